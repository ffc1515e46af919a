"""Search request validation.

Every check runs before the cache or the upstream is touched. All violations
are collected (in field order) so the client sees the full list at once.
"""

import re
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from puphax_gateway.core.exceptions import FieldViolation, ServiceFailure


MIN_TERM_LENGTH = 2
MAX_TERM_LENGTH = 100
MAX_MANUFACTURER_LENGTH = 100
MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 20

SORT_FIELDS = ("name", "manufacturer", "atcCode")
SORT_DIRECTIONS = ("ASC", "DESC")

ATC_CODE_PATTERN = re.compile(r"^[A-Z][0-9]{2}[A-Z]{2}[0-9]{2}$")


@dataclass(frozen=True)
class SearchRequest:
    """정규화된 검색 요청 (검증 후 불변)"""

    term: str
    manufacturer: Optional[str] = None
    atc_code: Optional[str] = None
    page: int = 0
    size: int = DEFAULT_PAGE_SIZE
    sort_by: str = "name"
    sort_direction: str = "ASC"

    @property
    def applied_filters(self) -> dict[str, str]:
        """값이 있는 필터만"""
        filters: dict[str, str] = {}
        if self.manufacturer and self.manufacturer.strip():
            filters["manufacturer"] = self.manufacturer.strip()
        if self.atc_code and self.atc_code.strip():
            filters["atcCode"] = self.atc_code.strip()
        return filters


def validate_request(
    term: Optional[str],
    manufacturer: Optional[str] = None,
    atc_code: Optional[str] = None,
    page: int = 0,
    size: int = DEFAULT_PAGE_SIZE,
    sort_by: str = "name",
    sort_direction: str = "ASC",
) -> SearchRequest:
    """원시 파라미터 검증 후 SearchRequest 생성

    Raises:
        ServiceFailure: VALIDATION (violations 포함)
    """
    violations: list[FieldViolation] = []

    stripped = term.strip() if term is not None else ""
    if not stripped:
        violations.append(FieldViolation("term", term, "Search term cannot be blank"))
    elif not MIN_TERM_LENGTH <= len(stripped) <= MAX_TERM_LENGTH:
        violations.append(FieldViolation(
            "term", term,
            f"Search term must be between {MIN_TERM_LENGTH} and {MAX_TERM_LENGTH} characters",
        ))

    if manufacturer is not None and len(manufacturer.strip()) > MAX_MANUFACTURER_LENGTH:
        violations.append(FieldViolation(
            "manufacturer", manufacturer,
            f"Manufacturer filter cannot exceed {MAX_MANUFACTURER_LENGTH} characters",
        ))

    if atc_code is not None and atc_code.strip() and not ATC_CODE_PATTERN.match(atc_code.strip()):
        violations.append(FieldViolation(
            "atcCode", atc_code, "ATC code must follow the format: A10AB01",
        ))

    if page < 0:
        violations.append(FieldViolation("page", page, "Page number must be 0 or greater"))

    if size < 1:
        violations.append(FieldViolation("size", size, "Page size must be at least 1"))
    elif size > MAX_PAGE_SIZE:
        violations.append(FieldViolation("size", size, f"Page size cannot exceed {MAX_PAGE_SIZE}"))

    if sort_by not in SORT_FIELDS:
        violations.append(FieldViolation(
            "sortBy", sort_by, f"Sort field must be one of: {', '.join(SORT_FIELDS)}",
        ))

    direction = (sort_direction or "").upper()
    if direction not in SORT_DIRECTIONS:
        violations.append(FieldViolation("sortDirection", sort_direction, "Sort direction must be ASC or DESC"))

    if violations:
        raise ServiceFailure.validation(
            "Request validation failed", violations=tuple(violations)
        )

    return SearchRequest(
        term=stripped,
        manufacturer=manufacturer.strip() if manufacturer and manufacturer.strip() else None,
        atc_code=atc_code.strip() if atc_code and atc_code.strip() else None,
        page=page,
        size=size,
        sort_by=sort_by,
        sort_direction=direction,
    )


def violations_from_errors(errors: Sequence[dict[str, Any]]) -> tuple[FieldViolation, ...]:
    """프레임워크 바인딩 오류(RequestValidationError.errors())를 FieldViolation으로 변환

    쿼리 파라미터 오류의 loc는 ("query", "size") 형태입니다.
    """
    violations = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part not in ("query", "body", "path")]
        violations.append(FieldViolation(
            field=".".join(loc) or "request",
            rejected_value=error.get("input"),
            message=str(error.get("msg", "Invalid value")),
        ))
    return tuple(violations)
