"""Pydantic 스키마 정의 (경계 DTO)

JSON 필드명은 camelCase로 고정되어 있습니다 (by_alias 직렬화).
내부 코드에서는 snake_case 이름으로 생성할 수 있습니다 (populate_by_name).
"""
import math
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DrugStatus(str, Enum):
    """의약품 생애주기 상태"""
    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"
    WITHDRAWN = "WITHDRAWN"


class DrugSummary(CamelModel):
    """검색 결과 한 건 (생성 후 불변)"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str = Field(..., min_length=1, description="업스트림 식별자")
    name: str = Field(..., description="표시 이름")
    manufacturer: Optional[str] = Field(None, description="제조사")
    atc_code: Optional[str] = Field(None, description="ATC 코드")
    active_ingredients: tuple[str, ...] = Field(default=(), description="유효 성분 목록 (순서 유지)")
    active_ingredient: Optional[str] = Field(None, description="대표 성분 (하위 호환)")
    prescription_required: bool = Field(False, description="처방 필요 여부")
    reimbursable: bool = Field(False, description="급여 여부")
    status: DrugStatus = Field(DrugStatus.ACTIVE, description="상태")

    @model_validator(mode="before")
    @classmethod
    def fill_primary_ingredient(cls, data: Any) -> Any:
        """대표 성분이 없으면 성분 목록의 첫 항목으로 채움"""
        if not isinstance(data, dict):
            return data
        primary = data.get("active_ingredient", data.get("activeIngredient"))
        ingredients = data.get("active_ingredients", data.get("activeIngredients")) or ()
        if not primary and ingredients:
            data = dict(data)
            data["active_ingredient"] = ingredients[0]
            data.pop("activeIngredient", None)
        return data


class PaginationInfo(CamelModel):
    """페이지 정보"""
    page: int = Field(..., ge=0)
    size: int = Field(..., ge=1, le=100)
    number_of_elements: int = Field(..., ge=0)
    total_elements: int = Field(..., ge=0, description="업스트림 보고값 (추정치일 수 있음)")
    total_pages: int = Field(..., ge=0)
    has_next: bool
    has_previous: bool

    @model_validator(mode="after")
    def check_page_fits(self) -> "PaginationInfo":
        if self.number_of_elements > self.size:
            raise ValueError("numberOfElements cannot exceed size")
        return self

    @classmethod
    def of(cls, page: int, size: int, number_of_elements: int, total_elements: int) -> "PaginationInfo":
        return cls(
            page=page,
            size=size,
            number_of_elements=number_of_elements,
            total_elements=total_elements,
            total_pages=math.ceil(total_elements / size) if total_elements else 0,
            has_next=(page + 1) * size < total_elements,
            has_previous=page > 0,
        )


class SearchInfo(CamelModel):
    """검색 출처 메타데이터"""
    search_term: str
    filters: dict[str, str] = Field(default_factory=dict, description="실제 적용된 필터만")
    duration_ms: float = Field(..., ge=0)
    cache_hit: bool
    timestamp: datetime


class DrugSearchResponse(CamelModel):
    """검색 성공 응답"""
    drugs: list[DrugSummary]
    pagination: PaginationInfo
    search_info: SearchInfo


class CachedPage(CamelModel):
    """캐시에 저장되는 완성된 페이지"""
    drugs: list[DrugSummary]
    pagination: PaginationInfo
    cached_at: datetime = Field(default_factory=datetime.now)


class FieldErrorDto(CamelModel):
    field: str
    rejected_value: Any = None
    message: str


class ErrorEnvelope(CamelModel):
    """모든 에러 응답의 공통 형태"""
    timestamp: datetime
    status: int
    error: str
    message: str
    path: str
    correlation_id: str


class ValidationErrorEnvelope(ErrorEnvelope):
    field_errors: list[FieldErrorDto]


class ComponentHealth(CamelModel):
    status: str = Field(..., description="UP | DOWN")
    response_time_ms: Optional[float] = None
    detail: Optional[str] = None


class HealthResponse(CamelModel):
    """헬스 체크 응답"""
    status: str = Field(..., description="UP | DEGRADED | DOWN")
    timestamp: datetime
    version: str
    components: dict[str, ComponentHealth] = Field(default_factory=dict)
