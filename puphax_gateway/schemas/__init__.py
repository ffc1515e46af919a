"""Schema package - export only."""

from .drug_schema import (
    CachedPage,
    ComponentHealth,
    DrugSearchResponse,
    DrugStatus,
    DrugSummary,
    ErrorEnvelope,
    FieldErrorDto,
    HealthResponse,
    PaginationInfo,
    SearchInfo,
    ValidationErrorEnvelope,
)

__all__ = [
    "CachedPage",
    "ComponentHealth",
    "DrugSearchResponse",
    "DrugStatus",
    "DrugSummary",
    "ErrorEnvelope",
    "FieldErrorDto",
    "HealthResponse",
    "PaginationInfo",
    "SearchInfo",
    "ValidationErrorEnvelope",
]
