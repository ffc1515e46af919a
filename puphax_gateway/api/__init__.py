"""API 엔드포인트 패키지 - export only."""

from .errors import register_exception_handlers
from .routes import (
    drug_router,
    health_router,
    get_assembler,
    get_cache_store,
    get_orchestrator,
    get_upstream_client,
)

__all__ = [
    "drug_router",
    "health_router",
    "register_exception_handlers",
    "get_assembler",
    "get_cache_store",
    "get_orchestrator",
    "get_upstream_client",
]
