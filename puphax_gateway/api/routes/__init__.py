"""API routes package."""

from .drug_routes import (
    router as drug_router,
    get_assembler,
    get_cache_store,
    get_orchestrator,
    get_upstream_client,
)
from .health_routes import router as health_router

__all__ = [
    "drug_router",
    "health_router",
    "get_assembler",
    "get_cache_store",
    "get_orchestrator",
    "get_upstream_client",
]
