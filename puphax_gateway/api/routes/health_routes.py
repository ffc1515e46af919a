"""헬스 체크 엔드포인트"""
import time
from datetime import datetime

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from puphax_gateway import __version__
from puphax_gateway.clients.puphax_client import PuphaxSoapClient
from puphax_gateway.core.logging import logger
from puphax_gateway.schemas.drug_schema import ComponentHealth, HealthResponse
from puphax_gateway.services.impl.cache_service import CacheStoreImpl

from .drug_routes import get_cache_store, get_upstream_client

router = APIRouter(tags=["health"])


def overall_status(components: dict[str, ComponentHealth]) -> str:
    """모두 UP → UP, 모두 DOWN → DOWN, 그 외 DEGRADED"""
    statuses = {component.status for component in components.values()}
    if statuses == {"UP"}:
        return "UP"
    if statuses == {"DOWN"}:
        return "DOWN"
    return "DEGRADED"


def _respond(health: HealthResponse) -> JSONResponse:
    return JSONResponse(
        status_code=503 if health.status == "DOWN" else 200,
        content=health.model_dump(mode="json", by_alias=True),
    )


@router.get("/api/v1/drugs/health", response_model=HealthResponse)
async def health_check(
    cache_store: CacheStoreImpl = Depends(get_cache_store),
    upstream: PuphaxSoapClient = Depends(get_upstream_client),
):
    """
    헬스 체크 엔드포인트

    - PUPHAX 연결 상태
    - 캐시 상태
    DOWN이면 503을 반환합니다.
    """
    components: dict[str, ComponentHealth] = {}

    started = time.perf_counter()
    upstream_ok = await upstream.ping()
    components["upstream"] = ComponentHealth(
        status="UP" if upstream_ok else "DOWN",
        response_time_ms=(time.perf_counter() - started) * 1000,
        detail=None if upstream_ok else "PUPHAX service is not responding",
    )

    started = time.perf_counter()
    cache_ok = cache_store.health_check()
    components["cache"] = ComponentHealth(
        status="UP" if cache_ok else "DOWN",
        response_time_ms=(time.perf_counter() - started) * 1000,
        detail=type(cache_store).__name__,
    )

    status = overall_status(components)
    if status != "UP":
        logger.warning(f"Health check: {status} ({', '.join(f'{k}={v.status}' for k, v in components.items())})")

    return _respond(HealthResponse(
        status=status,
        timestamp=datetime.now(),
        version=__version__,
        components=components,
    ))


@router.get("/api/v1/drugs/health/quick", response_model=HealthResponse)
async def health_quick():
    """로드밸런서용 가벼운 헬스 체크 (외부 호출 없음)"""
    return _respond(HealthResponse(status="UP", timestamp=datetime.now(), version=__version__))


@router.get("/")
async def root():
    """루트 엔드포인트"""
    return {
        "service": "PUPHAX drug search gateway",
        "version": __version__,
        "docs": "/docs"
    }
