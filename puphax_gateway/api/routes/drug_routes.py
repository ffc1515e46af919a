"""Drug Routes - HTTP → Engine Layer 위임

HTTP Layer는 파라미터를 SearchRequest로 옮기고 엔진 결과를 반환하는
단순한 Translator 역할만 수행합니다. 실패는 ServiceFailure로 올라가
api.errors의 핸들러가 envelope로 변환합니다.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from puphax_gateway.clients.puphax_client import PuphaxSoapClient
from puphax_gateway.core.exceptions import ServiceFailure
from puphax_gateway.core.logging import logger
from puphax_gateway.engine import (
    CacheAdapter,
    ResponseAssembler,
    SearchOrchestrator,
    validate_request,
)
from puphax_gateway.schemas.drug_schema import DrugSearchResponse
from puphax_gateway.services.impl.cache_service import CacheStoreImpl, build_cache_store

router = APIRouter(prefix="/api/v1/drugs", tags=["drugs"])

# 싱글톤
_cache_store: Optional[CacheStoreImpl] = None
_upstream_client: Optional[PuphaxSoapClient] = None
_orchestrator: Optional[SearchOrchestrator] = None
_assembler: Optional[ResponseAssembler] = None


def get_cache_store() -> CacheStoreImpl:
    """캐시 스토어 싱글톤"""
    global _cache_store
    if _cache_store is None:
        _cache_store = build_cache_store()
    return _cache_store


def get_upstream_client() -> PuphaxSoapClient:
    """PUPHAX 클라이언트 싱글톤"""
    global _upstream_client
    if _upstream_client is None:
        _upstream_client = PuphaxSoapClient()
    return _upstream_client


def get_orchestrator(
    cache_store: CacheStoreImpl = Depends(get_cache_store),
    upstream: PuphaxSoapClient = Depends(get_upstream_client),
) -> SearchOrchestrator:
    """SearchOrchestrator 싱글톤"""
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = SearchOrchestrator(cache=CacheAdapter(cache_store), upstream=upstream)
    return _orchestrator


def get_assembler() -> ResponseAssembler:
    global _assembler
    if _assembler is None:
        _assembler = ResponseAssembler()
    return _assembler


@router.get("/search", response_model=DrugSearchResponse)
async def search_drugs(
    term: Optional[str] = Query(None, description="검색어 (2~100자)"),
    manufacturer: Optional[str] = Query(None, description="제조사 필터"),
    atc_code: Optional[str] = Query(None, alias="atcCode", description="ATC 코드 (예: A10AB01)"),
    page: int = Query(0, description="0부터 시작하는 페이지"),
    size: int = Query(20, description="페이지 크기 (1~100)"),
    sort_by: str = Query("name", alias="sortBy", description="name | manufacturer | atcCode"),
    sort_direction: str = Query("ASC", alias="sortDirection", description="ASC | DESC"),
    orchestrator: SearchOrchestrator = Depends(get_orchestrator),
    assembler: ResponseAssembler = Depends(get_assembler),
):
    """의약품 검색 API

    Flow:
        1. 파라미터 검증 (실패 시 400, 캐시/업스트림 접근 없음)
        2. Engine에 위임 (Cache → PUPHAX)
        3. 결과를 응답 envelope로 변환
    """
    request = validate_request(
        term=term,
        manufacturer=manufacturer,
        atc_code=atc_code,
        page=page,
        size=size,
        sort_by=sort_by,
        sort_direction=sort_direction,
    )
    try:
        outcome = await orchestrator.search(request)
    except ServiceFailure:
        raise
    except Exception as e:
        # CORS 미들웨어 안쪽의 ServiceFailure 핸들러가 응답하도록 변환
        raise ServiceFailure.unclassified(f"{type(e).__name__}: {e}", cause=e) from e
    logger.info(
        f"[API] search served: drugs={len(outcome.drugs)} cache_hit={outcome.cache_hit}"
    )
    return assembler.success(outcome)
