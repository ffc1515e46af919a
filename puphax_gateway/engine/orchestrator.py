"""Search Orchestrator - Main Engine Entry Point

Coordinates the search pipeline:
1. Request validation (no cache / upstream contact on failure)
2. Cache lookup
3. Upstream fetch with a bounded timeout
4. Encoding repair → payload mapping → deterministic ordering → pagination
5. Cache write

Every failure leaving ``search`` is a ServiceFailure. Raw collaborator
exceptions are translated exactly once, at the upstream boundary.
"""

import asyncio
import time
from asyncio import TimeoutError as AsyncTimeoutError
from dataclasses import asdict
from datetime import datetime
from typing import Optional, Protocol

from puphax_gateway.clients.exceptions import (
    UpstreamConnectionError,
    UpstreamFaultError,
    UpstreamTimeoutError,
)
from puphax_gateway.core.config import settings
from puphax_gateway.core.exceptions import ServiceFailure
from puphax_gateway.core.logging import logger, sanitize_for_log
from puphax_gateway.schemas.drug_schema import CachedPage, DrugSummary, PaginationInfo, SearchInfo
from puphax_gateway.utils.encoding import repair
from puphax_gateway.utils.hash_utils import generate_cache_key

from .cache_adapter import CacheAdapter
from .mapping import PayloadMappingError, parse_search_payload
from .result import SearchOutcome
from .validation import SearchRequest, validate_request


MALFORMED_RESPONSE_CODE = "MALFORMED_RESPONSE"

_SORT_ATTRIBUTES = {
    "name": "name",
    "manufacturer": "manufacturer",
    "atcCode": "atc_code",
}


class UpstreamClient(Protocol):
    async def fetch(
        self,
        term: str,
        manufacturer: Optional[str],
        atc_code: Optional[str],
        page: int,
        size: int,
        sort_by: str,
        sort_direction: str,
        timeout: float,
    ) -> bytes: ...


def sort_drugs(drugs: list[DrugSummary], sort_by: str, sort_direction: str) -> list[DrugSummary]:
    """요청 필드 기준 대소문자 무시 정렬, 식별자 오름차순이 최종 tie-breaker

    sorted()는 안정 정렬이고 reverse=True에서도 동률 항목의 순서를 유지합니다.
    """
    attribute = _SORT_ATTRIBUTES[sort_by]
    by_id = sorted(drugs, key=lambda drug: drug.id)
    return sorted(
        by_id,
        key=lambda drug: (getattr(drug, attribute) or "").casefold(),
        reverse=sort_direction == "DESC",
    )


class SearchOrchestrator:
    """검색 엔진 오케스트레이터

    Cache → Upstream 파이프라인을 관리하고 출처 메타데이터를 기록합니다.
    재시도는 하지 않습니다 (업스트림 클라이언트 책임).
    """

    def __init__(
        self,
        cache: CacheAdapter,
        upstream: UpstreamClient,
        upstream_timeout: Optional[float] = None,
    ):
        """
        Args:
            cache: 캐시 어댑터 (get/put)
            upstream: 업스트림 클라이언트 (fetch)
            upstream_timeout: 업스트림 응답 대기 한도 (초, 기본값 settings.upstream_timeout_s)
        """
        if cache is None:
            raise ValueError("cache must not be None")
        if upstream is None:
            raise ValueError("upstream must not be None")

        self.cache = cache
        self.upstream = upstream
        self.upstream_timeout = upstream_timeout or settings.upstream_timeout_s

    async def search(self, request: SearchRequest) -> SearchOutcome:
        """통합 검색 실행

        Args:
            request: 검색 요청

        Returns:
            SearchOutcome: 정렬된 페이지, 페이지 정보, 출처 메타데이터

        Raises:
            ServiceFailure: 검증 실패 또는 분류된 업스트림 실패
        """
        request = validate_request(**asdict(request))
        started = time.perf_counter()

        cache_key = generate_cache_key(
            request.term,
            {"manufacturer": request.manufacturer, "atcCode": request.atc_code},
            request.page,
            request.size,
            request.sort_by,
            request.sort_direction,
        )
        logger.info(
            f"Search started: term='{sanitize_for_log(request.term)}' page={request.page} size={request.size}"
        )

        # 1. Cache 확인
        cached = await self.cache.get(cache_key)
        if cached is not None:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.info(f"Search completed from cache: key={cache_key} ({elapsed_ms:.2f}ms)")
            return SearchOutcome(
                drugs=cached.drugs,
                pagination=cached.pagination,
                search_info=self._search_info(request, elapsed_ms, cache_hit=True),
            )

        # 2. Upstream
        raw = await self._fetch(request)

        # 3. 보정 → 매핑 → 정렬 → 페이지
        try:
            page = self._build_page(request, raw)
        except ServiceFailure:
            raise
        except Exception as e:
            raise ServiceFailure.unclassified(
                f"Failed to process upstream response: {type(e).__name__}", cause=e
            ) from e

        # 4. Cache 저장
        await self.cache.put(cache_key, page)

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            f"Search completed from upstream: drugs={len(page.drugs)} "
            f"total={page.pagination.total_elements} ({elapsed_ms:.2f}ms)"
        )
        return SearchOutcome(
            drugs=page.drugs,
            pagination=page.pagination,
            search_info=self._search_info(request, elapsed_ms, cache_hit=False),
        )

    async def _fetch(self, request: SearchRequest) -> bytes:
        """업스트림 호출 + 실패 변환 (유일한 변환 지점)"""
        timeout = self.upstream_timeout
        try:
            return await asyncio.wait_for(
                self.upstream.fetch(
                    request.term,
                    request.manufacturer,
                    request.atc_code,
                    request.page,
                    request.size,
                    request.sort_by,
                    request.sort_direction,
                    timeout,
                ),
                timeout=timeout,
            )
        except UpstreamTimeoutError as e:
            raise ServiceFailure.timeout(e.message, cause=e) from e
        except UpstreamConnectionError as e:
            raise ServiceFailure.connection_failure(e.message, cause=e) from e
        except UpstreamFaultError as e:
            raise ServiceFailure.upstream_fault(e.code, e.text, cause=e) from e
        except (AsyncTimeoutError, TimeoutError) as e:
            raise ServiceFailure.timeout(
                f"PUPHAX did not respond within {timeout:.1f}s", cause=e
            ) from e
        except ServiceFailure:
            raise
        except Exception as e:
            raise ServiceFailure.unclassified(
                f"Upstream call failed: {type(e).__name__}", cause=e
            ) from e

    def _build_page(self, request: SearchRequest, raw: bytes) -> CachedPage:
        text = repair(raw)
        try:
            drugs, total = parse_search_payload(text)
        except PayloadMappingError as e:
            logger.warning(f"Upstream payload could not be mapped ({len(raw)} bytes)")
            raise ServiceFailure.upstream_fault(
                MALFORMED_RESPONSE_CODE,
                str(e),
                cause=e,
                message="PUPHAX returned a response that could not be read",
            ) from e

        ordered = sort_drugs(drugs, request.sort_by, request.sort_direction)

        if len(ordered) > request.size or len(ordered) >= total:
            # 업스트림이 페이지 처리하지 않은 전체 결과 (보고된 총 개수를 모두 포함)
            start = request.page * request.size
            total = max(total, len(ordered))
            ordered = ordered[start:start + request.size]

        pagination = PaginationInfo.of(
            page=request.page,
            size=request.size,
            number_of_elements=len(ordered),
            total_elements=max(total, len(ordered)),
        )
        return CachedPage(drugs=ordered, pagination=pagination)

    @staticmethod
    def _search_info(request: SearchRequest, elapsed_ms: float, cache_hit: bool) -> SearchInfo:
        return SearchInfo(
            search_term=request.term,
            filters=request.applied_filters,
            duration_ms=elapsed_ms,
            cache_hit=cache_hit,
            timestamp=datetime.now(),
        )
