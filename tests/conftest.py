"""전역 테스트 설정

역할:
- 테스트 환경 구성
- 공통 Fake 주입 (업스트림, 캐시 스토어)
- 싱글톤 초기화

금지:
- 실제 네트워크 / Redis 접근
"""

from __future__ import annotations

import asyncio
import itertools
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import pytest


# 프로젝트 루트를 경로에 추가
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from fixtures.payloads import ASPIRIN_PAYLOAD  # noqa: E402

from puphax_gateway.core.correlation import RequestContext  # noqa: E402
from puphax_gateway.engine import CacheAdapter, SearchOrchestrator  # noqa: E402
from puphax_gateway.services.impl.cache_service import InMemoryCacheStore  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def test_env() -> None:
    """테스트 환경 변수 설정 (세션 전역)"""
    os.environ["ENVIRONMENT"] = "test"
    os.environ["LOG_LEVEL"] = "INFO"


@dataclass
class FakeUpstream:
    """업스트림 협력자 Fake

    - 호출 인자 기록
    - delay로 업스트림 왕복 시간 흉내
    - error가 있으면 해당 예외 발생
    """

    payload: bytes = ASPIRIN_PAYLOAD
    delay: float = 0.0
    error: Optional[BaseException] = None
    calls: list[dict[str, Any]] = field(default_factory=list)

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
    ) -> bytes:
        self.calls.append({
            "term": term,
            "manufacturer": manufacturer,
            "atc_code": atc_code,
            "page": page,
            "size": size,
            "sort_by": sort_by,
            "sort_direction": sort_direction,
            "timeout": timeout,
        })
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.payload

    async def ping(self, timeout: float = 2.0) -> bool:
        return self.error is None


@dataclass
class CountingStore:
    """get/put 호출 횟수를 세는 메모리 캐시 스토어"""

    inner: InMemoryCacheStore = field(default_factory=InMemoryCacheStore)
    get_calls: int = 0
    put_calls: int = 0

    def get(self, key: str) -> Optional[dict[str, Any]]:
        self.get_calls += 1
        return self.inner.get(key)

    def put(self, key: str, value: dict[str, Any], ttl: int) -> None:
        self.put_calls += 1
        self.inner.put(key, value, ttl)

    def health_check(self) -> bool:
        return True


@pytest.fixture
def fake_upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def counting_store() -> CountingStore:
    return CountingStore()


@pytest.fixture
def orchestrator(counting_store: CountingStore, fake_upstream: FakeUpstream) -> SearchOrchestrator:
    return SearchOrchestrator(
        cache=CacheAdapter(counting_store, ttl=60),
        upstream=fake_upstream,
        upstream_timeout=1.0,
    )


@pytest.fixture
def sequential_context() -> RequestContext:
    """req-000001, req-000002 ... 순서로 ID를 내는 컨텍스트"""
    counter = itertools.count(1)
    return RequestContext(path="/api/v1/drugs/search", id_factory=lambda: f"req-{next(counter):06d}")


@pytest.fixture(autouse=True)
def reset_route_singletons():
    """라우트 싱글톤을 테스트마다 초기화"""
    from puphax_gateway.api.routes import drug_routes

    yield
    drug_routes._cache_store = None
    drug_routes._upstream_client = None
    drug_routes._orchestrator = None
    drug_routes._assembler = None
