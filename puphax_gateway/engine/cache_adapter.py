"""Cache Adapter - CachedPage (de)serialization over a cache store"""

from typing import Any, Optional, Protocol

from pydantic import ValidationError

from puphax_gateway.core.config import settings
from puphax_gateway.core.exceptions import CacheException
from puphax_gateway.core.logging import logger
from puphax_gateway.schemas.drug_schema import CachedPage


class CacheStore(Protocol):
    def get(self, key: str) -> Optional[dict[str, Any]]: ...

    def put(self, key: str, value: dict[str, Any], ttl: int) -> None: ...


class CacheAdapter:
    """Cache 스토어 어댑터

    저장소 오류는 로깅 후 miss/skip으로 처리하며 검색을 실패시키지 않습니다.
    """

    def __init__(self, store: CacheStore, ttl: Optional[int] = None):
        """
        Args:
            store: get/put을 제공하는 캐시 스토어
            ttl: TTL (초, 기본값 settings.cache_ttl)
        """
        if store is None:
            raise ValueError("store must not be None")
        self.store = store
        self.ttl = ttl or settings.cache_ttl

    async def get(self, key: str) -> Optional[CachedPage]:
        """캐시 조회

        Returns:
            CachedPage or None: 미스/오류 시 None
        """
        try:
            cached = self.store.get(key)
            if not cached:
                return None
            return CachedPage.model_validate(cached)
        except ValidationError as e:
            logger.warning(f"Cache data deserialization failed: key={key}, errors={e.error_count()}")
            return None
        except CacheException as e:
            logger.warning(f"Cache get failed: {e}")
            return None

    async def put(self, key: str, page: CachedPage) -> None:
        """캐시 저장 (last-write-wins)"""
        try:
            self.store.put(key, page.model_dump(mode="json", by_alias=True), self.ttl)
        except CacheException as e:
            logger.warning(f"Cache set failed: {e}")
