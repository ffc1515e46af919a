"""캐시 스토어 - Redis 우선, 프로세스 내 메모리 대체"""
import json
import threading
import time
from typing import Any, Optional, Union

from redis import Redis

from puphax_gateway.core.config import settings
from puphax_gateway.core.logging import logger
from puphax_gateway.core.exceptions import (
    CacheConnectionException,
    CacheSerializationException,
)


class RedisCacheStore:
    """Redis 캐시 스토어 (JSON 값, setex TTL)"""

    def __init__(self, redis_url: Optional[str] = None):
        """Redis 클라이언트 초기화

        Raises:
            CacheConnectionException: 연결 실패
        """
        try:
            self.redis_client = Redis.from_url(
                redis_url or settings.redis_url,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5
            )
            # 연결 테스트
            self.redis_client.ping()
            logger.info("Redis connection established")
        except Exception as e:
            logger.error(f"Failed to connect to Redis: {e}")
            raise CacheConnectionException(str(e), error_code="CACHE_CONN_FAILED") from e

    def get(self, key: str) -> Optional[dict[str, Any]]:
        """
        캐시 조회

        Args:
            key: 캐시 키

        Returns:
            저장된 dict 또는 None
        """
        try:
            cached_data = self.redis_client.get(key)
        except Exception as e:
            logger.error(f"Cache read error: {e}")
            raise CacheConnectionException(str(e), error_code="CACHE_READ_FAILED") from e

        if not cached_data:
            logger.info(f"Cache miss for key: {key}")
            return None

        logger.info(f"Cache hit for key: {key}")
        try:
            return json.loads(cached_data)
        except (json.JSONDecodeError, TypeError) as e:
            logger.error(f"Failed to deserialize cache: {e}")
            raise CacheSerializationException("get", str(e), {"key": key}) from e

    def put(self, key: str, value: dict[str, Any], ttl: int) -> None:
        """
        캐시 저장

        Args:
            key: 캐시 키
            value: 저장할 dict (JSON 직렬화 가능)
            ttl: TTL (초)
        """
        try:
            cached_value = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            logger.error(f"Failed to serialize cache data: {e}")
            raise CacheSerializationException("put", str(e), {"key": key}) from e

        try:
            self.redis_client.setex(key, ttl, cached_value)
        except Exception as e:
            logger.error(f"Cache write error: {e}")
            raise CacheConnectionException(str(e), error_code="CACHE_WRITE_FAILED") from e
        logger.info(f"Cache set for key: {key}, TTL: {ttl}s")

    def health_check(self) -> bool:
        """Redis 연결 상태 확인"""
        try:
            return bool(self.redis_client.ping())
        except Exception as e:
            logger.warning(f"Redis ping failed: {type(e).__name__}")
            return False


class InMemoryCacheStore:
    """프로세스 내 TTL 캐시

    - 읽을 때 만료 확인 (백그라운드 정리 없음)
    - 같은 키 동시 쓰기는 last-write-wins
    """

    def __init__(self, clock=time.monotonic):
        self._lock = threading.Lock()
        self._data: dict[str, tuple[float, str]] = {}
        self._clock = clock

    def get(self, key: str) -> Optional[dict[str, Any]]:
        now = self._clock()
        with self._lock:
            item = self._data.get(key)
            if not item:
                return None
            expires_at, payload = item
            if now >= expires_at:
                self._data.pop(key, None)
                return None
        return json.loads(payload)

    def put(self, key: str, value: dict[str, Any], ttl: int) -> None:
        try:
            payload = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise CacheSerializationException("put", str(e), {"key": key}) from e
        expires_at = self._clock() + max(1, int(ttl))
        with self._lock:
            self._data[key] = (expires_at, payload)

    def health_check(self) -> bool:
        return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)


CacheStoreImpl = Union[RedisCacheStore, InMemoryCacheStore]


def build_cache_store() -> CacheStoreImpl:
    """redis_url이 설정되어 있고 연결되면 Redis, 아니면 메모리 캐시"""
    if settings.redis_url:
        try:
            return RedisCacheStore(settings.redis_url)
        except CacheConnectionException as e:
            logger.warning(f"Redis unavailable, falling back to in-memory cache: {e.error_code}")
    else:
        logger.info("REDIS_URL not set, using in-memory cache")
    return InMemoryCacheStore()
