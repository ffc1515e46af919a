"""서비스 레이어 - export only."""

from .impl.cache_service import InMemoryCacheStore, RedisCacheStore, build_cache_store

__all__ = ["InMemoryCacheStore", "RedisCacheStore", "build_cache_store"]
