"""CacheAdapter 단위 테스트."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from puphax_gateway.core.exceptions import CacheConnectionException
from puphax_gateway.engine.cache_adapter import CacheAdapter
from puphax_gateway.schemas.drug_schema import CachedPage, DrugSummary, PaginationInfo
from puphax_gateway.services.impl.cache_service import InMemoryCacheStore


def _page() -> CachedPage:
    return CachedPage(
        drugs=[DrugSummary(id="HU-0001", name="Kőolaj kenőcs", active_ingredients=("vazelin",))],
        pagination=PaginationInfo.of(page=0, size=20, number_of_elements=1, total_elements=1),
    )


@pytest.mark.asyncio
async def test_round_trip_through_store():
    adapter = CacheAdapter(InMemoryCacheStore(), ttl=60)
    page = _page()

    await adapter.put("drugs:search:abc", page)
    cached = await adapter.get("drugs:search:abc")

    assert cached is not None
    assert cached.drugs == page.drugs
    assert cached.pagination == page.pagination


@pytest.mark.asyncio
async def test_stored_with_camel_case_fields_and_ttl():
    store = MagicMock()
    adapter = CacheAdapter(store, ttl=42)

    await adapter.put("k", _page())

    key, value, ttl = store.put.call_args.args
    assert key == "k"
    assert ttl == 42
    assert value["drugs"][0]["activeIngredient"] == "vazelin"
    assert value["pagination"]["totalElements"] == 1


@pytest.mark.asyncio
async def test_get_miss():
    adapter = CacheAdapter(InMemoryCacheStore(), ttl=60)
    assert await adapter.get("missing") is None


@pytest.mark.asyncio
async def test_invalid_cached_shape_treated_as_miss():
    store = MagicMock()
    store.get.return_value = {"drugs": "not-a-list"}
    assert await CacheAdapter(store, ttl=60).get("k") is None


@pytest.mark.asyncio
async def test_store_errors_are_swallowed():
    store = MagicMock()
    store.get.side_effect = CacheConnectionException("down")
    store.put.side_effect = CacheConnectionException("down")
    adapter = CacheAdapter(store, ttl=60)

    assert await adapter.get("k") is None
    await adapter.put("k", _page())


def test_store_required():
    with pytest.raises(ValueError):
        CacheAdapter(None)
