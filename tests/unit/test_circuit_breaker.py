"""CircuitBreaker 유닛 테스트"""

import asyncio

import pytest

from puphax_gateway.clients.circuit_breaker import CircuitBreaker


@pytest.mark.asyncio
async def test_opens_after_threshold():
    breaker = CircuitBreaker(fail_threshold=3, open_duration_sec=30)
    for _ in range(2):
        breaker.record_failure()
    assert breaker.is_open() is False

    breaker.record_failure()
    assert breaker.is_open() is True
    assert 0 < breaker.get_remaining_open_time() <= 30


@pytest.mark.asyncio
async def test_success_closes_and_resets():
    breaker = CircuitBreaker(fail_threshold=2, open_duration_sec=30)
    breaker.record_failure()
    breaker.record_success()
    breaker.record_failure()
    assert breaker.is_open() is False
    assert breaker.fail_count == 1


@pytest.mark.asyncio
async def test_auto_recovery():
    breaker = CircuitBreaker(fail_threshold=1, open_duration_sec=0.01)
    breaker.record_failure()
    assert breaker.is_open() is True

    await asyncio.sleep(0.02)
    assert breaker.is_open() is False
    assert breaker.fail_count == 0
