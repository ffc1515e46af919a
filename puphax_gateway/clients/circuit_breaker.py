"""Circuit breaker for the PUPHAX upstream."""

from __future__ import annotations

import asyncio

from puphax_gateway.core.logging import logger


class CircuitBreaker:
    """업스트림 Circuit Breaker

    - 연속 실패 시 회로 개방 (업스트림 호출 스킵)
    - 개방 후 일정 시간 뒤 자동 복구
    - 성공 시 즉시 회로 닫기
    """

    def __init__(
        self,
        fail_threshold: int = 5,
        open_duration_sec: float = 30.0,
    ) -> None:
        """초기화.

        Args:
            fail_threshold: 회로 개방 임계값 (연속 실패 횟수)
            open_duration_sec: 개방 상태 유지 시간 (초)
        """
        self.fail_threshold = fail_threshold
        self.open_duration_sec = open_duration_sec

        self._fail_count = 0
        self._open_until: float = 0.0

    @property
    def fail_count(self) -> int:
        return self._fail_count

    def record_success(self) -> None:
        """성공 기록 → 회로 닫기."""
        self._fail_count = 0
        self._open_until = 0.0

    def record_failure(self) -> None:
        """실패 기록 → 임계값 도달 시 회로 개방."""
        self._fail_count += 1

        if self._fail_count >= self.fail_threshold:
            loop = asyncio.get_running_loop()
            self._open_until = loop.time() + self.open_duration_sec
            logger.warning(
                f"[CIRCUIT_BREAKER] OPEN (fail_count={self._fail_count} >= {self.fail_threshold}). "
                f"PUPHAX calls blocked for {self.open_duration_sec}s"
            )

    def is_open(self) -> bool:
        """회로가 개방되었는가?"""
        if self._open_until <= 0.0:
            return False

        loop = asyncio.get_running_loop()
        if loop.time() >= self._open_until:
            # 자동 복구
            self._fail_count = 0
            self._open_until = 0.0
            logger.info("[CIRCUIT_BREAKER] CLOSED (auto-recovery)")
            return False

        return True

    def get_remaining_open_time(self) -> float:
        """회로 개방 남은 시간 (초)."""
        if self._open_until <= 0.0:
            return 0.0

        loop = asyncio.get_running_loop()
        return max(0.0, self._open_until - loop.time())

    def __repr__(self) -> str:
        status = "OPEN" if self._open_until > 0.0 else "CLOSED"
        return f"CircuitBreaker({status}, fail_count={self._fail_count}/{self.fail_threshold})"
