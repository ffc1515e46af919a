"""테스트 자산(데이터) 레이어

규칙:
- 로직 없음 (단순 bytes/str)
- 엔진/네트워크 의존 없음
"""

from .payloads import (
    ASPIRIN_PAYLOAD,
    EMPTY_PAYLOAD,
    FAULT_PAYLOAD,
    LATIN2_PAYLOAD,
    MALFORMED_PAYLOAD,
    MOJIBAKE_PAYLOAD,
    UNSORTED_PAYLOAD,
)

__all__ = [
    "ASPIRIN_PAYLOAD",
    "EMPTY_PAYLOAD",
    "FAULT_PAYLOAD",
    "LATIN2_PAYLOAD",
    "MALFORMED_PAYLOAD",
    "MOJIBAKE_PAYLOAD",
    "UNSORTED_PAYLOAD",
]
