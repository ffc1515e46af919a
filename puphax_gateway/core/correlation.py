"""Request correlation context.

A ``RequestContext`` is created once per inbound request and passed explicitly
to the classifier and the response assembler. Tests build it with a
deterministic ``id_factory``.
"""
import uuid
from dataclasses import dataclass, field
from typing import Callable


def new_correlation_id() -> str:
    """128-bit 랜덤 값에서 파생한 짧은 상관관계 ID"""
    return f"req-{uuid.uuid4().hex[:12]}"


@dataclass(frozen=True)
class RequestContext:
    """요청 단위 컨텍스트

    Attributes:
        path: 요청 경로 (에러 envelope의 path)
        id_factory: 상관관계 ID 생성기
    """

    path: str
    id_factory: Callable[[], str] = field(default=new_correlation_id)

    def next_correlation_id(self) -> str:
        return self.id_factory()
