"""커스텀 예외 정의 (Closed Failure Vocabulary)

ServiceFailure는 업스트림 경계 이후의 모든 컴포넌트가 사용하는 유일한 실패 타입입니다.
kind 태그가 variant를 결정하고, 분류기는 kind만 보고 상태 코드를 결정합니다.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class FailureKind(str, Enum):
    """실패 종류 (닫힌 집합)"""

    VALIDATION = "validation"
    CONNECTION_FAILURE = "connection_failure"
    TIMEOUT = "timeout"
    UPSTREAM_FAULT = "upstream_fault"
    UNCLASSIFIED = "unclassified"


@dataclass(frozen=True)
class FieldViolation:
    """필드 단위 검증 위반"""

    field: str
    rejected_value: Any
    message: str


class ServiceFailure(Exception):
    """서비스 실패 - tagged union over FailureKind

    직접 생성하지 말고 variant별 classmethod를 사용합니다.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        cause: Optional[BaseException] = None,
        fault_code: Optional[str] = None,
        fault_text: Optional[str] = None,
        violations: tuple[FieldViolation, ...] = (),
    ):
        self.kind = kind
        self.message = message
        self.cause = cause
        self.fault_code = fault_code
        self.fault_text = fault_text
        self.violations = tuple(violations)
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.kind.value}] {self.message}"

    @classmethod
    def validation(
        cls, message: str, violations: tuple[FieldViolation, ...] = ()
    ) -> "ServiceFailure":
        return cls(FailureKind.VALIDATION, message, violations=violations)

    @classmethod
    def connection_failure(
        cls, message: str, cause: Optional[BaseException] = None
    ) -> "ServiceFailure":
        return cls(FailureKind.CONNECTION_FAILURE, message, cause=cause)

    @classmethod
    def timeout(
        cls, message: str, cause: Optional[BaseException] = None
    ) -> "ServiceFailure":
        return cls(FailureKind.TIMEOUT, message, cause=cause)

    @classmethod
    def upstream_fault(
        cls,
        code: str,
        text: str,
        cause: Optional[BaseException] = None,
        message: Optional[str] = None,
    ) -> "ServiceFailure":
        """업스트림이 프로토콜 수준에서 보고한 fault

        Args:
            code: fault 코드 (예: "SOAP-100")
            text: fault 설명
            message: 게이트웨이가 직접 감지한 fault의 클라이언트 메시지
                (기본값: "SOAP fault: {text}")

        Returns:
            ServiceFailure: UPSTREAM_FAULT variant
        """
        return cls(
            FailureKind.UPSTREAM_FAULT,
            message if message is not None else f"SOAP fault: {text}",
            cause=cause,
            fault_code=code,
            fault_text=text,
        )

    @classmethod
    def unclassified(
        cls, message: str, cause: Optional[BaseException] = None
    ) -> "ServiceFailure":
        return cls(FailureKind.UNCLASSIFIED, message, cause=cause)


# 캐시 관련 예외
class CacheException(Exception):
    """캐시 관련 예외의 기본 클래스"""
    def __init__(self, message: str, error_code: str = "CACHE_ERROR", details: Optional[dict[str, Any]] = None):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"


class CacheConnectionException(CacheException):
    """캐시 연결/읽기/쓰기 실패"""
    def __init__(self, reason: str, error_code: str = "CACHE_CONNECTION_ERROR", details: Optional[dict[str, Any]] = None):
        super().__init__(f"Cache unavailable: {reason}", error_code, details or {"reason": reason})


class CacheSerializationException(CacheException):
    """캐시 직렬화/역직렬화 오류"""
    def __init__(self, operation: str, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Cache {operation} failed: {reason}"
        super().__init__(message, "CACHE_SERIALIZATION_ERROR",
                         details or {"operation": operation, "reason": reason})
