"""Error Classifier

ServiceFailure → (HTTP status, category label, correlation id, client message).
The mapping is a table keyed by FailureKind, checked at import time to cover
every kind, so a new variant cannot silently fall through to a default.
"""

from dataclasses import dataclass

from puphax_gateway.core.correlation import RequestContext
from puphax_gateway.core.exceptions import FailureKind, ServiceFailure
from puphax_gateway.core.logging import logger, with_correlation


VALIDATION_FAILED_LABEL = "Validation Failed"
UNCLASSIFIED_MESSAGE = (
    "An unexpected error occurred. Please contact support with correlation ID: {correlation_id}"
)

STATUS_TABLE: dict[FailureKind, tuple[int, str]] = {
    FailureKind.VALIDATION: (400, "Bad Request"),
    FailureKind.CONNECTION_FAILURE: (503, "Service Unavailable"),
    FailureKind.TIMEOUT: (503, "Gateway Timeout"),
    FailureKind.UPSTREAM_FAULT: (502, "Bad Gateway"),
    FailureKind.UNCLASSIFIED: (500, "Internal Server Error"),
}

_missing = set(FailureKind) - set(STATUS_TABLE)
if _missing:
    raise RuntimeError(f"STATUS_TABLE does not cover failure kinds: {sorted(k.value for k in _missing)}")


@dataclass(frozen=True)
class Classification:
    """분류 결과

    Attributes:
        status: HTTP 상태 코드
        error: 카테고리 라벨
        correlation_id: 로그와 응답을 잇는 ID
        message: 클라이언트에 노출할 메시지
    """

    status: int
    error: str
    correlation_id: str
    message: str


class ErrorClassifier:
    """ServiceFailure 분류기 (결정적)"""

    def classify(self, failure: ServiceFailure, context: RequestContext) -> Classification:
        status, label = STATUS_TABLE[failure.kind]
        correlation_id = context.next_correlation_id()

        if failure.kind is FailureKind.VALIDATION and failure.violations:
            label = VALIDATION_FAILED_LABEL

        if failure.kind is FailureKind.UNCLASSIFIED:
            message = UNCLASSIFIED_MESSAGE.format(correlation_id=correlation_id)
        else:
            message = failure.message

        self._log(failure, label, correlation_id, context.path)
        return Classification(status=status, error=label, correlation_id=correlation_id, message=message)

    @staticmethod
    def _log(failure: ServiceFailure, label: str, correlation_id: str, path: str) -> None:
        line = f"{label}: {failure.message} (path={path})"
        extra = with_correlation(correlation_id)
        if failure.kind is FailureKind.VALIDATION:
            fields = ", ".join(v.field for v in failure.violations)
            logger.warning(f"{line} fields=[{fields}]" if fields else line, extra=extra)
        elif failure.kind is FailureKind.UNCLASSIFIED:
            cause = failure.cause or failure
            logger.error(line, exc_info=(type(cause), cause, cause.__traceback__), extra=extra)
        elif failure.kind is FailureKind.UPSTREAM_FAULT:
            logger.error(f"{line} faultCode={failure.fault_code}", extra=extra)
        else:
            cause = f" cause={type(failure.cause).__name__}" if failure.cause else ""
            logger.error(f"{line}{cause}", extra=extra)
