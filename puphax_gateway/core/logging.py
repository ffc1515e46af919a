"""로깅 설정 (Security Enhanced)

모든 레코드는 ``correlation_id`` 속성을 가집니다. 분류기가 ``extra``로 넘긴
요청 correlation ID가 포맷에 찍히고, 요청과 무관한 로그에는 ``-``가 찍혀
클라이언트가 받은 ID로 서버 로그를 바로 찾을 수 있습니다.
"""
import logging
import sys
import os
from typing import Any, Dict

from puphax_gateway.core.config import settings


# Production 환경에서는 DEBUG 로그 비활성화
IS_PRODUCTION = os.getenv("ENVIRONMENT", "development") == "production"

CORRELATION_ID_FIELD = "correlation_id"
NO_CORRELATION_ID = "-"


class CorrelationIdFilter(logging.Filter):
    """correlation_id가 없는 레코드에 기본값 채우기 (포맷 KeyError 방지)"""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, CORRELATION_ID_FIELD, None):
            setattr(record, CORRELATION_ID_FIELD, NO_CORRELATION_ID)
        return True


def with_correlation(correlation_id: str) -> Dict[str, Any]:
    """logger 호출용 extra 딕셔너리

    Example:
        logger.error("...", extra=with_correlation("req-1a2b3c4d5e6f"))
    """
    return {CORRELATION_ID_FIELD: correlation_id}


def build_formatter(production: bool = IS_PRODUCTION) -> logging.Formatter:
    if production:
        fmt = "%(asctime)s - %(levelname)s - [%(correlation_id)s] %(message)s"
    else:
        fmt = (
            "%(asctime)s - %(name)s - %(levelname)s - [%(correlation_id)s] "
            "%(funcName)s:%(lineno)d - %(message)s"
        )
    return logging.Formatter(fmt=fmt, datefmt="%Y-%m-%d %H:%M:%S")


def setup_logging() -> logging.Logger:
    """게이트웨이 로거 초기화 및 설정"""

    logger = logging.getLogger("puphax_gateway")

    # Production에서는 최소 INFO 레벨
    log_level = settings.log_level.upper()
    if IS_PRODUCTION and log_level == "DEBUG":
        log_level = "INFO"

    logger.setLevel(getattr(logging, log_level))

    # 로거 단위 필터: 어떤 핸들러로 가든 correlation_id 속성이 보장됨
    if not any(isinstance(f, CorrelationIdFilter) for f in logger.filters):
        logger.addFilter(CorrelationIdFilter())

    if not logger.handlers:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(getattr(logging, log_level))
        console_handler.setFormatter(build_formatter())
        logger.addHandler(console_handler)

    return logger


logger = setup_logging()


_SENSITIVE_KEYWORDS = ("password", "token", "api_key", "secret")


def sanitize_for_log(value: str, max_length: int = 100) -> str:
    """민감 정보 제거 후 로깅용 문자열 반환

    - 민감 키워드가 포함되면 전체를 마스킹
    - 설정된 업스트림 비밀번호가 그대로 들어 있으면 해당 부분만 마스킹
    - 개행 제거 (로그 인젝션 방지)

    Args:
        value: 로깅할 문자열
        max_length: 최대 길이

    Returns:
        제거된 문자열
    """
    if not value:
        return "[empty]"

    lowered = value.lower()
    if any(keyword in lowered for keyword in _SENSITIVE_KEYWORDS):
        return "***"

    result = value
    password = settings.upstream_password
    if password and password in result:
        result = result.replace(password, "***")

    result = result.replace("\r", " ").replace("\n", " ")

    if len(result) > max_length:
        result = result[:max_length] + "..."

    return result
