"""설정 관리 - 환경 변수 로드 및 검증"""
from pydantic_settings import BaseSettings
from pydantic import field_validator


class Settings(BaseSettings):
    """애플리케이션 설정"""

    # PUPHAX 업스트림 (SOAP)
    upstream_endpoint_url: str = "https://puphax.neak.gov.hu/PUPHAXWS"
    upstream_username: str = "PUPHAX"
    upstream_password: str = "puphax"
    upstream_timeout_s: float = 10.0
    upstream_connect_timeout_s: float = 5.0
    upstream_max_retries: int = 1
    upstream_impersonate: str = "chrome110"
    upstream_max_clients: int = 10

    # 업스트림 회로차단(CB): 연속 실패 시 잠깐 호출 스킵
    upstream_fail_threshold: int = 5
    upstream_open_seconds: int = 30

    # Redis (비어 있으면 프로세스 내 캐시 사용)
    redis_url: str = ""
    cache_ttl: int = 600  # 10분

    # API
    api_title: str = "PUPHAX Drug Search Gateway"
    api_version: str = "1.0.0"
    api_description: str = "Cache-accelerated, paginated search over the NEAK PUPHAX drug registry."

    # 로깅
    log_level: str = "INFO"

    @field_validator("cache_ttl")
    @classmethod
    def validate_cache_ttl(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("cache_ttl must be positive")
        return v

    @field_validator("upstream_timeout_s", "upstream_connect_timeout_s")
    @classmethod
    def validate_upstream_timeouts(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("upstream timeouts must be positive")
        return v

    @field_validator("upstream_max_retries")
    @classmethod
    def validate_upstream_max_retries(cls, v: int) -> int:
        if v < 0:
            raise ValueError("upstream_max_retries must be >= 0")
        return v

    @field_validator("upstream_fail_threshold", "upstream_open_seconds", "upstream_max_clients")
    @classmethod
    def validate_positive_ints(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("circuit breaker and client limits must be positive")
        return v

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
