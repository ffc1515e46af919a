"""업스트림 협력자 예외

PuphaxSoapClient만 이 예외를 발생시키고, 오케스트레이터의 업스트림 경계만
이를 ServiceFailure로 변환합니다.
"""
from typing import Optional


class UpstreamError(Exception):
    """업스트림 호출 실패의 기본 클래스"""
    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.message = message
        self.cause = cause
        super().__init__(message)


class UpstreamConnectionError(UpstreamError):
    """연결/DNS/전송 실패 (재시도 후 최종 실패 포함)"""


class UpstreamTimeoutError(UpstreamError):
    """업스트림 응답 없음"""


class UpstreamFaultError(UpstreamError):
    """업스트림이 프로토콜 수준에서 보고한 fault"""
    def __init__(self, code: str, text: str, cause: Optional[BaseException] = None):
        self.code = code
        self.text = text
        super().__init__(f"[{code}] {text}", cause)
