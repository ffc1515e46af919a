"""PUPHAX SOAP client (TERMEKLISTA)

업스트림 협력자 구현체:
- SOAP envelope 생성 및 전송
- curl 오류 → UpstreamConnectionError / UpstreamTimeoutError
- HTTP 5xx 또는 Fault 요소 → UpstreamFaultError
- 연결 실패만 재시도 (upstream_max_retries)
"""

from __future__ import annotations

import re
from datetime import date
from typing import Optional
from xml.sax.saxutils import escape, unescape

from curl_cffi.const import CurlECode
from curl_cffi.curl import CurlError

from puphax_gateway.core.config import settings
from puphax_gateway.core.logging import logger, sanitize_for_log
from puphax_gateway.utils.encoding import repair

from .circuit_breaker import CircuitBreaker
from .exceptions import UpstreamConnectionError, UpstreamFaultError, UpstreamTimeoutError
from .http_client import SharedHttpClient, get_shared_http_client


SOAP_ACTION = "TERMEKLISTA"

_ENVELOPE_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<soap:Envelope xmlns:soap="http://schemas.xmlsoap.org/soap/envelope/">
    <soap:Body>
        <ter:TERMEKLISTA xmlns:ter="http://xmlns.oracle.com/orawsv/NEAK/PUPHAXWS">
            <ter:C_OBJ_ID_LISTA_TERMEKLISTA-INPUT>
                <ter:DSP-DATE-IN>{date}</ter:DSP-DATE-IN>
                <ter:SX-FILTER-VARCHAR2-IN>{filter}</ter:SX-FILTER-VARCHAR2-IN>
                <ter:N-PAGE-IN>{page}</ter:N-PAGE-IN>
                <ter:N-SIZE-IN>{size}</ter:N-SIZE-IN>
                <ter:SX-SORT-IN>{sort_by} {sort_direction}</ter:SX-SORT-IN>
            </ter:C_OBJ_ID_LISTA_TERMEKLISTA-INPUT>
        </ter:TERMEKLISTA>
    </soap:Body>
</soap:Envelope>
"""

_FAULT_RE = re.compile(r"<(?:[\w-]+:)?Fault[\s>/]")
_FAULT_CODE_RE = re.compile(r"<(?:[\w-]+:)?faultcode[^>]*>(.*?)</(?:[\w-]+:)?faultcode>", re.S)
_FAULT_STRING_RE = re.compile(r"<(?:[\w-]+:)?faultstring[^>]*>(.*?)</(?:[\w-]+:)?faultstring>", re.S)

# curl 타임아웃 계열 오류 코드
_TIMEOUT_CODES = {CurlECode.OPERATION_TIMEDOUT}


def build_search_filter(term: str, manufacturer: Optional[str], atc_code: Optional[str]) -> str:
    """검색어와 선택 필터를 공백으로 이어 붙인 PUPHAX 필터 문자열"""
    parts = [term.strip()]
    for value in (manufacturer, atc_code):
        if value and value.strip():
            parts.append(value.strip())
    return " ".join(parts)


def build_envelope(
    search_filter: str,
    page: int,
    size: int,
    sort_by: str,
    sort_direction: str,
    on_date: Optional[date] = None,
) -> bytes:
    return _ENVELOPE_TEMPLATE.format(
        date=(on_date or date.today()).isoformat(),
        filter=escape(search_filter),
        page=page,
        size=size,
        sort_by=escape(sort_by),
        sort_direction=escape(sort_direction),
    ).encode("utf-8")


def extract_fault(text: str) -> Optional[tuple[str, str]]:
    """응답 본문에서 SOAP Fault (code, text) 추출. 없으면 None."""
    if not _FAULT_RE.search(text):
        return None
    code_match = _FAULT_CODE_RE.search(text)
    string_match = _FAULT_STRING_RE.search(text)
    code = unescape(code_match.group(1).strip()) if code_match else "UNKNOWN"
    fault_text = unescape(string_match.group(1).strip()) if string_match else "Unknown SOAP fault"
    return code, fault_text


class PuphaxSoapClient:
    """PUPHAX 업스트림 클라이언트

    fetch()는 원문 바이트를 그대로 반환합니다. 인코딩 보정과 매핑은
    오케스트레이터가 담당합니다.
    """

    def __init__(
        self,
        http_client: Optional[SharedHttpClient] = None,
        breaker: Optional[CircuitBreaker] = None,
        endpoint_url: Optional[str] = None,
        max_retries: Optional[int] = None,
    ):
        self.http = http_client or get_shared_http_client()
        self.breaker = breaker or CircuitBreaker(
            fail_threshold=settings.upstream_fail_threshold,
            open_duration_sec=float(settings.upstream_open_seconds),
        )
        self.endpoint_url = endpoint_url or settings.upstream_endpoint_url
        self.max_retries = settings.upstream_max_retries if max_retries is None else max_retries
        self.auth = (settings.upstream_username, settings.upstream_password)

    async def fetch(
        self,
        term: str,
        manufacturer: Optional[str],
        atc_code: Optional[str],
        page: int,
        size: int,
        sort_by: str,
        sort_direction: str,
        timeout: float,
    ) -> bytes:
        """TERMEKLISTA 호출

        Args:
            term: 검색어
            manufacturer: 제조사 필터
            atc_code: ATC 코드 필터
            page: 페이지 인덱스
            size: 페이지 크기
            sort_by: 정렬 필드
            sort_direction: ASC | DESC
            timeout: 응답 대기 한도 (초)

        Returns:
            bytes: 원문 응답

        Raises:
            UpstreamConnectionError: 연결 실패 / 회로 개방
            UpstreamTimeoutError: 응답 없음
            UpstreamFaultError: SOAP fault 또는 HTTP 5xx
        """
        if self.breaker.is_open():
            remaining = self.breaker.get_remaining_open_time()
            raise UpstreamConnectionError(
                f"PUPHAX circuit open, retry in {remaining:.0f}s"
            )

        search_filter = build_search_filter(term, manufacturer, atc_code)
        body = build_envelope(search_filter, page, size, sort_by, sort_direction)
        headers = {
            "Content-Type": "text/xml; charset=UTF-8",
            "SOAPAction": SOAP_ACTION,
        }
        logger.info(
            f"[PUPHAX] {SOAP_ACTION} filter='{sanitize_for_log(search_filter)}' page={page} size={size}"
        )

        attempt = 0
        while True:
            try:
                status, raw = await self.http.post_bytes(
                    self.endpoint_url, body, timeout_s=timeout, headers=headers, auth=self.auth
                )
                break
            except CurlError as e:
                if getattr(e, "code", None) in _TIMEOUT_CODES:
                    self.breaker.record_failure()
                    raise UpstreamTimeoutError(
                        f"PUPHAX did not respond within {timeout:.1f}s", cause=e
                    ) from e
                if attempt < self.max_retries:
                    attempt += 1
                    logger.warning(
                        f"[PUPHAX] connection failed ({type(e).__name__}), retry {attempt}/{self.max_retries}"
                    )
                    continue
                self.breaker.record_failure()
                raise UpstreamConnectionError(
                    f"Unable to connect to PUPHAX service: {type(e).__name__}", cause=e
                ) from e

        fault = extract_fault(repair(raw)) if (status >= 500 or b"Fault" in raw) else None
        self.breaker.record_success()
        if fault is not None:
            raise UpstreamFaultError(*fault)
        if status >= 500:
            raise UpstreamFaultError(f"HTTP-{status}", f"PUPHAX returned HTTP {status}")

        logger.debug(f"[PUPHAX] response status={status} bytes={len(raw)}")
        return raw

    async def ping(self, timeout: float = 2.0) -> bool:
        """헬스 체크용 연결 확인"""
        try:
            status = await self.http.head_status(self.endpoint_url, timeout_s=timeout)
        except CurlError as e:
            logger.warning(f"[PUPHAX] ping failed: {type(e).__name__}")
            return False
        return 0 < status < 500
