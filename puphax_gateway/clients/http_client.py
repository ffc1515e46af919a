"""공유 HTTP 클라이언트 (curl_cffi)

- 요청마다 AsyncSession을 만들면 TLS/커넥션 오버헤드가 커지므로
  프로세스 단위로 세션을 재사용합니다.
- 전송 오류는 삼키지 않고 CurlError 그대로 호출자에게 전달합니다.
  (분류는 PuphaxSoapClient 담당)
- 앱 종료 시 close()로 정리합니다.
"""

from __future__ import annotations

import asyncio
from typing import Optional, Dict

from curl_cffi.requests import AsyncSession

from puphax_gateway.core.config import settings
from puphax_gateway.core.logging import logger


class SharedHttpClient:
    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._session: Optional[AsyncSession] = None

    async def _ensure_session(self) -> AsyncSession:
        async with self._lock:
            if self._session is not None:
                return self._session
            self._session = AsyncSession(
                impersonate=settings.upstream_impersonate,
                headers=self.default_headers(),
                allow_redirects=True,
                max_clients=settings.upstream_max_clients,
                trust_env=False,
            )
            return self._session

    def default_headers(self) -> Dict[str, str]:
        return {
            "Accept": "text/xml, application/soap+xml",
            "Accept-Charset": "UTF-8, ISO-8859-2",
        }

    async def post_bytes(
        self,
        url: str,
        body: bytes,
        *,
        timeout_s: float,
        headers: Optional[Dict[str, str]] = None,
        auth: Optional[tuple[str, str]] = None,
    ) -> tuple[int, bytes]:
        """POST 후 (status, 원문 바이트) 반환

        Raises:
            curl_cffi.CurlError: 연결/타임아웃 등 전송 오류
        """
        sess = await self._ensure_session()
        resp = await sess.post(
            url,
            data=body,
            headers=headers,
            auth=auth,
            timeout=(settings.upstream_connect_timeout_s, timeout_s),
        )
        status = getattr(resp, "status_code", 0) or 0
        content = getattr(resp, "content", b"") or b""
        return status, content

    async def head_status(self, url: str, *, timeout_s: float) -> int:
        sess = await self._ensure_session()
        resp = await sess.head(url, timeout=timeout_s, allow_redirects=True)
        return getattr(resp, "status_code", 0) or 0

    async def close(self) -> None:
        async with self._lock:
            if self._session is None:
                return
            try:
                await self._session.close()
            except Exception as e:
                logger.info(f"[HTTP_CLIENT] session close failed: {type(e).__name__}")
            self._session = None


_shared_http_client = SharedHttpClient()


def get_shared_http_client() -> SharedHttpClient:
    return _shared_http_client


async def shutdown_shared_http_client() -> None:
    await _shared_http_client.close()
