"""
REST HTTP client for the credential issuer.
"""

from typing import Any, Optional

import httpx

from rtc_call.errors import RtcCallError

DEFAULT_ISSUER_URL = "https://backstage-agora-token-server.herokuapp.com"


class HttpClient:
    def __init__(
        self,
        base_url: str = DEFAULT_ISSUER_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={"User-Agent": "rtc-call/0.1.0", "Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @staticmethod
    def _headers() -> dict[str, str]:
        return {"Accept": "application/json", "Content-Type": "application/json"}

    async def get(self, path: str, params: Optional[dict[str, str]] = None) -> Any:
        resp = await self._client.get(path, params=params, headers=self._headers())
        if resp.status_code >= 400:
            raise RtcCallError("http_error", f"HTTP {resp.status_code}: {resp.text[:200]}",
                               {"status_code": resp.status_code})
        try:
            return resp.json()
        except ValueError as e:
            raise RtcCallError("http_error", f"Invalid JSON body: {e}") from e

    async def close(self) -> None:
        await self._client.aclose()
