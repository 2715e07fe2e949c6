from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx


logger = logging.getLogger(__name__)

DEFAULT_HEADERS: Dict[str, str] = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/127.0.0.0 Safari/537.36"
    ),
    "Accept-Language": "en-US,en;q=0.8",
}


class AsyncHttpClient:
    """Thin httpx wrapper shared by the feed adapters and the mailer.

    Proxies come from HTTP_PROXY / HTTPS_PROXY through httpx's own env handling.
    """

    def __init__(
        self,
        *,
        timeout: float = 20.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.timeout = timeout
        self._client = httpx.AsyncClient(
            timeout=timeout,
            headers=DEFAULT_HEADERS,
            follow_redirects=True,
            transport=transport,
        )

    async def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send a request and hand back the response without checking its status."""
        return await self._client.request(method, url, **kwargs)

    async def get_text(
        self,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        **kwargs: Any,
    ) -> str:
        try:
            resp = await self._client.get(url, params=params, **kwargs)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("http.get_text failed url=%s err=%s", url, exc)
            raise
        return resp.text

    async def post_json(
        self,
        url: str,
        payload: Any,
        **kwargs: Any,
    ) -> Any:
        try:
            resp = await self._client.post(url, json=payload, **kwargs)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("http.post_json failed url=%s err=%s", url, exc)
            raise
        return resp.json()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncHttpClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
