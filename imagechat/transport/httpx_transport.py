from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import httpx

from imagechat.extraction.models import RawResponse
from imagechat.logging.logger import Log
from imagechat.transport.base import BaseChatTransport
from imagechat.transport.exceptions import TransportError


class HttpxChatTransport(BaseChatTransport):
    """Talks to ``{base_url}/chat/completions`` directly with httpx."""

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str,
        timeout_seconds: int,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = api_key
        self._endpoint = base_url.rstrip("/") + "/chat/completions"
        self._client = client or httpx.AsyncClient(timeout=timeout_seconds)

    @property
    def has_credential(self) -> bool:
        return bool(self._api_key.strip())

    async def send(self, body: dict[str, Any]) -> RawResponse:
        try:
            response = await self._client.post(
                self._endpoint, json=body, headers=self._headers()
            )
        except httpx.HTTPError as exc:
            raise TransportError(f"Network error: {exc}") from exc
        Log.debug(f"POST {self._endpoint} -> {response.status_code}")
        return _to_raw(response)

    @asynccontextmanager
    async def stream(self, body: dict[str, Any]) -> AsyncIterator[AsyncIterator[str]]:
        request = self._client.build_request(
            "POST", self._endpoint, json=body, headers=self._headers()
        )
        try:
            response = await self._client.send(request, stream=True)
        except httpx.HTTPError as exc:
            raise TransportError(f"Network error: {exc}") from exc
        try:
            if not response.is_success:
                await response.aread()
                raise TransportError.from_response(_to_raw(response))
            yield _iter_text(response)
        finally:
            await response.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }


def _to_raw(response: httpx.Response) -> RawResponse:
    return RawResponse(
        body=response.content,
        status_code=response.status_code,
        content_type=response.headers.get("content-type", ""),
    )


async def _iter_text(response: httpx.Response) -> AsyncIterator[str]:
    try:
        async for text in response.aiter_text():
            yield text
    except httpx.HTTPError as exc:
        raise TransportError(f"Stream interrupted: {exc}") from exc
