from collections.abc import AsyncIterator
from contextlib import AsyncExitStack, asynccontextmanager
from typing import Any

import httpx
import openai

from imagechat.extraction.models import RawResponse
from imagechat.transport.base import BaseChatTransport
from imagechat.transport.exceptions import TransportError


class OpenAIChatTransport(BaseChatTransport):
    """Chat transport built on the OpenAI SDK's raw-response interfaces.

    The SDK's own retries are disabled so that the extractor-triggered retry
    stays the only one.
    """

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        self._api_key = api_key
        self._client = openai.AsyncOpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
            max_retries=0,
        )

    @property
    def has_credential(self) -> bool:
        return bool(self._api_key.strip())

    async def send(self, body: dict[str, Any]) -> RawResponse:
        try:
            response = await self._client.chat.completions.with_raw_response.create(**body)
        except openai.APIStatusError as exc:
            return _to_raw(exc.response)
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise TransportError(f"AI provider network error: {exc}") from exc
        except openai.APIError as exc:
            raise TransportError(f"AI provider API error: {exc}") from exc
        return _to_raw(response.http_response)

    @asynccontextmanager
    async def stream(self, body: dict[str, Any]) -> AsyncIterator[AsyncIterator[str]]:
        async with AsyncExitStack() as stack:
            try:
                response = await stack.enter_async_context(
                    self._client.chat.completions.with_streaming_response.create(**body)
                )
            except openai.APIStatusError as exc:
                raise TransportError.from_response(_to_raw(exc.response)) from exc
            except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
                raise TransportError(f"AI provider network error: {exc}") from exc
            yield _iter_text(response)

    async def aclose(self) -> None:
        await self._client.close()


def _to_raw(response: httpx.Response) -> RawResponse:
    return RawResponse(
        body=response.content,
        status_code=response.status_code,
        content_type=response.headers.get("content-type", ""),
    )


async def _iter_text(response: Any) -> AsyncIterator[str]:
    try:
        async for text in response.iter_text():
            yield text
    except (httpx.HTTPError, openai.APIError) as exc:
        raise TransportError(f"Stream interrupted: {exc}") from exc
