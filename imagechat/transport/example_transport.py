"""Example chat transport.

Use this module as a reference when implementing new provider transports.
Implement BaseChatTransport and register the provider in TransportFactory.
"""

import json
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from typing import Any, ClassVar

from imagechat.extraction.models import RawResponse
from imagechat.transport.base import BaseChatTransport


class ExampleChatTransport(BaseChatTransport):
    """Transport that answers every request with canned data.

    No network calls. Image requests get a Markdown image reply; streaming
    requests get a short SSE transcript. Useful for local development and
    for exercising the pipeline end to end in tests.
    """

    DEFAULT_IMAGE_URL: ClassVar[str] = "https://example.com/generated.png"
    DEFAULT_STREAM_TEXT: ClassVar[tuple[str, ...]] = ("Hello", ", ", "world", "!")

    def __init__(
        self,
        image_url: str = DEFAULT_IMAGE_URL,
        stream_text: Sequence[str] = DEFAULT_STREAM_TEXT,
    ) -> None:
        self._image_url = image_url
        self._stream_text = tuple(stream_text)
        self.requests: list[dict[str, Any]] = []

    @property
    def has_credential(self) -> bool:
        return True

    async def send(self, body: dict[str, Any]) -> RawResponse:
        self.requests.append(body)
        payload = {
            "choices": [
                {
                    "index": 0,
                    "message": {
                        "role": "assistant",
                        "content": f"![image]({self._image_url})",
                    },
                    "finish_reason": "stop",
                }
            ]
        }
        return RawResponse(
            body=json.dumps(payload).encode("utf-8"),
            status_code=200,
            content_type="application/json",
        )

    @asynccontextmanager
    async def stream(self, body: dict[str, Any]) -> AsyncIterator[AsyncIterator[str]]:
        self.requests.append(body)
        yield self._frames()

    async def _frames(self) -> AsyncIterator[str]:
        for piece in self._stream_text:
            frame = {"choices": [{"index": 0, "delta": {"content": piece}}]}
            yield f"data: {json.dumps(frame)}\n\n"
        final = {"choices": [{"index": 0, "delta": {}, "finish_reason": "stop"}]}
        yield f"data: {json.dumps(final)}\n\n"
        yield "data: [DONE]\n\n"
