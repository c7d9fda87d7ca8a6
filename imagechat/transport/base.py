from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from contextlib import AbstractAsyncContextManager
from typing import Any

from imagechat.extraction.models import RawResponse


class BaseChatTransport(ABC):
    """Contract for provider-specific chat-completion transports."""

    @property
    @abstractmethod
    def has_credential(self) -> bool:
        """Whether a bearer token is configured for outgoing requests."""

    @abstractmethod
    async def send(self, body: dict[str, Any]) -> RawResponse:
        """POST a completion request and return the response as received.

        Non-2xx responses are returned, not raised, so callers can inspect
        the body.

        Raises:
            TransportError: when no response could be obtained.
        """

    @abstractmethod
    def stream(
        self, body: dict[str, Any]
    ) -> AbstractAsyncContextManager[AsyncIterator[str]]:
        """Open a streaming completion and yield decoded text chunks.

        Entering the context raises TransportError for non-2xx responses.
        Iterating raises TransportError when the connection breaks. Leaving
        the context releases the connection.
        """

    async def aclose(self) -> None:
        """Release pooled connections held by the transport."""
