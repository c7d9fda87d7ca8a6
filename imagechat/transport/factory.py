from typing import ClassVar

from imagechat.config.settings import Settings
from imagechat.transport.base import BaseChatTransport
from imagechat.transport.example_transport import ExampleChatTransport
from imagechat.transport.httpx_transport import HttpxChatTransport
from imagechat.transport.openai_transport import OpenAIChatTransport


class TransportFactory:
    """Creates the configured chat transport."""

    PROVIDERS: ClassVar[tuple[str, ...]] = ("example", "httpx", "openai")

    @classmethod
    def create(cls, settings: Settings, api_key: str | None = None) -> BaseChatTransport:
        """Create a transport from settings.

        Args:
            settings: Application settings.
            api_key: Credential override; defaults to ``settings.api_key``.
        """
        provider = settings.transport_provider.lower()
        key = settings.api_key if api_key is None else api_key
        if provider == "example":
            return ExampleChatTransport()
        if provider == "httpx":
            return HttpxChatTransport(
                api_key=key,
                base_url=settings.api_base_url,
                timeout_seconds=settings.request_timeout_seconds,
            )
        if provider == "openai":
            return OpenAIChatTransport(
                api_key=key,
                timeout_seconds=settings.request_timeout_seconds,
                base_url=settings.api_base_url or None,
            )
        raise ValueError(
            f"Unknown transport provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
        )
