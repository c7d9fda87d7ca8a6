import pytest

from imagechat.config.settings import Settings
from imagechat.transport.example_transport import ExampleChatTransport
from imagechat.transport.factory import TransportFactory
from imagechat.transport.httpx_transport import HttpxChatTransport
from imagechat.transport.openai_transport import OpenAIChatTransport


def _make_settings(**overrides: object) -> Settings:
    return Settings(api_key="sk-test", **overrides)


class TestTransportFactory:
    def test_creates_httpx_transport_by_default(self) -> None:
        transport = TransportFactory.create(_make_settings())
        assert isinstance(transport, HttpxChatTransport)
        assert transport.has_credential

    def test_creates_openai_transport(self) -> None:
        transport = TransportFactory.create(_make_settings(transport_provider="openai"))
        assert isinstance(transport, OpenAIChatTransport)

    def test_creates_example_transport(self) -> None:
        transport = TransportFactory.create(_make_settings(transport_provider="EXAMPLE"))
        assert isinstance(transport, ExampleChatTransport)

    def test_api_key_override(self) -> None:
        transport = TransportFactory.create(_make_settings(), api_key="")
        assert not transport.has_credential

    def test_unknown_provider_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown transport provider 'carrier-pigeon'"):
            TransportFactory.create(_make_settings(transport_provider="carrier-pigeon"))
