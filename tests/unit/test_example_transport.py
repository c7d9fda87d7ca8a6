import json

import pytest

from imagechat.extraction.extractor import ImageExtractor
from imagechat.extraction.models import ExtractionInput
from imagechat.extraction.response_parser import parse_payload
from imagechat.streaming.ingestor import StreamIngestor
from imagechat.transport.example_transport import ExampleChatTransport


class TestExampleChatTransport:
    @pytest.mark.asyncio
    async def test_send_returns_extractable_image(self) -> None:
        transport = ExampleChatTransport(image_url="https://example.com/cat.png")
        raw = await transport.send({"model": "m"})
        images = ImageExtractor().extract(ExtractionInput.from_response(raw, parse_payload(raw)))
        assert [image.url for image in images] == ["https://example.com/cat.png"]
        assert transport.requests == [{"model": "m"}]

    @pytest.mark.asyncio
    async def test_stream_ends_with_sentinel(self) -> None:
        transport = ExampleChatTransport()
        async with transport.stream({"stream": True}) as chunks:
            frames = [frame async for frame in chunks]
        assert frames[-1] == "data: [DONE]\n\n"
        first = json.loads(frames[0][len("data: "):])
        assert first["choices"][0]["delta"]["content"] == "Hello"

    @pytest.mark.asyncio
    async def test_stream_ingests_to_greeting(self) -> None:
        transport = ExampleChatTransport()
        async with transport.stream({}) as chunks:
            snapshots = [s async for s in StreamIngestor().ingest(chunks)]
        assert snapshots[-1].content == "Hello, world!"
        assert snapshots[-1].finish_reason == "stop"
        assert not snapshots[-1].interrupted

    def test_always_has_credential(self) -> None:
        assert ExampleChatTransport().has_credential
