from collections.abc import Sequence
from typing import Any

from imagechat.extraction.models import (
    ExtractionInput,
    ImageReference,
    TextChunk,
    first_message,
)
from imagechat.extraction.strategies import DEFAULT_STRATEGIES, Strategy
from imagechat.extraction.url_validator import safe_url
from imagechat.logging.logger import Log


class ImageExtractor:
    """Recovers image references from a loosely-shaped completion response.

    Strategies are tried in order; the first one that yields at least one
    allowed URL wins. Extraction never raises: no match is an empty tuple.
    """

    def __init__(self, strategies: Sequence[Strategy] = DEFAULT_STRATEGIES) -> None:
        self._strategies = tuple(strategies)

    def extract(self, source: ExtractionInput) -> tuple[ImageReference, ...]:
        for strategy in self._strategies:
            images = self._validated(strategy(source))
            if images:
                name = getattr(strategy, "__name__", repr(strategy))
                Log.debug(f"Extraction tier '{name}' found {len(images)} image(s)")
                return images
        return ()

    @staticmethod
    def _validated(candidates: list[str]) -> tuple[ImageReference, ...]:
        seen: dict[str, ImageReference] = {}
        for candidate in candidates:
            url = safe_url(candidate)
            if url is not None and url not in seen:
                seen[url] = ImageReference(url=url)
        return tuple(seen.values())


def collect_text_chunks(payload: Any) -> tuple[TextChunk, ...]:
    """Return the assistant text of ``choices[0].message.content``.

    String content gives one chunk; block content gives one chunk per
    non-empty text block.
    """
    message = first_message(payload)
    if not isinstance(message, dict):
        return ()
    content = message.get("content")
    if isinstance(content, str):
        return (TextChunk(content),) if content.strip() else ()
    chunks: list[TextChunk] = []
    if isinstance(content, list):
        for block in content:
            if (
                isinstance(block, dict)
                and block.get("type") == "text"
                and isinstance(block.get("text"), str)
                and block["text"].strip()
            ):
                chunks.append(TextChunk(block["text"]))
    return tuple(chunks)
