from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class RawResponse:
    """An HTTP response body exactly as received."""

    body: bytes
    status_code: int
    content_type: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


@dataclass(frozen=True)
class ImageReference:
    """A validated image URL (https, data or blob scheme)."""

    url: str


@dataclass(frozen=True)
class TextChunk:
    """A piece of assistant text recovered from a response."""

    text: str


ExtractedAsset = ImageReference | TextChunk


@dataclass(frozen=True)
class ExtractionInput:
    """Everything the extractor strategies may look at for one response."""

    payload: Any = None
    text: str = ""
    content: list[Any] = field(default_factory=list)

    @classmethod
    def from_response(cls, raw: RawResponse, payload: Any) -> "ExtractionInput":
        """Build the input from a raw response and its parsed payload (or None)."""
        content: list[Any] = []
        message = first_message(payload)
        if isinstance(message, dict) and isinstance(message.get("content"), list):
            content = message["content"]
        return cls(payload=payload, text=raw.text, content=content)


def first_message(payload: Any) -> Any:
    """Return ``choices[0].message`` of a completion payload, or None."""
    if not isinstance(payload, dict):
        return None
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    choice = choices[0]
    if not isinstance(choice, dict):
        return None
    return choice.get("message")
