import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from imagechat.extraction.models import ImageReference
from imagechat.extraction.url_validator import safe_url


def _new_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class GenerationRun:
    """One successful image generation as shown in the run gallery."""

    primary_image: ImageReference
    duration_seconds: float = 0.0
    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self) -> None:
        if self.duration_seconds < 0:
            raise ValueError("duration_seconds must be non-negative")
        if safe_url(self.primary_image.url) is None:
            raise ValueError(f"Refusing to store disallowed URL: {self.primary_image.url[:80]}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "ts": self.created_at.isoformat(timespec="seconds"),
            "durSec": self.duration_seconds,
            "url": self.primary_image.url,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GenerationRun":
        return cls(
            primary_image=ImageReference(url=str(data["url"])),
            duration_seconds=float(data.get("durSec", 0.0)),
            id=str(data["id"]),
            created_at=_parse_timestamp(data.get("ts")),
        )


@dataclass(frozen=True)
class ReviewRun:
    """One rewritten review, kept as cleaned HTML."""

    text: str
    duration_seconds: float = 0.0
    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self) -> None:
        if self.duration_seconds < 0:
            raise ValueError("duration_seconds must be non-negative")

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "ts": self.created_at.isoformat(timespec="seconds"),
            "durSec": self.duration_seconds,
            "text": self.text,
        }


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            pass
    return datetime.now()
