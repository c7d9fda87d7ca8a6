import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

from imagechat.streaming.models import StreamSnapshot

Role = Literal["user", "assistant"]


@dataclass
class ConversationMessage:
    """One chat turn.

    An assistant message grows while its reply streams in and is not
    changed once the stream is done.
    """

    role: Role
    content: str
    raw_content: str | None = None
    api_response: list[Any] | None = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat(timespec="seconds"))
    complete: bool = False

    def apply(self, snapshot: StreamSnapshot) -> None:
        if self.complete:
            raise ValueError(f"Message {self.id} is already complete")
        self.content = snapshot.content
        self.raw_content = snapshot.raw_content
        self.api_response = list(snapshot.trace)
        self.complete = snapshot.done

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "role": self.role,
            "content": self.content,
            "timestamp": self.timestamp,
        }
        if self.raw_content is not None:
            data["rawContent"] = self.raw_content
        if self.api_response is not None:
            data["apiResponse"] = self.api_response
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ConversationMessage":
        role = data.get("role")
        if role not in ("user", "assistant"):
            raise ValueError(f"Unknown message role: {role!r}")
        return cls(
            role=role,
            content=str(data.get("content", "")),
            raw_content=data.get("rawContent"),
            api_response=data.get("apiResponse"),
            id=str(data["id"]),
            timestamp=str(data.get("timestamp", "")),
            complete=True,
        )
