from dataclasses import dataclass, field
from enum import Enum
from typing import Any

PARTIAL_CONTENT_MARKER = "\n\n[Stream interrupted, the reply may be incomplete]"


class StreamState(str, Enum):
    STREAMING = "streaming"
    DONE = "done"


@dataclass(frozen=True)
class StreamSnapshot:
    """One published state of an in-flight reply."""

    state: StreamState
    content: str
    raw_content: str
    trace: tuple[Any, ...] = field(default_factory=tuple)
    finish_reason: str | None = None
    interrupted: bool = False

    @property
    def done(self) -> bool:
        return self.state is StreamState.DONE
