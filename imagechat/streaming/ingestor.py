"""Server-sent-event ingestion for streamed chat completions."""

from collections.abc import AsyncIterator, Callable
from typing import Any

from imagechat.extraction.response_parser import parse_json_text
from imagechat.logging.logger import Log
from imagechat.streaming.content_filter import filter_ai_response
from imagechat.streaming.models import (
    PARTIAL_CONTENT_MARKER,
    StreamSnapshot,
    StreamState,
)
from imagechat.transport.exceptions import TransportError

DATA_PREFIX = "data:"
DONE_SENTINEL = "[DONE]"


class StreamIngestor:
    """Turns a stream of SSE text chunks into a finite sequence of snapshots.

    A snapshot is published after every non-empty delta and once more when
    the stream ends. The last snapshot is always in the DONE state. Lines
    split across chunks are reassembled; undecodable lines are skipped.
    Closing the returned iterator early publishes nothing further and closes
    the chunk source.
    """

    def __init__(
        self,
        content_filter: Callable[[str], str] = filter_ai_response,
        partial_marker: str = PARTIAL_CONTENT_MARKER,
    ) -> None:
        self._filter = content_filter
        self._partial_marker = partial_marker

    async def ingest(self, chunks: AsyncIterator[str]) -> AsyncIterator[StreamSnapshot]:
        raw_content = ""
        content = ""
        trace: list[Any] = []
        finish_reason: str | None = None
        lines = _lines(chunks)

        try:
            try:
                async for line in lines:
                    data = _event_data(line)
                    if data is None:
                        continue
                    if data == DONE_SENTINEL:
                        Log.debug("Stream finished with sentinel")
                        yield self._snapshot(StreamState.DONE, content, raw_content, trace, finish_reason)
                        return
                    payload = parse_json_text(data)
                    if payload is None:
                        Log.debug(f"Skipping undecodable stream line: {data[:120]}")
                        continue
                    trace.append(payload)
                    delta, reason = _delta_and_reason(payload)
                    if delta:
                        raw_content += delta
                        content = self._filter(raw_content)
                        yield self._snapshot(StreamState.STREAMING, content, raw_content, trace, finish_reason)
                    if reason:
                        finish_reason = reason
                        if reason == "length":
                            Log.warning("Reply stopped at the maximum length")
            except TransportError as exc:
                Log.error(f"Stream interrupted: {exc}")

            Log.warning("Stream closed without end-of-stream sentinel")
            yield StreamSnapshot(
                state=StreamState.DONE,
                content=content + self._partial_marker,
                raw_content=raw_content,
                trace=tuple(trace),
                finish_reason=finish_reason,
                interrupted=True,
            )
        finally:
            await lines.aclose()
            aclose = getattr(chunks, "aclose", None)
            if aclose is not None:
                await aclose()

    @staticmethod
    def _snapshot(
        state: StreamState,
        content: str,
        raw_content: str,
        trace: list[Any],
        finish_reason: str | None,
    ) -> StreamSnapshot:
        return StreamSnapshot(
            state=state,
            content=content,
            raw_content=raw_content,
            trace=tuple(trace),
            finish_reason=finish_reason,
        )


def _event_data(line: str) -> str | None:
    line = line.strip()
    if not line.startswith(DATA_PREFIX):
        return None
    return line[len(DATA_PREFIX):].strip()


def _delta_and_reason(payload: Any) -> tuple[str, str | None]:
    if not isinstance(payload, dict):
        return "", None
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return "", None
    choice = choices[0]
    delta = choice.get("delta")
    text = delta.get("content") if isinstance(delta, dict) else None
    reason = choice.get("finish_reason")
    return (
        text if isinstance(text, str) else "",
        reason if isinstance(reason, str) and reason else None,
    )


async def _lines(chunks: AsyncIterator[str]) -> AsyncIterator[str]:
    """Split chunks into lines; a fragment left when the source ends is the last line."""
    pending = ""
    async for chunk in chunks:
        pending += chunk
        *complete, pending = pending.split("\n")
        for line in complete:
            yield line
    if pending.strip():
        yield pending
