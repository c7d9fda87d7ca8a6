"""Size-capped history persisted under a single storage key."""

import json
from dataclasses import dataclass, field
from typing import Any

from imagechat.extraction.response_parser import parse_json_text
from imagechat.history.exceptions import StorageQuotaExceededError
from imagechat.history.storage import BaseStorage, entry_size
from imagechat.logging.logger import Log


@dataclass(frozen=True)
class AppendResult:
    """Outcome of one append: what is stored now and what had to give way."""

    entries: list[dict[str, Any]] = field(default_factory=list)
    evicted: int = 0
    warning: str | None = None


class BoundedHistoryStore:
    """A JSON list of entries that never outgrows its byte budget.

    Every mutation is a single read-modify-write with no suspension point,
    so interleaved coroutines on one event loop cannot lose updates.

    Args:
        storage: Backend holding the serialized list.
        key: Storage key of the list.
        budget_bytes: Hard cap on the total storage size after an append.
        soft_threshold_bytes: Size above which only ``keep_recent`` entries stay.
        keep_recent: Entries kept when the soft threshold is crossed.
        fallback_keep: Entries kept when a write is refused by the backend.
        newest_first: Insert at the front (run galleries) instead of the
            back (chat transcripts).
    """

    def __init__(
        self,
        storage: BaseStorage,
        key: str,
        *,
        budget_bytes: int,
        soft_threshold_bytes: int | None = None,
        keep_recent: int = 30,
        fallback_keep: int = 20,
        newest_first: bool = False,
    ) -> None:
        self._storage = storage
        self._key = key
        self._budget_bytes = budget_bytes
        self._soft_threshold_bytes = (
            budget_bytes if soft_threshold_bytes is None else soft_threshold_bytes
        )
        self._keep_recent = keep_recent
        self._fallback_keep = min(fallback_keep, keep_recent)
        self._newest_first = newest_first

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> list[dict[str, Any]]:
        raw = self._storage.get_item(self._key)
        if raw is None:
            return []
        data = parse_json_text(raw)
        if not isinstance(data, list):
            Log.warning(f"History '{self._key}' is not a list, starting empty")
            return []
        return [item for item in data if isinstance(item, dict)]

    def append(self, entry: dict[str, Any]) -> AppendResult:
        entries = self.load()
        if self._projected_size([entry]) > self._budget_bytes:
            Log.warning(
                f"History '{self._key}' entry {entry.get('id')} exceeds the budget, not stored"
            )
            return AppendResult(
                entries=entries,
                warning="Entry is too large for history storage and was not saved",
            )
        entries = [entry, *entries] if self._newest_first else [*entries, entry]
        evicted = 0

        if self._projected_size(entries) > self._soft_threshold_bytes:
            kept = self._most_recent(entries, self._keep_recent)
            evicted += len(entries) - len(kept)
            entries = kept
            Log.warning(
                f"History '{self._key}' near capacity, keeping {len(entries)} most recent entries"
            )

        while entries and self._projected_size(entries) > self._budget_bytes:
            entries = self._drop_oldest(entries)
            evicted += 1

        try:
            self._write(entries)
        except StorageQuotaExceededError as exc:
            return self._write_after_pressure(entries, evicted, exc)
        return AppendResult(entries=entries, evicted=evicted)

    def remove(self, entry_id: str) -> list[dict[str, Any]]:
        """Delete one entry by id and persist the result immediately."""
        entries = [item for item in self.load() if item.get("id") != entry_id]
        self._write(entries)
        return entries

    def trim(self, keep: int) -> list[dict[str, Any]]:
        """Keep only the ``keep`` most recent entries."""
        entries = self._most_recent(self.load(), keep)
        self._write(entries)
        return entries

    def clear(self) -> None:
        self._storage.remove_item(self._key)

    def size_bytes(self) -> int:
        """Current total size of the backing storage."""
        return self._storage.size_bytes()

    def _write_after_pressure(
        self,
        entries: list[dict[str, Any]],
        evicted: int,
        exc: StorageQuotaExceededError,
    ) -> AppendResult:
        Log.warning(f"History '{self._key}' write refused: {exc}")
        kept = self._most_recent(entries, self._fallback_keep)
        evicted += len(entries) - len(kept)
        try:
            self._write(kept)
        except StorageQuotaExceededError as second:
            Log.warning(f"History '{self._key}' still refused after trimming: {second}")
            return AppendResult(
                entries=self.load(),
                evicted=evicted,
                warning="Storage is full; clear old history to keep saving",
            )
        return AppendResult(
            entries=kept,
            evicted=evicted,
            warning=f"Storage nearly full; kept the {len(kept)} most recent entries",
        )

    def _write(self, entries: list[dict[str, Any]]) -> None:
        self._storage.set_item(self._key, _serialize(entries))

    def _projected_size(self, entries: list[dict[str, Any]]) -> int:
        current = self._storage.get_item(self._key)
        others = self._storage.size_bytes()
        if current is not None:
            others -= entry_size(self._key, current)
        return others + entry_size(self._key, _serialize(entries))

    def _most_recent(self, entries: list[dict[str, Any]], count: int) -> list[dict[str, Any]]:
        if count <= 0:
            return []
        return entries[:count] if self._newest_first else entries[-count:]

    def _drop_oldest(self, entries: list[dict[str, Any]]) -> list[dict[str, Any]]:
        return entries[:-1] if self._newest_first else entries[1:]


def _serialize(entries: list[dict[str, Any]]) -> str:
    return json.dumps(entries, ensure_ascii=False, separators=(",", ":"))


def format_size(size_bytes: int) -> str:
    """Human-readable size: ``512 B``, ``1.5 KB``, ``2.0 MB``."""
    if size_bytes < 1024:
        return f"{size_bytes} B"
    if size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    return f"{size_bytes / (1024 * 1024):.1f} MB"
