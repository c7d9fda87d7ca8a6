"""Key/value storage backends with a byte quota, modelled on browser local storage."""

import json
from abc import ABC, abstractmethod
from pathlib import Path

from imagechat.history.exceptions import StorageQuotaExceededError
from imagechat.logging.logger import Log


def entry_size(key: str, value: str) -> int:
    """Bytes one stored key/value pair occupies (UTF-8)."""
    return len(key.encode("utf-8")) + len(value.encode("utf-8"))


class BaseStorage(ABC):
    """Contract for string key/value stores used by the history layer."""

    def __init__(self, quota_bytes: int | None = None) -> None:
        self._quota_bytes = quota_bytes

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        """Return the stored value, or None if the key is absent."""

    @abstractmethod
    def keys(self) -> list[str]:
        """Return all stored keys."""

    @abstractmethod
    def _write(self, key: str, value: str) -> None:
        """Persist one value after the quota check passed."""

    @abstractmethod
    def _delete(self, key: str) -> None:
        """Remove one key from the underlying medium."""

    def set_item(self, key: str, value: str) -> None:
        """Store a value.

        Raises:
            StorageQuotaExceededError: if the store would outgrow its quota.
        """
        if self._quota_bytes is not None:
            projected = self.size_bytes() - self._item_size(key) + entry_size(key, value)
            if projected > self._quota_bytes:
                raise StorageQuotaExceededError(
                    f"Storage quota exceeded: {projected} > {self._quota_bytes} bytes"
                )
        self._write(key, value)

    def remove_item(self, key: str) -> None:
        if self.get_item(key) is not None:
            self._delete(key)

    def size_bytes(self) -> int:
        """Total bytes of all stored keys and values."""
        total = 0
        for key in self.keys():
            total += self._item_size(key)
        return total

    def _item_size(self, key: str) -> int:
        value = self.get_item(key)
        return 0 if value is None else entry_size(key, value)


class InMemoryStorage(BaseStorage):
    """Process-local storage; contents vanish with the process."""

    def __init__(self, quota_bytes: int | None = None) -> None:
        super().__init__(quota_bytes)
        self._items: dict[str, str] = {}

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def keys(self) -> list[str]:
        return list(self._items)

    def _write(self, key: str, value: str) -> None:
        self._items[key] = value

    def _delete(self, key: str) -> None:
        del self._items[key]


class JsonFileStorage(BaseStorage):
    """Storage persisted as a single JSON object on disk.

    The whole file is rewritten on every change through a temporary file,
    so a crash never leaves a half-written history behind.
    """

    def __init__(self, path: Path, quota_bytes: int | None = None) -> None:
        super().__init__(quota_bytes)
        self._path = path
        self._items = self._load()

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def keys(self) -> list[str]:
        return list(self._items)

    def _write(self, key: str, value: str) -> None:
        items = {**self._items, key: value}
        self._flush(items)
        self._items = items

    def _delete(self, key: str) -> None:
        items = {k: v for k, v in self._items.items() if k != key}
        self._flush(items)
        self._items = items

    def _load(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            Log.warning(f"Ignoring unreadable history file {self._path}: {exc}")
            return {}
        if not isinstance(data, dict):
            Log.warning(f"Ignoring history file {self._path}: not a JSON object")
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _flush(self, items: dict[str, str]) -> None:
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(items, ensure_ascii=False), encoding="utf-8")
            tmp_path.replace(self._path)
        except OSError as exc:
            raise StorageQuotaExceededError(f"Failed to write {self._path}: {exc}") from exc
