import json
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from imagechat.config.settings import Settings
from imagechat.history.storage import InMemoryStorage, JsonFileStorage
from imagechat.session import state
from imagechat.session.state import (
    MESSAGES_KEY,
    RUNS_KEY,
    clear_history,
    close_session,
    get_session,
    init_session,
)
from imagechat.transport.example_transport import ExampleChatTransport


@pytest.fixture(autouse=True)
def _reset_session() -> Iterator[None]:
    yield
    state._session = None


def _make_settings(**overrides: object) -> Settings:
    return Settings(transport_provider="example", **overrides)


class TestInitSession:
    def test_loads_existing_history(self) -> None:
        storage = InMemoryStorage()
        storage.set_item(RUNS_KEY, json.dumps([{"id": "r1", "url": "https://e.com/a.png"}]))
        session = init_session(_make_settings(), storage=storage)
        assert session.runs.load() == [{"id": "r1", "url": "https://e.com/a.png"}]
        assert get_session() is session

    def test_builds_transport_from_settings(self) -> None:
        session = init_session(_make_settings(), storage=InMemoryStorage())
        assert isinstance(session.transport, ExampleChatTransport)

    def test_uses_file_storage_when_path_set(self, tmp_path: Path) -> None:
        session = init_session(_make_settings(history_path=str(tmp_path / "h.json")))
        assert isinstance(session.storage, JsonFileStorage)

    def test_uses_memory_storage_by_default(self) -> None:
        session = init_session(_make_settings())
        assert isinstance(session.storage, InMemoryStorage)

    def test_runs_are_newest_first(self) -> None:
        session = init_session(_make_settings(), storage=InMemoryStorage())
        session.runs.append({"id": "a"})
        session.runs.append({"id": "b"})
        session.messages.append({"id": "a"})
        session.messages.append({"id": "b"})
        assert [e["id"] for e in session.runs.load()] == ["b", "a"]
        assert [e["id"] for e in session.messages.load()] == ["a", "b"]


class TestSessionLifecycle:
    def test_get_before_init_raises(self) -> None:
        with pytest.raises(RuntimeError, match="not initialized"):
            get_session()

    @pytest.mark.asyncio
    async def test_close_releases_transport(self) -> None:
        transport = ExampleChatTransport()
        transport.aclose = AsyncMock()
        init_session(_make_settings(), transport=transport, storage=InMemoryStorage())
        await close_session()
        transport.aclose.assert_awaited_once()
        with pytest.raises(RuntimeError):
            get_session()

    @pytest.mark.asyncio
    async def test_close_without_session_is_noop(self) -> None:
        await close_session()

    def test_clear_history(self) -> None:
        storage = InMemoryStorage()
        storage.set_item("unrelated", "keep")
        session = init_session(_make_settings(), storage=storage)
        session.runs.append({"id": "r"})
        session.messages.append({"id": "m"})
        session.review_runs.append({"id": "v"})
        clear_history()
        assert storage.get_item(RUNS_KEY) is None
        assert storage.get_item(MESSAGES_KEY) is None
        assert session.review_runs.load() == []
        assert storage.get_item("unrelated") == "keep"
