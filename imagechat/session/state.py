"""Process-wide client state.

Holds the credential-bearing transport, the storage backend and the
history stores built on it. ``init_session`` loads everything from the
configured store at startup, ``close_session`` releases it, and
``get_session`` hands the state to the services that need it.
"""

from dataclasses import dataclass
from pathlib import Path

from imagechat.config.settings import Settings
from imagechat.history.storage import BaseStorage, InMemoryStorage, JsonFileStorage
from imagechat.history.store import BoundedHistoryStore
from imagechat.logging.logger import Log
from imagechat.transport.base import BaseChatTransport
from imagechat.transport.factory import TransportFactory

RUNS_KEY = "runs"
MESSAGES_KEY = "chat-messages"
REVIEW_RUNS_KEY = "runs-rewrite"


@dataclass
class Session:
    settings: Settings
    transport: BaseChatTransport
    storage: BaseStorage
    runs: BoundedHistoryStore
    messages: BoundedHistoryStore
    review_runs: BoundedHistoryStore


_session: Session | None = None


def init_session(
    settings: Settings,
    transport: BaseChatTransport | None = None,
    storage: BaseStorage | None = None,
) -> Session:
    """Build the global session from settings, loading stored history."""
    global _session  # noqa: PLW0603
    if storage is None:
        storage = _build_storage(settings)
    if transport is None:
        transport = TransportFactory.create(settings)
    _session = Session(
        settings=settings,
        transport=transport,
        storage=storage,
        runs=_history(settings, storage, RUNS_KEY, newest_first=True),
        messages=_history(settings, storage, MESSAGES_KEY, newest_first=False),
        review_runs=_history(settings, storage, REVIEW_RUNS_KEY, newest_first=True),
    )
    Log.info(
        f"Session ready: provider={settings.transport_provider}, "
        f"{len(_session.runs.load())} run(s), {len(_session.messages.load())} message(s)"
    )
    return _session


async def close_session() -> None:
    """Release the transport and forget the global session."""
    global _session  # noqa: PLW0603
    if _session is not None:
        await _session.transport.aclose()
        _session = None


def get_session() -> Session:
    if _session is None:
        raise RuntimeError("Session not initialized. Call init_session() first.")
    return _session


def clear_history() -> None:
    """Drop every stored run and message of the current session."""
    session = get_session()
    for store in (session.runs, session.messages, session.review_runs):
        store.clear()
    Log.info("All history cleared")


def _build_storage(settings: Settings) -> BaseStorage:
    if settings.history_path:
        return JsonFileStorage(Path(settings.history_path), quota_bytes=settings.history_budget_bytes)
    return InMemoryStorage(quota_bytes=settings.history_budget_bytes)


def _history(
    settings: Settings,
    storage: BaseStorage,
    key: str,
    *,
    newest_first: bool,
) -> BoundedHistoryStore:
    return BoundedHistoryStore(
        storage,
        key,
        budget_bytes=settings.history_budget_bytes,
        soft_threshold_bytes=settings.history_soft_threshold_bytes,
        keep_recent=settings.history_keep_recent,
        fallback_keep=settings.history_fallback_keep,
        newest_first=newest_first,
    )
