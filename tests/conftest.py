import json
from collections.abc import Callable
from typing import Any

import pytest

from imagechat.extraction.models import RawResponse
from imagechat.history.storage import InMemoryStorage
from imagechat.history.store import BoundedHistoryStore
from imagechat.transport.example_transport import ExampleChatTransport


def _completion_response(content: Any, status_code: int = 200, **extra: Any) -> RawResponse:
    payload: dict[str, Any] = {
        "choices": [{"index": 0, "message": {"role": "assistant", "content": content}}]
    }
    payload.update(extra)
    return RawResponse(
        body=json.dumps(payload).encode("utf-8"),
        status_code=status_code,
        content_type="application/json",
    )


@pytest.fixture()
def make_completion() -> Callable[..., RawResponse]:
    """Factory for chat-completion responses whose message content is given."""
    return _completion_response


@pytest.fixture()
def storage() -> InMemoryStorage:
    return InMemoryStorage(quota_bytes=64 * 1024)


@pytest.fixture()
def runs_store(storage: InMemoryStorage) -> BoundedHistoryStore:
    return BoundedHistoryStore(storage, "runs", budget_bytes=64 * 1024, newest_first=True)


@pytest.fixture()
def messages_store(storage: InMemoryStorage) -> BoundedHistoryStore:
    return BoundedHistoryStore(storage, "chat-messages", budget_bytes=64 * 1024)


@pytest.fixture()
def example_transport() -> ExampleChatTransport:
    return ExampleChatTransport()
