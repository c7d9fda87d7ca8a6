"""Best-effort decoding of chat-completion response bodies."""

import json
from typing import Any

from imagechat.extraction.models import RawResponse
from imagechat.logging.logger import Log


def parse_payload(raw: RawResponse) -> Any:
    """Decode a response body as JSON.

    Returns:
        The decoded tree, or None when the body is not valid JSON
        (HTML error pages, truncated bodies, plain-text replies).
    """
    return parse_json_text(raw.text)


def parse_json_text(text: str) -> Any:
    """Decode JSON text, returning None instead of raising."""
    if not text or not text.strip():
        return None
    try:
        return json.loads(text)
    except (json.JSONDecodeError, RecursionError) as exc:
        Log.debug(f"Response body is not JSON: {exc}")
        return None


def error_message(payload: Any) -> str | None:
    """Return ``error.message`` from a decoded error body, if present."""
    if not isinstance(payload, dict):
        return None
    error = payload.get("error")
    if isinstance(error, dict):
        message = error.get("message")
        if isinstance(message, str) and message:
            return message
    return None
