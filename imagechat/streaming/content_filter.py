"""Cleanup of assistant text before it is shown.

The filter runs over the whole accumulated reply after every streamed delta,
so it must be idempotent. It is applied until the text stops changing, which
makes ``filter_ai_response(filter_ai_response(x)) == filter_ai_response(x)``
hold even when one removal exposes another match.
"""

import re

_TIMESTAMP_RE = re.compile(r"\d{4}/\d{1,2}/\d{1,2}\s+\d{1,2}:\d{1,2}:\d{1,2}")
_THINKING_MARKER = "*Thinking...*"
_REASONING_QUOTE_RE = re.compile(r">\s*\*\*[\s\S]*?(?=\n\n|\n[^>]|\Z)")
_EXTRA_BLANK_LINES_RE = re.compile(r"\n\s*\n\s*\n")


def filter_ai_response(text: str) -> str:
    """Strip timestamps, thinking markers and quoted reasoning; tidy blank lines."""
    current = text
    while True:
        cleaned = _filter_once(current)
        if cleaned == current:
            return cleaned
        current = cleaned


def _filter_once(text: str) -> str:
    filtered = _TIMESTAMP_RE.sub("", text)
    filtered = filtered.replace(_THINKING_MARKER, "")
    filtered = _REASONING_QUOTE_RE.sub("", filtered)
    filtered = _EXTRA_BLANK_LINES_RE.sub("\n\n", filtered)
    return filtered.strip()
