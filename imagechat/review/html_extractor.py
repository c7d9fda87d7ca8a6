"""Reduce a model's rewrite reply to the HTML it was asked for."""

import re

_METADATA_LINE_RES = (
    re.compile(r"生成时间：[^\n]*\n"),
    re.compile(r"删除\s*\n"),
    re.compile(r"用时：[^\n]*\n"),
)
_THINKING_BLOCK_RE = re.compile(r"\*Thinking\.\.\.\*[\s\S]*?(?=<[a-zA-Z])")
_REASONING_QUOTE_RE = re.compile(r">\s*\*\*[\s\S]*?(?=<[a-zA-Z])")
_FENCED_CODE_RE = re.compile(r"```[\s\S]*?```")
_INLINE_CODE_RE = re.compile(r"`[^`]*`")
_FIRST_TAG_RE = re.compile(r"<[a-zA-Z][^>]*>")


def extract_html_content(text: str) -> str:
    """Drop UI metadata lines, thinking blocks and code spans, then cut
    everything before the first HTML tag.

    Two common tag slips (``<<p`` and ``<<li``) are repaired.
    """
    cleaned = text
    for pattern in _METADATA_LINE_RES:
        cleaned = pattern.sub("", cleaned)
    cleaned = _THINKING_BLOCK_RE.sub("", cleaned)
    cleaned = _REASONING_QUOTE_RE.sub("", cleaned)
    cleaned = _FENCED_CODE_RE.sub("", cleaned)
    cleaned = _INLINE_CODE_RE.sub("", cleaned)

    first_tag = _FIRST_TAG_RE.search(cleaned)
    if first_tag:
        cleaned = cleaned[first_tag.start():]
    cleaned = cleaned.strip()

    cleaned = cleaned.replace("<<p", "<li><p")
    cleaned = cleaned.replace("<<li", "<li")
    return cleaned
