"""Regex scanners that pull image URLs out of free text."""

import re

_DATA_URI_RE = re.compile(r"data:image/(?:png|jpe?g|webp);base64,[A-Za-z0-9+/=\-_]+")
_MARKDOWN_IMAGE_RE = re.compile(r"!\[[^\]]*\]\((https?://[^)\s]+)\)", re.IGNORECASE)
_BARE_URL_RE = re.compile(r"(https?://[^\s)\]}<'\"\\>,，。；、]+)", re.IGNORECASE)
_TRAILING_PUNCTUATION = ">,，。；、.;:!?）」】！？"


def extract_data_uris(text: str) -> list[str]:
    """Find inline base64 image literals anywhere in the text."""
    if not text:
        return []
    return _unique(match.group(0) for match in _DATA_URI_RE.finditer(text))


def extract_image_urls_from_text(text: str) -> list[str]:
    """Find http(s) URLs, Markdown images first, then bare links.

    Markdown image targets are trusted as images even without an extension.
    Bare links lose trailing prose punctuation. Returned candidates are not
    scheme-validated yet.
    """
    if not text:
        return []
    found = [match.group(1) for match in _MARKDOWN_IMAGE_RE.finditer(text)]
    for match in _BARE_URL_RE.finditer(text):
        url = match.group(1).rstrip(_TRAILING_PUNCTUATION)
        if "://" in url and not url.endswith("://"):
            found.append(url)
    return _unique(found)


def _unique(items) -> list[str]:
    seen: dict[str, None] = {}
    for item in items:
        seen.setdefault(item, None)
    return list(seen)
