"""Same-origin download redirector.

Browsers ignore the ``download`` attribute on cross-origin links, so the
client links here instead and gets redirected to the remote image with an
attachment disposition.
"""

import re
from pathlib import PurePosixPath
from urllib.parse import urlsplit

from fastapi import APIRouter, HTTPException
from fastapi.responses import RedirectResponse

router = APIRouter(prefix="/api")

_RESERVED_CHARS_RE = re.compile(r"[/\\:*?\"<>|\x00-\x1f]+")
_IMAGE_EXTENSIONS = frozenset({".png", ".jpg", ".jpeg", ".webp", ".gif"})
DEFAULT_FILENAME = "image"
DEFAULT_EXTENSION = ".png"


def sanitize_filename(name: str | None) -> str:
    """Remove path separators, reserved characters and trailing dots."""
    cleaned = _RESERVED_CHARS_RE.sub("", name or "").strip().rstrip(". ")
    stem, extension = _split_extension(cleaned)
    if extension:
        cleaned = stem.rstrip(". ")
    return cleaned or DEFAULT_FILENAME


def download_extension(url: str, filename: str | None = None) -> str:
    """Pick the file extension from the requested name, then the URL path."""
    _, extension = _split_extension(
        _RESERVED_CHARS_RE.sub("", filename or "").strip().rstrip(". ")
    )
    if extension:
        return extension
    _, extension = _split_extension(PurePosixPath(urlsplit(url).path).name)
    return extension or DEFAULT_EXTENSION


def _split_extension(name: str) -> tuple[str, str]:
    suffix = PurePosixPath(name).suffix.lower() if name else ""
    if suffix in _IMAGE_EXTENSIONS:
        return name[: -len(suffix)], ".jpg" if suffix == ".jpeg" else suffix
    return name, ""


@router.get("/download")
async def download(url: str | None = None, filename: str | None = None) -> RedirectResponse:
    """Redirect to ``url`` with a ``Content-Disposition: attachment`` header."""
    if not url:
        raise HTTPException(status_code=400, detail="missing url")
    if urlsplit(url).scheme.lower() not in ("http", "https"):
        raise HTTPException(status_code=400, detail="unsupported url")
    name = sanitize_filename(filename) + download_extension(url, filename)
    return RedirectResponse(
        url,
        status_code=307,
        headers={
            "Content-Disposition": f'attachment; filename="{name}"',
            "Cache-Control": "no-store",
        },
    )
