from urllib.parse import urlsplit

ALLOWED_SCHEMES = frozenset({"https", "data", "blob"})


def safe_url(candidate: str) -> str | None:
    """Re-parse a candidate URL and keep it only if its scheme is allowed.

    Anything that fails to parse or uses another scheme (including plain
    http) is reported as absent, never as an error.
    """
    candidate = candidate.strip()
    if not candidate:
        return None
    try:
        parts = urlsplit(candidate)
    except ValueError:
        return None
    scheme = parts.scheme.lower()
    if scheme not in ALLOWED_SCHEMES:
        return None
    if scheme == "https" and not parts.netloc:
        return None
    if scheme != "https" and not parts.path:
        return None
    return candidate
