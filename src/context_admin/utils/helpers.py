"""Utility helper functions."""

from urllib.parse import quote


def join_url(base_url: str, *parts: str) -> str:
    """Join a base URL and path segments with single slashes.

    Args:
        base_url: Scheme and host, optionally with a path prefix
        parts: Path segments; leading and trailing slashes are ignored

    Returns:
        The joined URL
    """
    url = base_url.rstrip("/")
    for part in parts:
        part = part.strip("/")
        if part:
            url = f"{url}/{part}"
    return url


def quote_segment(value: str) -> str:
    """Percent-encode a value for use as a single URL path segment."""
    return quote(str(value), safe="")


def truncate(text: str, limit: int = 50) -> str:
    """Shorten text to ``limit`` characters, marking the cut with '...'."""
    if len(text) > limit:
        return text[:limit] + "..."
    return text


def first_line(text: str) -> str:
    """Return the first non-empty line of text."""
    for line in text.splitlines():
        if line.strip():
            return line.strip()
    return ""
