"""Best-effort host extraction from history URLs."""

from __future__ import annotations

from urllib.parse import urlsplit


def extract_domain(url: str | None) -> str | None:
    """Return the lowercase hostname of ``url`` or None when it has none."""

    if not url:
        return None
    try:
        host = urlsplit(url).hostname
    except ValueError:
        return None
    return host or None


__all__ = ["extract_domain"]
