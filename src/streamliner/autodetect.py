"""URL-based provider classification for the ``get`` compatibility command.

This is a heuristic over host and path, not content sniffing: any http(s)
URL containing "feed" (including e.g. ``/feedback``) is taken for a feed.
"""

from __future__ import annotations

from enum import Enum
from urllib.parse import urlparse


class ProviderKind(str, Enum):
    """Provider kinds; values are the matching command tokens."""

    GITHUB = "github"
    GITLAB = "gitlab"
    RSS = "rss"
    HTTP = "http"


_FEED_SCHEMES = frozenset({"http", "https", "feed"})
_FEED_SUFFIXES = (".xml", ".rss")


def classify(url: str) -> ProviderKind:
    """Classify ``url``; first matching rule wins and HTTP is the catch-all."""
    parsed = urlparse(url)
    host = (parsed.hostname or "").lower()

    if host.endswith("github.com"):
        return ProviderKind.GITHUB
    if host.endswith("gitlab.com"):
        return ProviderKind.GITLAB
    if parsed.scheme.lower() in _FEED_SCHEMES and (
        parsed.path.lower().endswith(_FEED_SUFFIXES) or "feed" in url.lower()
    ):
        return ProviderKind.RSS
    return ProviderKind.HTTP
