"""Item model: the uniform output schema every adapter produces."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from enum import Enum
from typing import Any, Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

R = TypeVar("R")


class Source(str, Enum):
    """Closed set of source tags an Item can carry."""

    GITHUB_ISSUE = "github:issue"
    GITHUB_RELEASE = "github:release"
    GITLAB_ISSUE = "gitlab:issue"
    GITLAB_MR = "gitlab:mr"
    RSS = "rss"
    ATOM = "atom"
    HTTP = "http"


# Feed bodies are truncated summaries; everything else carries the full body.
FEED_SOURCES = frozenset({Source.RSS, Source.ATOM})


@dataclass(frozen=True)
class Item:
    """One normalized record."""

    url: str
    title: str
    content: str
    needs_further_processing: bool
    source: Source
    timestamp: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "title": self.title,
            "content": self.content,
            "needs_further_processing": self.needs_further_processing,
            "source": self.source.value,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }


@dataclass(frozen=True)
class ItemsResponse:
    """Response envelope: an ordered list of items under a named field."""

    items: list[Item] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"items": [item.to_dict() for item in self.items]}


@dataclass(frozen=True)
class FieldExtractors(Generic[R]):
    """How to read each Item field from one native record shape.

    Every extractor returns None when the field is absent; defaults are
    applied by build_item, never by the extractor.
    """

    url: Callable[[R], str | None]
    title: Callable[[R], str | None]
    body: Callable[[R], str | None]
    timestamp: Callable[[R], str | datetime | None]
    title_default: str = ""


def parse_timestamp(raw: str | datetime | None) -> datetime | None:
    """Parse an upstream date value. Returns None if absent or unparseable.

    Accepts ISO 8601 (API records, Atom) and RFC 822 (RSS pubDate).
    Naive results are taken as UTC.
    """
    if raw is None:
        return None
    if isinstance(raw, datetime):
        dt = raw
    else:
        text = raw.strip()
        if not text:
            return None
        dt = _parse_iso(text) or _parse_rfc822(text)
        if dt is None:
            logger.debug("Unparseable timestamp: %r", raw)
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _parse_iso(text: str) -> datetime | None:
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def _parse_rfc822(text: str) -> datetime | None:
    try:
        return parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        return None


def synthesize_content(title: str, summary: str) -> str:
    """Prefix a feed summary with its title.

    Returns ``title`` alone when the summary is empty or merely repeats it,
    and the summary alone when there is no title.
    """
    if not summary or summary == title:
        return title
    if not title:
        return summary
    return f"{title}\n\n{summary}"


def build_item(source: Source, record: R, extractors: FieldExtractors[R]) -> Item:
    """Map one native record into an Item. Never raises for missing fields."""
    url = extractors.url(record) or ""
    title = extractors.title(record) or extractors.title_default
    body = extractors.body(record) or ""

    needs_further_processing = source in FEED_SOURCES
    content = synthesize_content(title, body) if needs_further_processing else body

    return Item(
        url=url,
        title=title,
        content=content,
        needs_further_processing=needs_further_processing,
        source=source,
        timestamp=parse_timestamp(extractors.timestamp(record)),
    )
