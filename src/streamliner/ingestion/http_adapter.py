"""Generic web page source adapter."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone

import httpx

from streamliner.clients import HttpFetcher
from streamliner.config import Config
from streamliner.ingestion.adapter import Fetcher, SourceAdapter
from streamliner.ingestion.item import FieldExtractors, Item, Source, build_item

logger = logging.getLogger(__name__)

_TITLE_RE = re.compile(r"<title[^>]*>(.*?)</title>", re.IGNORECASE | re.DOTALL)


def extract_title(html: str) -> str | None:
    """Return the trimmed text of the first ``<title>`` element, if any."""
    match = _TITLE_RE.search(html)
    if match is None:
        return None
    return match.group(1).strip() or None


class HTTPAdapter(SourceAdapter):
    """Adapter that turns one fetched page into one item with its raw body."""

    def __init__(self, fetcher: Fetcher) -> None:
        self._fetcher = fetcher

    @property
    def name(self) -> str:
        return "http"

    @classmethod
    def from_config(cls, config: Config) -> HTTPAdapter:
        return cls(HttpFetcher(config))

    def fetch(self, url: str) -> list[Item]:
        response = self._fetcher.get(url)
        fetched_at = datetime.now(timezone.utc)

        fields: FieldExtractors[httpx.Response] = FieldExtractors(
            url=lambda _: url,
            title=lambda r: extract_title(r.text),
            body=lambda r: r.text,
            timestamp=lambda _: fetched_at,
            title_default=url,
        )
        item = build_item(Source.HTTP, response, fields)
        logger.info("Fetched page %s (%d chars)", url, len(item.content))
        return [item]
