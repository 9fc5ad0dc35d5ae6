"""RSS/Atom feed source adapter."""

from __future__ import annotations

import logging

from streamliner.clients import HttpFetcher
from streamliner.config import Config
from streamliner.ingestion.adapter import Fetcher, SourceAdapter
from streamliner.ingestion.feed import (
    ATOM_NAMESPACES,
    RSS_NAMESPACES,
    Node,
    child_text,
    detect_entries,
    find_all_children_by_tag,
    inner_text,
    parse_xml,
)
from streamliner.ingestion.item import FieldExtractors, Item, Source, build_item

logger = logging.getLogger(__name__)

# Atom rel values that point at the entry itself rather than an enclosure or the feed
_ENTRY_LINK_RELS = frozenset({"", "alternate"})


def extract_atom_link(entry: Node) -> str | None:
    """Pick the entry's link: ``href`` attribute first, then element text.

    When several links exist, one without ``rel`` or with
    ``rel="alternate"`` is preferred over the rest.
    """
    links = find_all_children_by_tag(entry, "link", ATOM_NAMESPACES)
    if not links:
        return None
    preferred = [n for n in links if n.attributes.get("rel", "") in _ENTRY_LINK_RELS]
    link = (preferred or links)[0]

    href = link.attributes.get("href", "").strip()
    if href:
        return href
    if link.text and link.text.strip():
        return link.text.strip()
    return None


_RSS_FIELDS: FieldExtractors[Node] = FieldExtractors(
    url=lambda n: child_text(n, "link", RSS_NAMESPACES),
    title=lambda n: child_text(n, "title", RSS_NAMESPACES),
    body=lambda n: child_text(n, "description", RSS_NAMESPACES),
    timestamp=lambda n: child_text(n, "pubDate", RSS_NAMESPACES),
)


def atom_text(entry: Node, tag: str) -> str | None:
    """Stripped text of the first non-blank Atom ``tag`` child, or None.

    ``type="xhtml"`` constructs hold their text in child elements.
    """
    for node in find_all_children_by_tag(entry, tag, ATOM_NAMESPACES):
        if node.attributes.get("type") == "xhtml":
            text = inner_text(node).strip()
        else:
            text = (node.text or "").strip()
        if text:
            return text
    return None


_ATOM_FIELDS: FieldExtractors[Node] = FieldExtractors(
    url=extract_atom_link,
    title=lambda n: atom_text(n, "title"),
    body=lambda n: atom_text(n, "summary") or atom_text(n, "content"),
    timestamp=lambda n: atom_text(n, "updated") or atom_text(n, "published"),
)


def map_rss_entry(entry: Node) -> Item:
    return build_item(Source.RSS, entry, _RSS_FIELDS)


def map_atom_entry(entry: Node) -> Item:
    return build_item(Source.ATOM, entry, _ATOM_FIELDS)


def parse_feed(data: str | bytes) -> list[Item]:
    """Detect the feed format of a raw document and map its entries."""
    source, entries = detect_entries(parse_xml(data))
    if source is Source.RSS:
        return [map_rss_entry(entry) for entry in entries]
    if source is Source.ATOM:
        return [map_atom_entry(entry) for entry in entries]
    return []


class RSSAdapter(SourceAdapter):
    """Adapter for RSS and Atom feeds."""

    def __init__(self, fetcher: Fetcher) -> None:
        self._fetcher = fetcher

    @property
    def name(self) -> str:
        return "rss"

    @classmethod
    def from_config(cls, config: Config) -> RSSAdapter:
        return cls(HttpFetcher(config))

    def fetch(self, url: str) -> list[Item]:
        response = self._fetcher.get(url)
        items = parse_feed(response.content)
        if not items:
            logger.warning("No RSS items or Atom entries found at %s", url)
        else:
            logger.info("Fetched %d items from %s", len(items), url)
        return items
