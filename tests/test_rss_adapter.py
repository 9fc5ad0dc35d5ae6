"""Tests for streamliner.ingestion.rss_adapter: RSS/Atom source adapter."""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import MagicMock

import httpx
import pytest

from streamliner.ingestion.feed import Node, parse_xml
from streamliner.ingestion.item import Source
from streamliner.ingestion.rss_adapter import (
    RSSAdapter,
    extract_atom_link,
    map_atom_entry,
    map_rss_entry,
    parse_feed,
)

# --- Sample feed XML ---

SAMPLE_RSS = """\
<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Test Feed</title>
    <item>
      <title>Article One</title>
      <link>https://example.com/article-1</link>
      <description>&lt;p&gt;First article content.&lt;/p&gt;</description>
      <pubDate>Sat, 15 Jun 2025 10:00:00 GMT</pubDate>
    </item>
    <item>
      <title>Article Two</title>
      <link>https://example.com/article-2</link>
      <pubDate>sometime last week</pubDate>
    </item>
    <item>
      <description>Untitled body.</description>
    </item>
  </channel>
</rss>
"""

SAMPLE_ATOM = """\
<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Atom Feed</title>
  <entry>
    <title>Atom Article</title>
    <link rel="self" href="https://example.com/atom-1.xml"/>
    <link href="https://example.com/atom-1"/>
    <summary>Atom summary.</summary>
    <content>Atom full body.</content>
    <updated>2025-06-15T10:00:00Z</updated>
  </entry>
  <entry>
    <title>Content Only</title>
    <link>https://example.com/atom-2</link>
    <content>Only content here.</content>
  </entry>
</feed>
"""


def _fetcher(body: str) -> MagicMock:
    fetcher = MagicMock()
    fetcher.get.return_value = httpx.Response(
        200, content=body.encode("utf-8"), request=httpx.Request("GET", "https://example.com/feed.xml")
    )
    return fetcher


def _entry(xml: str) -> Node:
    return parse_xml(xml).children[0]


class TestExtractAtomLink:
    def test_href_attribute(self):
        assert extract_atom_link(_entry('<entry><link href="https://x"/></entry>')) == "https://x"

    def test_text_fallback(self):
        assert extract_atom_link(_entry("<entry><link>https://y</link></entry>")) == "https://y"

    def test_prefers_alternate_over_other_rels(self):
        entry = _entry(
            '<entry><link rel="enclosure" href="https://e/audio.mp3"/>'
            '<link rel="alternate" href="https://e/page"/></entry>'
        )
        assert extract_atom_link(entry) == "https://e/page"

    def test_only_non_alternate_links_uses_first(self):
        entry = _entry('<entry><link rel="related" href="https://r"/></entry>')
        assert extract_atom_link(entry) == "https://r"

    def test_missing(self):
        assert extract_atom_link(_entry("<entry><title>t</title></entry>")) is None
        assert extract_atom_link(_entry("<entry><link/></entry>")) is None


class TestMapEntries:
    def test_rss_entry(self):
        item = map_rss_entry(_entry(
            "<item><title>T</title><link>https://x</link><description>S</description>"
            "<pubDate>Sat, 15 Jun 2025 10:00:00 GMT</pubDate></item>"
        ))
        assert item.source is Source.RSS
        assert item.url == "https://x"
        assert item.title == "T"
        assert item.content == "T\n\nS"
        assert item.needs_further_processing is True
        assert item.timestamp == datetime(2025, 6, 15, 10, 0, tzinfo=timezone.utc)

    def test_rss_entry_all_optional_missing(self):
        item = map_rss_entry(_entry("<item/>"))
        assert item.url == ""
        assert item.title == ""
        assert item.content == ""
        assert item.timestamp is None

    def test_atom_summary_preferred(self):
        item = map_atom_entry(_entry(
            "<entry><title>T</title><summary>S</summary><content>C</content></entry>"
        ))
        assert item.content == "T\n\nS"
        assert item.source is Source.ATOM

    def test_atom_content_fallback(self):
        item = map_atom_entry(_entry("<entry><title>T</title><content>C</content></entry>"))
        assert item.content == "T\n\nC"

    def test_atom_published_when_no_updated(self):
        item = map_atom_entry(_entry(
            "<entry><title>T</title><published>2025-06-15T10:00:00Z</published></entry>"
        ))
        assert item.timestamp == datetime(2025, 6, 15, 10, 0, tzinfo=timezone.utc)


class TestParseFeed:
    def test_rss_document(self):
        items = parse_feed(SAMPLE_RSS)
        assert [i.title for i in items] == ["Article One", "Article Two", ""]
        assert items[2].content == "Untitled body."
        assert all(i.source is Source.RSS for i in items)

    def test_html_passed_through(self):
        items = parse_feed(SAMPLE_RSS)
        assert items[0].content == "Article One\n\n<p>First article content.</p>"

    def test_bad_date_does_not_abort(self):
        items = parse_feed(SAMPLE_RSS)
        assert items[0].timestamp is not None
        assert items[1].timestamp is None
        assert items[1].content == "Article Two"

    def test_atom_document(self):
        items = parse_feed(SAMPLE_ATOM)
        assert len(items) == 2
        assert items[0].url == "https://example.com/atom-1"
        assert items[0].content == "Atom Article\n\nAtom summary."
        assert items[1].url == "https://example.com/atom-2"
        assert items[1].content == "Content Only\n\nOnly content here."

    def test_not_a_feed(self):
        assert parse_feed("<html><head><title>x</title></head></html>") == []

    def test_malformed(self):
        assert parse_feed("this is not xml") == []


class TestRSSAdapter:
    def test_name(self):
        assert RSSAdapter(MagicMock()).name == "rss"

    def test_fetches_items(self):
        fetcher = _fetcher(SAMPLE_RSS)
        items = RSSAdapter(fetcher).fetch("https://example.com/feed.xml")
        fetcher.get.assert_called_once_with("https://example.com/feed.xml")
        assert len(items) == 3

    def test_atom_feed(self):
        items = RSSAdapter(_fetcher(SAMPLE_ATOM)).fetch("https://example.com/atom")
        assert [i.title for i in items] == ["Atom Article", "Content Only"]

    def test_empty_feed_is_not_an_error(self, caplog):
        with caplog.at_level("WARNING"):
            items = RSSAdapter(_fetcher("<rss><channel/></rss>")).fetch("https://example.com/feed")
        assert items == []
        assert "No RSS items or Atom entries" in caplog.text

    def test_http_error_propagates(self):
        fetcher = MagicMock()
        fetcher.get.side_effect = httpx.ConnectError("fail")
        with pytest.raises(httpx.HTTPError):
            RSSAdapter(fetcher).fetch("https://example.com/feed")


# --- Real-world feed irregularities ---

NAMESPACED_RSS = """\
<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0"
     xmlns:atom="http://www.w3.org/2005/Atom"
     xmlns:itunes="http://www.itunes.com/dtds/podcast-1.0.dtd">
  <channel>
    <atom:link href="https://a/feed.xml" rel="self"/>
    <item>
      <atom:link href="https://a/self" rel="self"/>
      <link>https://a/1</link>
      <itunes:title>Ep 1</itunes:title>
      <title>Episode 1: Full</title>
      <itunes:summary>Short promo</itunes:summary>
      <description>Show notes.</description>
    </item>
  </channel>
</rss>
"""

ENTITY_RSS = """\
<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <item>
      <title>Caf&eacute; opening</title>
      <description>Caf&eacute; &nbsp;news</description>
    </item>
  </channel>
</rss>
"""

XHTML_ATOM = """\
<feed xmlns="http://www.w3.org/2005/Atom">
  <entry>
    <title>Rich</title>
    <link href="https://example.com/rich"/>
    <content type="xhtml">
      <div xmlns="http://www.w3.org/1999/xhtml"><p>Hello <b>there</b>.</p></div>
    </content>
  </entry>
</feed>
"""


class TestFeedIrregularities:
    def test_rss_ignores_namespaced_link(self):
        item = parse_feed(NAMESPACED_RSS)[0]
        assert item.url == "https://a/1"

    def test_rss_ignores_namespaced_title(self):
        item = parse_feed(NAMESPACED_RSS)[0]
        assert item.title == "Episode 1: Full"
        assert item.content == "Episode 1: Full\n\nShow notes."

    def test_atom_ignores_foreign_namespace_title(self):
        entry = _entry(
            '<entry xmlns="http://www.w3.org/2005/Atom" xmlns:media="http://search.yahoo.com/mrss/">'
            "<media:title>Thumb</media:title><title>Real</title></entry>"
        )
        assert map_atom_entry(entry).title == "Real"

    def test_blank_first_element_skipped(self):
        item = map_rss_entry(_entry("<item><title> </title><title>Second</title></item>"))
        assert item.title == "Second"

    def test_leading_whitespace(self):
        items = parse_feed("\n  " + SAMPLE_RSS)
        assert len(items) == 3

    def test_html_entities(self):
        items = parse_feed(ENTITY_RSS)
        assert len(items) == 1
        assert items[0].title == "Caf\u00e9 opening"
        assert items[0].content == "Caf\u00e9 opening\n\nCaf\u00e9 \u00a0news"

    def test_xhtml_content(self):
        item = parse_feed(XHTML_ATOM)[0]
        assert item.content == "Rich\n\nHello there."

    def test_xhtml_summary_preferred(self):
        entry = _entry(
            '<entry><title>T</title><summary type="xhtml"><div>Sum <i>mary</i></div></summary>'
            "<content>Body</content></entry>"
        )
        assert map_atom_entry(entry).content == "T\n\nSum mary"
