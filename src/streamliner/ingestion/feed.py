"""Feed format detection over a generic tag tree.

Parsed XML is turned into ``Node`` values whose ``tag`` is the local name
and whose ``namespace`` keeps the element's namespace URI, so a lookup can
tell RSS ``<link>`` apart from ``<atom:link>``. Every lookup helper
returns None or an empty list on absence, so a feed missing an optional
element never raises.
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from html.entities import name2codepoint
from typing import Any, Collection, NamedTuple, Sequence

from lxml import etree

from streamliner.ingestion.item import Source

logger = logging.getLogger(__name__)

DOCUMENT_TAG = "#document"

ATOM_NAMESPACE = "http://www.w3.org/2005/Atom"
_ATOM_03_NAMESPACE = "http://purl.org/atom/ns#"

# RSS 2.0 elements carry no namespace; anything prefixed is an extension.
RSS_NAMESPACES: frozenset[str | None] = frozenset({None})
# Atom feeds that forget the xmlns declaration are still read as Atom.
ATOM_NAMESPACES: frozenset[str | None] = frozenset({ATOM_NAMESPACE, _ATOM_03_NAMESPACE, None})

_RSS_PATH = ("rss", "channel", "item")
_ATOM_PATH = ("feed", "entry")

_XML_ENTITIES = frozenset({"amp", "lt", "gt", "quot", "apos"})
_ENTITY_RE = re.compile(rb"&([A-Za-z][A-Za-z0-9]*);")


@dataclass
class Node:
    """One element of a parsed document."""

    tag: str
    attributes: dict[str, str] = field(default_factory=dict)
    children: list[Node] = field(default_factory=list)
    text: str | None = None
    namespace: str | None = None
    tail: str | None = None


class FeedEntries(NamedTuple):
    """Entries found in a document and the format they were found as."""

    source: Source | None
    entries: list[Node]


def _split_name(name: str) -> tuple[str | None, str]:
    """Split ``{namespace}local`` into its parts."""
    if name.startswith("{"):
        namespace, local = name[1:].split("}", 1)
        return namespace, local
    return None, name


def from_element(element: Any) -> Node:
    """Convert an ElementTree or lxml element (recursively) into a Node.

    Comments and processing instructions are skipped.
    """
    namespace, tag = _split_name(element.tag)
    return Node(
        tag=tag,
        attributes={_split_name(k)[1]: v for k, v in element.attrib.items()},
        children=[from_element(child) for child in element if isinstance(child.tag, str)],
        text=element.text,
        namespace=namespace,
        tail=element.tail,
    )


def _replace_html_entities(data: bytes) -> bytes:
    """Rewrite HTML named entities (``&eacute;``) as numeric character references."""

    def replace(match: re.Match[bytes]) -> bytes:
        name = match.group(1).decode("ascii")
        if name in _XML_ENTITIES or name not in name2codepoint:
            return match.group(0)
        return b"&#%d;" % name2codepoint[name]

    return _ENTITY_RE.sub(replace, data)


def _parse_strict(data: bytes, encoding: str | None) -> ET.Element | None:
    try:
        return ET.fromstring(data, parser=ET.XMLParser(encoding=encoding))
    except ET.ParseError:
        return None


def _parse_recovering(data: bytes, encoding: str | None) -> Any:
    parser = etree.XMLParser(
        recover=True, resolve_entities=False, no_network=True, encoding=encoding
    )
    try:
        return etree.fromstring(data, parser)
    except etree.XMLSyntaxError:
        return None


def parse_xml(data: str | bytes) -> Node | None:
    """Parse raw XML into a document node wrapping the root element.

    Leading whitespace is ignored. A document the strict parser rejects is
    retried with HTML named entities rewritten, then with lxml's recovering
    parser. Returns None when nothing can be salvaged.
    """
    encoding = None
    if isinstance(data, str):
        data = data.encode("utf-8")
        encoding = "utf-8"
    data = data.lstrip()

    root = _parse_strict(data, encoding)
    if root is None:
        data = _replace_html_entities(data)
        root = _parse_strict(data, encoding)
    if root is None:
        logger.debug("Payload is not well-formed XML, retrying in recover mode")
        root = _parse_recovering(data, encoding)
    if root is None:
        return None
    return Node(tag=DOCUMENT_TAG, children=[from_element(root)])


def _matches(node: Node, tag: str, namespaces: Collection[str | None] | None) -> bool:
    return node.tag == tag and (namespaces is None or node.namespace in namespaces)


def find_first_child_by_tag(
    node: Node | None, tag: str, namespaces: Collection[str | None] | None = None
) -> Node | None:
    if node is None:
        return None
    for child in node.children:
        if _matches(child, tag, namespaces):
            return child
    return None


def find_all_children_by_tag(
    node: Node | None, tag: str, namespaces: Collection[str | None] | None = None
) -> list[Node]:
    if node is None:
        return []
    return [child for child in node.children if _matches(child, tag, namespaces)]


def find_all_descendants_by_path(
    node: Node | None,
    path: Sequence[str],
    namespaces: Collection[str | None] | None = None,
) -> list[Node]:
    """Follow ``path`` one tag per level below ``node``, fanning out at each level.

    A level with no matching children yields an empty list. ``namespaces``
    restricts every level; None accepts any namespace.
    """
    current = [node] if node is not None else []
    for tag in path:
        current = [
            match
            for parent in current
            for match in find_all_children_by_tag(parent, tag, namespaces)
        ]
        if not current:
            return []
    return current


def child_text(
    node: Node | None, tag: str, namespaces: Collection[str | None] | None = None
) -> str | None:
    """Stripped text of the first non-blank ``tag`` child, or None."""
    for child in find_all_children_by_tag(node, tag, namespaces):
        text = (child.text or "").strip()
        if text:
            return text
    return None


def inner_text(node: Node) -> str:
    """All text inside ``node``, descendants included, in document order."""
    parts = [node.text or ""]
    for child in node.children:
        parts.append(inner_text(child))
        parts.append(child.tail or "")
    return "".join(parts)


def detect_entries(document: Node | None) -> FeedEntries:
    """Find feed entries, trying RSS first and Atom second.

    The first format that yields at least one entry wins. A document of
    neither shape yields ``FeedEntries(None, [])``.
    """
    items = find_all_descendants_by_path(document, _RSS_PATH, RSS_NAMESPACES)
    if items:
        return FeedEntries(Source.RSS, items)

    entries = find_all_descendants_by_path(document, _ATOM_PATH, ATOM_NAMESPACES)
    if entries:
        return FeedEntries(Source.ATOM, entries)

    return FeedEntries(None, [])
