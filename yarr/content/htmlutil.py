"""Helpers for parsing, walking, querying and rendering HTML documents."""

from __future__ import annotations

import enum
import html
import re
from collections import deque
from dataclasses import dataclass, field
from html.parser import HTMLParser
from typing import Callable, Iterable, Protocol
from urllib.parse import SplitResult, urljoin, urlsplit
from xml.dom import Node as _DomNode

import html5lib


class NodeType(enum.Enum):
    """Kind of a node in a parsed HTML tree."""

    DOCUMENT = "document"
    ELEMENT = "element"
    TEXT = "text"
    COMMENT = "comment"
    DOCTYPE = "doctype"


@dataclass(eq=False)
class Node:
    """A node of a parsed HTML tree; nodes compare and hash by identity."""

    type: NodeType
    data: str = ""
    attrs: list[tuple[str, str]] = field(default_factory=list)
    parent: Node | None = field(default=None, repr=False)
    _children: list[Node] = field(default_factory=list, init=False, repr=False)

    def append_child(self, child: Node) -> None:
        """Attach ``child`` as the last child of this node."""
        if child.parent is not None:
            raise ValueError("node already has a parent")
        child.parent = self
        self._children.append(child)

    def remove_child(self, child: Node) -> None:
        """Detach ``child`` from this node."""
        if child.parent is not self:
            raise ValueError("node is not a child of this node")
        self._children.remove(child)
        child.parent = None

    def children(self) -> list[Node]:
        """Return the node's children in document order."""
        return list(self._children)


class Matcher(Protocol):
    def match(self, node: Node) -> bool: ...


@dataclass(frozen=True)
class ElementMatch:
    """Matches elements by tag name; ``*`` matches any element."""

    name: str

    def match(self, node: Node) -> bool:
        return node.type is NodeType.ELEMENT and (node.data == self.name or self.name == "*")


@dataclass
class MultiMatch:
    """Matches a node if any of its matchers does."""

    matchers: list[Matcher] = field(default_factory=list)

    def add(self, matcher: Matcher) -> None:
        self.matchers.append(matcher)

    def match(self, node: Node) -> bool:
        return any(matcher.match(node) for matcher in self.matchers)


def _from_dom(dom) -> Node | None:
    kind = dom.nodeType
    if kind == _DomNode.DOCUMENT_NODE:
        return Node(NodeType.DOCUMENT)
    if kind == _DomNode.ELEMENT_NODE:
        return Node(NodeType.ELEMENT, dom.localName or dom.tagName, list(dom.attributes.items()))
    if kind in (_DomNode.TEXT_NODE, _DomNode.CDATA_SECTION_NODE):
        return Node(NodeType.TEXT, dom.data)
    if kind == _DomNode.COMMENT_NODE:
        return Node(NodeType.COMMENT, dom.data)
    if kind == _DomNode.DOCUMENT_TYPE_NODE:
        return Node(NodeType.DOCTYPE, dom.name or "")
    return None


def parse_html(content: str | bytes) -> Node:
    """Parse an HTML document into a tree of :class:`Node` objects."""
    document = html5lib.parse(content, treebuilder="dom")
    root = _from_dom(document)
    stack = [(document, root)]
    while stack:
        dom, node = stack.pop()
        for dom_child in dom.childNodes:
            child = _from_dom(dom_child)
            if child is not None:
                node.append_child(child)
                stack.append((dom_child, child))
    return root


def find_nodes(node: Node, match: Callable[[Node], bool]) -> list[Node]:
    """Return all nodes under ``node`` (inclusive) matching ``match``, breadth first."""
    found = []
    queue = deque([node])
    while queue:
        current = queue.popleft()
        if match(current):
            found.append(current)
        queue.extend(current._children)
    return found


_NODE_NAME = re.compile(r"\w+|\*", re.ASCII)


def new_matcher(sel: str) -> MultiMatch:
    """Build a matcher from a comma separated list of tag names."""
    multi = MultiMatch()
    for part in sel.split(","):
        part = part.strip()
        if not _NODE_NAME.search(part):
            raise ValueError(f"unsupported selector: {part}")
        multi.add(ElementMatch(part))
    return multi


def query(node: Node, sel: str) -> list[Node]:
    """Return the elements under ``node`` matching the selector."""
    return find_nodes(node, new_matcher(sel).match)


def closest(node: Node | None, sel: str) -> Node | None:
    """Return the nearest node, starting with ``node`` itself, matching the selector."""
    matcher = new_matcher(sel)
    current = node
    while current is not None:
        if matcher.match(current):
            return current
        current = current.parent
    return None


_VOID_ELEMENTS = frozenset(
    {"area", "base", "br", "col", "embed", "hr", "img", "input", "keygen",
     "link", "meta", "param", "source", "track", "wbr"}
)
_RAW_TEXT_ELEMENTS = frozenset(
    {"iframe", "noembed", "noframes", "noscript", "plaintext", "script", "style", "xmp"}
)
_ESCAPES = str.maketrans(
    {"&": "&amp;", "'": "&#39;", "<": "&lt;", ">": "&gt;", '"': "&#34;", "\r": "&#13;"}
)


def _escape(value: str) -> str:
    return value.translate(_ESCAPES)


def _render(node: Node, out: list[str]) -> None:
    if node.type is NodeType.DOCUMENT:
        for child in node._children:
            _render(child, out)
    elif node.type is NodeType.TEXT:
        out.append(_escape(node.data))
    elif node.type is NodeType.COMMENT:
        out.append(f"<!--{node.data}-->")
    elif node.type is NodeType.DOCTYPE:
        out.append(f"<!DOCTYPE {node.data}>")
    else:
        out.append("<" + node.data)
        out.extend(f' {key}="{_escape(value)}"' for key, value in node.attrs)
        if node.data in _VOID_ELEMENTS:
            out.append("/>")
            return
        out.append(">")
        children = node._children
        if (
            node.data in ("pre", "listing", "textarea")
            and children
            and children[0].type is NodeType.TEXT
            and children[0].data.startswith("\n")
        ):
            out.append("\n")
        raw = node.data in _RAW_TEXT_ELEMENTS
        for child in children:
            if raw and child.type is NodeType.TEXT:
                out.append(child.data)
            else:
                _render(child, out)
        out.append(f"</{node.data}>")


def render_html(node: Node) -> str:
    """Serialise ``node`` and its descendants to HTML."""
    out: list[str] = []
    _render(node, out)
    return "".join(out)


def inner_html(node: Node) -> str:
    """Serialise the children of ``node`` to HTML."""
    out: list[str] = []
    for child in node._children:
        _render(child, out)
    return "".join(out)


def attr(node: Node, key: str) -> str:
    """Return the value of attribute ``key`` (case-insensitive), or an empty string."""
    wanted = key.casefold()
    return next((value for name, value in node.attrs if name.casefold() == wanted), "")


def text(node: Node) -> str:
    """Join the stripped text of all text nodes under ``node`` with spaces."""
    return " ".join(
        n.data.strip() for n in find_nodes(node, lambda n: n.type is NodeType.TEXT)
    )


_WHITESPACE = re.compile(r"[\t\n\f\r ]+")


class _TextCollector(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.parts: list[str] = []

    def handle_data(self, data: str) -> None:
        self.parts.append(html.unescape(data))


def extract_text(content: str) -> str:
    """Strip the markup from an HTML fragment and collapse whitespace."""
    collector = _TextCollector()
    collector.feed(content)
    collector.close()
    return _WHITESPACE.sub(" ", "".join(collector.parts).strip())


def any_match(els: Iterable[str], el: str, match: Callable[[str, str], bool]) -> bool:
    """Tell whether ``match(x, el)`` holds for any ``x`` in ``els``."""
    return any(match(x, el) for x in els)


_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def _parse_url(value: str) -> SplitResult | None:
    if any(ord(c) < 0x20 or c == "\x7f" for c in value):
        return None
    try:
        parts = urlsplit(value)
        parts.port
    except ValueError:
        return None
    if any(_BAD_ESCAPE.search(piece) for piece in (parts.netloc, parts.path, parts.fragment)):
        return None
    return parts


def absolute_url(href: str, base: str) -> str:
    """Resolve ``href`` against ``base``; return an empty string if either is invalid."""
    if _parse_url(base) is None or _parse_url(href) is None:
        return ""
    return urljoin(base, href)


def url_domain(val: str) -> str:
    """Return the host (with port) of a URL, or the value itself if it cannot be parsed."""
    parts = _parse_url(val)
    if parts is None:
        return val
    return parts.netloc.rpartition("@")[2]