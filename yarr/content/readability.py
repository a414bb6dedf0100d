"""Extraction of the main readable content from an HTML page."""

from __future__ import annotations

import re
from typing import IO

from yarr.content.htmlutil import (
    Node,
    attr,
    closest,
    inner_html,
    parse_html,
    query,
    text,
)

_TAGS_TO_SCORE = "section,h2,h3,h4,h5,h6,p,td,pre,div"

_DIV_TO_P_ELEMENTS = re.compile(r"<(a|blockquote|dl|div|img|ol|p|pre|table|ul)", re.IGNORECASE)
_SENTENCE = re.compile(r"\.( |\Z)")

_BLACKLIST_CANDIDATES = re.compile(r"popupbody|-ad|g-plus", re.IGNORECASE)
_OK_MAYBE_CANDIDATE = re.compile(r"and|article|body|column|main|shadow", re.IGNORECASE)
_UNLIKELY_CANDIDATES = re.compile(
    r"banner|breadcrumbs|combx|comment|community|cover-wrap|disqus|extra|foot|header|"
    r"legends|menu|modal|related|remark|replies|rss|shoutbox|sidebar|skyscraper|social|"
    r"sponsor|supplemental|ad-break|agegate|pagination|pager|popup|yom-remote",
    re.IGNORECASE,
)
_NEGATIVE = re.compile(
    r"hidden|^hid$|hid$|hid|^hid |banner|combx|comment|com-|contact|foot|footer|footnote|"
    r"masthead|media|meta|modal|outbrain|promo|related|scroll|share|shoutbox|sidebar|"
    r"skyscraper|sponsor|shopping|tags|tool|widget|byline|author|dateline|writtenby|p-author",
    re.IGNORECASE,
)
_POSITIVE = re.compile(
    r"article|body|content|entry|hentry|h-entry|main|page|pagination|post|text|blog|story",
    re.IGNORECASE,
)

_NODE_SCORES = {
    "div": 5.0,
    **dict.fromkeys(("pre", "td", "blockquote", "img"), 3.0),
    **dict.fromkeys(("address", "ol", "ul", "dl", "dd", "dt", "li", "form"), -3.0),
    **dict.fromkeys(("h1", "h2", "h3", "h4", "h5", "h6", "th"), -5.0),
}


def _byte_length(value: str) -> int:
    return len(value.encode("utf-8"))


def extract_content(page: str | bytes | IO) -> str:
    """Return the most relevant part of an HTML page wrapped in a ``<div>``."""
    if hasattr(page, "read"):
        page = page.read()
    root = parse_html(page)

    for trash in query(root, "script,style"):
        if trash.parent is not None:
            trash.parent.remove_child(trash)

    _transform_misused_divs_into_paragraphs(root)
    _remove_unlikely_candidates(root)

    scores = _get_candidates(root)
    best = _get_top_candidate(scores)
    if best is None:
        best = next(iter(query(root, "body")), None)
    if best is None:
        raise ValueError("document has no body")
    return _get_article(best, scores)


def _siblings(best: Node) -> list[Node]:
    if best.parent is None:
        return [best]
    family = best.parent.children()
    index = family.index(best)
    return [best, *family[index + 1:], *reversed(family[:index])]


def _get_article(best: Node, scores: dict[Node, float]) -> str:
    """Collect the top candidate and its related siblings."""
    threshold = max(10.0, scores.get(best, 0.0) * 0.2)
    output = ["<div>"]
    for node in _siblings(best):
        is_p = node.data == "p"
        if node is best or scores.get(node, 0.0) >= threshold:
            keep = True
        elif is_p:
            density = _link_density(node)
            content = text(node)
            length = _byte_length(content)
            keep = (length >= 80 and density < 0.25) or (
                length < 80 and density == 0 and _SENTENCE.search(content) is not None
            )
        else:
            keep = False
        if keep:
            tag = "p" if is_p else "div"
            output.append(f"<{tag}>{inner_html(node)}</{tag}>")
    output.append("</div>")
    return "".join(output)


def _remove_unlikely_candidates(root: Node) -> None:
    bodies = query(root, "body")
    if not bodies:
        return
    for node in query(bodies[0], "*"):
        marker = attr(node, "class") + attr(node, "id")
        if closest(node, "table,code") is not None:
            continue
        blacklisted = _BLACKLIST_CANDIDATES.search(marker) is not None or (
            _UNLIKELY_CANDIDATES.search(marker) is not None
            and _OK_MAYBE_CANDIDATE.search(marker) is None
        )
        if blacklisted and node.parent is not None:
            node.parent.remove_child(node)


def _get_top_candidate(scores: dict[Node, float]) -> Node | None:
    top = None
    best_score = 0.0
    for node, score in scores.items():
        if score > best_score:
            top, best_score = node, score
    return top


def _get_candidates(root: Node) -> dict[Node, float]:
    """Score the parents of content-like elements by how content-y they look."""
    scores: dict[Node, float] = {}
    for node in query(root, _TAGS_TO_SCORE):
        content = text(node)
        length = _byte_length(content)
        if length < 25:
            continue

        parent = node.parent
        if parent is None:
            continue
        grandparent = parent.parent

        if parent not in scores:
            scores[parent] = _score_node(parent)
        if grandparent is not None and grandparent not in scores:
            scores[grandparent] = _score_node(grandparent)

        content_score = 1.0
        content_score += content.count(",") + 1
        content_score += min(length // 100, 3)

        scores[parent] += content_score
        if grandparent is not None:
            scores[grandparent] += content_score / 2.0

    for node in scores:
        scores[node] *= 1 - _link_density(node)
    return scores


def _score_node(node: Node) -> float:
    return _NODE_SCORES.get(node.data, 0.0) + _class_weight(node)


def _link_density(node: Node) -> float:
    """Share of the node's text that sits inside links."""
    length = _byte_length(text(node))
    if length == 0:
        return 0.0
    link_length = sum(_byte_length(text(a)) for a in query(node, "a"))
    return link_length / length


def _class_weight(node: Node) -> float:
    weight = 0
    for value in (attr(node, "class"), attr(node, "id")):
        if not value:
            continue
        if _NEGATIVE.search(value):
            weight -= 25
        if _POSITIVE.search(value):
            weight += 25
    return float(weight)


def _transform_misused_divs_into_paragraphs(root: Node) -> None:
    for node in query(root, "div"):
        if not _DIV_TO_P_ELEMENTS.search(inner_html(node)):
            node.data = "p"