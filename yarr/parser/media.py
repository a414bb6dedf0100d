"""Media RSS extensions (thumbnails and descriptions) of feed entries."""

from __future__ import annotations

from typing import Iterator

from lxml import etree

from yarr.parser.util import plain2html

MRSS = "http://search.yahoo.com/mrss/"


def _children(element: etree._Element, name: str) -> Iterator[etree._Element]:
    return element.iterchildren(f"{{{MRSS}}}{name}")


def _chardata(element: etree._Element) -> str:
    return (element.text or "") + "".join(child.tail or "" for child in element)


def first_media_thumbnail(element: etree._Element) -> str:
    """Return the URL of the entry's first media thumbnail, or ''."""
    for content in _children(element, "content"):
        for thumb in _children(content, "thumbnail"):
            return thumb.get("url", "")
    for thumb in _children(element, "thumbnail"):
        return thumb.get("url", "")
    for group in _children(element, "group"):
        for thumb in _children(group, "thumbnail"):
            return thumb.get("url", "")
    return ""


def first_media_description(element: etree._Element) -> str:
    """Return the entry's first media description as HTML, or ''."""
    for desc in _children(element, "description"):
        return plain2html(_chardata(desc))
    for group in _children(element, "group"):
        for desc in _children(group, "description"):
            return plain2html(_chardata(desc))
    return ""