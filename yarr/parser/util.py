"""Shared helpers for the feed parsers."""

from __future__ import annotations

import codecs
import io
import re
from typing import IO

from lxml import etree


def first_non_empty(*args: str) -> str:
    """Return the first argument that is not blank, stripped, or an empty string."""
    for value in args:
        trimmed = value.strip()
        if trimmed:
            return trimmed
    return ""


_LINK = re.compile(r"(https?://[^\t\n\f\r ]+)")


def plain2html(text: str) -> str:
    """Turn plain text into HTML with linked URLs and ``<br>`` line breaks."""
    text = _LINK.sub(r'<a href="\1">\1</a>', text)
    return text.replace("\n", "<br>")


def is_in_character_range(ch: str | int) -> bool:
    """Tell whether a character is allowed in XML documents."""
    r = ord(ch) if isinstance(ch, str) else ch
    return (
        r in (0x09, 0x0A, 0x0D)
        or 0x20 <= r <= 0xD7FF
        or 0xE000 <= r <= 0xFFFD
        or 0x10000 <= r <= 0x10FFFF
    )


def _clean(text: str) -> str:
    return "".join(filter(is_in_character_range, text))


class SafeXMLReader:
    """Binary reader yielding UTF-8 with characters illegal in XML removed."""

    def __init__(self, stream: IO[bytes]) -> None:
        self._stream = stream
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = bytearray()
        self._eof = False

    def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` bytes (all when negative); empty bytes at the end."""
        while not self._eof and (size < 0 or len(self._buffer) < size):
            chunk = self._stream.read(4096)
            final = not chunk
            self._buffer += _clean(self._decoder.decode(chunk, final=final)).encode("utf-8")
            self._eof = final
        if size < 0:
            size = len(self._buffer)
        out = bytes(self._buffer[:size])
        del self._buffer[:size]
        return out


def proc_inst(param: str, s: str) -> str:
    """Return the quoted value of ``param=`` in a processing instruction, or ''."""
    param += "="
    idx = s.find(param)
    if idx == -1:
        return ""
    v = s[idx + len(param):]
    if not v or v[0] not in "'\"":
        return ""
    end = v.find(v[0], 1)
    if end == -1:
        return ""
    return v[1:end]


_DECLARATION = re.compile(r"\A[\s\ufeff\x00]*<\?xml(?=[\s?])(.*?)\?>", re.DOTALL)


def _declared_encoding(head: str) -> str:
    match = _DECLARATION.match(head)
    return proc_inst("encoding", match.group(1)).lower() if match else ""


def parse_xml(data: str | bytes | IO) -> etree._Element:
    """Leniently parse an XML document, honouring its declared encoding."""
    if hasattr(data, "read"):
        data = data.read()
    if isinstance(data, bytes):
        head = data[:1024].decode("latin-1").lstrip("\x00\ufeff\xef\xbb\xbf\xfe\xff")
        encoding = _declared_encoding(head) or "utf-8"
        try:
            codec = codecs.lookup(encoding)
        except LookupError as err:
            raise ValueError(f"unsupported encoding: {encoding}") from err
        if codec.name == "utf-8":
            codec = codecs.lookup("utf-8-sig")
        text = data.decode(codec.name, errors="replace")
    else:
        text = data
    text = _clean(text).lstrip("\ufeff")
    text = _DECLARATION.sub("", text, count=1)
    parser = etree.XMLParser(
        recover=True, encoding="utf-8", resolve_entities=False, no_network=True, huge_tree=True
    )
    try:
        root = etree.parse(io.BytesIO(text.encode("utf-8")), parser).getroot()
    except etree.XMLSyntaxError as err:
        raise ValueError(f"invalid XML: {err}") from err
    if root is None:
        raise ValueError("no XML document found")
    return root