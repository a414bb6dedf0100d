"""Reduction of untrusted HTML to a safe subset of tags and attributes."""

from __future__ import annotations

import enum
import html
import math
import re
from dataclasses import dataclass, field
from html.entities import html5 as _ENTITIES
from typing import Iterator

from yarr.content.htmlutil import absolute_url, url_domain

_ALLOWED_TAGS = frozenset({
    "a", "abbr", "acronym", "address", "area", "article", "aside", "audio",
    "b", "bdi", "bdo", "big", "blink", "blockquote", "body", "br", "button",
    "canvas", "caption", "center", "cite", "code", "col", "colgroup",
    "content", "data", "datalist", "dd", "decorator", "del", "details", "dfn",
    "dialog", "dir", "div", "dl", "dt", "element", "em", "fieldset",
    "figcaption", "figure", "font", "footer", "form", "h1", "h2", "h3", "h4",
    "h5", "h6", "head", "header", "hgroup", "hr", "html", "i", "iframe", "img",
    "input", "ins", "kbd", "label", "legend", "li", "main", "map", "mark",
    "marquee", "menu", "menuitem", "meter", "nav", "nobr", "ol", "optgroup",
    "option", "output", "p", "picture", "pre", "progress", "q", "rp", "rt",
    "ruby", "s", "samp", "section", "select", "shadow", "small", "source",
    "spacer", "span", "strike", "strong", "sub", "summary", "sup", "table",
    "tbody", "td", "template", "textarea", "tfoot", "th", "thead", "time",
    "tr", "track", "tt", "u", "ul", "var", "video", "wbr",
})

_ALLOWED_SVG_TAGS = frozenset({
    "svg", "a", "altglyph", "altglyphdef", "altglyphitem", "animatecolor",
    "animatemotion", "animatetransform", "circle", "clippath", "defs", "desc",
    "ellipse", "filter", "font", "g", "glyph", "glyphref", "hkern", "image",
    "line", "lineargradient", "marker", "mask", "metadata", "mpath", "path",
    "pattern", "polygon", "polyline", "radialgradient", "rect", "stop",
    "switch", "symbol", "text", "textpath", "title", "tref", "tspan", "view",
    "vkern",
})

# Tag names are lower-cased by the tokenizer, so these never match; kept as listed.
_ALLOWED_SVG_FILTERS = frozenset({
    "feBlend", "feColorMatrix", "feComponentTransfer", "feComposite",
    "feConvolveMatrix", "feDiffuseLighting", "feDisplacementMap",
    "feDistantLight", "feFlood", "feFuncA", "feFuncB", "feFuncG", "feFuncR",
    "feGaussianBlur", "feMerge", "feMergeNode", "feMorphology", "feOffset",
    "fePointLight", "feSpecularLighting", "feSpotLight", "feTile",
    "feTurbulence",
})

_ALLOWED_ATTRS = {
    "img": frozenset({"alt", "title", "src", "srcset", "sizes"}),
    "audio": frozenset({"src"}),
    "video": frozenset({"poster", "height", "width", "src"}),
    "source": frozenset({"src", "type", "srcset", "sizes", "media"}),
    "td": frozenset({"rowspan", "colspan"}),
    "th": frozenset({"rowspan", "colspan"}),
    "q": frozenset({"cite"}),
    "a": frozenset({"href", "title"}),
    "time": frozenset({"datetime"}),
    "abbr": frozenset({"title"}),
    "acronym": frozenset({"title"}),
    "iframe": frozenset({"width", "height", "frameborder", "src", "allowfullscreen"}),
}

_ALLOWED_SVG_ATTRS = frozenset({
    "accent-height", "accumulate", "additive", "alignment-baseline", "ascent",
    "attributename", "attributetype", "azimuth", "basefrequency",
    "baseline-shift", "begin", "bias", "by", "class", "clip", "clippathunits",
    "clip-path", "clip-rule", "color", "color-interpolation",
    "color-interpolation-filters", "color-profile", "color-rendering", "cx",
    "cy", "d", "dx", "dy", "diffuseconstant", "direction", "display",
    "divisor", "dur", "edgemode", "elevation", "end", "fill", "fill-opacity",
    "fill-rule", "filter", "filterunits", "flood-color", "flood-opacity",
    "font-family", "font-size", "font-size-adjust", "font-stretch",
    "font-style", "font-variant", "font-weight", "fx", "fy", "g1", "g2",
    "glyph-name", "glyphref", "gradientunits", "gradienttransform", "height",
    "href", "id", "image-rendering", "in", "in2", "k", "k1", "k2", "k3", "k4",
    "kerning", "keypoints", "keysplines", "keytimes", "lang", "lengthadjust",
    "letter-spacing", "kernelmatrix", "kernelunitlength", "lighting-color",
    "local", "marker-end", "marker-mid", "marker-start", "markerheight",
    "markerunits", "markerwidth", "maskcontentunits", "maskunits", "max",
    "mask", "media", "method", "mode", "min", "name", "numoctaves", "offset",
    "operator", "opacity", "order", "orient", "orientation", "origin",
    "overflow", "paint-order", "path", "pathlength", "patterncontentunits",
    "patterntransform", "patternunits", "points", "preservealpha",
    "preserveaspectratio", "primitiveunits", "r", "rx", "ry", "radius",
    "refx", "refy", "repeatcount", "repeatdur", "restart", "result", "rotate",
    "scale", "seed", "shape-rendering", "specularconstant",
    "specularexponent", "spreadmethod", "startoffset", "stddeviation",
    "stitchtiles", "stop-color", "stop-opacity", "stroke-dasharray",
    "stroke-dashoffset", "stroke-linecap", "stroke-linejoin",
    "stroke-miterlimit", "stroke-opacity", "stroke", "stroke-width",
    "surfacescale", "systemlanguage", "tabindex", "targetx", "targety",
    "transform", "text-anchor", "text-decoration", "text-rendering",
    "textlength", "type", "u1", "u2", "unicode", "values", "viewbox",
    "visibility", "version", "vert-adv-y", "vert-origin-x", "vert-origin-y",
    "width", "word-spacing", "wrap", "writing-mode", "xchannelselector",
    "ychannelselector", "x", "x1", "x2", "xmlns", "y", "y1", "y2", "z",
    "zoomandpan",
})

_ALLOWED_URI_SCHEMES = frozenset(
    {"http", "https", "ftp", "ftps", "tel", "mailto", "callto", "cid", "xmpp"}
)

_BLOCKED_TAGS = frozenset({"noscript", "script", "style"})

_BLOCKED_RESOURCES = (
    "feedsportal.com",
    "api.flattr.com",
    "stats.wordpress.com",
    "plus.google.com/share",
    "twitter.com/share",
    "feeds.feedburner.com",
)

_IFRAME_SOURCES = frozenset({
    "bandcamp.com", "cdn.embedly.com", "invidio.us", "player.bilibili.com",
    "player.vimeo.com", "soundcloud.com", "vk.com", "w.soundcloud.com",
    "www.dailymotion.com", "www.youtube-nocookie.com", "www.youtube.com",
})

_VIDEO_SOURCES = frozenset({
    "player.bilibili.com", "player.vimeo.com", "www.dailymotion.com",
    "www.youtube-nocookie.com", "www.youtube.com",
})

_DATA_URL_PREFIXES = (
    "data:image/avif", "data:image/apng", "data:image/png", "data:image/svg",
    "data:image/svg+xml", "data:image/jpg", "data:image/jpeg",
    "data:image/gif", "data:image/webp",
)

_REQUIRED_ATTRS = {
    "a": frozenset({"href"}),
    "iframe": frozenset({"src"}),
    "img": frozenset({"src"}),
    "source": frozenset({"src", "srcset"}),
}

_EXTRA_ATTRS = {
    "a": (
        ("rel", 'rel="noopener noreferrer"'),
        ("target", 'target="_blank"'),
        ("referrerpolicy", 'referrerpolicy="no-referrer"'),
    ),
    "video": (("controls", "controls"),),
    "audio": (("controls", "controls"),),
    "iframe": (
        ("sandbox", 'sandbox="allow-scripts allow-same-origin allow-popups"'),
        ("loading", 'loading="lazy"'),
    ),
    "img": (("loading", 'loading="lazy"'),),
}

_EXTERNAL_RESOURCE_ATTRS = frozenset({"src", "href", "poster", "cite"})

_FLOAT32_MAX = 3.4028234663852886e38


# --- tokenizer -------------------------------------------------------------

class _Kind(enum.Enum):
    TEXT = "text"
    START = "start"
    END = "end"
    SELF_CLOSING = "self-closing"


@dataclass
class _Token:
    kind: _Kind
    data: str
    attrs: list[tuple[str, str]] = field(default_factory=list)


_WHITESPACE = "\t\n\f\r "
_RAW_TAGS = frozenset({
    "iframe", "noembed", "noframes", "noscript", "plaintext", "script",
    "style", "textarea", "title", "xmp",
})
_RCDATA_TAGS = frozenset({"textarea", "title"})
_MARKUP = re.compile(r"<(?=[A-Za-z/!?])")
_TAG_NAME = re.compile(r"[^\t\n\f\r />]*")
_ATTRIBUTE = re.compile(
    r"""([^\t\n\f\r />][^\t\n\f\r /=>]*)
        (?:[\t\n\f\r ]*=[\t\n\f\r ]*
           (?:"([^"]*)"?|'([^']*)'?|([^\t\n\f\r >]*)))?""",
    re.VERBOSE,
)
_CHARREF = re.compile(r"&(#[0-9]+;?|#[xX][0-9a-fA-F]+;?|[A-Za-z][A-Za-z0-9]*;?)")


def _newlines(value: str) -> str:
    return value.replace("\r\n", "\n").replace("\r", "\n")


def _unescape_attribute(value: str) -> str:
    def replace(match: re.Match) -> str:
        ref = match.group(1)
        if ref.startswith("#") or ref.endswith(";"):
            return html.unescape(match.group(0))
        following = value[match.end():match.end() + 1]
        if following != "=" and ref in _ENTITIES:
            return _ENTITIES[ref]
        return match.group(0)

    return _CHARREF.sub(replace, value)


def _read_tag(data: str, pos: int) -> tuple[str, list[tuple[str, str]], bool, int] | None:
    """Read a tag starting at its name; None when the input ends inside it."""
    name_match = _TAG_NAME.match(data, pos)
    name = name_match.group().lower()
    pos = name_match.end()
    attrs: list[tuple[str, str]] = []
    size = len(data)
    while True:
        while pos < size and data[pos] in _WHITESPACE:
            pos += 1
        if pos >= size:
            return None
        char = data[pos]
        if char == ">":
            return name, attrs, data[pos - 1] == "/", pos + 1
        if char == "/":
            pos += 1
            continue
        match = _ATTRIBUTE.match(data, pos)
        value = next((g for g in match.group(2, 3, 4) if g is not None), "")
        attrs.append((match.group(1).lower(), _unescape_attribute(_newlines(value))))
        pos = match.end()


def _raw_text_end(data: str, pos: int, tag: str) -> int:
    if tag == "plaintext":
        return len(data)
    closing = re.compile("</" + re.escape(tag) + r"(?=[\t\n\f\r />])", re.IGNORECASE)
    match = closing.search(data, pos)
    return match.start() if match else len(data)


def _tokenize(data: str) -> Iterator[_Token]:
    pos = 0
    size = len(data)
    raw_tag = ""
    while pos < size:
        if raw_tag:
            end = _raw_text_end(data, pos, raw_tag)
            if end > pos:
                chunk = _newlines(data[pos:end])
                if raw_tag in _RCDATA_TAGS:
                    chunk = html.unescape(chunk)
                yield _Token(_Kind.TEXT, chunk)
            raw_tag = ""
            pos = end
            continue

        match = _MARKUP.search(data, pos)
        start = match.start() if match else size
        if start > pos:
            yield _Token(_Kind.TEXT, html.unescape(_newlines(data[pos:start])))
        if match is None:
            return
        pos = start
        marker = data[pos + 1]

        if marker == "/":
            after = data[pos + 2:pos + 3]
            if not after:
                yield _Token(_Kind.TEXT, "</")
                return
            if after.isascii() and after.isalpha():
                tag = _read_tag(data, pos + 2)
                if tag is None:
                    return
                yield _Token(_Kind.END, tag[0])
                pos = tag[3]
            elif after == ">":
                pos += 3
            else:
                close = data.find(">", pos + 2)
                pos = size if close < 0 else close + 1
        elif marker in "!?":
            if data.startswith("<!--", pos):
                close = data.find("-->", pos + 4)
                pos = size if close < 0 else close + 3
            else:
                close = data.find(">", pos + 2)
                pos = size if close < 0 else close + 1
        else:
            tag = _read_tag(data, pos + 1)
            if tag is None:
                return
            name, attrs, self_closing, pos = tag
            kind = _Kind.SELF_CLOSING if self_closing else _Kind.START
            yield _Token(kind, name, attrs)
            if name in _RAW_TAGS:
                raw_tag = name


# --- sanitizing ------------------------------------------------------------

_HTML_ESCAPES = str.maketrans(
    {"&": "&amp;", "'": "&#39;", "<": "&lt;", ">": "&gt;", '"': "&#34;", "\r": "&#13;"}
)
_SRCSET_SPLIT = re.compile(r",[\t\n\f\r ]+")


def _escape(value: str) -> str:
    return value.translate(_HTML_ESCAPES)


def _is_valid_tag(name: str) -> bool:
    return name in _ALLOWED_TAGS or name in _ALLOWED_SVG_TAGS or name in _ALLOWED_SVG_FILTERS


def _is_valid_attribute(tag: str, name: str) -> bool:
    if tag in _ALLOWED_ATTRS:
        return name in _ALLOWED_ATTRS[tag]
    if tag in _ALLOWED_SVG_TAGS:
        return name in _ALLOWED_SVG_ATTRS
    return False


def _has_required_attributes(tag: str, names: list[str]) -> bool:
    required = _REQUIRED_ATTRS.get(tag)
    if required is None:
        return True
    return any(name in required for name in names)


def _has_valid_uri_scheme(src: str) -> bool:
    return src.split(":", 1)[0] in _ALLOWED_URI_SCHEMES


def _is_blocked_resource(src: str) -> bool:
    return any(blocked in src for blocked in _BLOCKED_RESOURCES)


def _is_valid_iframe_source(base_url: str, src: str) -> bool:
    domain = url_domain(src)
    return url_domain(base_url) == domain or domain in _IFRAME_SOURCES


def _is_valid_data_attribute(value: str) -> bool:
    return value.startswith(_DATA_URL_PREFIXES)


def _is_valid_descriptor(value: str) -> bool:
    if not value or value[-1] not in "wx":
        return False
    number = value[:-1]
    if not number or number != number.strip() or "_" in number:
        return False
    try:
        parsed = float(number)
    except ValueError:
        return False
    return not (math.isfinite(parsed) and abs(parsed) > _FLOAT32_MAX)


def _sanitize_srcset(base_url: str, value: str) -> str:
    sources = []
    for raw_source in _SRCSET_SPLIT.split(value):
        parts = raw_source.strip().split(" ")
        source = parts[0]
        if not source.startswith("data:"):
            source = absolute_url(source, base_url)
            if not source:
                continue
        if len(parts) == 2 and _is_valid_descriptor(parts[1]):
            source += " " + parts[1]
        sources.append(source)
    return ", ".join(sources)


def _sanitize_attributes(
    base_url: str, tag: str, attributes: list[tuple[str, str]]
) -> tuple[list[str], str]:
    names: list[str] = []
    rendered: list[str] = []
    for key, original in attributes:
        if not _is_valid_attribute(tag, key):
            continue
        value = original
        if tag in ("img", "source") and key == "srcset":
            value = _sanitize_srcset(base_url, value)
        if key in _EXTERNAL_RESOURCE_ATTRS:
            if tag == "iframe":
                if not _is_valid_iframe_source(base_url, original):
                    continue
                value = original
            elif tag == "img" and key == "src" and _is_valid_data_attribute(original):
                value = original
            else:
                value = absolute_url(value, base_url)
                if not value or not _has_valid_uri_scheme(value) or _is_blocked_resource(value):
                    continue
        names.append(key)
        rendered.append(f'{key}="{_escape(value)}"')

    for name, markup in _EXTRA_ATTRS.get(tag, ()):
        names.append(name)
        rendered.append(markup)
    return names, " ".join(rendered)


def _is_video_iframe(token: _Token) -> bool:
    if token.data != "iframe":
        return False
    src = next((value for key, value in token.attrs if key == "src"), None)
    return src is not None and url_domain(src) in _VIDEO_SOURCES


def sanitize(base_url: str, input_html: str) -> str:
    """Return ``input_html`` reduced to safe markup, resolving URLs against ``base_url``."""
    out: list[str] = []
    opened: set[str] = set()
    parent_tag = ""
    blocked_depth = 0

    for token in _tokenize(input_html):
        name = token.data
        if token.kind is _Kind.TEXT:
            # An iframe never has fallback content.
            if blocked_depth > 0 or parent_tag == "iframe":
                continue
            out.append(_escape(name))
        elif token.kind is _Kind.START:
            parent_tag = name
            if _is_valid_tag(name):
                names, rendered = _sanitize_attributes(base_url, name, token.attrs)
                if not _has_required_attributes(name, names):
                    continue
                wrap = _is_video_iframe(token)
                if wrap:
                    out.append('<div class="video-wrapper">')
                out.append(f"<{name} {rendered}>" if names else f"<{name}>")
                if name == "iframe":
                    out.append("</iframe>")
                    if wrap:
                        out.append("</div>")
                else:
                    opened.add(name)
            elif name in _BLOCKED_TAGS:
                blocked_depth += 1
        elif token.kind is _Kind.END:
            if name == "iframe":
                continue
            if _is_valid_tag(name) and name in opened:
                out.append(f"</{name}>")
            elif name in _BLOCKED_TAGS:
                blocked_depth -= 1
        elif _is_valid_tag(name):
            names, rendered = _sanitize_attributes(base_url, name, token.attrs)
            if _has_required_attributes(name, names):
                out.append(f"<{name} {rendered}/>" if names else f"<{name}/>")

    return "".join(out)