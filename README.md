# yarr

Building blocks for a news reader: an HTML sanitizer for feed content, a
readability extractor that pulls the main article out of a web page,
HTML tree helpers, video embeds for well-known video sites, and the data
model and XML helpers used for feeds.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Cleaning up HTML

```python
from yarr.content.sanitizer import sanitize

safe = sanitize("http://example.com/", '<p onclick="x()">Hi <script>bad()</script></p>')
# '<p>Hi </p>'
```

Only allowed tags and attributes are kept, links are made absolute against
the base URL, unsafe URL schemes and known trackers are dropped, and
iframes are kept only when they come from the page's own host or from
well-known video and audio players. Iframes from video players are wrapped
in `<div class="video-wrapper">`.

## Readable content

```python
from yarr.content.readability import extract_content

with open("article.html", "rb") as fh:
    html = extract_content(fh)
```

`extract_content` accepts a string, bytes or a binary file object and
returns the best-scoring block of the page, with related siblings, wrapped
in a `<div>`. It raises `ValueError` when the document has no body.

The same is available from the command line, for a URL or a local file:

```
yarr-reader https://example.com/article.html
```

## Video embeds

```python
from yarr.content.silo import video_iframe

video_iframe("https://youtu.be/dQw4w9WgXcQ")   # YouTube <iframe>
video_iframe("https://vimeo.com/526381128")    # Vimeo <iframe>
video_iframe("https://example.com/")           # ""
```

## HTML helpers

`yarr.content.htmlutil` parses documents into a tree of `Node` objects
(`parse_html`) and offers `query` and `closest` with comma separated tag
name selectors (`"p, span"`, `"*"`), `find_nodes`, `render_html`,
`inner_html`, `attr`, `text`, `extract_text` (markup stripped, whitespace
collapsed), `absolute_url` and `url_domain`.

## Feed data and XML helpers

`yarr.parser.models` holds the `Feed` and `Item` dataclasses. A `Feed` can
`cleanup()` its fields (trimming, stripping markup from item titles,
dropping image and audio URLs already present in the content),
`set_missing_dates_to(date)` for undated items, and `translate_urls(base)`,
which resolves the site address against `base` and raises `ValueError` for
unparseable URLs.

`yarr.parser.util` provides `parse_xml` (lenient parsing that honours the
declared encoding and drops characters not allowed in XML),
`SafeXMLReader`, `first_non_empty`, `plain2html`, `is_in_character_range`
and `proc_inst`. `yarr.parser.media` reads Media RSS thumbnails and
descriptions from a parsed entry element with `first_media_thumbnail` and
`first_media_description`.

## What it does not do

The package does not read feed documents itself: there is no detection
of RSS, Atom, RDF or JSON Feed documents, no conversion of them into
`Feed` objects, no parsing of feed dates, no discovery of feeds or icons on
web pages, and no command that prints a feed. It has no server, storage or
user interface.