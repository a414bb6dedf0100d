"""Data model of a parsed feed."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from urllib.parse import SplitResult, urljoin, urlsplit

from yarr.content.htmlutil import extract_text


@dataclass
class Item:
    """A single entry of a feed; ``date`` is None when the feed gives none."""

    guid: str = ""
    date: datetime | None = None
    url: str = ""
    title: str = ""
    content: str = ""
    image_url: str = ""
    audio_url: str = ""


def _split(value: str, what: str) -> SplitResult:
    try:
        parts = urlsplit(value)
        parts.port
    except ValueError as err:
        raise ValueError(f"failed to parse {what} url: {value!r}") from err
    return parts


@dataclass
class Feed:
    """A feed with its title, site address and items."""

    title: str = ""
    site_url: str = ""
    items: list[Item] = field(default_factory=list)

    def cleanup(self) -> None:
        """Trim fields, strip markup from titles and drop media already in the content."""
        self.title = self.title.strip()
        self.site_url = self.site_url.strip()
        for item in self.items:
            original_content = item.content
            item.guid = item.guid.strip()
            item.url = item.url.strip()
            item.title = extract_text(item.title).strip()
            item.content = original_content.strip()
            if item.image_url and item.image_url in original_content:
                item.image_url = ""
            if item.audio_url and item.audio_url in original_content:
                item.audio_url = ""

    def set_missing_dates_to(self, newdate: datetime) -> None:
        """Give ``newdate`` to every item that has no date."""
        for item in self.items:
            if item.date is None:
                item.date = newdate

    def translate_urls(self, base: str) -> None:
        """Resolve the site address against ``base``; raise ValueError on invalid URLs."""
        _split(base, "base")
        _split(self.site_url, "feed")
        for item in self.items:
            _split(item.url, "item")
        self.site_url = urljoin(base, self.site_url)