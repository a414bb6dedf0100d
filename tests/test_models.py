from datetime import datetime, timezone

import pytest

from yarr.parser.models import Feed, Item


def test_cleanup_trims_and_strips_markup():
    feed = Feed(
        title="  Title \n",
        site_url=" http://example.com/ ",
        items=[Item(guid=" g ", url=" u ", title=" <b>bold</b>  text ", content=" body ")],
    )
    feed.cleanup()
    assert feed.title == "Title"
    assert feed.site_url == "http://example.com/"
    item = feed.items[0]
    assert (item.guid, item.url, item.content) == ("g", "u", "body")
    assert item.title == "bold text"


def test_cleanup_drops_media_present_in_content():
    image = "https://example.com/image.png"
    audio = "http://example.com/audio.ext"
    feed = Feed(items=[
        Item(content=f'<img src="{image}">', image_url=image),
        Item(content=f'<audio src="{audio}"></audio>', audio_url=audio),
        Item(content="nothing", image_url=image, audio_url=audio),
    ])
    feed.cleanup()
    assert feed.items[0].image_url == ""
    assert feed.items[1].audio_url == ""
    assert feed.items[2].image_url == image
    assert feed.items[2].audio_url == audio


def test_set_missing_dates_only_fills_empty():
    existing = datetime(2020, 1, 1, tzinfo=timezone.utc)
    now = datetime(2021, 6, 1, tzinfo=timezone.utc)
    feed = Feed(items=[Item(date=existing), Item()])
    feed.set_missing_dates_to(now)
    assert [i.date for i in feed.items] == [existing, now]


def test_translate_urls_resolves_site():
    feed = Feed(site_url="/blog/")
    feed.translate_urls("http://example.com/feed.xml")
    assert feed.site_url == "http://example.com/blog/"


def test_translate_urls_keeps_absolute_site():
    feed = Feed(site_url="http://example.org/")
    feed.translate_urls("http://example.com/")
    assert feed.site_url == "http://example.org/"


def test_translate_urls_invalid_base():
    with pytest.raises(ValueError):
        Feed().translate_urls("http://[bad")


def test_translate_urls_invalid_item():
    feed = Feed(items=[Item(url="http://[bad")])
    with pytest.raises(ValueError):
        feed.translate_urls("http://example.com/")