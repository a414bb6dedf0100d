import pytest

from yarr.content.silo import video_iframe

YOUTUBE = (
    '<iframe src="https://www.youtube.com/embed/dQw4w9WgXcQ" width="560" height="315" '
    'frameborder="0" allowfullscreen></iframe>'
)
VIMEO = (
    '<iframe src="https://player.vimeo.com/video/526381128" width="640" height="360" '
    'frameborder="0" allowfullscreen></iframe>'
)


@pytest.mark.parametrize(
    "link",
    [
        "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        "https://youtu.be/dQw4w9WgXcQ",
        "https://youtu.be/dQw4w9WgXcQ",
    ],
)
def test_youtube_iframe(link):
    assert video_iframe(link) == YOUTUBE


@pytest.mark.parametrize(
    "link",
    [
        "https://vimeo.com/channels/staffpicks/526381128",
        "https://vimeo.com/526381128",
    ],
)
def test_vimeo_iframe(link):
    assert video_iframe(link) == VIMEO


@pytest.mark.parametrize(
    "link",
    [
        "https://example.com/watch?v=abc",
        "https://www.youtube.com/channel/abc",
        "https://vimeo.com/channels/staffpicks",
        "http://[::1",
    ],
)
def test_unknown_links(link):
    assert video_iframe(link) == ""