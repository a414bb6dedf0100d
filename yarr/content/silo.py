"""Embeddable players for links to well-known video sites."""

import re
from urllib.parse import parse_qs, unquote, urlsplit

_YOUTUBE_FRAME = (
    '<iframe src="https://www.youtube.com/embed/{}" width="560" height="315" '
    'frameborder="0" allowfullscreen></iframe>'
)
_VIMEO_FRAME = (
    '<iframe src="https://player.vimeo.com/video/{}" width="640" height="360" '
    'frameborder="0" allowfullscreen></iframe>'
)
_VIMEO_ID = re.compile(r"/(\d+)\Z", re.ASCII)


def video_iframe(link: str) -> str:
    """Return an iframe embedding the video at ``link``, or an empty string."""
    try:
        parts = urlsplit(link)
    except ValueError:
        return ""
    host = parts.netloc.rpartition("@")[2]
    path = unquote(parts.path)

    youtube_id = ""
    if host == "www.youtube.com" and path == "/watch":
        youtube_id = parse_qs(parts.query).get("v", [""])[0]
    elif host == "youtu.be":
        youtube_id = path.lstrip("/")
    if youtube_id:
        return _YOUTUBE_FRAME.format(youtube_id)

    if host == "vimeo.com":
        match = _VIMEO_ID.search(path)
        if match:
            return _VIMEO_FRAME.format(match.group(1))
    return ""