"""HTML sanitizing, readable-content extraction and feed data helpers for a news reader."""

__version__ = "2.3"