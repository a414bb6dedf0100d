"""Command that prints the readable content of a page or file."""

from __future__ import annotations

import sys
import urllib.error
import urllib.request

from yarr.content.readability import extract_content


def main(argv: list[str] | None = None) -> None:
    """Extract and print the main content of the page at a URL or path."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 1:
        print("usage: <script> [url]")
        return
    location = args[0]

    if location.startswith("http"):
        try:
            with urllib.request.urlopen(location) as response:
                page = response.read()
        except (urllib.error.URLError, OSError, ValueError) as err:
            raise SystemExit(f"failed to get url {location}: {err}") from err
    else:
        try:
            with open(location, "rb") as handle:
                page = handle.read()
        except OSError as err:
            raise SystemExit(f"failed to open file: {err}") from err

    try:
        content = extract_content(page)
    except ValueError as err:
        raise SystemExit(f"failed to extract content: {err}") from err
    print(content)