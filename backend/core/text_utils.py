"""
Shared text helpers: page splitting and context windows around matches.
"""

import re

PAGE_BREAK = "\f"
ELLIPSIS = "..."

_WHITESPACE_RE = re.compile(r"\s+")


def collapse_whitespace(text: str) -> str:
    """Collapse runs of whitespace to single spaces and trim."""
    return _WHITESPACE_RE.sub(" ", text).strip()


def split_pages(text: str) -> list[str]:
    """
    Split document text into pages on the form-feed marker.

    A document without page breaks is a single page.
    """
    return text.split(PAGE_BREAK)


def context_window(text: str, start: int, end: int, radius: int) -> str:
    """
    Return the text around ``text[start:end]``, ``radius`` characters each side.

    Whitespace inside the window is collapsed. An ellipsis is added on any
    side where the window was cut short of the string boundary.
    """
    window_start = max(0, start - radius)
    window_end = min(len(text), end + radius)
    snippet = collapse_whitespace(text[window_start:window_end])

    if window_start > 0:
        snippet = ELLIPSIS + snippet
    if window_end < len(text):
        snippet = snippet + ELLIPSIS
    return snippet


def raw_window(text: str, start: int, end: int, radius: int) -> str:
    """Fixed-width slice around a match, without any normalization."""
    return text[max(0, start - radius):min(len(text), end + radius)]
