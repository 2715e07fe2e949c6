from __future__ import annotations

import re
from typing import Iterable

from selectolax.parser import HTMLParser


def make_html_parser(html: str) -> HTMLParser:
    """Create a Selectolax parser from raw HTML."""

    return HTMLParser(html)


def page_text(html: str) -> str:
    """Visible text of a page with whitespace collapsed, scripts and styles dropped."""
    parser = make_html_parser(html)
    for node in parser.css("script, style, noscript"):
        node.decompose()
    root = parser.body or parser.root
    if root is None:
        return ""
    return re.sub(r"\s+", " ", root.text(separator=" ")).strip()


def first_match(text: str, patterns: Iterable[re.Pattern[str]]) -> re.Match[str] | None:
    """Try each pattern in priority order and return the first hit."""
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return match
    return None
