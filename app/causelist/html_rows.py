"""BeautifulSoup helpers for reading results-table cells."""
from __future__ import annotations

from typing import List, Optional

from bs4 import BeautifulSoup
from bs4.element import Tag

from .utils import clean_text

_LINE_BREAK = "\x1e"


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "html5lib")


def cell_lines(cell: Optional[Tag]) -> List[str]:
    """Return the visible lines of ``cell``, splitting on ``<br>``.

    Each line is whitespace-collapsed and empty lines are dropped. A missing
    cell yields an empty list.
    """

    if cell is None:
        return []

    # Source newlines are formatting only; ``<br>`` marks a rendered line.
    for br in cell.find_all("br"):
        br.replace_with(_LINE_BREAK)

    lines = []
    for line in cell.get_text().split(_LINE_BREAK):
        cleaned = clean_text(line)
        if cleaned:
            lines.append(cleaned)
    return lines


def cell_text(cell: Optional[Tag]) -> str:
    """Return the whole text of ``cell`` collapsed to one line."""

    if cell is None:
        return ""
    return clean_text(cell.get_text(" "))


def first_anchor_text(cell: Optional[Tag]) -> Optional[str]:
    """Return the text of the first ``<a>`` inside ``cell``, if any."""

    if cell is None:
        return None
    anchor = cell.find("a")
    if anchor is None:
        return None
    return clean_text(anchor.get_text(" ")) or None


__all__ = ["parse_html", "cell_lines", "cell_text", "first_anchor_text"]
