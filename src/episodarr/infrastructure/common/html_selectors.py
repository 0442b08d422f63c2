"""CSS-selector-based HTML extraction.

Thin helpers around BeautifulSoup so scrapers never hand-roll regexes
over raw markup for structural data like anchors.
"""

from __future__ import annotations

from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag


def parse_html(html: str) -> BeautifulSoup:
    """Parse an HTML string into a BeautifulSoup tree (lxml parser)."""
    return BeautifulSoup(html, "lxml")


def select_items(
    root: BeautifulSoup | Tag,
    selector: str,
    *fallback_selectors: str,
) -> list[Tag]:
    """Select elements via CSS with a fallback chain.

    Returns results from the **first** selector that matches anything.
    """
    for sel in (selector, *fallback_selectors):
        items = root.select(sel)
        if items:
            return items
    return []


def extract_hrefs(
    root: BeautifulSoup | Tag,
    selector: str = "a[href]",
    *fallback_selectors: str,
    base_url: str = "",
) -> list[str]:
    """Return every non-empty ``href`` under *selector*, absolutised.

    Relative links are joined against *base_url* when given.  Malformed
    hrefs are kept as-is for the caller to reject.
    """
    hrefs: list[str] = []
    for tag in select_items(root, selector, *fallback_selectors):
        href = tag.get("href")
        if not href:
            continue
        href_str = str(href).strip()
        if not href_str:
            continue
        if base_url:
            try:
                href_str = urljoin(base_url, href_str)
            except ValueError:
                continue
        hrefs.append(href_str)
    return hrefs
