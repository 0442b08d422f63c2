"""Common infrastructure utilities."""

from __future__ import annotations

from .html_selectors import extract_hrefs, parse_html
from .text import is_hls_url, slugify

__all__ = [
    "extract_hrefs",
    "is_hls_url",
    "parse_html",
    "slugify",
]
