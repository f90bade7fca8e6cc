# extractor.py — pulls candidate links out of fetched markup
from __future__ import annotations

import re
from typing import List

from bs4 import BeautifulSoup

_LINK_TAGS  = ("a", "frame", "iframe", "form")
_LINK_ATTRS = ("href", "src", "action", "url")
_SKIP_SCHEMES = ("mailto:", "news:", "javascript:", "ftp:", "telnet:", "callto:", "ed2k:")
_CUT_RE = re.compile(r"[\"'#\s>]")


def _clean(value: str) -> str:
    """Keep everything up to the first '#', quote, whitespace or '>'."""
    value = value.strip().lstrip("\"'")
    m = _CUT_RE.search(value)
    return value[:m.start()] if m else value


def extract_links(html: str) -> List[str]:
    """Attribute values of link-bearing tags, in document order, duplicates kept."""
    if not html:
        return []
    soup = BeautifulSoup(html, "html.parser")
    links: List[str] = []
    for tag in soup.find_all(_LINK_TAGS):
        for attr in _LINK_ATTRS:
            raw = tag.get(attr)
            if not raw or not isinstance(raw, str):
                continue
            if raw.lstrip().lower().startswith(_SKIP_SCHEMES):
                continue
            link = _clean(raw)
            if link:
                links.append(link)
    return links
