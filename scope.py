# scope.py — decides which discovered links belong to the crawl
from __future__ import annotations

import re
from typing import Iterable

from matcher import Matcher, compile_fragments

# ─────────────────────────── regex helpers ────────────────────────
_SCHEME_RE   = re.compile(r"^https?://", re.I)
_PREFIXED_RE = re.compile(r"^[a-z][a-z0-9+.\-]*:", re.I)
_WWW_RE      = re.compile(r"^www\.", re.I)
_ASSET_RE    = re.compile(r"\.(ico|png|jpg|gif|css|js)(\?.*)?$", re.I)
_INJECTED_RE = re.compile(r"https?://.*https?://")
# ──────────────────────────────────────────────────────────────────


class CrawlTarget:
    """The root address. Always ends with '/'."""

    def __init__(self, url: str) -> None:
        url = (url or "").strip()
        if url and not url.endswith("/"):
            url += "/"
        self.url = url
        # scheme and leading "www." removed, e.g. "example.com/"
        self.scope = _WWW_RE.sub("", _SCHEME_RE.sub("", url))

    def __str__(self) -> str:
        return self.url


class UrlScope:
    """
    Validator and normalizer for links found on crawled pages.

    Relative links are resolved by plain concatenation with the root, so
    ``../`` segments are kept verbatim and links starting with ``/`` or ``./``
    are left as they are (and therefore fail the host check).
    """

    def __init__(self, target: CrawlTarget, disabled: Iterable[str] = (),
                 query_urls: bool = False) -> None:
        self.target = target
        self.query_urls = query_urls
        self.disabled: Matcher | None = compile_fragments(disabled, target.scope)
        scope = re.escape(target.scope)
        self._query_re = re.compile(scope + r".*\?", re.I)
        self._host_re  = re.compile(r"^https?://(www\.)?([^/]+\.)*" + scope + r"[^#]*$", re.I)

    def normalize(self, link: str) -> str:
        if not link:
            return ""
        if link.startswith(("./", "/")) or _PREFIXED_RE.match(link):
            return link
        return self.target.url + link

    def is_in_scope(self, url: str) -> bool:
        if not url:
            return False
        if _ASSET_RE.search(url):
            return False
        if self.disabled and self.disabled.matches(url):
            return False
        if not self.query_urls and self._query_re.search(url):
            return False
        if _INJECTED_RE.search(url):
            return False
        return self._host_re.match(url) is not None
