# matcher.py — path-fragment rules (disabled / primary / normal / secondary)
from __future__ import annotations

import re
from typing import Iterable, List


def normalize_fragment(fragment: str) -> str:
    """Strip one leading './' and then one leading '/'."""
    fragment = (fragment or "").strip()
    if fragment.startswith("./"):
        fragment = fragment[2:]
    if fragment.startswith("/"):
        fragment = fragment[1:]
    return fragment


class Matcher:
    """
    Tests whether any fragment occurs in the path part of a URL, i.e. somewhere
    after the crawl scope (host + root path). Case-insensitive.
    """

    def __init__(self, fragments: List[str], scope: str) -> None:
        self.fragments = fragments
        self.scope = scope
        alternatives = "|".join(re.escape(f) for f in fragments)
        self._re = re.compile(re.escape(scope) + r"[^#]*?(?:" + alternatives + ")", re.I)

    def matches(self, url: str) -> bool:
        return bool(url) and self._re.search(url) is not None

    def __repr__(self) -> str:
        return f"Matcher({self.fragments!r}, scope={self.scope!r})"


def compile_fragments(fragments: Iterable[str] | None, scope: str) -> Matcher | None:
    """Build a Matcher, or None when nothing is left after dropping blanks."""
    cleaned = [f for f in (normalize_fragment(f) for f in fragments or ()) if f]
    if not cleaned:
        return None
    return Matcher(cleaned, scope)
