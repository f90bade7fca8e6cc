# errors.py — crawl / sitemap error taxonomy
from __future__ import annotations


class SitemapError(Exception):
    """Base class for everything this tool raises on purpose."""


class ConfigurationError(SitemapError):
    """No crawl target, bad settings, or nothing to write."""


class TransportError(SitemapError):
    """A single page could not be fetched. Never fatal for a crawl."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class CheckpointError(SitemapError):
    """Crawl progress could not be persisted; the cycle cannot continue."""
