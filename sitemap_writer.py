# sitemap_writer.py — serializes crawl results into a sitemap urlset
from __future__ import annotations

import os
from html import escape
from pathlib import Path
from typing import Mapping

from errors import ConfigurationError
from priority import ResultRecord

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"


def render_urlset(results: Mapping[str, ResultRecord]) -> str:
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<urlset xmlns="{SITEMAP_NS}">',
    ]
    for url, rec in results.items():
        lines += [
            "  <url>",
            f"    <loc>{escape(url)}</loc>",
            f"    <changefreq>{rec.change_freq}</changefreq>",
            f"    <priority>{rec.priority:g}</priority>",
            "  </url>",
        ]
    lines.append("</urlset>")
    return "\n".join(lines) + "\n"


class SitemapWriter:
    def __init__(self, output: str | os.PathLike) -> None:
        self.output = Path(output)

    def set_output(self, filename: str | os.PathLike | None) -> "SitemapWriter":
        if filename:
            self.output = Path(filename)
        return self

    def build(self, results: Mapping[str, ResultRecord]) -> Path:
        """Write the sitemap and return its path. Refuses empty input."""
        if not results:
            raise ConfigurationError("No data")
        self.output.parent.mkdir(parents=True, exist_ok=True)
        self.output.write_text(render_urlset(results), encoding="utf-8")
        return self.output
