# pinger.py — tells search engines where the new sitemap lives
from __future__ import annotations

import sys
from typing import Dict, Iterable, List, TextIO

import requests

from settings import DEFAULT_TIMEOUT

DEFAULT_ENDPOINTS = [
    "https://www.google.com/ping?sitemap={path}",
    "https://www.bing.com/ping?sitemap={path}",
]


class Pinger:
    """GETs every endpoint template with `placeholder` replaced by the sitemap address."""

    def __init__(self, path: str, placeholder: str = "{path}",
                 session: requests.Session | None = None,
                 timeout: float = DEFAULT_TIMEOUT,
                 stream: TextIO | None = None) -> None:
        self.path = path
        self.placeholder = placeholder
        self.session = session or requests.Session()
        self.timeout = timeout
        self.stream = stream
        self.urls: List[str] = []
        self.responses: Dict[str, str] = {}   # pinged url → raw response

    def set_urls(self, urls: Iterable[str]) -> "Pinger":
        self.urls = list(urls)
        return self

    def targets(self) -> List[str]:
        return [u.replace(self.placeholder, self.path) for u in self.urls]

    def send_ping(self, url: str) -> str:
        try:
            r = self.session.get(url, timeout=self.timeout, allow_redirects=False)
        except requests.RequestException as exc:
            return f"ERROR {exc}"
        return f"{r.status_code} {r.reason or ''}".strip() + "\n" + r.text

    def ping(self) -> Dict[str, str]:
        for url in self.targets():
            raw = self.send_ping(url)
            self.responses[url] = raw
            status = raw.split("\n", 1)[0]
            print(f"{status}\t{url}", file=self.stream or sys.stdout, flush=True)
        return self.responses
