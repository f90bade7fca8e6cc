#fetcher.py
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Tuple

import requests

from errors import TransportError
from settings import DEFAULT_TIMEOUT, DEFAULT_UA

_HTML_CT_RE = re.compile(r".*/.*html", re.I)


@dataclass
class Page:
    url: str
    status: int
    headers: Dict[str, str] = field(default_factory=dict)
    text: str = ""

    @property
    def content_type(self) -> str:
        for k, v in self.headers.items():
            if k.lower() == "content-type":
                return v
        return ""

    @property
    def is_html(self) -> bool:
        return bool(_HTML_CT_RE.search(self.content_type))


class PageFetcher:
    """
    One GET per page: fixed UA, optional basic auth, redirects not followed.
    gzip / deflate bodies are decoded by requests.
    """

    def __init__(self,
                 user_agent: str = DEFAULT_UA,
                 auth: Tuple[str, str] | None = None,
                 timeout: float = DEFAULT_TIMEOUT,
                 session: requests.Session | None = None) -> None:
        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": user_agent,
            "Accept-Encoding": "gzip, deflate",
        })
        self.auth = auth
        self.timeout = timeout

    def fetch(self, url: str) -> Page:
        try:
            r = self.session.get(
                url,
                auth=self.auth,
                timeout=self.timeout,
                allow_redirects=False,
            )
        except requests.RequestException as exc:
            raise TransportError(url, str(exc)) from exc
        return Page(url=url, status=r.status_code, headers=dict(r.headers), text=r.text)

    def close(self) -> None:
        self.session.close()
