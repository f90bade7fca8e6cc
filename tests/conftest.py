import io

import pytest

from errors import TransportError
from fetcher import Page

ROOT = "http://example.com/"

HTML = {"Content-Type": "text/html; charset=utf-8"}

# A tiny site: root → about, blog/post1, archive/old ; about → root, post1 ; post1 → about
SITE = {
    ROOT: """
        <html><body>
          <a href="about">About</a>
          <a href="blog/post1">Post</a>
          <a href="http://example.com/archive/old">Old</a>
          <a href="mailto:team@example.com">Mail</a>
          <a href="style.css">CSS</a>
          <a href="http://evil.com/page">Elsewhere</a>
          <a href="about#team">Team</a>
        </body></html>
    """,
    ROOT + "about": """
        <p><a href="http://example.com/">Home</a> <a href='blog/post1'>Post</a></p>
    """,
    ROOT + "blog/post1": '<div><a href="about">back</a></div>',
    # archive/old is missing → TransportError
}


class FakeFetcher:
    """Serves pages from a dict; unknown urls fail like a refused connection."""

    def __init__(self, pages):
        self.pages = pages
        self.calls = []

    def fetch(self, url):
        self.calls.append(url)
        item = self.pages.get(url)
        if item is None:
            raise TransportError(url, "connection refused")
        if isinstance(item, Page):
            return item
        return Page(url=url, status=200, headers=dict(HTML), text=item)


class FakeClock:
    """Returns the given readings in order, then keeps repeating the last one."""

    def __init__(self, *readings):
        self.readings = list(readings)

    def __call__(self):
        if len(self.readings) > 1:
            return self.readings.pop(0)
        return self.readings[0]


@pytest.fixture
def stream():
    return io.StringIO()


@pytest.fixture
def site_fetcher():
    return FakeFetcher(SITE)
