import pytest
import requests

from errors import TransportError
from fetcher import Page, PageFetcher
from settings import DEFAULT_UA


class _Resp:
    def __init__(self, status=200, headers=None, text=""):
        self.status_code = status
        self.headers = headers or {}
        self.text = text


def test_fetch_passes_auth_and_disables_redirects(monkeypatch):
    seen = {}
    session = requests.Session()

    def fake_get(url, **kwargs):
        seen.update(kwargs, url=url)
        return _Resp(301, {"Location": "http://example.com/x", "Content-Type": "text/html"}, "moved")

    monkeypatch.setattr(session, "get", fake_get)
    f = PageFetcher(auth=("bob", "secret"), timeout=3, session=session)
    page = f.fetch("http://example.com/")

    assert seen["allow_redirects"] is False
    assert seen["auth"] == ("bob", "secret")
    assert seen["timeout"] == 3
    assert session.headers["User-Agent"] == DEFAULT_UA
    assert page.status == 301
    assert page.text == "moved"


def test_request_errors_become_transport_errors(monkeypatch):
    session = requests.Session()

    def boom(url, **kwargs):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(session, "get", boom)
    with pytest.raises(TransportError) as info:
        PageFetcher(session=session).fetch("http://example.com/down")
    assert info.value.url == "http://example.com/down"
    assert "refused" in info.value.reason


@pytest.mark.parametrize("ct, expected", [
    ("text/html; charset=utf-8", True),
    ("application/xhtml+xml", True),
    ("TEXT/HTML", True),
    ("text/plain", False),
    ("application/json", False),
    ("", False),
])
def test_html_detection(ct, expected):
    page = Page(url="u", status=200, headers={"content-type": ct} if ct else {})
    assert page.is_html is expected
