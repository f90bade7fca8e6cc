from extractor import extract_links


def test_link_tags_and_attributes():
    html = """
      <a href="one">1</a>
      <A HREF="two">2</A>
      <frame src="frame.html">
      <iframe src='embed'></iframe>
      <form action="submit" method="post"></form>
      <img src="pic.png">
      <script src="app.js"></script>
      <link href="style.css" rel="stylesheet">
    """
    assert extract_links(html) == ["one", "two", "frame.html", "embed", "submit"]


def test_non_fetchable_schemes_are_skipped():
    html = "".join(f'<a href="{h}">x</a>' for h in (
        "mailto:a@b.c", "JavaScript:void(0)", "ftp://files", "telnet:host",
        "callto:123", "ed2k://x", "news:group", "http://example.com/ok",
    ))
    assert extract_links(html) == ["http://example.com/ok"]


def test_fragments_are_cut_and_bare_anchors_dropped():
    html = '<a href="page#section">a</a><a href="#top">b</a><a href="">c</a><a>d</a>'
    assert extract_links(html) == ["page"]


def test_entities_are_decoded():
    assert extract_links('<a href="list?a=1&amp;b=2">x</a>') == ["list?a=1&b=2"]


def test_duplicates_are_kept_in_document_order():
    html = '<a href="b">1</a><a href="a">2</a><a href="b">3</a>'
    assert extract_links(html) == ["b", "a", "b"]


def test_empty_markup():
    assert extract_links("") == []
    assert extract_links("plain text, no tags") == []
