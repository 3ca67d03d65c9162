from bs4.element import NavigableString, Tag

from focus_scout.parser.html_parser import parse_html, tokenize
from focus_scout.config import DEFAULT_DELIMITERS


def test_links_resolve_against_page_and_drop_fragment():
    page = parse_html(
        '<p>See <a href="../x#top">this</a> or <a href="mailto:me@a.example">mail</a>'
        ' or <a href="https://b.example/y">that</a></p>',
        "https://a.example/dir/page.html",
    )
    assert [l.target for l in page.links] == ["https://a.example/x", None, "https://b.example/y"]
    assert [l.href for l in page.links][0] == "../x#top"
    assert page.links[0].anchor_text == "this"


def test_node_sequence_is_document_order():
    page = parse_html('<p>Hi <a href="/x">there</a></p><!-- note --><script>var widget;</script>', "https://a.example/")
    kinds = [n.name if isinstance(n, Tag) else str(n) for n in page.nodes]
    assert kinds == ["p", "Hi ", "a", "there", "script"]
    assert all(isinstance(n, (Tag, NavigableString)) for n in page.nodes)


def test_index_and_subtree_positions():
    page = parse_html('<p>before <a href="/x"><b>bold</b> tail</a> after</p>', "https://a.example/")
    anchor = page.links[0].element
    index = page.index_of(anchor)
    assert page.nodes[index] is anchor
    end = page.subtree_end(index)
    assert list(page.strings_after(end)) == [" after"]
    assert list(page.strings_before(index)) == ["before "]


def test_page_text_skips_comments_and_scripts():
    page = parse_html("<title>T</title><p>visible</p><!-- hidden --><script>code()</script>", "https://a.example/")
    assert "visible" in page.text
    assert "hidden" not in page.text
    assert "code" not in page.text


def test_tokenize_default_delimiters():
    assert tokenize("Buy-Widget, NOW!\tcheap_stuff", DEFAULT_DELIMITERS) == ["buy", "widget", "now", "cheap", "stuff"]
    assert tokenize("  ", DEFAULT_DELIMITERS) == []
