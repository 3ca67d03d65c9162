import pytest

from focus_scout.utils import canonicalize_scheme, is_valid_url, resolve_link


def test_scheme_variants_share_a_key():
    assert canonicalize_scheme("http://example.com/x") == canonicalize_scheme("https://example.com/x")
    assert canonicalize_scheme("HTTP://example.com/x") == "https://example.com/x"


def test_canonicalize_is_idempotent():
    once = canonicalize_scheme("http://example.com/x")
    assert canonicalize_scheme(once) == once
    assert canonicalize_scheme("ftp://example.com/") == "ftp://example.com/"


@pytest.mark.parametrize(
    "url,valid",
    [
        ("https://a.example/", True),
        ("http://a.example", True),
        ("mailto:x@a.example", False),
        ("/relative/path", False),
        ("http://[::1", False),
    ],
)
def test_is_valid_url(url, valid):
    assert is_valid_url(url) is valid


def test_resolve_link():
    assert resolve_link("https://a.example/a/b", "c#frag") == "https://a.example/a/c"
    assert resolve_link("https://a.example/", "javascript:void(0)") is None
    assert resolve_link("https://a.example/", "  /x  ") == "https://a.example/x"
