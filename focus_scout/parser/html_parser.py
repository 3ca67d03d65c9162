# === FILE: focus_scout/parser/html_parser.py ===
"""HTML document model for FocusScout.

:func:`parse_html` turns a fetched body into a :class:`ParsedPage` which the
relevance scorer and the scheduler consume:

* nodes — element and text nodes in document order (depth-first), the way a
  DOM walker visits them. Comments, doctype and script/style payloads are not
  text nodes.
* text  — whole-page plain text (the text nodes joined with spaces).
* links — every ``<a href>`` with its raw href, its absolute target and its
  anchor text.

Positions are computed once per page, so looking up where a link sits in the
node sequence is a dictionary hit rather than a re-scan of the document.
"""
from __future__ import annotations

import re
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Union

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PageElement, Tag

from focus_scout.utils import resolve_link

__all__: Sequence[str] = ("Link", "ParsedPage", "parse_html", "tokenize", "is_text_node")


@lru_cache(maxsize=16)
def _splitter(delimiters: str) -> re.Pattern[str]:
    return re.compile("[" + "".join(re.escape(ch) for ch in delimiters) + "]+")


def tokenize(text: str, delimiters: str) -> list[str]:
    """Split *text* on any character of *delimiters*; lower-case, no empties."""
    return [tok.lower() for tok in _splitter(delimiters).split(text) if tok]


def is_text_node(node: PageElement) -> bool:
    # Comment, Doctype, Script, Stylesheet... are NavigableString subclasses
    return type(node) is NavigableString


def _is_node(node: PageElement) -> bool:
    return isinstance(node, Tag) or is_text_node(node)


@dataclass(slots=True)
class Link:
    """One outbound hyperlink of a page."""

    element: Tag
    href: str
    target: Optional[str]
    anchor_text: str


class ParsedPage:
    """Parsed document of a fetched page."""

    def __init__(self, url: str, soup: BeautifulSoup, raw: bytes = b"") -> None:
        self.url = url
        self.raw = raw
        self.nodes: list[PageElement] = [n for n in soup.descendants if _is_node(n)]
        self._positions: dict[int, int] = {id(n): i for i, n in enumerate(self.nodes)}
        self.text = " ".join(str(n) for n in self.nodes if is_text_node(n))
        self._page_tokens: dict[str, frozenset[str]] = {}

        self.links: list[Link] = []
        for tag in soup.find_all("a", href=True):
            href = tag.get("href")
            if not isinstance(href, str):
                continue
            self.links.append(
                Link(
                    element=tag,
                    href=href,
                    target=resolve_link(url, href),
                    anchor_text=tag.get_text(),
                )
            )

    # Positions ----------------------------------------------------------------
    def index_of(self, node: PageElement) -> int:
        try:
            return self._positions[id(node)]
        except KeyError:
            raise ValueError("node does not belong to this page") from None

    def subtree_end(self, index: int) -> int:
        """Index of the first node after the subtree rooted at *index*."""
        node = self.nodes[index]
        if not isinstance(node, Tag):
            return index + 1
        return index + 1 + sum(1 for d in node.descendants if _is_node(d))

    def strings_after(self, index: int) -> Iterator[str]:
        """Text node contents from *index* on, in document order."""
        for node in self.nodes[index:]:
            if is_text_node(node):
                yield str(node)

    def strings_before(self, index: int) -> Iterator[str]:
        """Text node contents before *index*, nearest first."""
        for i in range(index - 1, -1, -1):
            node = self.nodes[i]
            if is_text_node(node):
                yield str(node)

    def page_tokens(self, delimiters: str) -> frozenset[str]:
        tokens = self._page_tokens.get(delimiters)
        if tokens is None:
            tokens = frozenset(tokenize(self.text, delimiters))
            self._page_tokens[delimiters] = tokens
        return tokens

    def __repr__(self) -> str:
        return f"<ParsedPage {self.url} nodes={len(self.nodes)} links={len(self.links)}>"


def parse_html(html: Union[str, bytes], url: str, raw: Optional[bytes] = None) -> ParsedPage:
    """Parse markup fetched from *url*.

    Parameters
    ----------
    html
        Decoded markup (or bytes, in which case BeautifulSoup sniffs the
        encoding).
    url
        Address the page was fetched from; relative links resolve against it.
    raw
        Body bytes to persist. Defaults to *html* encoded as UTF-8.
    """
    if raw is None:
        raw = html if isinstance(html, bytes) else html.encode("utf-8")
    soup = BeautifulSoup(html, "html.parser")
    return ParsedPage(url, soup, raw)
