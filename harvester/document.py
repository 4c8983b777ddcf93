"""
Parsed HTML document access backed by BeautifulSoup.

The extractor only talks to `ParsedDocument` and `Node`, so swapping the
HTML parser touches this module alone.
"""
from typing import List, Optional

from bs4 import BeautifulSoup, Tag


HTML_PARSER = "html.parser"


class Node:
    """A single element of a parsed document."""

    def __init__(self, tag: Tag):
        self._tag = tag

    def text(self) -> str:
        return self._tag.get_text()

    def attr(self, name: str) -> Optional[str]:
        value = self._tag.get(name)
        if isinstance(value, list):  # multi-valued attributes such as class
            return " ".join(value)
        return value

    def html(self) -> str:
        """Inner markup of the element."""
        return self._tag.decode_contents()

    def select_first(self, selector: str) -> Optional["Node"]:
        found = self._tag.select_one(selector)
        return Node(found) if found is not None else None

    def select_all(self, selector: str) -> List["Node"]:
        return [Node(t) for t in self._tag.select(selector)]


class ParsedDocument:
    """A parsed listing page plus the URL it came from."""

    def __init__(self, soup: BeautifulSoup, base_url: Optional[str] = None):
        self._soup = soup
        self.base_url = base_url

    def select_first(self, selector: str) -> Optional[Node]:
        found = self._soup.select_one(selector)
        return Node(found) if found is not None else None

    def select_all(self, selector: str) -> List[Node]:
        return [Node(t) for t in self._soup.select(selector)]

    def html(self) -> str:
        return self._soup.decode()


def parse_document(markup: str, base_url: Optional[str] = None) -> ParsedDocument:
    """Parse raw HTML into a ParsedDocument."""
    return ParsedDocument(BeautifulSoup(markup or "", HTML_PARSER), base_url=base_url)
