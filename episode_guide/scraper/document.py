from __future__ import annotations

import re
from typing import Any, Protocol

from lxml import etree

from episode_guide.errors import FetchError
from episode_guide.utils.network import NetworkHandler

_XML_DECLARATION = re.compile(r"\A\s*<\?xml[^>]*\?>")

# Parsed documents and nodes are lxml elements; kept loose for fakes.
Document = Any
Node = Any


class DocumentFetcher(Protocol):
    def fetch_document(self, url: str) -> Document:
        """Fetch ``url`` and return a queryable document, or raise FetchError."""
        ...


class StructuredQuery(Protocol):
    def select_nodes(self, query: str, node: Node) -> list[Node]: ...

    def select_string(self, query: str, node: Node) -> str: ...

    def get_attribute(self, name: str, node: Node) -> str: ...

    def get_text_content(self, node: Node) -> str: ...


class LxmlQuery:
    """XPath 1.0 queries over lxml trees."""

    def select_nodes(self, query: str, node: Node) -> list[Node]:
        result = node.xpath(query)
        if not isinstance(result, list):
            return []
        return [n for n in result if isinstance(n, etree._Element)]

    def select_string(self, query: str, node: Node) -> str:
        """String value of the first node matching ``query``, stripped; "" when nothing matches."""
        value = node.xpath(f"string({query})")
        return str(value).strip()

    def get_attribute(self, name: str, node: Node) -> str:
        return str(node.get(name) or "")

    def get_text_content(self, node: Node) -> str:
        return "".join(node.itertext()).strip()


class HtmlDocumentFetcher:
    """DocumentFetcher backed by NetworkHandler + lxml's HTML parser."""

    def __init__(self, network: NetworkHandler | None = None):
        self.network = network or NetworkHandler()

    def fetch_document(self, url: str) -> Document:
        html = self.network.get(url)
        return parse_html(html, url=url)


def parse_html(html: str | bytes, url: str | None = None) -> Document:
    if isinstance(html, str):
        # Already decoded text; lxml rejects str input that declares an encoding
        html = _XML_DECLARATION.sub("", html, count=1)
    if not html or not html.strip():
        raise FetchError(f"Empty document: {url}", url=url)
    try:
        root = etree.HTML(html)
    except (etree.ParserError, ValueError) as e:
        raise FetchError(f"Unparsable document: {url}: {e}", url=url) from e
    if root is None:
        raise FetchError(f"Unparsable document: {url}", url=url)
    return root
