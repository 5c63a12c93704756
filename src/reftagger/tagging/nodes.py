"""Text node supply for the tagger.

Walks a BeautifulSoup tree and yields the text nodes eligible for
tagging. A node is rejected when its containing element matches one of
the exclude selectors (or a default exclusion), or when it already sits
inside an annotation.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from bs4 import BeautifulSoup, NavigableString, Tag

ANNOTATION_CLASS = "alkotob-ayah"
ANNOTATION_SELECTOR = f"a.{ANNOTATION_CLASS}"

# Untagged srcdoc of an iframe whose document was tagged
ORIGINAL_SRCDOC = "data-reftagger-srcdoc"

# Elements whose own text is never tagged (their children still are)
DEFAULT_EXCLUDES = ("script", "style", "title", "head", "html")


class TextNodeIterator:
    """Lists eligible text nodes and embedded frames under a context."""

    def __init__(
        self,
        ctx: Tag,
        iframes: bool = True,
        exclude: Iterable[str] = (),
    ):
        self.ctx = ctx
        self.iframes = iframes
        self.exclude = list(exclude) + list(DEFAULT_EXCLUDES)

    @staticmethod
    def matches(el, selectors: Iterable[str]) -> bool:
        """Check if an element matches any selector (tag names are selectors too)."""
        if not isinstance(el, Tag) or isinstance(el, BeautifulSoup):
            return False
        return any(el.css.match(selector) for selector in selectors)

    def accepts(self, node: NavigableString) -> bool:
        parent = node.parent
        if self.matches(parent, self.exclude):
            return False
        return node.find_parent("a", class_=ANNOTATION_CLASS) is None

    def __iter__(self) -> Iterator[NavigableString]:
        return iter(self.text_nodes())

    def text_nodes(self) -> list[NavigableString]:
        """Collect eligible text nodes up front so callers can mutate the tree."""
        nodes = []
        for node in self.ctx.find_all(string=True):
            # Skip comments, doctypes, CDATA and other string subclasses
            if type(node) is not NavigableString:
                continue
            if self.accepts(node):
                nodes.append(node)
        return nodes

    def frames(self) -> list[Tag]:
        """Embedded <iframe srcdoc> documents, when frame recursion is on."""
        if not self.iframes:
            return []
        return self.ctx.find_all("iframe", srcdoc=True)
