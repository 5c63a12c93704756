"""Citation tagging for HTML documents.

The tagger scans every eligible text node, finds Quran and Bible
citations, and replaces each matched run with an annotation anchor::

    <a href="..." target="_blank" class="alkotob-ayah"
       data-text="John 3:16" data-type="bible" data-book="john"
       data-chapter="3" data-verses="16" data-version="injil"
       data-permalink="...">John 3:16</a>

Overlapping matches are settled by a greedy pass over the citations in
descending start offset: a citation is realized only if it ends before
the start of the last realized one, so the latest match wins and the
earlier overlapping one is dropped. Working from the end of the node
backwards also keeps every remaining offset valid.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from bs4 import BeautifulSoup, NavigableString, Tag

from reftagger.canons.base import Citation, CitationSource
from reftagger.canons.bible import BibleCanon
from reftagger.canons.quran import QuranCanon
from reftagger.config import Settings
from reftagger.tagging.nodes import (
    ANNOTATION_CLASS,
    ANNOTATION_SELECTOR,
    ORIGINAL_SRCDOC,
    TextNodeIterator,
)

logger = logging.getLogger(__name__)

PARSER = "html.parser"


class Reftagger:
    """Tags citations in documents and removes the tags again.

    Usage:
        tagger = Reftagger(Settings(versions=["injil", "quran"]))
        html = tagger.tag_html("<p>See John 3:16.</p>")
        original = tagger.destroy_html(html)
    """

    def __init__(
        self,
        settings: Settings | None = None,
        sources: Iterable[CitationSource] | None = None,
    ):
        self.settings = settings or Settings()
        if sources is None:
            sources = [
                QuranCanon(site_url=self.settings.site_url),
                BibleCanon(site_url=self.settings.site_url),
            ]
        self.sources: dict[str, CitationSource] = {s.type: s for s in sources}
        self.document: BeautifulSoup | None = None

    def source(self, canon_type: str) -> CitationSource:
        try:
            return self.sources[canon_type]
        except KeyError:
            raise ValueError(f"No citation source for canon '{canon_type}'")

    def iterator(self, ctx: Tag) -> TextNodeIterator:
        return TextNodeIterator(
            ctx, iframes=self.settings.iframes, exclude=self.settings.exclude
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def load(self, markup: str) -> BeautifulSoup:
        """Parse a document, tagging it right away if on_page_load is set."""
        self.document = BeautifulSoup(markup, PARSER)
        if self.settings.on_page_load:
            self.tag(self.document)
        return self.document

    def find_citations(self, text: str) -> list[Citation]:
        """Parse and resolve every citation in text, latest match first."""
        citations = []
        for source in self.sources.values():
            for citation in source.parse(text):
                citations.append(source.resolve(citation, self.settings.versions))

        # Longer match first on a shared start
        citations.sort(key=lambda c: (c.order, len(c.text)), reverse=True)
        return citations

    def tag(self, ctx: Tag | None = None) -> int:
        """Wrap every citation under ctx in an annotation anchor.

        Text already inside an annotation is skipped, so tagging twice
        leaves the document unchanged.

        Returns:
            Number of annotations inserted
        """
        ctx = self._context(ctx)
        iterator = self.iterator(ctx)

        count = 0
        for node in iterator.text_nodes():
            citations = self.find_citations(str(node))
            if citations:
                count += self._wrap_citations(node, citations)

        for frame in iterator.frames():
            inner = BeautifulSoup(frame["srcdoc"], PARSER)
            inserted = self.tag(inner)
            if inserted:
                # Restored verbatim by destroy()
                if not frame.has_attr(ORIGINAL_SRCDOC):
                    frame[ORIGINAL_SRCDOC] = frame["srcdoc"]
                frame["srcdoc"] = str(inner)
                count += inserted

        logger.debug(f"Tagged {count} citation(s)")
        return count

    def destroy(self, ctx: Tag | None = None) -> int:
        """Replace every annotation under ctx with its plain text.

        Returns:
            Number of annotations removed
        """
        ctx = self._context(ctx)

        anchors = ctx.select(ANNOTATION_SELECTOR)
        for anchor in anchors:
            anchor.replace_with(anchor.get_text())
        if anchors:
            # Rejoin the split text runs
            ctx.smooth()

        count = len(anchors)
        for frame in self.iterator(ctx).frames():
            inner = BeautifulSoup(frame["srcdoc"], PARSER)
            removed = self.destroy(inner)
            if removed:
                frame["srcdoc"] = frame.attrs.pop(ORIGINAL_SRCDOC, None) or str(inner)
                count += removed

        return count

    def tag_html(self, markup: str) -> str:
        soup = BeautifulSoup(markup, PARSER)
        self.tag(soup)
        return str(soup)

    def destroy_html(self, markup: str) -> str:
        soup = BeautifulSoup(markup, PARSER)
        self.destroy(soup)
        return str(soup)

    # ------------------------------------------------------------------
    # Wrapping
    # ------------------------------------------------------------------

    def _context(self, ctx: Tag | None) -> Tag:
        if ctx is not None:
            return ctx
        if self.document is None:
            raise ValueError("No document loaded; pass a context or call load()")
        return self.document

    def _wrap_citations(self, node: NavigableString, citations: list[Citation]) -> int:
        """Replace node with text runs and anchors.

        Args:
            node: Text node the citations were parsed from
            citations: Citations sorted by descending start offset

        Returns:
            Number of anchors inserted
        """
        text = str(node)
        builder = self._builder(node)

        pieces: list = []
        boundary = len(text)
        inserted = 0

        for citation in citations:
            if citation.end > boundary or text[citation.order : citation.end] != citation.text:
                logger.debug(
                    f"Skipping overlapping citation {citation.text!r} at {citation.order}"
                )
                continue

            tail = text[citation.end : boundary]
            if tail:
                pieces.append(NavigableString(tail))
            pieces.append(self._build_anchor(builder, citation))
            boundary = citation.order
            inserted += 1

        if not inserted:
            return 0

        head = text[:boundary]
        if head:
            pieces.append(NavigableString(head))
        pieces.reverse()

        node.replace_with(*pieces)
        return inserted

    @staticmethod
    def _builder(node: NavigableString) -> BeautifulSoup:
        """The document that owns node, used as the tag factory."""
        for parent in node.parents:
            if isinstance(parent, BeautifulSoup):
                return parent
        return BeautifulSoup("", PARSER)

    def _build_anchor(self, builder: BeautifulSoup, citation: Citation) -> Tag:
        permalink = self.source(citation.type).permalink(citation)

        anchor = builder.new_tag("a")
        anchor["href"] = permalink
        anchor["target"] = "_blank"
        anchor["class"] = [ANNOTATION_CLASS]
        for name, value in citation.to_attributes().items():
            anchor[name] = value
        anchor["data-permalink"] = permalink
        anchor.string = citation.text
        return anchor
