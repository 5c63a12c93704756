"""Bible canon: 66 books, coverage is looked up by book."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from urllib.parse import quote

from reftagger.canons import registry
from reftagger.canons.base import Citation, CitationSource
from reftagger.canons.verses import VERSE_SPEC_PATTERN, VerseSpecError, parse_verse_spec
from reftagger.engine.query import BIBLE

logger = logging.getLogger(__name__)

# "John 3:16", "1 Cor. 13:4-7", "Ps 23:1,4"
CITATION_PATTERN = re.compile(
    rf"(?<!\w)(?P<book>{registry.bible_name_pattern()})\.?\s*"
    rf"(?P<chapter>\d{{1,3}})\s*:\s*(?P<verses>{VERSE_SPEC_PATTERN})(?!\d)",
    re.IGNORECASE,
)


class BibleCanon(CitationSource):
    """Citations to the Bible."""

    type = BIBLE

    def parse(self, text: str) -> Iterator[Citation]:
        for match in CITATION_PATTERN.finditer(text):
            book = registry.bible_book_slug(match.group("book"))
            chapter = int(match.group("chapter"))
            if book is None or chapter < 1:
                continue
            try:
                verses = parse_verse_spec(match.group("verses"))
            except VerseSpecError as e:
                logger.debug(f"Ignoring {match.group(0)!r}: {e}")
                continue
            yield Citation(
                type=self.type,
                book=book,
                chapter=chapter,
                verses=verses,
                text=match.group(0),
                order=match.start(),
            )

    def version_key(self, citation: Citation) -> str | None:
        return citation.book

    def permalink(self, citation: Citation) -> str:
        version = citation.version or self.type
        verses = quote(citation.verse_spec, safe="-,")
        return f"{self.site_url}/{version}/{citation.book}/{citation.chapter}/{verses}"

    def query_variables(self, citation: Citation) -> dict:
        return {
            "version": citation.version,
            "chapter": citation.chapter,
            "book": citation.book,
        }
