"""Quran canon: a single book of 114 chapters."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from urllib.parse import quote

from reftagger.canons import registry
from reftagger.canons.base import Citation, CitationSource
from reftagger.canons.verses import VERSE_SPEC_PATTERN, VerseSpecError, parse_verse_spec
from reftagger.engine.query import QURAN

logger = logging.getLogger(__name__)

# "Quran 2:255", "Qur'an 2:255-257", "Koran 1:1", "Surah 36:1"
ENGLISH_PATTERN = re.compile(
    rf"(?<!\w)(?:Qur['’]?an|Koran|Surah?)\s*(?P<chapter>\d{{1,3}})\s*:\s*"
    rf"(?P<verses>{VERSE_SPEC_PATTERN})(?!\d)",
    re.IGNORECASE,
)

# "سورة البقرة 255" or "البقرة: 255"
ARABIC_PATTERN = re.compile(
    rf"(?<!\w)(?:سورة\s+(?P<named>{registry.quran_name_pattern()})\s*:?\s*"
    rf"|(?P<bare>{registry.quran_name_pattern()})\s*:\s*)"
    rf"(?P<verses>{VERSE_SPEC_PATTERN})(?!\d)"
)


class QuranCanon(CitationSource):
    """Citations to the Quran; coverage is looked up by chapter."""

    type = QURAN

    def parse(self, text: str) -> Iterator[Citation]:
        for match in ENGLISH_PATTERN.finditer(text):
            citation = self._citation(match, int(match.group("chapter")))
            if citation:
                yield citation

        for match in ARABIC_PATTERN.finditer(text):
            name = match.group("named") or match.group("bare")
            chapter = registry.quran_chapter_number(name)
            if chapter is None:
                continue
            citation = self._citation(match, chapter)
            if citation:
                yield citation

    def _citation(self, match: re.Match, chapter: int) -> Citation | None:
        if not 1 <= chapter <= registry.QURAN_CHAPTER_COUNT:
            logger.debug(f"Ignoring out-of-range chapter in {match.group(0)!r}")
            return None
        try:
            verses = parse_verse_spec(match.group("verses"))
        except VerseSpecError as e:
            logger.debug(f"Ignoring {match.group(0)!r}: {e}")
            return None
        return Citation(
            type=self.type,
            chapter=chapter,
            verses=verses,
            text=match.group(0),
            order=match.start(),
        )

    def version_key(self, citation: Citation) -> int:
        return citation.chapter

    def permalink(self, citation: Citation) -> str:
        version = citation.version or self.type
        verses = quote(citation.verse_spec, safe="-,")
        return f"{self.site_url}/{version}/{citation.chapter}/{verses}"

    def query_variables(self, citation: Citation) -> dict:
        return {"version": citation.version, "chapter": citation.chapter}
