"""Shared canon model: citations, translations and version resolution.

Each canon (Quran, Bible) is a ``CitationSource``: it parses citations out
of raw text, resolves the best translation for a citation against a
priority list, builds permalinks, and knows how to query and render its
verses.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path

import yaml

from reftagger.canons import registry
from reftagger.canons.verses import format_verse_spec, parse_verse_spec
from reftagger.engine.excerpt import DEFAULT_BUDGET, render_excerpt
from reftagger.engine.query import (
    CANON_TYPES,
    RESULT_PATHS,
    QueryDescriptor,
    UnknownCanonError,
    build_query,
)

logger = logging.getLogger(__name__)

DEFAULT_SITE_URL = "https://alkotob.org"
TRANSLATIONS_PATH = Path(__file__).parent / "data" / "translations.yaml"


class MissingTranslationsError(Exception):
    """Raised when a canon is asked to resolve versions without translations."""

    pass


# ============================================================================
# Data model
# ============================================================================


@dataclass
class Citation:
    """A single citation located in a block of text."""

    type: str
    chapter: int
    verses: list[tuple[int, int | None]]
    text: str
    order: int = 0
    book: str | None = None
    verse_spec: str = ""
    version: str | None = None
    resolved: bool = False

    def __post_init__(self):
        if not self.verse_spec:
            self.verse_spec = format_verse_spec(self.verses)

    @property
    def end(self) -> int:
        """Offset just past the matched text."""
        return self.order + len(self.text)

    def to_attributes(self) -> dict[str, str]:
        """Serialize to the data-* attributes carried by an annotation."""
        attrs = {
            "data-text": self.text,
            "data-type": self.type,
            "data-chapter": str(self.chapter),
            "data-verses": self.verse_spec,
        }
        if self.book is not None:
            attrs["data-book"] = self.book
        if self.version is not None:
            attrs["data-version"] = self.version
        return attrs

    @classmethod
    def from_attributes(cls, attrs: Mapping) -> "Citation":
        """Rebuild a resolved citation from annotation attributes.

        The stored data-version is the resolution made at tag time; a
        missing data-version means no translation covered the citation.
        """
        verse_spec = attrs.get("data-verses", "")
        return cls(
            type=attrs["data-type"],
            book=attrs.get("data-book") or None,
            chapter=int(attrs["data-chapter"]),
            verses=parse_verse_spec(verse_spec),
            text=attrs.get("data-text", ""),
            verse_spec=verse_spec,
            version=attrs.get("data-version") or None,
            resolved=True,
        )


@dataclass
class Translation:
    """One edition of a canon with its chapter/book coverage.

    ``chapters`` is keyed by zero-based chapter index, ``books`` by book
    slug. A list is accepted for either table and indexed by position.
    """

    abbreviation: str
    name: str = ""
    language: str = ""
    chapters: dict = field(default_factory=dict)
    books: dict = field(default_factory=dict)

    def __post_init__(self):
        if isinstance(self.chapters, (list, tuple)):
            self.chapters = dict(enumerate(self.chapters))
        if isinstance(self.books, (list, tuple)):
            self.books = dict(enumerate(self.books))

    def has_chapter(self, key) -> bool:
        return bool(self.chapters.get(key))

    def has_book(self, key) -> bool:
        return bool(self.books.get(key))


def coverage_key(key):
    """Shift a numeric-looking key from 1-based to the 0-based coverage index."""
    if isinstance(key, bool):
        return key
    if isinstance(key, int):
        return key - 1
    if isinstance(key, str) and key.strip().isdecimal():
        return int(key) - 1
    return key


def _expand_books(spec) -> dict[str, bool]:
    groups = {
        "all": registry.OLD_TESTAMENT + registry.NEW_TESTAMENT,
        "old_testament": registry.OLD_TESTAMENT,
        "new_testament": registry.NEW_TESTAMENT,
    }
    entries = [spec] if isinstance(spec, str) else list(spec or [])
    books: dict[str, bool] = {}
    for entry in entries:
        for slug in groups.get(entry, [entry]):
            books[slug] = True
    return books


def _expand_chapters(spec) -> dict[int, bool]:
    if spec == "all":
        return {i: True for i in range(registry.QURAN_CHAPTER_COUNT)}
    return {int(i): True for i in spec or []}


def load_translations(canon_type: str, path: Path | None = None) -> list[Translation]:
    """Load the translation coverage catalog for one canon.

    Args:
        canon_type: "quran" or "bible"
        path: Catalog path (defaults to the packaged translations.yaml)

    Returns:
        Translations in catalog order
    """
    if canon_type not in CANON_TYPES:
        raise UnknownCanonError(f"Unknown canon type: '{canon_type}'")

    catalog_path = path or TRANSLATIONS_PATH
    with open(catalog_path, encoding="utf-8") as f:
        catalog = yaml.safe_load(f) or {}

    translations = []
    for entry in catalog.get(canon_type, []):
        translations.append(
            Translation(
                abbreviation=entry["abbreviation"],
                name=entry.get("name", ""),
                language=entry.get("language", ""),
                chapters=_expand_chapters(entry.get("chapters")),
                books=_expand_books(entry.get("books")),
            )
        )
    return translations


# ============================================================================
# Canon capability
# ============================================================================


class CitationSource(ABC):
    """A canon that can locate, resolve, query and render its citations."""

    type: str = ""

    def __init__(
        self,
        translations: Iterable[Translation] | None = None,
        site_url: str = DEFAULT_SITE_URL,
    ):
        if translations is None:
            translations = load_translations(self.type)
        self.translations = list(translations)
        self.site_url = site_url.rstrip("/")

    @abstractmethod
    def parse(self, text: str) -> Iterator[Citation]:
        """Yield every citation of this canon found in text."""

    @abstractmethod
    def version_key(self, citation: Citation):
        """Key used to look the citation up in translation coverage."""

    @abstractmethod
    def permalink(self, citation: Citation) -> str:
        """Reading URL for a resolved citation."""

    @abstractmethod
    def query_variables(self, citation: Citation) -> dict:
        """Variables for the chapter query of a resolved citation."""

    def resolve_version(self, key, desired: Iterable[str] = ()) -> str | None:
        """Return the first desired translation that covers key.

        Numeric keys (chapter numbers) are 1-based and shifted to the
        0-based coverage index; other keys (book slugs) are used as-is.

        Raises:
            MissingTranslationsError: If this canon has no translations
        """
        if not self.translations:
            raise MissingTranslationsError(
                f"No translations configured for canon '{self.type}'"
            )

        key = coverage_key(key)
        available = {t.abbreviation: t for t in self.translations}

        for abbreviation in desired:
            translation = available.get(abbreviation)
            if translation is None:
                continue
            if translation.has_chapter(key):
                return translation.abbreviation
            if translation.has_book(key):
                return translation.abbreviation

        return None

    def resolve(self, citation: Citation, desired: Iterable[str] = ()) -> Citation:
        """Return the citation with its version resolved (once)."""
        if citation.resolved:
            return citation
        version = self.resolve_version(self.version_key(citation), desired)
        if version is None:
            logger.debug(f"No translation covers {citation.text!r}")
        return replace(citation, version=version, resolved=True)

    def build_query(self, verses) -> QueryDescriptor:
        return build_query(self.type, verses)

    def extract_chapter(self, data: Mapping | None) -> dict | None:
        """Walk a response's data down to the chapter payload."""
        node = data
        for key in RESULT_PATHS[self.type]:
            if not isinstance(node, Mapping):
                return None
            node = node.get(key)
        return node or None

    def render(self, chapter: dict | None, budget: int = DEFAULT_BUDGET) -> str | None:
        return render_excerpt(chapter, budget)
