"""Canons: citation parsing, translation coverage and version resolution.

Provides:
- Citation / Translation data model
- CitationSource capability with QuranCanon and BibleCanon
- Packaged translation coverage catalog
"""

from __future__ import annotations

from reftagger.canons.base import (
    Citation,
    CitationSource,
    MissingTranslationsError,
    Translation,
    load_translations,
)
from reftagger.canons.bible import BibleCanon
from reftagger.canons.quran import QuranCanon

__all__ = [
    "BibleCanon",
    "Citation",
    "CitationSource",
    "MissingTranslationsError",
    "QuranCanon",
    "Translation",
    "load_translations",
]
