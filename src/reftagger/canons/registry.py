"""Canon registry: chapter and book names with alternate spellings.

Used only for name lookup by the citation parsers. The Quran table is
indexed by zero-based chapter index; the Bible table is keyed by book slug
(the id used by the verse endpoint and the translation coverage catalog).
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

# ============================================================================
# Quran
# ============================================================================

QURAN_CHAPTER_COUNT = 114

# Arabic chapter names, first entry is the display form
QURAN_CHAPTERS: list[list[str]] = [
    ["الفاتحة"],
    ["البقرة"],
    ["ال عمران"],
    ["النساء"],
    ["المائدة"],
    ["الانعام"],
    ["الاعراف"],
    ["الانفال"],
    ["التوبة"],
    ["يونس"],
    ["هود"],
    ["يوسف"],
    ["الرعد"],
    ["ابراهيم"],
    ["الحجر"],
    ["النحل"],
    ["الاسراء"],
    ["الكهف"],
    ["مريم"],
    ["طه"],
    ["الانبياء", "الأنبياء"],
    ["الحج"],
    ["المؤمنون"],
    ["النور"],
    ["الفرقان"],
    ["الشعراء"],
    ["النمل"],
    ["القصص"],
    ["العنكبوت"],
    ["الروم"],
    ["لقمان"],
    ["السجدة"],
    ["الاحزاب"],
    ["سبأ"],
    ["فاطر"],
    ["يس"],
    ["الصافات"],
    ["ص"],
    ["الزمر"],
    ["غافر"],
    ["فصلت"],
    ["الشورى"],
    ["الزخرف"],
    ["الدخان"],
    ["الجاثية"],
    ["الاحقاف"],
    ["محمد"],
    ["الفتح"],
    ["الحجرات"],
    ["ق"],
    ["الذاريات"],
    ["الطور"],
    ["النجم"],
    ["القمر"],
    ["الرحمن"],
    ["الواقعة"],
    ["الحديد"],
    ["المجادلة"],
    ["الحشر"],
    ["الممتحنة"],
    ["الصف"],
    ["الجمعة"],
    ["المنافقون"],
    ["التغابن"],
    ["الطلاق"],
    ["التحريم"],
    ["الملك"],
    ["القلم"],
    ["الحاقة"],
    ["المعارج"],
    ["نوح"],
    ["الجن"],
    ["المزمل"],
    ["المدثر"],
    ["القيامة"],
    ["الانسان"],
    ["المرسلات"],
    ["النبا"],
    ["النازعات"],
    ["عبس"],
    ["التكوير"],
    ["الانفطار"],
    ["المطففين"],
    ["الانشقاق"],
    ["البروج"],
    ["الطارق"],
    ["الاعلى"],
    ["الغاشية"],
    ["الفجر"],
    ["البلد"],
    ["الشمس"],
    ["الليل"],
    ["الضحى"],
    ["الانشراح"],
    ["التين"],
    ["العلق"],
    ["القدر"],
    ["البينة"],
    ["الزلزلة"],
    ["العاديات"],
    ["القارعة"],
    ["التكاثر"],
    ["العصر"],
    ["الهمزة"],
    ["الفيل"],
    ["قريش"],
    ["الماعون"],
    ["الكوثر"],
    ["الكافرون"],
    ["النصر"],
    ["المسد"],
    ["الاخلاص"],
    ["الفلق"],
    ["الناس"],
]


# ============================================================================
# Bible
# ============================================================================


@dataclass
class BibleBook:
    """A single book of the Bible canon."""

    slug: str
    name: str
    testament: str
    aliases: list[str] = field(default_factory=list)

    @property
    def names(self) -> list[str]:
        return [self.name] + self.aliases


_ROMAN = {1: "i", 2: "ii", 3: "iii"}


def _numbered(number: int, *names: str) -> list[str]:
    """Expand "Samuel" into "1 Samuel", "1Samuel", "I Samuel", ..."""
    expanded = []
    for name in names:
        expanded.append(f"{number} {name}")
        expanded.append(f"{number}{name}")
        expanded.append(f"{_ROMAN[number]} {name}")
    return expanded


def _book(slug: str, name: str, testament: str, *aliases: str) -> BibleBook:
    return BibleBook(slug=slug, name=name, testament=testament, aliases=list(aliases))


def _numbered_book(
    slug: str, number: int, name: str, testament: str, *short: str
) -> BibleBook:
    names = _numbered(number, name, *short)
    return BibleBook(slug=slug, name=names[0], testament=testament, aliases=names[1:])


OT = "old_testament"
NT = "new_testament"

BIBLE_BOOKS: list[BibleBook] = [
    _book("genesis", "Genesis", OT, "Gen", "Gn"),
    _book("exodus", "Exodus", OT, "Exod", "Exo", "Ex"),
    _book("leviticus", "Leviticus", OT, "Lev", "Lv"),
    _book("numbers", "Numbers", OT, "Num", "Nm"),
    _book("deuteronomy", "Deuteronomy", OT, "Deut", "Dt"),
    _book("joshua", "Joshua", OT, "Josh", "Jos"),
    _book("judges", "Judges", OT, "Judg", "Jdg"),
    _book("ruth", "Ruth", OT, "Rth"),
    _numbered_book("1samuel", 1, "Samuel", OT, "Sam", "Sm"),
    _numbered_book("2samuel", 2, "Samuel", OT, "Sam", "Sm"),
    _numbered_book("1kings", 1, "Kings", OT, "Kgs", "Ki"),
    _numbered_book("2kings", 2, "Kings", OT, "Kgs", "Ki"),
    _numbered_book("1chronicles", 1, "Chronicles", OT, "Chron", "Chr"),
    _numbered_book("2chronicles", 2, "Chronicles", OT, "Chron", "Chr"),
    _book("ezra", "Ezra", OT, "Ezr"),
    _book("nehemiah", "Nehemiah", OT, "Neh"),
    _book("esther", "Esther", OT, "Esth", "Est"),
    _book("job", "Job", OT, "Jb"),
    _book("psalms", "Psalms", OT, "Psalm", "Pss", "Psa", "Ps"),
    _book("proverbs", "Proverbs", OT, "Prov", "Prv", "Pr"),
    _book("ecclesiastes", "Ecclesiastes", OT, "Eccles", "Eccl", "Ecc", "Qoheleth"),
    _book(
        "song-of-songs",
        "Song of Songs",
        OT,
        "Song of Solomon",
        "Canticles",
        "Song",
    ),
    _book("isaiah", "Isaiah", OT, "Isa"),
    _book("jeremiah", "Jeremiah", OT, "Jer"),
    _book("lamentations", "Lamentations", OT, "Lam"),
    _book("ezekiel", "Ezekiel", OT, "Ezek", "Eze"),
    _book("daniel", "Daniel", OT, "Dan", "Dn"),
    _book("hosea", "Hosea", OT, "Hos"),
    _book("joel", "Joel", OT, "Jl"),
    _book("amos", "Amos", OT),
    _book("obadiah", "Obadiah", OT, "Obad", "Ob"),
    _book("jonah", "Jonah", OT, "Jon"),
    _book("micah", "Micah", OT, "Mic"),
    _book("nahum", "Nahum", OT, "Nah"),
    _book("habakkuk", "Habakkuk", OT, "Hab"),
    _book("zephaniah", "Zephaniah", OT, "Zeph", "Zep"),
    _book("haggai", "Haggai", OT, "Hag"),
    _book("zechariah", "Zechariah", OT, "Zech", "Zec"),
    _book("malachi", "Malachi", OT, "Mal"),
    _book("matthew", "Matthew", NT, "Matt", "Mat", "Mt"),
    _book("mark", "Mark", NT, "Mrk", "Mk"),
    _book("luke", "Luke", NT, "Luk", "Lk"),
    _book("john", "John", NT, "Jhn", "Jn"),
    _book("acts", "Acts", NT, "Act"),
    _book("romans", "Romans", NT, "Rom", "Rm"),
    _numbered_book("1corinthians", 1, "Corinthians", NT, "Cor", "Co"),
    _numbered_book("2corinthians", 2, "Corinthians", NT, "Cor", "Co"),
    _book("galatians", "Galatians", NT, "Gal"),
    _book("ephesians", "Ephesians", NT, "Eph"),
    _book("philippians", "Philippians", NT, "Phil", "Php"),
    _book("colossians", "Colossians", NT, "Col"),
    _numbered_book("1thessalonians", 1, "Thessalonians", NT, "Thess", "Th"),
    _numbered_book("2thessalonians", 2, "Thessalonians", NT, "Thess", "Th"),
    _numbered_book("1timothy", 1, "Timothy", NT, "Tim", "Ti"),
    _numbered_book("2timothy", 2, "Timothy", NT, "Tim", "Ti"),
    _book("titus", "Titus", NT, "Tit"),
    _book("philemon", "Philemon", NT, "Philem", "Phlm", "Phm"),
    _book("hebrews", "Hebrews", NT, "Heb"),
    _book("james", "James", NT, "Jas", "Jm"),
    _numbered_book("1peter", 1, "Peter", NT, "Pet", "Pt"),
    _numbered_book("2peter", 2, "Peter", NT, "Pet", "Pt"),
    _numbered_book("1john", 1, "John", NT, "Jn", "Jhn"),
    _numbered_book("2john", 2, "John", NT, "Jn", "Jhn"),
    _numbered_book("3john", 3, "John", NT, "Jn", "Jhn"),
    _book("jude", "Jude", NT, "Jud"),
    _book("revelation", "Revelation", NT, "Rev", "Rv", "Apocalypse"),
]

OLD_TESTAMENT = [b.slug for b in BIBLE_BOOKS if b.testament == OT]
NEW_TESTAMENT = [b.slug for b in BIBLE_BOOKS if b.testament == NT]


# ============================================================================
# Lookup
# ============================================================================

_WHITESPACE = re.compile(r"\s+")
_ALEF_VARIANTS = str.maketrans("أإآ", "ااا")


def normalize_name(name: str) -> str:
    """Normalize a chapter/book name for lookup.

    Lowercases, trims, collapses whitespace, drops a trailing period and
    folds hamza-carrying alef forms into a bare alef.
    """
    cleaned = _WHITESPACE.sub(" ", name.strip().lower()).rstrip(".")
    return cleaned.translate(_ALEF_VARIANTS)


_QURAN_LOOKUP: dict[str, int] = {
    normalize_name(synonym): index + 1
    for index, synonyms in enumerate(QURAN_CHAPTERS)
    for synonym in synonyms
}


def _build_bible_lookup() -> dict[str, str]:
    lookup = {}
    for book in BIBLE_BOOKS:
        for name in book.names:
            key = normalize_name(name)
            lookup[key] = book.slug
            lookup[key.replace(" ", "")] = book.slug
    return lookup


_BIBLE_LOOKUP = _build_bible_lookup()
_BIBLE_BY_SLUG: dict[str, BibleBook] = {b.slug: b for b in BIBLE_BOOKS}


def quran_chapter_number(name: str) -> int | None:
    """Return the 1-based chapter number for an Arabic chapter name."""
    return _QURAN_LOOKUP.get(normalize_name(name))


def quran_chapter_name(number: int) -> str | None:
    """Return the display name for a 1-based chapter number."""
    if 1 <= number <= QURAN_CHAPTER_COUNT:
        return QURAN_CHAPTERS[number - 1][0]
    return None


def bible_book_slug(name: str) -> str | None:
    """Return the book slug for a name or abbreviation ("1 Cor" -> "1corinthians")."""
    key = normalize_name(name)
    return _BIBLE_LOOKUP.get(key) or _BIBLE_LOOKUP.get(key.replace(" ", ""))


def bible_book(slug: str) -> BibleBook | None:
    return _BIBLE_BY_SLUG.get(slug)


def _alternation(names: list[str], alef_insensitive: bool = False) -> str:
    """Build a regex alternation, longest names first so "1 John" beats "John"."""
    parts = []
    for name in sorted(set(names), key=len, reverse=True):
        pattern = re.escape(name).replace(r"\ ", r"\s+")
        if alef_insensitive:
            pattern = pattern.replace("ا", "[اأإآ]")
        parts.append(pattern)
    return "|".join(parts)


def quran_name_pattern() -> str:
    return _alternation(
        [synonym for synonyms in QURAN_CHAPTERS for synonym in synonyms],
        alef_insensitive=True,
    )


def bible_name_pattern() -> str:
    return _alternation([name for book in BIBLE_BOOKS for name in book.names])
