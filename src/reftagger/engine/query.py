"""GraphQL query building for verse excerpts."""

from __future__ import annotations

from dataclasses import dataclass, field

QURAN = "quran"
BIBLE = "bible"
CANON_TYPES = (QURAN, BIBLE)

# Path from the response "data" object down to the chapter payload
RESULT_PATHS = {
    QURAN: ("quran", "chapter"),
    BIBLE: ("bible", "book", "chapter"),
}


class UnknownCanonError(ValueError):
    """Raised for a canon type other than "quran" or "bible"."""

    pass


@dataclass(frozen=True)
class VerseSelection:
    """One aliased verses sub-request within a chapter."""

    start: int
    end: int | None = None

    @property
    def alias(self) -> str:
        return f"verses{self.start}"

    @property
    def limit(self) -> int | None:
        return None if self.end is not None else 1

    @property
    def arguments(self) -> dict[str, int]:
        if self.end is not None:
            return {"start": self.start, "end": self.end}
        return {"start": self.start, "limit": 1}

    def to_graphql(self) -> str:
        args = ", ".join(f"{k}: {v}" for k, v in self.arguments.items())
        return f"{self.alias}: verses({args}) {{\n  number\n  text\n}}"


@dataclass(frozen=True)
class QueryDescriptor:
    """A built query: the GraphQL document plus what it asks for."""

    canon_type: str
    document: str
    selections: tuple[VerseSelection, ...] = field(default_factory=tuple)

    @property
    def result_path(self) -> tuple[str, ...]:
        return RESULT_PATHS[self.canon_type]

    @property
    def variable_names(self) -> tuple[str, ...]:
        if self.canon_type == BIBLE:
            return ("version", "chapter", "book")
        return ("version", "chapter")

    def selection(self, start: int) -> VerseSelection | None:
        for selection in self.selections:
            if selection.start == start:
                return selection
        return None

    def __str__(self) -> str:
        return self.document


def _selections(verses) -> tuple[VerseSelection, ...]:
    """One selection per start verse; the widest range wins on a shared start."""
    by_start: dict[int, VerseSelection] = {}
    for start, end in verses:
        start = int(start)
        end = int(end) if end is not None else None
        current = by_start.get(start)
        if current is None or (end is not None and (current.end or start) < end):
            by_start[start] = VerseSelection(start=start, end=end)
    return tuple(by_start.values())


def _indent(block: str, depth: int) -> str:
    pad = "  " * depth
    return "\n".join(pad + line for line in block.splitlines())


def build_query(canon_type: str, verses) -> QueryDescriptor:
    """Build the chapter query for a list of (start, end | None) verse ranges.

    Ranges with an end become ``verses(start: s, end: e)``; single verses
    become ``verses(start: s, limit: 1)``. Each sub-request is aliased
    ``verses{start}`` so disjoint ranges of one chapter share a request.

    Args:
        canon_type: "quran" or "bible"
        verses: Iterable of (start, end) tuples, end None for a single verse

    Returns:
        QueryDescriptor with the GraphQL document and its selections

    Raises:
        UnknownCanonError: For any other canon type
    """
    if canon_type not in CANON_TYPES:
        raise UnknownCanonError(f"Unknown canon type: '{canon_type}'")

    selections = _selections(verses)
    verses_query = "\n".join(s.to_graphql() for s in selections)

    if canon_type == QURAN:
        document = (
            "query ($version: String, $chapter: Int!) {\n"
            "  quran(id: $version) {\n"
            "    name\n"
            "    direction\n"
            "    language\n"
            "    chapter(id: $chapter) {\n"
            "      id\n"
            "      name\n"
            f"{_indent(verses_query, 3)}\n"
            "    }\n"
            "  }\n"
            "}"
        )
    else:
        document = (
            "query ($version: String, $chapter: Int!, $book: String!) {\n"
            "  bible(id: $version) {\n"
            "    name\n"
            "    direction\n"
            "    language\n"
            "    book(id: $book) {\n"
            "      name\n"
            "      chapter(id: $chapter) {\n"
            "        id\n"
            "        name\n"
            f"{_indent(verses_query, 4)}\n"
            "      }\n"
            "    }\n"
            "  }\n"
            "}"
        )

    return QueryDescriptor(canon_type=canon_type, document=document, selections=selections)
