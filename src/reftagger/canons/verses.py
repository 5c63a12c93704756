"""Verse specification parsing for matched citations.

A verse specification is the part of a citation after the chapter colon:

- Single verse: "16"
- Hyphen range: "16-18"
- En-dash range: "16–18"
- Comma list: "16,18" (Arabic comma "،" is accepted too)
- Combined: "1-3,5"

Output: ordered list of (start, end) tuples where end is None for a
single verse. Ranges are kept as written, not expanded.
"""

from __future__ import annotations

import re

# Pattern fragment shared by the canon parsers (Unicode digits allowed).
# A list item followed by a chapter colon or a word starts the next
# citation ("John 3:16, 4:1", "Rom 8:28, 1 John 4:8") and is not taken.
_LIST_ITEM = (
    r"\s*[,،]\s*\d{1,3}(?:\s*[-–—]\s*\d{1,3})?"
    r"(?!\d)(?!\s*:)(?!\s+[^\W\d_])"
)
VERSE_SPEC_PATTERN = rf"\d{{1,3}}(?:\s*[-–—]\s*\d{{1,3}})?(?:{_LIST_ITEM})*"

_DASHES = re.compile(r"[–—]")
_COMMAS = re.compile(r"[،,]")


class VerseSpecError(ValueError):
    """Error parsing a verse specification."""

    pass


def parse_verse_spec(spec: str) -> list[tuple[int, int | None]]:
    """Parse a verse specification into ordered (start, end) ranges.

    Args:
        spec: Verse spec like "16", "16-18", "16,18", "1-3,5"

    Returns:
        Ranges in the order written; end is None for a single verse

    Raises:
        VerseSpecError: If spec is malformed
    """
    normalized = _DASHES.sub("-", spec)
    parts = [p.strip() for p in _COMMAS.split(normalized) if p.strip()]

    if not parts:
        raise VerseSpecError(f"Missing verse number in specification: '{spec}'")

    ranges: list[tuple[int, int | None]] = []
    for part in parts:
        if "-" in part:
            range_parts = part.split("-")
            if len(range_parts) != 2:
                raise VerseSpecError(
                    f"Invalid verse range: '{part}'. Expected format like '16-18'."
                )
            try:
                start = int(range_parts[0].strip())
                end = int(range_parts[1].strip())
            except ValueError:
                raise VerseSpecError(
                    f"Invalid verse numbers in range: '{part}'. "
                    "Verses must be integers."
                )
            if start > end:
                raise VerseSpecError(
                    f"Invalid verse range: '{part}'. "
                    f"Start verse ({start}) cannot be greater than end verse ({end})."
                )
            if start < 1:
                raise VerseSpecError(
                    f"Invalid verse number: {start}. Verses start at 1."
                )
            # "5-5" is a single verse
            ranges.append((start, end if end != start else None))
        else:
            try:
                verse = int(part)
            except ValueError:
                raise VerseSpecError(
                    f"Invalid verse number: '{part}'. Verses must be integers."
                )
            if verse < 1:
                raise VerseSpecError(
                    f"Invalid verse number: {verse}. Verses start at 1."
                )
            ranges.append((verse, None))

    return ranges


def format_verse_spec(ranges: list[tuple[int, int | None]]) -> str:
    """Format ranges back into a compact ASCII spec like "1-3,5"."""
    return ",".join(
        f"{start}-{end}" if end is not None else str(start) for start, end in ranges
    )
