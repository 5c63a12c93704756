"""Excerpt rendering for fetched chapter results.

Turns a chapter payload such as::

    {"id": 2, "name": "...", "verses255": [{"number": 255, "text": "..."}]}

into a length-bounded HTML excerpt that never ends mid-word.
"""

from __future__ import annotations

import html
import re

DEFAULT_BUDGET = 400
ELLIPSIS = "&hellip;"

# Any aliased verses field ("verses", "verses3", ...)
VERSES_FIELD = re.compile(r"^verses")


def trim_to_word(text: str, limit: int) -> str:
    """Cut text to at most ``limit`` characters without splitting a word.

    Returns an empty string when the first word alone exceeds the limit.
    """
    if limit >= len(text):
        return text
    if limit <= 0:
        return ""

    head = text[:limit]
    if text[limit].isspace():
        return head.rstrip()

    boundary = head.rfind(" ")
    if boundary <= 0:
        return ""
    return head[:boundary].rstrip()


def render_verse(number, text: str) -> str:
    return f'<span class="verse"><sup>{number}</sup> {text}</span>'


def render_excerpt(chapter: dict | None, budget: int = DEFAULT_BUDGET) -> str | None:
    """Render the verses of a chapter result as a truncated excerpt.

    Verses fields are scanned in the order they appear. Once the running
    character count passes ``budget`` no further verses are added; the
    verse that crosses the budget is cut back to a whole word and followed
    by an ellipsis. If nothing of that verse survives the cut, the verse is
    shown with the ellipsis alone.

    Args:
        chapter: Chapter payload from the verse endpoint, or None
        budget: Maximum number of verse characters to include

    Returns:
        HTML excerpt, or None when there is nothing to show
    """
    if not chapter:
        return None

    fragments: list[str] = []
    consumed = 0

    for key, verses in chapter.items():
        if not VERSES_FIELD.match(key) or not verses:
            continue

        for verse in verses:
            if consumed > budget:
                break

            text = verse.get("text") or ""
            remaining = budget - consumed
            consumed += len(text)

            if consumed <= budget:
                fragments.append(render_verse(verse.get("number"), html.escape(text)))
                continue

            # Straddles the budget
            if remaining <= 0:
                continue
            kept = trim_to_word(text, remaining)
            if kept:
                body = f"{html.escape(kept)} {ELLIPSIS}"
            else:
                body = ELLIPSIS
            fragments.append(render_verse(verse.get("number"), body))

    if not fragments:
        return None
    return " ".join(fragments)
