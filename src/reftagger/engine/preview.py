"""Verse previews for tagged citations.

A preview is what a reader sees when opening an annotation: the reference,
share links, and the rendered excerpt once the verse fetch completes.

Each ``open()`` takes a fresh request token. A fetch result is applied
only while its token is still the current one, so a slow response for a
preview that was closed (or replaced by another) can never overwrite the
newer preview.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Protocol
from urllib.parse import quote

from bs4 import Tag

from reftagger.canons.base import Citation, CitationSource
from reftagger.config import Settings, message
from reftagger.engine.fetch import FetchResult
from reftagger.engine.query import QueryDescriptor

logger = logging.getLogger(__name__)


class PreviewState(str, Enum):
    LOADING = "loading"
    READY = "ready"
    NOT_FOUND = "not_found"
    FAILED = "failed"


class VerseFetcher(Protocol):
    async def fetch(
        self, query: QueryDescriptor | str, variables: dict | None = None
    ) -> FetchResult: ...


def share_links(permalink: str) -> dict[str, str]:
    encoded = quote(permalink, safe="")
    return {
        "facebook": f"https://www.facebook.com/sharer/sharer.php?u={encoded}",
        "twitter": f"https://twitter.com/intent/tweet?url={encoded}",
        "read_more": permalink,
    }


@dataclass
class Preview:
    """State of one opened preview."""

    token: int
    citation: Citation
    reference: str
    permalink: str
    state: PreviewState = PreviewState.LOADING
    html: str | None = None
    message: str | None = None
    canon_name: str | None = None
    chapter_name: str | None = None
    direction: str | None = None
    language: str | None = None
    theme: str = ""
    share: dict[str, str] = field(default_factory=dict)
    errors: list[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "token": self.token,
            "reference": self.reference,
            "permalink": self.permalink,
            "state": self.state.value,
            "html": self.html,
            "message": self.message,
            "canon_name": self.canon_name,
            "chapter_name": self.chapter_name,
            "direction": self.direction,
            "language": self.language,
            "theme": self.theme,
            "share": dict(self.share),
            "version": self.citation.version,
        }


class PreviewController:
    """Opens previews for annotations and applies fetch results in order.

    Usage:
        controller = PreviewController(tagger.sources, client, settings)
        preview = await controller.open(anchor.attrs)
        controller.close()
    """

    def __init__(
        self,
        sources: Mapping[str, CitationSource],
        client: VerseFetcher,
        settings: Settings | None = None,
    ):
        self.sources = sources
        self.client = client
        self.settings = settings or Settings()
        self.current: Preview | None = None
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    def close(self) -> None:
        """Close the current preview; any fetch still in flight is discarded."""
        self._generation += 1
        self.current = None

    async def open(self, target: Tag | Mapping | Citation) -> Preview | None:
        """Open a preview for an annotation and load its excerpt.

        Args:
            target: Annotation anchor, its attributes, or a resolved Citation

        Returns:
            The settled preview, or None when it was closed or superseded
            before the fetch completed
        """
        self._generation += 1
        token = self._generation

        if isinstance(target, Tag):
            target = target.attrs
        citation = target if isinstance(target, Citation) else Citation.from_attributes(target)
        source = self.sources.get(citation.type)
        if source is None:
            raise ValueError(f"No citation source for canon '{citation.type}'")
        if not citation.resolved:
            citation = source.resolve(citation, self.settings.versions)

        permalink = (
            target.get("data-permalink") if isinstance(target, Mapping) else None
        ) or source.permalink(citation)

        preview = Preview(
            token=token,
            citation=citation,
            reference=citation.text.strip(),
            permalink=permalink,
            message=message(self.settings.language, "loading"),
            theme=self.settings.theme,
            share=share_links(permalink),
        )
        self.current = preview

        query = source.build_query(citation.verses)
        result = await self.client.fetch(query, source.query_variables(citation))

        if token != self._generation:
            logger.debug(f"Discarding stale preview result for {preview.reference!r}")
            return None

        settled = self._settle(preview, source, result)
        self.current = settled
        return settled

    def _settle(
        self, preview: Preview, source: CitationSource, result: FetchResult
    ) -> Preview:
        language = self.settings.language

        if result.errors:
            logger.warning(f"Preview fetch failed for {preview.reference!r}: {result.errors}")
            return replace(
                preview,
                state=PreviewState.FAILED,
                message=message(language, "fetch_failed"),
                errors=list(result.errors),
            )

        canon = result.get(source.type) or {}
        chapter = source.extract_chapter(result.data)
        html = source.render(chapter, self.settings.excerpt_length)

        if html is None:
            return replace(
                preview,
                state=PreviewState.NOT_FOUND,
                message=message(language, "not_found"),
            )

        return replace(
            preview,
            state=PreviewState.READY,
            html=html,
            message=None,
            canon_name=canon.get("name"),
            chapter_name=(chapter or {}).get("name"),
            direction=canon.get("direction"),
            language=canon.get("language"),
        )
