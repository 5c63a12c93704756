"""Tests for opening verse previews.

Tests cover:
- Settled states: ready, not found, failed
- The version stored on the annotation is used as-is
- Stale fetch results never overwrite a newer or closed preview
"""

from __future__ import annotations

import asyncio

import pytest
from bs4 import BeautifulSoup

from reftagger.canons.base import Citation
from reftagger.config import Settings
from reftagger.engine.fetch import FetchResult
from reftagger.engine.preview import PreviewController, PreviewState, share_links
from reftagger.tagging.annotator import PARSER
from reftagger.tagging.nodes import ANNOTATION_SELECTOR


def _anchor(tagger, markup: str):
    soup = BeautifulSoup(tagger.tag_html(markup), PARSER)
    return soup.select_one(ANNOTATION_SELECTOR)


class TestOpen:
    @pytest.mark.asyncio
    async def test_ready_preview(self, tagger, settings, quran_client):
        anchor = _anchor(tagger, "<p>Quran 2:255</p>")
        controller = PreviewController(tagger.sources, quran_client, settings)

        preview = await controller.open(anchor)

        assert preview.state == PreviewState.READY
        assert preview.reference == "Quran 2:255"
        assert preview.permalink == "https://alkotob.org/quran/2/255"
        assert "<sup>255</sup>" in preview.html
        assert preview.canon_name == "القرآن الكريم"
        assert preview.chapter_name == "البقرة"
        assert preview.direction == "rtl"
        assert preview.language == "ar"
        assert preview.message is None
        assert preview.theme == "alkotob"
        assert controller.current is preview

    @pytest.mark.asyncio
    async def test_query_uses_citation_verses(self, tagger, settings, quran_client):
        anchor = _anchor(tagger, "<p>Quran 2:255</p>")
        await PreviewController(tagger.sources, quran_client, settings).open(anchor)

        ((query, variables),) = quran_client.calls
        assert "verses255: verses(start: 255, limit: 1)" in str(query)
        assert variables == {"version": "quran", "chapter": 2}

    @pytest.mark.asyncio
    async def test_bible_variables_include_book(self, tagger, settings, bible_client):
        anchor = _anchor(tagger, "<p>John 3:16</p>")
        preview = await PreviewController(tagger.sources, bible_client, settings).open(
            anchor
        )

        ((_, variables),) = bible_client.calls
        assert variables == {"version": "injil", "chapter": 3, "book": "john"}
        assert preview.chapter_name == "John 3"

    @pytest.mark.asyncio
    async def test_excerpt_length_setting(self, tagger, bible_client):
        anchor = _anchor(tagger, "<p>John 3:16</p>")
        controller = PreviewController(
            tagger.sources, bible_client, Settings(excerpt_length=10)
        )

        preview = await controller.open(anchor)
        assert "For God so &hellip;" in preview.html

    @pytest.mark.asyncio
    async def test_share_links(self, tagger, settings, quran_client):
        anchor = _anchor(tagger, "<p>Quran 2:255</p>")
        preview = await PreviewController(tagger.sources, quran_client, settings).open(
            anchor
        )

        assert preview.share == share_links("https://alkotob.org/quran/2/255")
        assert "https%3A%2F%2Falkotob.org%2Fquran%2F2%2F255" in preview.share["facebook"]
        assert preview.share["read_more"] == preview.permalink

    @pytest.mark.asyncio
    async def test_unresolved_citation_is_resolved(self, tagger, settings, bible_client):
        citation = Citation(
            type="bible", book="john", chapter=3, verses=[(16, None)], text="John 3:16"
        )
        preview = await PreviewController(tagger.sources, bible_client, settings).open(
            citation
        )

        assert preview.citation.version == "injil"
        assert preview.permalink == "https://alkotob.org/injil/john/3/16"


class TestStoredVersion:
    @pytest.mark.asyncio
    async def test_stored_version_is_not_recomputed(self, tagger, bible_client):
        """A later change to the priority list does not affect tagged anchors."""
        anchor = _anchor(tagger, "<p>John 3:16</p>")
        assert anchor["data-version"] == "injil"

        controller = PreviewController(
            tagger.sources, bible_client, Settings(versions=["gnt", "injil"])
        )
        await controller.open(anchor)

        ((_, variables),) = bible_client.calls
        assert variables["version"] == "injil"

    @pytest.mark.asyncio
    async def test_missing_version_is_sent_as_null(self, tagger, settings, bible_client):
        attrs = {
            "data-type": "bible",
            "data-book": "genesis",
            "data-chapter": "1",
            "data-verses": "1",
            "data-text": "Genesis 1:1",
        }
        controller = PreviewController(tagger.sources, bible_client, settings)
        preview = await controller.open(attrs)

        ((_, variables),) = bible_client.calls
        assert variables["version"] is None
        assert preview.permalink == "https://alkotob.org/bible/genesis/1/1"


class TestSettledStates:
    @pytest.mark.asyncio
    async def test_fetch_failure(self, tagger, settings, make_client):
        client = make_client(FetchResult(errors=[{"message": "HTTP 503", "status": 503}]))
        anchor = _anchor(tagger, "<p>Quran 2:255</p>")

        preview = await PreviewController(tagger.sources, client, settings).open(anchor)

        assert preview.state == PreviewState.FAILED
        assert preview.message == "Unable to load verses"
        assert preview.html is None
        assert preview.errors[0]["status"] == 503

    @pytest.mark.asyncio
    async def test_no_verses(self, tagger, settings, make_client):
        client = make_client(FetchResult(data={"quran": {"name": "Quran", "chapter": None}}))
        anchor = _anchor(tagger, "<p>Quran 2:255</p>")

        preview = await PreviewController(tagger.sources, client, settings).open(anchor)

        assert preview.state == PreviewState.NOT_FOUND
        assert preview.message == "Verse not found"

    @pytest.mark.asyncio
    async def test_arabic_messages(self, tagger, make_client):
        client = make_client(FetchResult(errors=[{"message": "boom"}]))
        anchor = _anchor(tagger, "<p>Quran 2:255</p>")
        controller = PreviewController(tagger.sources, client, Settings(language="ar"))

        preview = await controller.open(anchor)
        assert preview.message == "تعذر تحميل الآيات"

    @pytest.mark.asyncio
    async def test_unknown_language_falls_back_to_english(self, tagger, make_client):
        client = make_client(FetchResult(data={}))
        anchor = _anchor(tagger, "<p>Quran 2:255</p>")
        controller = PreviewController(tagger.sources, client, Settings(language="fr"))

        preview = await controller.open(anchor)
        assert preview.message == "Verse not found"


class TestStaleResults:
    @pytest.mark.asyncio
    async def test_loading_state_while_fetching(self, tagger, settings, make_client):
        gate = asyncio.Event()
        client = make_client(gates=[gate])
        controller = PreviewController(tagger.sources, client, settings)

        task = asyncio.create_task(controller.open(_anchor(tagger, "<p>Quran 2:255</p>")))
        await asyncio.sleep(0)

        assert controller.current.state == PreviewState.LOADING
        assert controller.current.message == "Loading…"

        gate.set()
        preview = await task
        assert preview.state == PreviewState.READY

    @pytest.mark.asyncio
    async def test_newer_preview_wins(self, tagger, settings, make_client, bible_client):
        """A slow first fetch finishing last does not replace the second preview."""
        slow = asyncio.Event()
        client = make_client(bible_client.result, gates=[slow, None])
        controller = PreviewController(tagger.sources, client, settings)

        first = asyncio.create_task(controller.open(_anchor(tagger, "<p>John 3:16</p>")))
        await asyncio.sleep(0)
        second = await controller.open(_anchor(tagger, "<p>Acts 1:8</p>"))

        slow.set()
        assert await first is None
        assert second.state == PreviewState.READY
        assert controller.current is second
        assert controller.current.reference == "Acts 1:8"

    @pytest.mark.asyncio
    async def test_closed_preview_discards_result(self, tagger, settings, make_client):
        gate = asyncio.Event()
        client = make_client(gates=[gate])
        controller = PreviewController(tagger.sources, client, settings)

        task = asyncio.create_task(controller.open(_anchor(tagger, "<p>Quran 2:255</p>")))
        await asyncio.sleep(0)
        controller.close()
        gate.set()

        assert await task is None
        assert controller.current is None
