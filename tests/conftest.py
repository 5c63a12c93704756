"""Shared fixtures for reftagger tests."""

from __future__ import annotations

import asyncio

import pytest

from reftagger.config import Settings
from reftagger.engine.fetch import FetchResult
from reftagger.tagging.annotator import Reftagger


QURAN_RESULT = {
    "quran": {
        "name": "القرآن الكريم",
        "direction": "rtl",
        "language": "ar",
        "chapter": {
            "id": 2,
            "name": "البقرة",
            "verses255": [
                {"number": 255, "text": "الله لا إله إلا هو الحي القيوم"},
            ],
        },
    }
}

BIBLE_RESULT = {
    "bible": {
        "name": "Injil",
        "direction": "ltr",
        "language": "en",
        "book": {
            "name": "John",
            "chapter": {
                "id": 3,
                "name": "John 3",
                "verses16": [
                    {"number": 16, "text": "For God so loved the world"},
                ],
            },
        },
    }
}


class FakeClient:
    """Records queries and answers with canned results, in call order.

    An entry may be an asyncio.Event, in which case that call blocks until
    the event is set and then answers with ``result``.
    """

    def __init__(self, result: FetchResult | None = None, gates=None):
        self.result = result or FetchResult(data=QURAN_RESULT)
        self.gates = list(gates or [])
        self.calls: list[tuple] = []

    async def fetch(self, query, variables=None) -> FetchResult:
        self.calls.append((query, variables))
        if self.gates:
            gate = self.gates.pop(0)
            if isinstance(gate, asyncio.Event):
                await gate.wait()
        return self.result


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def tagger(settings) -> Reftagger:
    """Tagger using the packaged translation catalog."""
    return Reftagger(settings)


@pytest.fixture
def quran_client() -> FakeClient:
    return FakeClient(FetchResult(data=QURAN_RESULT))


@pytest.fixture
def bible_client() -> FakeClient:
    return FakeClient(FetchResult(data=BIBLE_RESULT))


@pytest.fixture
def make_client():
    """Factory for clients with a custom result or gated calls."""
    return FakeClient
