"""API tests for the tagging and excerpt endpoints."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from reftagger.api.main import app
from reftagger.api.routes import get_client
from reftagger.engine.fetch import FetchResult


@pytest.fixture
def client(quran_client):
    app.dependency_overrides[get_client] = lambda: quran_client
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestHealth:
    def test_health(self, client):
        response = client.get("/api/v1/health")
        assert response.status_code == 200
        assert response.json()["canons"] == ["quran", "bible"]

    def test_root(self, client):
        assert client.get("/").json()["api"] == "/api/v1"


class TestTagging:
    def test_tag(self, client):
        response = client.post("/api/v1/tag", json={"html": "<p>John 3:16</p>"})
        body = response.json()

        assert response.status_code == 200
        assert body["tagged"] == 1
        assert 'data-version="injil"' in body["html"]

    def test_tag_with_version_override(self, client):
        response = client.post(
            "/api/v1/tag", json={"html": "<p>John 3:16</p>", "versions": ["gnt"]}
        )
        assert 'data-version="gnt"' in response.json()["html"]

    def test_overrides_do_not_leak(self, client):
        client.post("/api/v1/tag", json={"html": "<p>John 3:16</p>", "versions": ["gnt"]})
        response = client.post("/api/v1/tag", json={"html": "<p>John 3:16</p>"})
        assert 'data-version="injil"' in response.json()["html"]

    def test_tag_with_exclude(self, client):
        response = client.post(
            "/api/v1/tag",
            json={"html": '<p class="skip">John 3:16</p>', "exclude": [".skip"]},
        )
        assert response.json()["tagged"] == 0

    def test_untag_round_trip(self, client):
        markup = "<p>See Quran 2:255 and John 3:16.</p>"
        tagged = client.post("/api/v1/tag", json={"html": markup}).json()["html"]

        response = client.post("/api/v1/untag", json={"html": tagged})
        assert response.json() == {"html": markup, "removed": 2}


class TestCitations:
    def test_lists_citations_in_text_order(self, client):
        response = client.post(
            "/api/v1/citations", json={"text": "John 3:16 and Quran 2:255"}
        )
        citations = response.json()

        assert [c["text"] for c in citations] == ["John 3:16", "Quran 2:255"]
        assert citations[0]["book"] == "john"
        assert citations[0]["permalink"] == "https://alkotob.org/injil/john/3/16"
        assert citations[1]["version"] == "quran"

    def test_uncovered_citation_has_null_version(self, client):
        response = client.post(
            "/api/v1/citations", json={"text": "Genesis 1:1", "versions": ["injil"]}
        )
        assert response.json()[0]["version"] is None


class TestExcerpt:
    def test_ready(self, client, quran_client):
        response = client.post(
            "/api/v1/excerpt",
            json={"type": "quran", "chapter": 2, "verses": "255", "version": "quran"},
        )
        body = response.json()

        assert response.status_code == 200
        assert body["state"] == "ready"
        assert "<sup>255</sup>" in body["html"]
        assert body["reference"] == "quran 2:255"
        assert "token" not in body

        ((_, variables),) = quran_client.calls
        assert variables == {"version": "quran", "chapter": 2}

    def test_version_is_not_resolved_again(self, client, quran_client):
        client.post(
            "/api/v1/excerpt",
            json={"type": "quran", "chapter": 2, "verses": "255", "text": "Quran 2:255"},
        )

        ((_, variables),) = quran_client.calls
        assert variables["version"] is None

    def test_fetch_failure(self, client, quran_client):
        quran_client.result = FetchResult(errors=[{"message": "HTTP 500"}])
        response = client.post(
            "/api/v1/excerpt",
            json={"type": "quran", "chapter": 2, "verses": "255", "version": "quran"},
        )

        assert response.status_code == 200
        assert response.json()["state"] == "failed"
        assert response.json()["message"] == "Unable to load verses"

    def test_unknown_canon(self, client):
        response = client.post(
            "/api/v1/excerpt", json={"type": "vedas", "chapter": 1, "verses": "1"}
        )
        assert response.status_code == 400

    def test_bad_verses(self, client):
        response = client.post(
            "/api/v1/excerpt", json={"type": "quran", "chapter": 1, "verses": "7-3"}
        )
        assert response.status_code == 400

    def test_bible_needs_book(self, client):
        response = client.post(
            "/api/v1/excerpt", json={"type": "bible", "chapter": 3, "verses": "16"}
        )
        assert response.status_code == 400
