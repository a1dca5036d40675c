"""
Tests for the FastAPI application.

The lifespan runs for real; only the collaborator wiring is replaced so
the orchestrator uses fakes and a temporary SQLite database.
"""

import random
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

import app as app_module
from conceptweave.config import IngestionConfig, TokenizerConfig
from conceptweave.core.extractors.base import ExtractedContent
from conceptweave.core.stores.sqlite_store import SQLiteStore
from conceptweave.core.tokenizer import Tokenizer
from conceptweave.services.ingestion import IngestionOrchestrator

HEADERS = {"X-User-Id": "user_1"}


@pytest.fixture
def client(
    monkeypatch,
    tmp_path,
    fake_embedder,
    fake_summarizer,
    fake_extractor,
    fake_suggester,
    fake_url_extractor,
):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("CW_LOG_TO_FILE", "false")

    llm = MagicMock()
    llm.close = AsyncMock()
    monkeypatch.setattr(app_module.LLMFactory, "create", staticmethod(lambda config: llm))

    def build(config, llm):
        store = SQLiteStore(db_path=str(tmp_path / "api.db"))
        return IngestionOrchestrator(
            embedder=fake_embedder,
            summarizer=fake_summarizer,
            concept_extractor=fake_extractor,
            connection_suggester=fake_suggester,
            content_store=store,
            summary_store=store,
            graph_store=store,
            url_extractor=fake_url_extractor,
            tokenizer=Tokenizer(TokenizerConfig(provider="approximate")),
            config=IngestionConfig(call_timeout=1.0),
            rng=random.Random(1),
        )

    monkeypatch.setattr(app_module, "build_orchestrator", build)

    with TestClient(app_module.app) as test_client:
        yield test_client

    llm.close.assert_awaited_once()
    assert fake_url_extractor.closed


@pytest.mark.integration
class TestContentEndpoints:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "orchestrator_initialized": True}

    def test_submit_text(self, client, fake_extractor):
        fake_extractor.concepts_by_body["Discuss AI roadmap and hiring plan"] = [
            "AI roadmap",
            "Hiring plan",
        ]

        response = client.post(
            "/contents/text",
            json={"title": "Meeting Notes", "body": "Discuss AI roadmap and hiring plan"},
            headers=HEADERS,
        )

        assert response.status_code == 201
        data = response.json()
        assert data["kind"] == "text"
        assert data["tags"] == []
        assert data["has_embedding"] is True
        assert data["has_summary"] is True
        assert data["enrichment_status"] == "done"
        assert data["summary"]["key_concepts"] == ["AI roadmap", "Hiring plan"]

        nodes = client.get("/graph/nodes", headers=HEADERS).json()
        assert sorted(node["label"] for node in nodes) == ["AI roadmap", "Hiring plan"]
        assert client.get("/graph/connections", headers=HEADERS).json() == []

    def test_submit_url(self, client, fake_url_extractor):
        url = "https://example.com/post"
        fake_url_extractor.pages[url] = ExtractedContent(title="Post", body="Post body")

        response = client.post("/contents/url", json={"url": url}, headers=HEADERS)

        assert response.status_code == 201
        data = response.json()
        assert data["kind"] == "url"
        assert data["tags"] == ["url"]
        assert data["source_url"] == url

    def test_missing_user_is_401(self, client):
        response = client.post("/contents/text", json={"title": "T", "body": "B"})

        assert response.status_code == 401

    def test_empty_body_is_422(self, client):
        response = client.post(
            "/contents/text", json={"title": "T", "body": "  "}, headers=HEADERS
        )

        assert response.status_code == 422

    def test_collaborator_failure_is_502(self, client, fake_summarizer):
        fake_summarizer.fail = True

        response = client.post(
            "/contents/text", json={"title": "T", "body": "B"}, headers=HEADERS
        )

        assert response.status_code == 502
        listed = client.get("/contents", headers=HEADERS).json()
        assert len(listed) == 1
        assert listed[0]["has_summary"] is False
        assert listed[0]["failed_step"] == "summarization"

    def test_update_get_delete(self, client):
        created = client.post(
            "/contents/text", json={"title": "T", "body": "old"}, headers=HEADERS
        ).json()
        content_id = created["id"]

        updated = client.put(
            f"/contents/{content_id}",
            json={"title": "T2", "body": "new", "tags": ["edited"]},
            headers=HEADERS,
        )
        assert updated.status_code == 200
        assert updated.json()["summary"]["id"] == created["summary"]["id"]
        assert updated.json()["summary"]["summary"] == "Summary: new"
        assert updated.json()["tags"] == ["edited"]

        fetched = client.get(f"/contents/{content_id}", headers=HEADERS)
        assert fetched.json()["title"] == "T2"

        other = {"X-User-Id": "other"}
        assert client.get(f"/contents/{content_id}", headers=other).status_code == 404

        deleted = client.delete(f"/contents/{content_id}", headers=HEADERS)
        assert deleted.status_code == 200
        assert client.get(f"/contents/{content_id}", headers=HEADERS).status_code == 404
        assert client.delete(f"/contents/{content_id}", headers=HEADERS).status_code == 404

    def test_analyze(self, client, fake_summarizer):
        fake_summarizer.fail = True
        client.post("/contents/text", json={"title": "T", "body": "B"}, headers=HEADERS)
        content_id = client.get("/contents", headers=HEADERS).json()[0]["id"]
        fake_summarizer.fail = False

        response = client.post(
            f"/contents/{content_id}/analyze", json={"analysis": "all"}, headers=HEADERS
        )

        assert response.status_code == 200
        assert response.json()["content"]["has_summary"] is True
        assert response.json()["content"]["enrichment_status"] == "done"

    def test_analyze_invalid_type(self, client):
        content_id = client.post(
            "/contents/text", json={"title": "T", "body": "B"}, headers=HEADERS
        ).json()["id"]

        response = client.post(
            f"/contents/{content_id}/analyze", json={"analysis": "bogus"}, headers=HEADERS
        )

        assert response.status_code == 422


@pytest.mark.integration
class TestGraphEndpoints:
    def test_connections_and_stats(self, client, fake_extractor):
        fake_extractor.concepts_by_body["first"] = ["Alpha"]
        fake_extractor.concepts_by_body["second"] = ["Beta"]
        client.post("/contents/text", json={"title": "1", "body": "first"}, headers=HEADERS)
        client.post("/contents/text", json={"title": "2", "body": "second"}, headers=HEADERS)

        connections = client.get("/graph/connections", headers=HEADERS).json()
        assert [(c["source_concept"], c["target_concept"]) for c in connections] == [
            ("Beta", "Alpha")
        ]

        stats = client.get("/stats", headers=HEADERS).json()
        assert stats == {
            "user_id": "user_1",
            "contents": 2,
            "summaries": 2,
            "nodes": 2,
            "connections": 1,
        }

        connection_id = connections[0]["id"]
        url = f"/graph/connections/{connection_id}"
        assert client.delete(url, headers=HEADERS).status_code == 200
        assert client.get("/graph/connections", headers=HEADERS).json() == []
        assert client.delete(url, headers=HEADERS).status_code == 404


@pytest.mark.integration
class TestSimilarityEndpoints:
    def test_related_and_search(self, client, fake_embedder):
        fake_embedder.vectors.update(
            {
                "Cats felines": [1.0, 0.0, 0.0],
                "Kittens young cats": [0.9, 0.1, 0.0],
                "Taxes filing": [0.0, 0.0, 1.0],
                "pets": [1.0, 0.05, 0.0],
            }
        )
        ids = {}
        for title, body in [("Cats", "felines"), ("Kittens", "young cats"), ("Taxes", "filing")]:
            ids[title] = client.post(
                "/contents/text", json={"title": title, "body": body}, headers=HEADERS
            ).json()["id"]

        related = client.get(f"/contents/{ids['Cats']}/related?limit=1", headers=HEADERS)
        assert related.status_code == 200
        assert [item["title"] for item in related.json()] == ["Kittens"]
        assert related.json()[0]["similarity"] > 0.9

        found = client.get("/search", params={"q": "pets", "limit": 2}, headers=HEADERS)
        assert [item["title"] for item in found.json()] == ["Cats", "Kittens"]

    def test_related_unknown_item_is_404(self, client):
        assert client.get("/contents/missing/related", headers=HEADERS).status_code == 404

    def test_search_empty_query_is_422(self, client):
        assert client.get("/search", params={"q": " "}, headers=HEADERS).status_code == 422
