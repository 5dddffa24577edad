"""Tests for truthguard.api.routes using the Flask test client.

The synthesizer runs with a seeded PRNG and no delay; failure paths use an
AsyncMock in its place.
"""
from __future__ import annotations

from unittest.mock import AsyncMock

from tests.helpers import make_synthesizer
from truthguard.app import create_flask_app
from truthguard.models.errors import AnalysisFailure
from truthguard.storage.session_history import SessionHistoryStore


class TestAnalyze:
    def test_analyze_text(self, client):
        response = client.post("/analyze", json={"content": "A study of city budgets", "type": "text"})
        assert response.status_code == 200

        body = response.get_json()
        result = body["result"]
        assert result["type"] == "text"
        assert result["content"] == "A study of city budgets"
        assert 0.1 <= result["truth_score"] <= 0.9
        assert len(result["metrics"]) == 5
        assert result["sources"] == []
        assert body["notification"]["description"] == (
            f"Truth score: {result['verdict']['percentage']}%"
        )

    def test_analyze_url_has_sources(self, client):
        response = client.post(
            "/analyze", json={"content": "https://example.com/news/1", "type": "url"}
        )
        assert response.status_code == 200
        assert 1 <= len(response.get_json()["result"]["sources"]) <= 3

    def test_type_defaults_to_text(self, client):
        response = client.post("/analyze", json={"content": "Some text"})
        assert response.get_json()["result"]["type"] == "text"

    def test_content_stored_verbatim(self, client):
        response = client.post("/analyze", json={"content": "  padded text  "})
        assert response.get_json()["result"]["content"] == "  padded text  "

    def test_rejects_blank_content(self, client):
        response = client.post("/analyze", json={"content": "   ", "type": "text"})
        assert response.status_code == 400
        assert response.get_json()["error"] == "Please enter some text or a URL to analyze"

    def test_rejects_unknown_type(self, client):
        response = client.post("/analyze", json={"content": "Some text", "type": "video"})
        assert response.status_code == 400

    def test_rejects_non_json(self, client):
        response = client.post("/analyze", data="not json")
        assert response.status_code == 400

    def test_analysis_failure_returns_500(self, test_settings):
        synthesizer = AsyncMock()
        synthesizer.synthesize.side_effect = AnalysisFailure("timer unavailable")
        app = create_flask_app(test_settings, synthesizer, SessionHistoryStore())

        response = app.test_client().post("/analyze", json={"content": "Some text"})
        assert response.status_code == 500
        assert response.get_json()["error"] == "Analysis failed"
        assert synthesizer.synthesize.await_count == 1

    def test_retries_when_configured(self, test_settings):
        result = make_synthesizer().build("Some text", "text")
        synthesizer = AsyncMock()
        synthesizer.synthesize.side_effect = [AnalysisFailure("flaky"), result]
        test_settings.analysis_attempts = 2
        app = create_flask_app(test_settings, synthesizer, SessionHistoryStore())

        response = app.test_client().post("/analyze", json={"content": "Some text"})
        assert response.status_code == 200
        assert response.get_json()["result"]["id"] == result.id
        assert synthesizer.synthesize.await_count == 2


class TestHistory:
    def test_history_keeps_ten_newest(self, client):
        for i in range(12):
            client.post("/analyze", json={"content": f"Article {i}"})

        body = client.get("/history").get_json()
        assert body["count"] == 10
        assert [item["content"] for item in body["items"]] == [
            f"Article {i}" for i in range(11, 1, -1)
        ]

    def test_history_is_per_session(self, app):
        first = app.test_client()
        second = app.test_client()
        first.post("/analyze", json={"content": "Only in the first session"})

        assert first.get("/history").get_json()["count"] == 1
        assert second.get("/history").get_json()["count"] == 0

    def test_select_item_keeps_it(self, client):
        item_id = client.post("/analyze", json={"content": "Keep me"}).get_json()["result"]["id"]

        response = client.get(f"/history/{item_id}")
        assert response.status_code == 200
        assert response.get_json()["result"]["content"] == "Keep me"
        assert client.get("/history").get_json()["count"] == 1

    def test_unknown_item(self, client):
        assert client.get("/history/does-not-exist").status_code == 404

    def test_report(self, client):
        result = client.post("/analyze", json={"content": "Report me"}).get_json()["result"]

        lines = client.get(f"/history/{result['id']}/report").get_json()["lines"]
        assert lines[0] == result["title"]
        assert "Factual Assessment" in lines

    def test_clear(self, client):
        client.post("/analyze", json={"content": "Forget me"})
        assert client.delete("/history").status_code == 200
        assert client.get("/history").get_json()["count"] == 0

    def test_history_summary_report(self, client):
        client.post("/analyze", json={"content": "First article"})
        client.post("/analyze", json={"content": "Second article"})

        lines = client.get("/history/report").get_json()["lines"]
        assert lines[0] == "Previously Analyzed Content (2 items)"
        assert lines[2].strip() == "Second article"

    def test_history_summary_report_empty(self, client):
        assert client.get("/history/report").get_json() == {"lines": ["No Analysis History"]}


class TestSessionLifecycle:
    def test_reads_without_cookie_allocate_nothing(self, app):
        store = app.config["HISTORY"]
        for _ in range(50):
            client = app.test_client()
            assert client.get("/history").get_json()["count"] == 0
            assert client.get("/history/missing").status_code == 404
            assert client.delete("/history").status_code == 200

        assert len(store) == 0

    def test_sessions_are_capped(self, test_settings, seeded_synthesizer):
        store = SessionHistoryStore(max_sessions=3)
        app = create_flask_app(test_settings, seeded_synthesizer, store)
        clients = [app.test_client() for _ in range(5)]
        for i, client in enumerate(clients):
            client.post("/analyze", json={"content": f"Article {i}"})

        assert len(store) == 3
        assert clients[0].get("/history").get_json()["count"] == 0
        assert clients[-1].get("/history").get_json()["count"] == 1


class TestLogs:
    def test_missing_log_file(self, client):
        assert client.get("/logs").get_json() == {"logs": []}

    def test_returns_tail(self, client, test_settings):
        with open(test_settings.log_file, "w", encoding="utf-8") as f:
            f.writelines(f"line {i}\n" for i in range(60))

        logs = client.get("/logs").get_json()["logs"]
        assert len(logs) == 50
        assert logs[-1] == "line 59\n"
