"""
tests/test_crux_api.py

HTTP-level tests for the CrUX endpoints.

The report service dependency is overridden with one backed by a fake
connector, so these tests exercise routing, request validation, status
codes and the camelCase / omit-when-absent wire format end to end.
"""

from __future__ import annotations

from typing import Any

import pytest
from fastapi.testclient import TestClient

from app.config import AppSettings
from app.connectors import ConnectorRequestError
from app.main import app
from app.services.crux_report_service import CruxReportService, get_crux_report_service
from tests.payloads import crux_metric, crux_payload


class _StubConnector:
    def __init__(self, responses: dict[str, Any]) -> None:
        self.responses = responses

    def _resolve(self, url: str) -> Any:
        outcome = self.responses.get(url, ConnectorRequestError("connection refused"))
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def fetch_record(self, url: str) -> Any:
        return self._resolve(url)

    def fetch_record_fallback(self, url: str) -> Any:
        return self._resolve(url)


@pytest.fixture()
def client_factory():
    def _make(responses: dict[str, Any] | None = None, environment: str = "production") -> TestClient:
        service = CruxReportService(
            connector=_StubConnector(responses or {}),
            app_settings=AppSettings(environment=environment),
        )
        app.dependency_overrides[get_crux_report_service] = lambda: service
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# POST /api/crux/report
# ---------------------------------------------------------------------------


class TestReportEndpoint:
    def test_success_shapes_camel_case_payload(self, client_factory, full_payload) -> None:
        client = client_factory({"https://example.com": full_payload})

        response = client.post("/api/crux/report", json={"url": "https://example.com"})

        assert response.status_code == 200
        body = response.json()
        assert body["url"] == "https://example.com"
        assert body["metrics"]["lcp"] == {
            "good": 0.75,
            "needsImprovement": 0.15,
            "poor": 0.10,
            "percentile": 2300,
        }
        assert body["metrics"]["cls"]["percentile"] == "0.08"
        assert "fid" not in body["metrics"]
        assert body["insights"]["summary"] == "Performance analysis based on Chrome UX Report"
        assert isinstance(body["insights"]["performanceScore"], int)
        assert "isMockData" not in body
        assert "error" not in body

    def test_url_is_trimmed(self, client_factory, full_payload) -> None:
        client = client_factory({"example.com": full_payload})

        response = client.post("/api/crux/report", json={"url": "  example.com  "})

        assert response.status_code == 200
        assert response.json()["url"] == "example.com"

    @pytest.mark.parametrize("body", [{}, {"url": ""}, {"url": "   "}, {"url": None}])
    def test_missing_url_is_400(self, client_factory, body) -> None:
        response = client_factory().post("/api/crux/report", json=body)

        assert response.status_code == 400
        assert response.json()["detail"] == "URL is required"

    def test_malformed_body_is_400(self, client_factory) -> None:
        response = client_factory().post(
            "/api/crux/report",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid request body"

    def test_upstream_failure_in_production_is_500(self, client_factory) -> None:
        client = client_factory(
            {
                "a.com": ConnectorRequestError(
                    "API response error: 404 Not Found",
                    status_code=404,
                    reason="Not Found",
                    body="record not found",
                )
            }
        )

        response = client.post("/api/crux/report", json={"url": "a.com"})

        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to fetch CrUX data: record not found"

    def test_upstream_failure_in_development_serves_mock(self, client_factory) -> None:
        client = client_factory(environment="development")

        response = client.post("/api/crux/report", json={"url": "a.com"})

        assert response.status_code == 200
        body = response.json()
        assert body["isMockData"] is True
        assert body["url"] == "a.com"
        assert body["insights"]["performanceScore"] == 78

    def test_malformed_upstream_payload_reports_processing_error(self, client_factory) -> None:
        client = client_factory({"a.com": {"record": {}}})

        response = client.post("/api/crux/report", json={"url": "a.com"})

        assert response.status_code == 200
        body = response.json()
        assert body["metrics"] == {"error": "Failed to process CrUX data"}
        assert body["insights"] == {"error": "Failed to process CrUX data"}

    def test_score_omitted_when_no_scored_metric(self, client_factory) -> None:
        payload = crux_payload(first_contentful_paint=crux_metric(0.9, 0.05, 0.05, 1000))
        client = client_factory({"a.com": payload})

        body = client.post("/api/crux/report", json={"url": "a.com"}).json()

        assert "performanceScore" not in body["insights"]
        assert body["insights"]["issues"] == []


# ---------------------------------------------------------------------------
# POST /api/crux/batch-report
# ---------------------------------------------------------------------------


class TestBatchReportEndpoint:
    def test_mixed_results(self, client_factory) -> None:
        client = client_factory(
            {
                "a.com": ConnectorRequestError(
                    "API response error: 404 Not Found", status_code=404, reason="Not Found"
                ),
                "b.com": crux_payload(largest_contentful_paint=crux_metric(0.6, 0.3, 0.1, 3000)),
            }
        )

        response = client.post("/api/crux/batch-report", json={"urls": ["a.com", "b.com"]})

        assert response.status_code == 200
        body = response.json()
        assert [result["url"] for result in body["results"]] == ["a.com", "b.com"]
        assert body["results"][0] == {"url": "a.com", "error": "API error: 404 Not Found"}
        assert body["summary"]["totalUrls"] == 2
        assert body["summary"]["validResults"] == 1
        assert body["summary"]["averages"] == {"lcp": 3000.0, "performanceScore": 60.0}
        assert "isMockData" not in body

    def test_all_failed_omits_averages(self, client_factory) -> None:
        client = client_factory()

        body = client.post("/api/crux/batch-report", json={"urls": ["a.com"]}).json()

        assert body["summary"] == {"totalUrls": 1, "validResults": 0}
        assert body["results"][0]["error"] == "Failed to fetch data: connection refused"

    def test_development_returns_mock_batch(self, client_factory) -> None:
        client = client_factory(environment="development")

        body = client.post("/api/crux/batch-report", json={"urls": ["a.com", "b.com"]}).json()

        assert body["isMockData"] is True
        assert all(result["isMockData"] for result in body["results"])
        assert body["summary"]["averages"]["performanceScore"] == 78.0
        assert body["summary"]["averages"]["fid"] == 80.0

    @pytest.mark.parametrize(
        "body",
        [{}, {"urls": None}, {"urls": []}, {"urls": ["a.com", ""]}, {"urls": ["  "]}],
    )
    def test_invalid_urls_is_400(self, client_factory, body) -> None:
        response = client_factory().post("/api/crux/batch-report", json=body)

        assert response.status_code == 400
        assert response.json()["detail"] == "Valid URLs array is required"

    @pytest.mark.parametrize(
        "urls",
        ["a.com", {"url": "a.com"}, 42, ["a.com", 7], [None], [["a.com"]]],
    )
    def test_non_list_or_non_string_urls_is_400(self, client_factory, urls) -> None:
        response = client_factory().post("/api/crux/batch-report", json={"urls": urls})

        assert response.status_code == 400
        assert response.json()["detail"] == "Valid URLs array is required"


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


class TestHealth:
    def test_health(self) -> None:
        response = TestClient(app).get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert "environment" in response.json()

    def test_lifespan_starts_and_stops_cleanly(self) -> None:
        with TestClient(app) as client:
            assert client.get("/health").status_code == 200
