"""Thin HTTP client the Streamlit UI uses to reach the CrUX Insights API."""

from __future__ import annotations

import os
from typing import Any

import requests

DEFAULT_API_BASE_URL = "http://localhost:8000"


class APIClientError(RuntimeError):
    """Raised with a user-facing message when an API call fails."""


def api_base_url() -> str:
    return os.getenv("CRUX_API_BASE_URL", DEFAULT_API_BASE_URL).rstrip("/")


def _post(path: str, body: dict[str, Any], *, session: requests.Session | None = None) -> dict[str, Any]:
    http = session or requests
    try:
        response = http.post(f"{api_base_url()}{path}", json=body, timeout=120)
    except requests.RequestException as exc:
        raise APIClientError("Failed to connect to the server") from exc

    try:
        payload = response.json()
    except ValueError:
        payload = None

    if not response.ok:
        detail = payload.get("detail") if isinstance(payload, dict) else None
        raise APIClientError(detail if isinstance(detail, str) and detail else "Failed to fetch CrUX data")
    if not isinstance(payload, dict):
        raise APIClientError("Failed to fetch CrUX data")
    return payload


def fetch_report(url: str, *, session: requests.Session | None = None) -> dict[str, Any]:
    return _post("/api/crux/report", {"url": url}, session=session)


def fetch_batch_report(urls: list[str], *, session: requests.Session | None = None) -> dict[str, Any]:
    return _post("/api/crux/batch-report", {"urls": urls}, session=session)
