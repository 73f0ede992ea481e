"""
app/api/dependencies.py

Shared FastAPI dependencies for request validation.
"""

from __future__ import annotations

from fastapi import HTTPException, status

from app.schemas.crux_report import BatchReportRequest, ReportRequest


def get_report_url(payload: ReportRequest) -> str:
    """
    Validate that the request body carries a non-blank URL.
    """

    url = (payload.url or "").strip()
    if not url:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="URL is required",
        )
    return url


def get_batch_urls(payload: BatchReportRequest) -> list[str]:
    """
    Validate that the request body carries a non-empty list of non-blank
    URL strings.
    """

    raw_urls = payload.urls
    if (
        not isinstance(raw_urls, list)
        or not raw_urls
        or any(not isinstance(url, str) or not url.strip() for url in raw_urls)
    ):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Valid URLs array is required",
        )
    return [url.strip() for url in raw_urls]
