"""
crux/mock_data.py

Deterministic stand-in results used in development mode.
"""

from __future__ import annotations

from typing import Sequence

from crux.models import (
    BatchReport,
    BatchSummary,
    Insights,
    MetricBucket,
    NormalizedMetrics,
    UrlReport,
)

MOCK_METRICS = NormalizedMetrics(
    buckets={
        "lcp": MetricBucket(good=0.75, needs_improvement=0.15, poor=0.10, percentile=2300),
        "cls": MetricBucket(good=0.82, needs_improvement=0.12, poor=0.06, percentile=0.08),
        "inp": MetricBucket(good=0.65, needs_improvement=0.25, poor=0.10, percentile=180),
        "fcp": MetricBucket(good=0.78, needs_improvement=0.15, poor=0.07, percentile=1600),
    }
)

MOCK_INSIGHTS = Insights(
    summary="Performance analysis based on Chrome UX Report (Mock Data)",
    issues=("This is mock data for testing only",),
    recommendations=(
        "Set up a Google API key with appropriate permissions for Chrome UX Report API",
        "Verify your network connection and SSL certificates",
    ),
    performance_score=78,
)

MOCK_AVERAGES = {
    "lcp": 2300.0,
    "cls": 0.08,
    "fid": 80.0,
    "inp": 180.0,
    "fcp": 1600.0,
    "performance_score": 78.0,
}

DEFAULT_MOCK_URL = "example.com"


def generate_mock_report(url: str | None) -> UrlReport:
    return UrlReport(
        url=url or DEFAULT_MOCK_URL,
        metrics=MOCK_METRICS,
        insights=MOCK_INSIGHTS,
        is_mock_data=True,
    )


def generate_mock_batch(urls: Sequence[str]) -> BatchReport:
    """
    Mock batch: every URL gets the canned report and fixed averages.
    """

    return BatchReport(
        results=tuple(generate_mock_report(url) for url in urls),
        summary=BatchSummary(
            total_urls=len(urls),
            valid_results=len(urls),
            averages=dict(MOCK_AVERAGES),
        ),
        is_mock_data=True,
    )
