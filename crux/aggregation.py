"""
crux/aggregation.py

Batch aggregation across per-URL CrUX results.
"""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from crux.insights import generate_insights
from crux.models import BatchReport, BatchSummary, FetchOutcome, UrlReport
from crux.normalizer import as_number, normalize_crux_record
from crux.thresholds import METRIC_KEYS

logger = logging.getLogger(__name__)

PERFORMANCE_SCORE = "performance_score"


def build_url_report(outcome: FetchOutcome) -> UrlReport:
    """
    Shape one fetch outcome, passing fetch errors through untouched.
    """

    if outcome.error is not None:
        return UrlReport(url=outcome.url, error=outcome.error)

    metrics = normalize_crux_record(outcome.data)
    return UrlReport(url=outcome.url, metrics=metrics, insights=generate_insights(metrics))


def compute_averages(reports: Iterable[UrlReport]) -> dict[str, float]:
    """
    Mean p75 per metric and mean performance score over valid reports.

    A metric with no contributing report is left out of the result.
    """

    totals: dict[str, list[float]] = {key: [] for key in (*METRIC_KEYS, PERFORMANCE_SCORE)}

    for report in reports:
        if not report.is_valid:
            continue
        if report.metrics is not None:
            for key in METRIC_KEYS:
                bucket = report.metrics.get(key)
                if bucket is not None:
                    totals[key].append(as_number(bucket.percentile))
        if report.insights is not None and report.insights.performance_score is not None:
            totals[PERFORMANCE_SCORE].append(float(report.insights.performance_score))

    return {key: sum(values) / len(values) for key, values in totals.items() if values}


def process_batch(outcomes: Sequence[FetchOutcome]) -> BatchReport:
    """
    Turn raw per-URL outcomes into reports plus a batch summary.

    ``averages`` is only populated when at least one URL produced a valid
    result; results keep the input order.
    """

    reports = tuple(build_url_report(outcome) for outcome in outcomes)
    valid = [report for report in reports if report.is_valid]

    averages = compute_averages(valid) if valid else None
    logger.info(
        "Batch processed total_urls=%d valid_results=%d",
        len(outcomes),
        len(valid),
    )
    return BatchReport(
        results=reports,
        summary=BatchSummary(
            total_urls=len(outcomes),
            valid_results=len(valid),
            averages=averages,
        ),
    )
