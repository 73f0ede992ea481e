"""
crux/insights.py

Rule-based insight generator over normalized CrUX metrics.

Scoring
-------
performance_score = round(mean(good_density * 100)) over the scored
metrics present (LCP, CLS, FID, INP). Halves round up.
"""

from __future__ import annotations

import logging
import math

from crux.models import Insights, NormalizedMetrics
from crux.normalizer import as_number
from crux.thresholds import THRESHOLDS

logger = logging.getLogger(__name__)

SUMMARY = "Performance analysis based on Chrome UX Report"


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def generate_insights(metrics: NormalizedMetrics) -> Insights:
    """
    Flag every metric whose p75 exceeds its "good" threshold and score
    the result.

    An errored ``metrics`` input is passed through as an errored insight.
    """

    if metrics.error is not None:
        return Insights.failure(metrics.error)

    issues: list[str] = []
    recommendations: list[str] = []
    score_parts: list[float] = []

    for threshold in THRESHOLDS:
        bucket = metrics.get(threshold.key)
        if bucket is None:
            continue

        if as_number(bucket.percentile) > threshold.good:
            issues.append(threshold.issue)
            recommendations.append(threshold.recommendation)

        if threshold.scored:
            score_parts.append(bucket.good * 100)

    performance_score: int | None = None
    if score_parts:
        raw_score = round_half_up(sum(score_parts) / len(score_parts))
        performance_score = max(0, min(100, raw_score))

    logger.debug(
        "Insights generated issues=%d score=%s",
        len(issues),
        performance_score,
    )
    return Insights(
        summary=SUMMARY,
        issues=tuple(issues),
        recommendations=tuple(recommendations),
        performance_score=performance_score,
    )
