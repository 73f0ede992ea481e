"""
crux/thresholds.py

Fixed Core Web Vitals threshold table and status classification.

Breakpoints follow the published web.dev guidance: a p75 value at or
below ``good`` is Good, at or below ``needs_improvement`` is Needs
Improvement, anything above is Poor.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final


class MetricStatus(str, Enum):
    GOOD = "good"
    NEEDS_IMPROVEMENT = "needs_improvement"
    POOR = "poor"

    @property
    def label(self) -> str:
        return _STATUS_LABELS[self]


_STATUS_LABELS: Final[dict[MetricStatus, str]] = {
    MetricStatus.GOOD: "Good",
    MetricStatus.NEEDS_IMPROVEMENT: "Needs Improvement",
    MetricStatus.POOR: "Poor",
}


@dataclass(frozen=True)
class MetricThreshold:
    """
    Threshold row for one metric together with its canned advice.
    """

    key: str
    api_name: str
    display_name: str
    good: float
    needs_improvement: float
    issue: str
    recommendation: str
    scored: bool = True
    unit: str = "ms"


# Table order is the order in which issues and recommendations are emitted.
THRESHOLDS: Final[tuple[MetricThreshold, ...]] = (
    MetricThreshold(
        key="lcp",
        api_name="largest_contentful_paint",
        display_name="Largest Contentful Paint",
        good=2500,
        needs_improvement=4000,
        issue="Slow Largest Contentful Paint (LCP)",
        recommendation=(
            "Optimize LCP by improving server response times, render-blocking "
            "resources, or resource load times"
        ),
    ),
    MetricThreshold(
        key="cls",
        api_name="cumulative_layout_shift",
        display_name="Cumulative Layout Shift",
        good=0.1,
        needs_improvement=0.25,
        issue="High Cumulative Layout Shift (CLS)",
        recommendation=(
            "Improve CLS by using size attributes on images and videos, "
            "avoiding inserting content above existing content"
        ),
        unit="",
    ),
    MetricThreshold(
        key="fid",
        api_name="first_input_delay",
        display_name="First Input Delay",
        good=100,
        needs_improvement=300,
        issue="Slow First Input Delay (FID)",
        recommendation=(
            "Improve FID by breaking up long tasks, optimizing JavaScript "
            "execution, and reducing JavaScript execution time"
        ),
    ),
    MetricThreshold(
        key="inp",
        api_name="interaction_to_next_paint",
        display_name="Interaction to Next Paint",
        good=200,
        needs_improvement=500,
        issue="Slow Interaction to Next Paint (INP)",
        recommendation=(
            "Improve INP by optimizing event handlers, reducing main thread "
            "work, and ensuring efficient JS execution"
        ),
    ),
    MetricThreshold(
        key="fcp",
        api_name="first_contentful_paint",
        display_name="First Contentful Paint",
        good=1800,
        needs_improvement=3000,
        issue="Slow First Contentful Paint (FCP)",
        recommendation=(
            "Improve FCP by reducing render-blocking resources, minimizing "
            "critical request chains, and optimizing server response times"
        ),
        # FCP is reported but left out of the performance score.
        scored=False,
    ),
)

THRESHOLDS_BY_KEY: Final[dict[str, MetricThreshold]] = {row.key: row for row in THRESHOLDS}

METRIC_KEYS: Final[tuple[str, ...]] = tuple(row.key for row in THRESHOLDS)


def get_threshold(metric: str) -> MetricThreshold | None:
    return THRESHOLDS_BY_KEY.get(metric)


def classify(metric: str, value: float) -> MetricStatus | None:
    """
    Map a p75 value onto a status band.

    Returns ``None`` for unknown metrics.
    """

    threshold = THRESHOLDS_BY_KEY.get(metric)
    if threshold is None:
        return None
    if value <= threshold.good:
        return MetricStatus.GOOD
    if value <= threshold.needs_improvement:
        return MetricStatus.NEEDS_IMPROVEMENT
    return MetricStatus.POOR


def metric_display_name(metric: str) -> str:
    threshold = THRESHOLDS_BY_KEY.get(metric)
    return threshold.display_name if threshold is not None else metric
