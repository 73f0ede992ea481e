"""
crux/models.py

Request-scoped value objects produced by the CrUX data-shaping layer.

None of these objects outlive a single request. They are frozen so the
pure transforms in this package can share them freely between threads.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

PROCESSING_ERROR = "Failed to process CrUX data"


@dataclass(frozen=True)
class MetricBucket:
    """
    Density split and 75th percentile for one web-vital metric.

    ``percentile`` is carried exactly as the API sent it; CLS arrives as
    a decimal string.
    """

    good: float
    needs_improvement: float
    poor: float
    percentile: float | str


@dataclass(frozen=True)
class NormalizedMetrics:
    """
    Per-metric buckets keyed by short metric name (``lcp``, ``cls``, ...).

    Exactly one of ``buckets`` / ``error`` is meaningful: a malformed
    upstream payload produces an empty mapping and an ``error`` message.
    """

    buckets: Mapping[str, MetricBucket] = field(default_factory=dict)
    error: str | None = None

    @classmethod
    def failure(cls, reason: str = PROCESSING_ERROR) -> "NormalizedMetrics":
        return cls(buckets={}, error=reason)

    def get(self, metric: str) -> MetricBucket | None:
        return self.buckets.get(metric)


@dataclass(frozen=True)
class Insights:
    """
    Heuristic findings derived from one normalized result.

    ``performance_score`` is ``None`` when no scored metric was present.
    """

    summary: str | None = None
    issues: tuple[str, ...] = ()
    recommendations: tuple[str, ...] = ()
    performance_score: int | None = None
    error: str | None = None

    @classmethod
    def failure(cls, reason: str) -> "Insights":
        return cls(error=reason)


@dataclass(frozen=True)
class UrlReport:
    """
    Outcome for one URL: metrics plus insights, or a fetch error.
    """

    url: str
    metrics: NormalizedMetrics | None = None
    insights: Insights | None = None
    error: str | None = None
    is_mock_data: bool = False

    @property
    def is_valid(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class FetchOutcome:
    """
    Raw result of one outbound CrUX call, before any shaping.

    Either ``data`` holds the decoded API payload or ``error`` describes
    why the call failed.
    """

    url: str
    data: object = None
    error: str | None = None


@dataclass(frozen=True)
class BatchSummary:
    """
    Totals and per-metric averages across a batch.

    ``averages`` is ``None`` when no URL produced a valid result.
    """

    total_urls: int
    valid_results: int
    averages: Mapping[str, float] | None = None


@dataclass(frozen=True)
class BatchReport:
    results: tuple[UrlReport, ...]
    summary: BatchSummary
    is_mock_data: bool = False
