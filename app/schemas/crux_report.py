"""
app/schemas/crux_report.py

Request and response schemas for the CrUX report endpoints.

Wire format is camelCase (``needsImprovement``, ``performanceScore``);
absent values are dropped from responses rather than sent as null.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from crux.models import BatchReport, BatchSummary, Insights, NormalizedMetrics, UrlReport


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ReportRequest(BaseModel):
    """
    Body for ``POST /api/crux/report``.
    """

    url: str | None = None


class BatchReportRequest(BaseModel):
    """
    Body for ``POST /api/crux/batch-report``.

    ``urls`` is accepted as any JSON value; its shape is checked by the
    ``get_batch_urls`` dependency so every bad shape gets the same message.
    """

    urls: Any = None


class MetricBucketResponse(_CamelModel):
    good: float
    needs_improvement: float
    poor: float
    percentile: int | float | str


class ProcessingErrorResponse(BaseModel):
    error: str


class InsightsResponse(_CamelModel):
    summary: str | None = None
    issues: list[str] | None = None
    recommendations: list[str] | None = None
    performance_score: int | None = Field(default=None, ge=0, le=100)
    error: str | None = None

    @classmethod
    def from_domain(cls, insights: Insights) -> "InsightsResponse":
        if insights.error is not None:
            return cls(error=insights.error)
        return cls(
            summary=insights.summary,
            issues=list(insights.issues),
            recommendations=list(insights.recommendations),
            performance_score=insights.performance_score,
        )


def _metrics_response(
    metrics: NormalizedMetrics,
) -> dict[str, MetricBucketResponse] | ProcessingErrorResponse:
    if metrics.error is not None:
        return ProcessingErrorResponse(error=metrics.error)
    return {
        key: MetricBucketResponse(
            good=bucket.good,
            needs_improvement=bucket.needs_improvement,
            poor=bucket.poor,
            percentile=bucket.percentile,
        )
        for key, bucket in metrics.buckets.items()
    }


class ReportResponse(_CamelModel):
    """
    API response model for one URL report (or one batch entry).
    """

    url: str
    metrics: dict[str, MetricBucketResponse] | ProcessingErrorResponse | None = None
    insights: InsightsResponse | None = None
    error: str | None = None
    is_mock_data: bool | None = None

    @classmethod
    def from_domain(cls, report: UrlReport) -> "ReportResponse":
        return cls(
            url=report.url,
            metrics=_metrics_response(report.metrics) if report.metrics is not None else None,
            insights=InsightsResponse.from_domain(report.insights) if report.insights is not None else None,
            error=report.error,
            is_mock_data=True if report.is_mock_data else None,
        )


class AveragesResponse(_CamelModel):
    lcp: float | None = None
    cls: float | None = None
    fid: float | None = None
    inp: float | None = None
    fcp: float | None = None
    performance_score: float | None = None


class BatchSummaryResponse(_CamelModel):
    total_urls: int = Field(..., ge=0)
    valid_results: int = Field(..., ge=0)
    averages: AveragesResponse | None = None

    @classmethod
    def from_domain(cls, summary: BatchSummary) -> "BatchSummaryResponse":
        return cls(
            total_urls=summary.total_urls,
            valid_results=summary.valid_results,
            averages=AveragesResponse(**summary.averages) if summary.averages is not None else None,
        )


class BatchReportResponse(_CamelModel):
    """
    API response model for a batch of URL reports.
    """

    results: list[ReportResponse]
    summary: BatchSummaryResponse
    is_mock_data: bool | None = None

    @classmethod
    def from_domain(cls, report: BatchReport) -> "BatchReportResponse":
        return cls(
            results=[ReportResponse.from_domain(result) for result in report.results],
            summary=BatchSummaryResponse.from_domain(report.summary),
            is_mock_data=True if report.is_mock_data else None,
        )
