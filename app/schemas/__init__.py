"""
app/schemas package marker.
"""

from app.schemas.crux_report import (
    AveragesResponse,
    BatchReportRequest,
    BatchReportResponse,
    BatchSummaryResponse,
    InsightsResponse,
    MetricBucketResponse,
    ProcessingErrorResponse,
    ReportRequest,
    ReportResponse,
)

__all__ = [
    "AveragesResponse",
    "BatchReportRequest",
    "BatchReportResponse",
    "BatchSummaryResponse",
    "InsightsResponse",
    "MetricBucketResponse",
    "ProcessingErrorResponse",
    "ReportRequest",
    "ReportResponse",
]
