"""
app/api/routers/crux_router.py

Chrome UX Report HTTP endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.dependencies import get_batch_urls, get_report_url
from app.schemas.crux_report import BatchReportResponse, ReportResponse
from app.services.crux_report_service import (
    CruxReportError,
    CruxReportService,
    get_crux_report_service,
)

router = APIRouter(prefix="/api/crux", tags=["crux"])


@router.post("/report", response_model=ReportResponse, response_model_exclude_none=True)
def get_report(
    url: str = Depends(get_report_url),
    report_service: CruxReportService = Depends(get_crux_report_service),
) -> ReportResponse:
    """
    Fetch CrUX metrics for one URL and derive insights.
    """

    try:
        report = report_service.get_report(url)
    except CruxReportError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"{exc}: {exc.details}",
        ) from exc

    return ReportResponse.from_domain(report)


@router.post("/batch-report", response_model=BatchReportResponse, response_model_exclude_none=True)
def get_batch_report(
    urls: list[str] = Depends(get_batch_urls),
    report_service: CruxReportService = Depends(get_crux_report_service),
) -> BatchReportResponse:
    """
    Fetch CrUX metrics for many URLs and summarize them.
    """

    return BatchReportResponse.from_domain(report_service.get_batch_report(urls))
