"""
app/services package marker.
"""

from app.services.crux_report_service import (
    CruxReportError,
    CruxReportService,
    close_crux_report_service,
    get_crux_report_service,
)

__all__ = [
    "CruxReportError",
    "CruxReportService",
    "close_crux_report_service",
    "get_crux_report_service",
]
