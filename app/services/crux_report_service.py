"""
app/services/crux_report_service.py

Orchestration service for CrUX reports.

Single URL: primary client, then one fallback client, then (development
only) mock data. Batch: one primary call per URL issued concurrently, joined,
then aggregated.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from functools import lru_cache
from typing import Sequence

from app.config import (
    AppSettings,
    get_app_settings,
    get_crux_api_settings,
    get_external_http_settings,
)
from app.connectors import ConnectorRequestError, CruxConnector
from crux.aggregation import build_url_report, process_batch
from crux.mock_data import generate_mock_batch, generate_mock_report
from crux.models import BatchReport, FetchOutcome, UrlReport

logger = logging.getLogger(__name__)


class CruxReportError(RuntimeError):
    """
    Raised when a single-URL report cannot be produced from the live API.
    """

    def __init__(self, message: str, *, details: str) -> None:
        super().__init__(message)
        self.details = details


def describe_fetch_error(exc: ConnectorRequestError) -> str:
    """
    Per-URL error text used in batch results.
    """

    if exc.is_http_error:
        return f"API error: {exc.status_code} {exc.reason or ''}".rstrip()
    return f"Failed to fetch data: {exc}"


class CruxReportService:
    """
    Coordinates CrUX fetching, shaping and the development mock fallback.
    """

    def __init__(
        self,
        *,
        connector: CruxConnector,
        app_settings: AppSettings,
    ) -> None:
        self._connector = connector
        self._app_settings = app_settings

    def get_report(self, url: str) -> UrlReport:
        """
        Build the report for one URL.

        Raises CruxReportError when both HTTP clients fail outside
        development mode.
        """

        logger.info("Fetching CrUX data url=%s", url)
        try:
            data = self._fetch_with_fallback(url)
        except ConnectorRequestError as exc:
            details = exc.body or str(exc)
            logger.error("Error fetching CrUX data url=%s error=%s", url, details)
            if self._app_settings.is_development:
                logger.warning("Serving mock CrUX data for development url=%s", url)
                return generate_mock_report(url)
            raise CruxReportError("Failed to fetch CrUX data", details=details) from exc

        return build_url_report(FetchOutcome(url=url, data=data))

    def get_batch_report(self, urls: Sequence[str]) -> BatchReport:
        """
        Build reports for many URLs plus a summary.

        Per-URL fetch failures become error entries; the batch itself only
        fails on programming errors.
        """

        if self._app_settings.is_development:
            logger.warning("Serving mock CrUX batch for development urls=%d", len(urls))
            return generate_mock_batch(urls)

        if not urls:
            return process_batch([])

        with ThreadPoolExecutor(max_workers=len(urls), thread_name_prefix="crux-batch") as executor:
            outcomes = list(executor.map(self._fetch_outcome, urls))

        return process_batch(outcomes)

    def close(self) -> None:
        self._connector.close()

    def _fetch_with_fallback(self, url: str) -> object:
        try:
            return self._connector.fetch_record(url)
        except ConnectorRequestError as exc:
            logger.warning("Primary CrUX client failed, trying fallback url=%s error=%s", url, exc)
            return self._connector.fetch_record_fallback(url)

    def _fetch_outcome(self, url: str) -> FetchOutcome:
        try:
            return FetchOutcome(url=url, data=self._connector.fetch_record(url))
        except ConnectorRequestError as exc:
            logger.error("Error fetching CrUX data url=%s error=%s", url, exc)
            return FetchOutcome(url=url, error=describe_fetch_error(exc))


@lru_cache(maxsize=1)
def get_crux_report_service() -> CruxReportService:
    """
    Build and cache the CrUX report service.
    """

    connector = CruxConnector(
        settings=get_crux_api_settings(),
        http_settings=get_external_http_settings(),
    )
    return CruxReportService(connector=connector, app_settings=get_app_settings())


def close_crux_report_service() -> None:
    """
    Close the cached service's HTTP clients, if the service was built.
    """

    if get_crux_report_service.cache_info().currsize:
        get_crux_report_service().close()
        get_crux_report_service.cache_clear()
