"""
app/connectors/crux_connector.py

Chrome UX Report API connector.

The primary path goes through a shared ``requests`` session. A second,
independent client (``httpx``) is available as the single fallback path
for callers that want one more attempt through a different HTTP stack.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
import requests

from app.config import CruxAPISettings, ExternalHTTPSettings
from app.connectors.base import BaseConnector, ConnectorRequestError

logger = logging.getLogger(__name__)

JSON_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


class CruxConnector(BaseConnector):
    """
    Connector for ``records:queryRecord`` on the CrUX API.
    """

    def __init__(
        self,
        *,
        settings: CruxAPISettings,
        http_settings: ExternalHTTPSettings,
        session: requests.Session | None = None,
        fallback_client: httpx.Client | None = None,
    ) -> None:
        super().__init__(source="crux_api", http_settings=http_settings, session=session)
        self._settings = settings
        self._fallback_client = fallback_client or httpx.Client(
            timeout=http_settings.timeout_seconds,
            verify=http_settings.verify_tls,
        )

    def close(self) -> None:
        super().close()
        self._fallback_client.close()

    def build_payload(self, url: str) -> dict[str, Any]:
        return {
            "url": url,
            "formFactor": self._settings.form_factor,
            "metrics": list(self._settings.metrics),
        }

    def _params(self) -> dict[str, str]:
        return {"key": self._settings.api_key} if self._settings.api_key else {}

    def fetch_record(self, url: str) -> Any:
        """
        Query the CrUX record for *url* through the requests session.
        """

        payload = self._request_json(
            method="POST",
            url=self._settings.endpoint,
            params=self._params(),
            headers=JSON_HEADERS,
            json_body=self.build_payload(url),
        )
        logger.info("Received CrUX data url=%s", url)
        return payload

    def fetch_record_fallback(self, url: str) -> Any:
        """
        Same query as fetch_record, issued through httpx.
        """

        try:
            response = self._fallback_client.post(
                self._settings.endpoint,
                params=self._params(),
                headers=JSON_HEADERS,
                json=self.build_payload(url),
            )
        except httpx.HTTPError as exc:
            logger.error("Fallback CrUX request failed url=%s error=%s", url, exc)
            raise ConnectorRequestError(str(exc)) from exc

        if not response.is_success:
            logger.error(
                "Fallback CrUX request failed url=%s status=%s body=%s",
                url,
                response.status_code,
                response.text,
            )
            raise ConnectorRequestError(
                f"API response error: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
                reason=response.reason_phrase,
                body=response.text,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise ConnectorRequestError(f"{self.source}: response was not valid JSON.") from exc
        logger.info("Received CrUX data via fallback client url=%s", url)
        return payload
