"""
app/connectors/base.py

Base connector abstraction and shared HTTP mechanics.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from typing import Any

import requests

from app.config import ExternalHTTPSettings

logger = logging.getLogger(__name__)


class ConnectorRequestError(RuntimeError):
    """
    Raised when a connector cannot fetch data.

    ``status_code`` and ``reason`` are set when the upstream answered with
    a non-2xx status; both are ``None`` for network-level failures.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        reason: str | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason
        self.body = body

    @property
    def is_http_error(self) -> bool:
        return self.status_code is not None


class BaseConnector(ABC):
    """
    Connector interface for fetching one upstream record per URL.

    Without an injected session each worker thread gets its own
    ``requests.Session``; batch requests call the connector from a thread
    pool and sessions are not shared across threads.
    """

    source: str

    def __init__(
        self,
        *,
        source: str,
        http_settings: ExternalHTTPSettings,
        session: requests.Session | None = None,
    ) -> None:
        self.source = source
        self._shared_session = session
        self._local = threading.local()
        self._owned_sessions: list[requests.Session] = []
        self._sessions_lock = threading.Lock()
        self._timeout_seconds = http_settings.timeout_seconds
        self._verify_tls = http_settings.verify_tls

    @abstractmethod
    def fetch_record(self, url: str) -> Any:
        """
        Fetch the raw upstream payload for *url*.
        """

    def _get_session(self) -> requests.Session:
        if self._shared_session is not None:
            return self._shared_session
        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            self._local.session = session
            with self._sessions_lock:
                self._owned_sessions.append(session)
        return session

    def close(self) -> None:
        """
        Close every session this connector created. Injected sessions are
        left to their owner.
        """

        with self._sessions_lock:
            sessions, self._owned_sessions = self._owned_sessions, []
        for session in sessions:
            session.close()
        self._local = threading.local()

    def _request_json(
        self,
        *,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        json_body: Any = None,
    ) -> Any:
        """
        Execute an HTTP request and return parsed JSON.
        """

        response = self._request(
            method=method,
            url=url,
            params=params,
            headers=headers,
            json_body=json_body,
        )
        try:
            return response.json()
        except ValueError as exc:
            raise ConnectorRequestError(f"{self.source}: response was not valid JSON.") from exc

    def _request(
        self,
        *,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        json_body: Any = None,
    ) -> requests.Response:
        """
        Execute one HTTP request. Non-2xx responses and transport
        failures surface as ConnectorRequestError; nothing is retried.
        """

        try:
            response = self._get_session().request(
                method=method,
                url=url,
                params=params,
                headers=headers,
                json=json_body,
                timeout=self._timeout_seconds,
                verify=self._verify_tls,
            )
        except requests.RequestException as exc:
            logger.error(
                "Connector request failed source=%s url=%s error=%s",
                self.source,
                url,
                exc,
            )
            raise ConnectorRequestError(str(exc)) from exc

        if not response.ok:
            logger.error(
                "Connector request failed source=%s status=%s reason=%s body=%s",
                self.source,
                response.status_code,
                response.reason,
                response.text,
            )
            raise ConnectorRequestError(
                f"API response error: {response.status_code} {response.reason}",
                status_code=response.status_code,
                reason=response.reason,
                body=response.text,
            )
        return response
