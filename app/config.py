"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

DEVELOPMENT = "development"

DEFAULT_CRUX_ENDPOINT = "https://chromeuxreport.googleapis.com/v1/records:queryRecord"
DEFAULT_CRUX_METRICS = (
    "largest_contentful_paint",
    "cumulative_layout_shift",
    "interaction_to_next_paint",
    "first_contentful_paint",
)


def load_env_files() -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.
    """

    project_root = Path(__file__).resolve().parents[1]
    for filename in (".env", ".env.local"):
        env_path = project_root / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    """
    Read an optional string value from environment variables.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


def _get_list_env(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    """
    Read a comma-separated list, dropping blank entries.
    """

    raw_value = _get_optional_str_env(name)
    if raw_value is None:
        return default
    items = tuple(item.strip() for item in raw_value.split(",") if item.strip())
    return items or default


@dataclass(frozen=True)
class AppSettings:
    """
    Top-level application mode settings.

    ``environment`` is ``"development"`` unless overridden; development
    mode substitutes mock data when the CrUX API cannot be reached.
    """

    environment: str = DEVELOPMENT
    cors_allow_origins: tuple[str, ...] = ("*",)

    @property
    def is_development(self) -> bool:
        return self.environment == DEVELOPMENT


@dataclass(frozen=True)
class ExternalHTTPSettings:
    """
    Shared HTTP behavior settings for external connectors.
    """

    timeout_seconds: float = 30.0
    verify_tls: bool = False


@dataclass(frozen=True)
class CruxAPISettings:
    """
    Chrome UX Report API connector settings.
    """

    api_key: str | None = None
    endpoint: str = DEFAULT_CRUX_ENDPOINT
    form_factor: str = "PHONE"
    metrics: tuple[str, ...] = DEFAULT_CRUX_METRICS


@lru_cache(maxsize=1)
def get_app_settings() -> AppSettings:
    """
    Return cached application settings.
    """

    return AppSettings(
        environment=_get_str_env("ENVIRONMENT", DEVELOPMENT).lower(),
        cors_allow_origins=_get_list_env("CORS_ALLOW_ORIGINS", ("*",)),
    )


@lru_cache(maxsize=1)
def get_external_http_settings() -> ExternalHTTPSettings:
    """
    Return shared connector HTTP settings from environment variables.
    """

    return ExternalHTTPSettings(
        timeout_seconds=max(1.0, _get_float_env("EXTERNAL_HTTP_TIMEOUT_SECONDS", 30.0)),
        verify_tls=_get_bool_env("CRUX_VERIFY_TLS", False),
    )


@lru_cache(maxsize=1)
def get_crux_api_settings() -> CruxAPISettings:
    """
    Return CrUX API connector settings from environment variables.

    ``CRUX_API_KEY`` wins over the legacy ``GOOGLE_API_KEY`` name.
    """

    return CruxAPISettings(
        api_key=_get_optional_str_env("CRUX_API_KEY") or _get_optional_str_env("GOOGLE_API_KEY"),
        endpoint=_get_str_env("CRUX_API_ENDPOINT", DEFAULT_CRUX_ENDPOINT),
        form_factor=_get_str_env("CRUX_FORM_FACTOR", "PHONE").upper(),
        metrics=_get_list_env("CRUX_METRICS", DEFAULT_CRUX_METRICS),
    )


def clear_settings_cache() -> None:
    """
    Drop cached settings so the next getter call re-reads the environment.
    """

    get_app_settings.cache_clear()
    get_external_http_settings.cache_clear()
    get_crux_api_settings.cache_clear()
