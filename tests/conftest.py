"""
Shared fixtures.
"""

from __future__ import annotations

from typing import Any

import pytest

from app.config import clear_settings_cache
from tests.payloads import crux_metric, crux_payload


@pytest.fixture()
def full_payload() -> dict[str, Any]:
    return crux_payload(
        largest_contentful_paint=crux_metric(0.75, 0.15, 0.10, 2300),
        cumulative_layout_shift=crux_metric(0.82, 0.12, 0.06, "0.08"),
        interaction_to_next_paint=crux_metric(0.65, 0.25, 0.10, 180),
        first_contentful_paint=crux_metric(0.78, 0.15, 0.07, 1600),
    )


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Settings getters are lru_cached; re-read the environment per test."""
    clear_settings_cache()
    yield
    clear_settings_cache()
