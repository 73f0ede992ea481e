"""Pure table helpers for the Streamlit UI.

Everything here works on the JSON returned by the API and stays free of
Streamlit calls so it can be unit tested.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, Optional

import pandas as pd

from crux.insights import round_half_up
from crux.thresholds import MetricStatus, classify, metric_display_name

URL_PATTERN = re.compile(r"^(https?://)?([\da-z.-]+)\.([a-z.]{2,6})([/\w .-]*)/?$")

STATUS_FILTERS = {
    "all": None,
    "good": MetricStatus.GOOD,
    "needsImprovement": MetricStatus.NEEDS_IMPROVEMENT,
    "poor": MetricStatus.POOR,
}

# Streamlit colour names per status band.
_STATUS_COLOURS = {
    MetricStatus.GOOD: "green",
    MetricStatus.NEEDS_IMPROVEMENT: "orange",
    MetricStatus.POOR: "red",
}

SINGLE_COLUMNS = ["Metric", "75th Percentile", "Good (%)", "Needs Improvement (%)", "Poor (%)", "Status"]
COMPARISON_COLUMNS = ["URL", "Metric", "75th Percentile", "Good (%)", "Status"]


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return None if number != number else number


# ── Input parsing ──────────────────────────────────────────────────────────
def is_valid_url(value: str) -> bool:
    return bool(URL_PATTERN.match(value))


def parse_url_lines(text: str, existing: Iterable[str] = ()) -> list[str]:
    """Merge valid, non-blank lines of *text* into *existing*, de-duplicated in order."""
    merged: list[str] = []
    for url in [*existing, *(line.strip() for line in text.splitlines())]:
        if url and is_valid_url(url) and url not in merged:
            merged.append(url)
    return merged


# ── Formatting ─────────────────────────────────────────────────────────────
def status_for(metric: str, value: Any) -> Optional[MetricStatus]:
    number = _as_float(value)
    if number is None:
        return None
    return classify(metric, number)


def status_label(status: Optional[MetricStatus]) -> str:
    return status.label if status is not None else "N/A"


def status_colour(status: Optional[MetricStatus]) -> str:
    return _STATUS_COLOURS.get(status, "gray") if status is not None else "gray"


def format_percentile(metric: str, value: Any) -> str:
    number = _as_float(value)
    if number is None:
        return "N/A"
    if metric == "cls":
        return f"{number:.3f}"
    return f"{round_half_up(number)}ms"


def format_density(value: Any) -> str:
    number = _as_float(value)
    return "N/A" if number is None else f"{number * 100:.1f}%"


def score_level(score: Any) -> str:
    """Return ``success`` (≥90), ``warning`` (≥50) or ``error``."""
    number = _as_float(score) or 0.0
    if number >= 90:
        return "success"
    if number >= 50:
        return "warning"
    return "error"


# ── Row builders ───────────────────────────────────────────────────────────
def metric_rows(report: dict[str, Any]) -> list[dict[str, Any]]:
    """One row per metric of a single-URL report; errored metrics are skipped."""
    metrics = report.get("metrics")
    if not isinstance(metrics, dict) or "error" in metrics:
        return []

    rows: list[dict[str, Any]] = []
    for metric, bucket in metrics.items():
        if not isinstance(bucket, dict) or "error" in bucket:
            continue
        rows.append(
            {
                "metric": metric,
                "name": metric_display_name(metric),
                "percentile": bucket.get("percentile"),
                "good": bucket.get("good"),
                "needsImprovement": bucket.get("needsImprovement"),
                "poor": bucket.get("poor"),
                "status": status_for(metric, bucket.get("percentile")),
            }
        )
    return rows


def filter_by_status(rows: list[dict[str, Any]], status_filter: str) -> list[dict[str, Any]]:
    wanted = STATUS_FILTERS.get(status_filter)
    if wanted is None:
        return list(rows)
    return [row for row in rows if row["status"] == wanted]


def comparison_rows(
    results: list[dict[str, Any]],
    *,
    url_filter: str = "",
    metric_filter: str = "all",
    status_filter: str = "all",
) -> list[dict[str, Any]]:
    """Flatten batch results into (url, metric) rows after applying the filters."""
    rows: list[dict[str, Any]] = []
    for result in filter_results_by_url(results, url_filter):
        for row in metric_rows(result):
            if metric_filter != "all" and row["metric"] != metric_filter:
                continue
            rows.append({"url": result.get("url", ""), **row})
    return filter_by_status(rows, status_filter)


def filter_results_by_url(results: list[dict[str, Any]], url_filter: str) -> list[dict[str, Any]]:
    needle = url_filter.strip().lower()
    if not needle:
        return list(results)
    return [result for result in results if needle in str(result.get("url", "")).lower()]


def all_metrics(results: list[dict[str, Any]]) -> list[str]:
    """Metric keys seen across results, in first-seen order."""
    seen: list[str] = []
    for result in results:
        metrics = result.get("metrics")
        if not isinstance(metrics, dict) or "error" in metrics:
            continue
        for metric in metrics:
            if metric not in seen:
                seen.append(metric)
    return seen


def sort_rows(rows: list[dict[str, Any]], key: Optional[str], *, descending: bool = False) -> list[dict[str, Any]]:
    """Stable sort on *key*; numeric-looking values compare as numbers, missing values go last."""
    if not key:
        return list(rows)

    def _sort_key(row: dict[str, Any]) -> tuple:
        value = row.get(key)
        if isinstance(value, MetricStatus):
            value = value.label
        number = _as_float(value)
        if number is not None:
            return (0, number, "")
        return (1, 0.0, str(value).lower())

    present = [row for row in rows if row.get(key) is not None]
    missing = [row for row in rows if row.get(key) is None]
    return sorted(present, key=_sort_key, reverse=descending) + missing


def average_rows(summary: dict[str, Any]) -> list[dict[str, Any]]:
    averages = summary.get("averages") or {}
    return [
        {
            "metric": metric,
            "name": metric_display_name(metric),
            "percentile": value,
            "status": status_for(metric, value),
        }
        for metric, value in averages.items()
        if metric != "performanceScore"
    ]


# ── DataFrames ─────────────────────────────────────────────────────────────
def single_table(rows: list[dict[str, Any]]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            [
                row["name"],
                format_percentile(row["metric"], row["percentile"]),
                format_density(row["good"]),
                format_density(row["needsImprovement"]),
                format_density(row["poor"]),
                status_label(row["status"]),
            ]
            for row in rows
        ],
        columns=SINGLE_COLUMNS,
    )


def comparison_table(rows: list[dict[str, Any]]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            [
                row["url"],
                row["name"],
                format_percentile(row["metric"], row["percentile"]),
                format_density(row["good"]),
                status_label(row["status"]),
            ]
            for row in rows
        ],
        columns=COMPARISON_COLUMNS,
    )


def averages_table(rows: list[dict[str, Any]]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            [row["name"], format_percentile(row["metric"], row["percentile"]), status_label(row["status"])]
            for row in rows
        ],
        columns=["Metric", "Average 75th Percentile", "Status"],
    )
