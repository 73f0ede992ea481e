"""Streamlit frontend for CrUX Insights.

Replaceable UI layer; all display logic lives here.
Data comes from the API only (see ``frontend.api_client``).
"""

from __future__ import annotations

from typing import Any, Optional

import streamlit as st

from crux.insights import round_half_up
from crux.thresholds import metric_display_name
from frontend.api_client import APIClientError, fetch_batch_report, fetch_report
from frontend.table import (
    all_metrics,
    average_rows,
    averages_table,
    comparison_rows,
    comparison_table,
    filter_by_status,
    filter_results_by_url,
    format_density,
    format_percentile,
    is_valid_url,
    metric_rows,
    parse_url_lines,
    score_level,
    single_table,
    sort_rows,
    status_colour,
    status_label,
)

# ── Page config (must be first Streamlit call) ─────────────────────────────
st.set_page_config(
    page_title="Chrome UX Report Analyzer",
    page_icon="📊",
    layout="wide",
)


# ── Session state defaults ─────────────────────────────────────────────────
_STATE_DEFAULTS: dict = {
    "result": None,
    "result_is_batch": False,
    "urls": [],
    "error": None,
}

for _key, _val in _STATE_DEFAULTS.items():
    if _key not in st.session_state:
        st.session_state[_key] = _val

_STATUS_OPTIONS = {
    "all": "All",
    "good": "Good",
    "needsImprovement": "Needs Improvement",
    "poor": "Poor",
}

_SINGLE_SORT_KEYS = {
    "name": "Metric",
    "percentile": "75th Percentile",
    "good": "Good (%)",
    "needsImprovement": "Needs Improvement (%)",
    "poor": "Poor (%)",
}

_COMPARISON_SORT_KEYS = {
    "url": "URL",
    "name": "Metric",
    "percentile": "75th Percentile",
    "good": "Good (%)",
}

_SCORE_ICON = {"success": "🟢", "warning": "🟡", "error": "🔴"}


def _reset_result() -> None:
    st.session_state.result = None
    st.session_state.error = None


# ── Helper renderers ───────────────────────────────────────────────────────
def _render_score(score: Optional[Any], label: str = "Performance Score") -> None:
    if score is None:
        return
    level = score_level(score)
    st.markdown(f"**{label}:** {_SCORE_ICON[level]} {round_half_up(float(score))}%")


def _sort_controls(key_prefix: str, options: dict[str, str]) -> tuple[Optional[str], bool]:
    cols = st.columns(2)
    sort_key = cols[0].selectbox(
        "Sort by",
        options=[None, *options.keys()],
        format_func=lambda k: "None" if k is None else options[k],
        key=f"{key_prefix}_sort_key",
    )
    descending = cols[1].radio(
        "Direction",
        options=["asc", "desc"],
        horizontal=True,
        key=f"{key_prefix}_sort_dir",
    ) == "desc"
    return sort_key, descending


def _render_single(report: dict) -> None:
    st.subheader(f"Results for: {report.get('url', '')}")
    if report.get("isMockData"):
        st.caption("Showing mock data: the Chrome UX Report API could not be reached.")

    insights = report.get("insights") or {}
    _render_score(insights.get("performanceScore"))

    status_filter = st.selectbox(
        "Filter by Status",
        options=list(_STATUS_OPTIONS.keys()),
        format_func=_STATUS_OPTIONS.get,
        key="single_status_filter",
    )
    sort_key, descending = _sort_controls("single", _SINGLE_SORT_KEYS)

    rows = sort_rows(filter_by_status(metric_rows(report), status_filter), sort_key, descending=descending)
    if rows:
        st.dataframe(single_table(rows), use_container_width=True, hide_index=True)
    else:
        st.info("No data available")

    issues = insights.get("issues") or []
    if issues:
        st.subheader("Insights & Recommendations")
        st.markdown("**Issues Detected:**")
        for issue in issues:
            st.markdown(f"- {issue}")
        st.markdown("**Recommendations:**")
        for recommendation in insights.get("recommendations") or []:
            st.markdown(f"- {recommendation}")


def _render_comparison(results: list[dict]) -> None:
    cols = st.columns(3)
    url_filter = cols[0].text_input("Filter by URL", key="cmp_url_filter")
    metrics = all_metrics(results)
    metric_filter = cols[1].selectbox(
        "Filter by Metric",
        options=["all", *metrics],
        format_func=lambda m: "All Metrics" if m == "all" else metric_display_name(m),
        key="cmp_metric_filter",
    )
    status_filter = cols[2].selectbox(
        "Filter by Status",
        options=list(_STATUS_OPTIONS.keys()),
        format_func=_STATUS_OPTIONS.get,
        key="cmp_status_filter",
    )
    sort_key, descending = _sort_controls("cmp", _COMPARISON_SORT_KEYS)

    rows = comparison_rows(
        results,
        url_filter=url_filter,
        metric_filter=metric_filter,
        status_filter=status_filter,
    )
    rows = sort_rows(rows, sort_key, descending=descending)
    if rows:
        st.dataframe(comparison_table(rows), use_container_width=True, hide_index=True)
    else:
        st.info("No data available")


def _render_individual(results: list[dict]) -> None:
    url_filter = st.text_input("Filter by URL", key="ind_url_filter")
    for result in filter_results_by_url(results, url_filter):
        st.markdown(f"#### {result.get('url', '')}")
        if result.get("error"):
            st.error(f"Error: {result['error']}")
            continue

        insights = result.get("insights") or {}
        _render_score(insights.get("performanceScore"))

        rows = metric_rows(result)
        if not rows:
            st.info("No metrics data available")
        for row in rows:
            status = row["status"]
            st.markdown(
                f"- {row['name']}: {format_percentile(row['metric'], row['percentile'])}"
                f" · good {format_density(row['good'])}"
                f" · :{status_colour(status)}[{status_label(status)}]"
            )

        recommendations = insights.get("recommendations") or []
        if recommendations:
            with st.expander("Recommendations"):
                for recommendation in recommendations:
                    st.markdown(f"- {recommendation}")


def _render_summary(summary: dict) -> None:
    st.markdown(f"Total URLs analyzed: **{summary.get('totalUrls', 0)}**")
    st.markdown(f"URLs with valid data: **{summary.get('validResults', 0)}**")

    averages = summary.get("averages")
    if not averages:
        return

    st.subheader("Average Metrics")
    st.dataframe(averages_table(average_rows(summary)), use_container_width=True, hide_index=True)
    _render_score(averages.get("performanceScore"), label="Average Performance Score")


def _render_batch(data: dict) -> None:
    st.subheader("Multiple URLs Analysis")
    if data.get("isMockData"):
        st.caption("Showing mock data (development mode).")

    results: list[dict] = data.get("results") or []
    summary: Optional[dict] = data.get("summary")

    labels = ["Comparison Table", "Individual Results"]
    if summary:
        labels.append("Summary & Averages")
    tabs = st.tabs(labels)

    with tabs[0]:
        _render_comparison(results)
    with tabs[1]:
        _render_individual(results)
    if summary:
        with tabs[2]:
            _render_summary(summary)


# ── Sidebar / input ────────────────────────────────────────────────────────
st.title("Chrome UX Report Analyzer")

multi_url_mode = st.toggle("Multiple URLs", value=False, on_change=_reset_result)

if not multi_url_mode:
    url = st.text_input("Enter URL to analyze", placeholder="https://example.com")
    if url and not is_valid_url(url.strip()):
        st.caption(":red[Please enter a valid URL]")

    if st.button("Search", type="primary"):
        st.session_state.error = None
        st.session_state.result = None
        if not url.strip():
            st.session_state.error = "Please enter a URL"
        elif not is_valid_url(url.strip()):
            st.session_state.error = "Please enter a valid URL"
        else:
            with st.spinner("Fetching Chrome UX Report…"):
                try:
                    st.session_state.result = fetch_report(url.strip())
                    st.session_state.result_is_batch = False
                except APIClientError as exc:
                    st.session_state.error = str(exc)
else:
    url_input = st.text_area("Enter Multiple URLs to analyze (one per line)", height=120)
    cols = st.columns(2)
    if cols[0].button("Add URLs"):
        merged = parse_url_lines(url_input, st.session_state.urls)
        if len(merged) > len(st.session_state.urls):
            st.session_state.urls = merged
            st.session_state.error = None
        else:
            st.session_state.error = "Please enter valid URLs"

    if st.session_state.urls:
        st.markdown(f"URLs to analyze ({len(st.session_state.urls)}):")
        for index, queued in enumerate(list(st.session_state.urls)):
            row = st.columns([6, 1])
            row[0].write(queued)
            if row[1].button("Remove", key=f"remove_{index}"):
                st.session_state.urls.pop(index)
                st.rerun()

    if cols[1].button("Search", type="primary"):
        st.session_state.result = None
        if not st.session_state.urls:
            st.session_state.error = "Please add at least one URL"
        else:
            st.session_state.error = None
            with st.spinner("Fetching Chrome UX Reports…"):
                try:
                    st.session_state.result = fetch_batch_report(list(st.session_state.urls))
                    st.session_state.result_is_batch = True
                except APIClientError as exc:
                    st.session_state.error = str(exc)


# ── Results ────────────────────────────────────────────────────────────────
if st.session_state.error:
    st.error(st.session_state.error)

if st.session_state.result:
    if st.session_state.result_is_batch:
        _render_batch(st.session_state.result)
    else:
        _render_single(st.session_state.result)
