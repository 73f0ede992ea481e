"""
tests/test_crux_normalizer.py

Unit tests for normalize_crux_record.

Coverage
--------
- Bucket extraction from histogram bins and p75
- Percentile passed through unchanged (numbers and decimal strings)
- Missing metrics omitted
- Malformed payloads collapse to a single error result
"""

from __future__ import annotations

import pytest

from crux.aggregation import process_batch
from crux.insights import generate_insights
from crux.models import PROCESSING_ERROR, FetchOutcome, MetricBucket
from crux.normalizer import normalize_crux_record
from tests.payloads import crux_metric, crux_payload


class TestBucketExtraction:
    def test_full_payload_produces_all_present_metrics(self, full_payload) -> None:
        result = normalize_crux_record(full_payload)

        assert result.error is None
        assert set(result.buckets) == {"lcp", "cls", "inp", "fcp"}

    def test_lcp_bucket_matches_histogram(self, full_payload) -> None:
        result = normalize_crux_record(full_payload)

        assert result.get("lcp") == MetricBucket(
            good=0.75,
            needs_improvement=0.15,
            poor=0.10,
            percentile=2300,
        )

    @pytest.mark.parametrize("p75", [2300, 2300.5, "0.08", 0])
    def test_percentile_is_passed_through_unchanged(self, p75) -> None:
        payload = crux_payload(largest_contentful_paint=crux_metric(0.5, 0.3, 0.2, p75))

        bucket = normalize_crux_record(payload).get("lcp")

        assert bucket is not None
        assert bucket.percentile == p75
        assert type(bucket.percentile) is type(p75)

    def test_fid_is_read_when_present(self) -> None:
        payload = crux_payload(first_input_delay=crux_metric(0.9, 0.07, 0.03, 40))

        result = normalize_crux_record(payload)

        assert list(result.buckets) == ["fid"]
        assert result.get("fid").percentile == 40

    def test_missing_density_in_empty_bin_reads_as_zero(self) -> None:
        metric = crux_metric(1.0, 0.0, 0.0, 900)
        del metric["histogram"][2]["density"]

        bucket = normalize_crux_record(crux_payload(first_contentful_paint=metric)).get("fcp")

        assert bucket.poor == 0.0


class TestMissingMetrics:
    def test_absent_metric_is_omitted(self) -> None:
        payload = crux_payload(cumulative_layout_shift=crux_metric(0.9, 0.05, 0.05, "0.02"))

        result = normalize_crux_record(payload)

        assert "lcp" not in result.buckets
        assert result.get("lcp") is None

    def test_empty_metrics_object_is_not_an_error(self) -> None:
        result = normalize_crux_record(crux_payload())

        assert result.error is None
        assert dict(result.buckets) == {}

    def test_unknown_metrics_are_ignored(self) -> None:
        payload = crux_payload(experimental_time_to_first_byte=crux_metric(0.8, 0.1, 0.1, 500))

        assert dict(normalize_crux_record(payload).buckets) == {}


class TestMalformedPayload:
    @pytest.mark.parametrize(
        "payload",
        [
            None,
            {},
            {"record": {}},
            {"record": None},
            {"record": {"metrics": None}},
            {"record": {"metrics": []}},
            "not a dict",
            [],
        ],
    )
    def test_missing_record_metrics_yields_error(self, payload) -> None:
        result = normalize_crux_record(payload)

        assert result.error == PROCESSING_ERROR
        assert dict(result.buckets) == {}

    def test_short_histogram_yields_error_not_partial(self) -> None:
        broken = crux_metric(0.5, 0.3, 0.2, 2000)
        broken["histogram"] = broken["histogram"][:2]
        payload = crux_payload(
            largest_contentful_paint=broken,
            first_contentful_paint=crux_metric(0.8, 0.1, 0.1, 1200),
        )

        result = normalize_crux_record(payload)

        assert result.error == PROCESSING_ERROR
        assert dict(result.buckets) == {}

    def test_missing_p75_yields_error(self) -> None:
        metric = crux_metric(0.5, 0.3, 0.2, 2000)
        metric["percentiles"] = {}

        result = normalize_crux_record(crux_payload(largest_contentful_paint=metric))

        assert result.error == PROCESSING_ERROR

    def test_non_numeric_p75_yields_error(self) -> None:
        metric = crux_metric(0.5, 0.3, 0.2, "fast")

        result = normalize_crux_record(crux_payload(largest_contentful_paint=metric))

        assert result.error == PROCESSING_ERROR

    @pytest.mark.parametrize("value", ["NaN", "inf", "-Infinity", float("nan"), float("inf")])
    def test_non_finite_density_yields_error(self, value) -> None:
        metric = crux_metric(value, 0.1, 0.1, 2000)

        result = normalize_crux_record(crux_payload(largest_contentful_paint=metric))

        assert result.error == PROCESSING_ERROR
        assert dict(result.buckets) == {}

    @pytest.mark.parametrize("value", ["NaN", "inf", float("nan"), float("-inf")])
    def test_non_finite_p75_yields_error(self, value) -> None:
        metric = crux_metric(0.5, 0.3, 0.2, value)

        result = normalize_crux_record(crux_payload(cumulative_layout_shift=metric))

        assert result.error == PROCESSING_ERROR

    def test_non_finite_values_do_not_escape_downstream(self) -> None:
        payload = crux_payload(largest_contentful_paint=crux_metric(float("inf"), 0.1, 0.1, 2000))

        insights = generate_insights(normalize_crux_record(payload))
        batch = process_batch([FetchOutcome(url="a.com", data=payload)])

        assert insights.error == PROCESSING_ERROR
        assert batch.results[0].metrics.error == PROCESSING_ERROR
        assert batch.summary.valid_results == 1
        assert batch.summary.averages == {}
