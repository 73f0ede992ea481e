"""
crux/normalizer.py

Flatten a raw CrUX ``records:queryRecord`` payload into metric buckets.

Expected payload shape (abridged)::

    {
      "record": {
        "metrics": {
          "largest_contentful_paint": {
            "histogram": [
              {"start": 0, "end": 2500, "density": 0.75},
              {"start": 2500, "end": 4000, "density": 0.15},
              {"start": 4000, "density": 0.10}
            ],
            "percentiles": {"p75": 2300}
          },
          ...
        }
      }
    }
"""

from __future__ import annotations

import logging
import math
from typing import Any

from crux.models import MetricBucket, NormalizedMetrics
from crux.thresholds import THRESHOLDS

logger = logging.getLogger(__name__)


class MalformedPayloadError(ValueError):
    """
    Raised internally when a payload cannot be shaped into buckets.
    """


def as_number(value: Any) -> float:
    """
    Coerce a CrUX numeric field to float.

    The API reports CLS percentiles as decimal strings (``"0.05"``), so
    strings are accepted as long as they parse to a finite value.
    """

    if isinstance(value, bool):
        raise MalformedPayloadError(f"Expected a number, got {value!r}.")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise MalformedPayloadError(f"Expected a number, got {value!r}.") from exc
    if not math.isfinite(number):
        raise MalformedPayloadError(f"Expected a finite number, got {value!r}.")
    return number


def _bucket_from_metric(api_name: str, metric: Any) -> MetricBucket:
    if not isinstance(metric, dict):
        raise MalformedPayloadError(f"Metric '{api_name}' is not an object.")

    histogram = metric.get("histogram")
    if not isinstance(histogram, list) or len(histogram) < 3:
        raise MalformedPayloadError(f"Metric '{api_name}' has no three-bin histogram.")

    percentiles = metric.get("percentiles")
    if not isinstance(percentiles, dict) or "p75" not in percentiles:
        raise MalformedPayloadError(f"Metric '{api_name}' has no p75 percentile.")

    densities: list[float] = []
    for index in range(3):
        bin_ = histogram[index]
        if not isinstance(bin_, dict):
            raise MalformedPayloadError(f"Metric '{api_name}' histogram bin {index} is not an object.")
        # Empty bins are sometimes sent without a density.
        densities.append(as_number(bin_.get("density", 0.0)))

    p75 = percentiles["p75"]
    as_number(p75)

    return MetricBucket(
        good=densities[0],
        needs_improvement=densities[1],
        poor=densities[2],
        percentile=p75,
    )


def normalize_crux_record(data: Any) -> NormalizedMetrics:
    """
    Convert a raw CrUX API response into per-metric buckets.

    Metrics absent from the payload are omitted from the result. A
    payload without ``record.metrics``, or with any present metric that
    cannot be read, yields a single error result instead of a partial
    one. This function never raises.
    """

    try:
        record = data.get("record") if isinstance(data, dict) else None
        metrics = record.get("metrics") if isinstance(record, dict) else None
        if not isinstance(metrics, dict):
            raise MalformedPayloadError("Invalid CrUX data format")

        buckets: dict[str, MetricBucket] = {}
        for threshold in THRESHOLDS:
            raw_metric = metrics.get(threshold.api_name)
            if raw_metric is None:
                if threshold.key == "fid":
                    logger.debug("FID metric is no longer available from CrUX API")
                continue
            buckets[threshold.key] = _bucket_from_metric(threshold.api_name, raw_metric)
    except MalformedPayloadError as exc:
        logger.error("Error processing CrUX data: %s", exc)
        return NormalizedMetrics.failure()

    return NormalizedMetrics(buckets=buckets)
