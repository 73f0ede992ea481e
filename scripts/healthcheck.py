"""
Simple container health check for the CrUX Insights API.
"""

from __future__ import annotations

import os
import sys

import requests


def main() -> int:
    port = os.getenv("PORT", "8000")
    path = os.getenv("HEALTHCHECK_PATH", "/health")
    url = f"http://127.0.0.1:{port}{path}"

    try:
        response = requests.get(url, timeout=2)
    except requests.RequestException as exc:
        print(f"healthcheck failed: {exc}", file=sys.stderr)
        return 1
    if not response.ok:
        return 1
    try:
        return 0 if response.json().get("status") == "ok" else 1
    except ValueError:
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
