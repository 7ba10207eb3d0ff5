#!/usr/bin/env python3
"""Collect baseline timings for the comparison service."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from time import perf_counter

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from cltpj.backend.app.services.calculation_service import (  # noqa: E402
    calculate_comparison,
)

SAMPLE_PAYLOAD = {
    "year": 2024,
    "locale": "pt",
    "clt": {"gross_monthly": 7500},
    "pj": {
        "gross_monthly": 10000,
        "costs": {"health_plan": 450, "meal_allowance": 1000, "accounting_fee": 250},
    },
}


def measure_backend(iterations: int) -> dict[str, float]:
    """Return timing statistics for repeated comparison calculations."""

    payload = dict(SAMPLE_PAYLOAD)
    calculate_comparison(payload)  # Warm configuration cache
    start = perf_counter()
    for _ in range(iterations):
        calculate_comparison(payload)
    elapsed = perf_counter() - start
    return {
        "iterations": iterations,
        "total_ms": elapsed * 1000,
        "average_ms": (elapsed / iterations) * 1000,
    }


def measure_sweep(start: int, stop: int, step: int) -> dict[str, float]:
    """Time a what-if sweep over CLT salaries against the sample PJ scenario."""

    salaries = range(start, stop + 1, step)
    began = perf_counter()
    count = 0
    for salary in salaries:
        payload = dict(SAMPLE_PAYLOAD, clt={"gross_monthly": salary})
        calculate_comparison(payload)
        count += 1
    elapsed = perf_counter() - began
    return {"points": count, "total_ms": elapsed * 1000}


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--iterations", type=int, default=1000)
    parser.add_argument("--sweep-start", type=int, default=1000)
    parser.add_argument("--sweep-stop", type=int, default=30000)
    parser.add_argument("--sweep-step", type=int, default=100)
    args = parser.parse_args(argv)

    report = {
        "backend": measure_backend(args.iterations),
        "sweep": measure_sweep(args.sweep_start, args.sweep_stop, args.sweep_step),
    }
    print(json.dumps(report, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
