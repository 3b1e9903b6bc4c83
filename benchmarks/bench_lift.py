"""
Benchmark: Metric Lift alignment

Measures construction and query cost of MetricLift as the associated
sets grow, comparing the general predicate scan with the keyed dict
join, and checks that both return identical scores.

Sections:
  L1: Construction cost (reference vector + norm-squared)
  L2: Query throughput, predicate scan vs keyed join
  L3: Score equivalence of the two alignments on random catalogs

Timing: best of REPEATS passes after one warmup pass, reported per
construction and per query at each set size.
"""

from __future__ import annotations

import operator
import random
import time
from dataclasses import dataclass, field
from typing import Any, Callable

from prefmetric import MetricLift

SET_SIZES = [2, 4, 8, 16]
N_TAGS = 64
REPEATS = 7


def _random_catalog(n_items: int, set_size: int, seed: int = 42) -> dict[int, list[int]]:
    """Items mapped to *set_size* distinct tags drawn from N_TAGS."""
    rng = random.Random(seed)
    return {i: rng.sample(range(N_TAGS), set_size) for i in range(n_items)}


def _tag_distance(a: int, b: int) -> int:
    return abs(a - b) % 7


def _make_lift(catalog: dict[int, list[int]], keyed: bool) -> MetricLift:
    return MetricLift.from_ops(
        "int",
        catalog.__getitem__,
        operator.eq,
        _tag_distance,
        0,
        1,
        key=(lambda tag: tag) if keyed else None,
    )


def _best_seconds(fn: Callable[[], Any], repeats: int = REPEATS) -> float:
    """Fastest of *repeats* timed calls, after one untimed warmup call."""
    fn()
    best = float("inf")
    for _ in range(repeats):
        start = time.perf_counter()
        fn()
        best = min(best, time.perf_counter() - start)
    return best


def _us_per_query(lift: MetricLift, pairs: list[tuple[int, int]]) -> float:
    seconds = _best_seconds(lambda: [lift.compare_to_preference(c, d) for c, d in pairs])
    return round(seconds / len(pairs) * 1e6, 2)


def bench_construction() -> dict[str, Any]:
    out: dict[str, Any] = {}
    for size in SET_SIZES:
        catalog = _random_catalog(2, size)
        row: dict[str, Any] = {"dimension": size * size}
        for label, keyed in (("scan", False), ("keyed", True)):
            seconds = _best_seconds(lambda: _make_lift(catalog, keyed))
            row[f"{label}_ms"] = round(seconds * 1e3, 3)
        out[f"set_size_{size}"] = row
    return out


def bench_queries() -> dict[str, Any]:
    out: dict[str, Any] = {}
    for size in SET_SIZES:
        catalog = _random_catalog(10, size)
        pairs = [(c, d) for c in range(10) for d in range(10)]
        row: dict[str, Any] = {"dimension": size * size}
        for label, keyed in (("scan", False), ("keyed", True)):
            lift = _make_lift(catalog, keyed)
            row[f"{label}_us_per_query"] = _us_per_query(lift, pairs)
        row["speedup"] = round(row["scan_us_per_query"] / row["keyed_us_per_query"], 2)
        out[f"set_size_{size}"] = row
    return out


def bench_equivalence(n_catalogs: int = 25) -> dict[str, Any]:
    mismatches = 0
    checked = 0
    for seed in range(n_catalogs):
        catalog = _random_catalog(10, 1 + seed % 8, seed=seed)
        scan = _make_lift(catalog, keyed=False)
        keyed = _make_lift(catalog, keyed=True)
        for c in range(10):
            for d in range(10):
                checked += 1
                if scan.compare_to_preference(c, d) != keyed.compare_to_preference(c, d):
                    mismatches += 1
    return {"pairs_checked": checked, "mismatches": mismatches}


@dataclass
class LiftResults:
    construction: dict[str, Any] = field(default_factory=dict)
    queries: dict[str, Any] = field(default_factory=dict)
    equivalence: dict[str, Any] = field(default_factory=dict)


def run_all() -> LiftResults:
    results = LiftResults()
    print("=== Metric Lift Benchmarks ===\n")

    print("L1   Construction cost...")
    results.construction = bench_construction()

    print("L2   Query throughput (scan vs keyed)...")
    results.queries = bench_queries()

    print("L3   Scan / keyed equivalence...")
    results.equivalence = bench_equivalence()

    return results


if __name__ == "__main__":
    r = run_all()

    print("\n" + "=" * 60)
    print("METRIC LIFT RESULTS")
    print("=" * 60)

    print("\n--- Construction (ms) ---")
    for k, v in r.construction.items():
        print(f"  {k}: dim={v['dimension']}, scan {v['scan_ms']:.3f} ms, "
              f"keyed {v['keyed_ms']:.3f} ms")

    print("\n--- Queries (μs per query) ---")
    for k, v in r.queries.items():
        print(f"  {k}: dim={v['dimension']}, scan {v['scan_us_per_query']:.2f} μs, "
              f"keyed {v['keyed_us_per_query']:.2f} μs (x{v['speedup']})")

    eq = r.equivalence
    print("\n--- Equivalence ---")
    print(f"  {eq['pairs_checked']} pairs, {eq['mismatches']} mismatches")
