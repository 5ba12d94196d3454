"""Benchmark: permission evaluation throughput — checks per second.

Measures how many ``can``/``cannot`` checks complete per second for an actor
with a realistic permission set, mixing collection and instance resources.
"""
from __future__ import annotations

import json
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from roba.entities import Actor, Collective
from roba.permissions.permission import Permission
from roba.resources import Resource

_ITERATIONS: int = 10_000


def _make_actor() -> Actor:
    """Build an actor derived from a multi-resource collective."""
    users = Collective(
        "users",
        [
            Permission.protected("accounts"),
            Permission.public("posts"),
            Permission.private("messages"),
            Permission.read_only("reports"),
        ],
    )
    return Actor.derived_from(users, "bench-actor")


def bench_evaluation_throughput() -> dict[str, object]:
    """Benchmark whitelist and blacklist check throughput.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms, p99_latency_ms, memory_peak_mb.
    """
    actor = _make_actor()
    accounts = Resource.collection("accounts")
    own_account = Resource.instance_of(accounts, "a-1", actor)
    posts = Resource.collection("posts")

    start = time.perf_counter()
    for _ in range(_ITERATIONS):
        actor.can.read(accounts)
        actor.can.update(own_account)
        actor.cannot.delete(posts)
    total = time.perf_counter() - start
    checks = _ITERATIONS * 3

    result: dict[str, object] = {
        "operation": "permission_evaluation_throughput",
        "iterations": checks,
        "total_seconds": round(total, 4),
        "ops_per_second": round(checks / total, 1),
        "avg_latency_ms": round(total / checks * 1000, 4),
        "p99_latency_ms": 0.0,
        "memory_peak_mb": 0.0,
    }
    print(
        f"[bench_evaluation_throughput] {result['operation']}: "
        f"{result['ops_per_second']:,.0f} ops/sec  "
        f"avg {result['avg_latency_ms']:.4f} ms"
    )
    return result


def run_benchmark() -> dict[str, object]:
    """Entry point returning the benchmark result dict."""
    return bench_evaluation_throughput()


if __name__ == "__main__":
    result = run_benchmark()
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)
    output_path = results_dir / "throughput_baseline.json"
    with open(output_path, "w", encoding="utf-8") as fh:
        json.dump(result, fh, indent=2)
    print(f"Results saved to {output_path}")
