"""Statistics Aggregator — per-operation latency summary of a run.

Only successful calls contribute to latency figures. Failed calls are
listed separately, in the order they happened. Everything here is a
pure function of the ``RunLog``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from s3bench.results import OperationKind, RunLog
from s3bench.utils import format_ms

SUMMARY_ORDER: tuple[OperationKind, ...] = (
    OperationKind.LIST,
    OperationKind.PUT,
    OperationKind.GET,
    OperationKind.DELETE,
)

RULE = "=" * 50


def percentile(sorted_values: Sequence[float], p: float) -> float:
    """Nearest-rank-down percentile of an ascending sequence.

    Picks ``sorted_values[floor(n * p)]`` with no interpolation, clamped
    to the last element.

    Raises:
        ValueError: If the sequence is empty.
    """
    n = len(sorted_values)
    if n == 0:
        raise ValueError("percentile of empty sequence")
    return sorted_values[min(math.floor(n * p), n - 1)]


@dataclass(frozen=True)
class OperationStats:
    """Latency summary for one operation kind, in milliseconds."""

    kind: OperationKind
    count: int
    mean: float
    median: float
    p90: float
    p99: float
    min: float
    max: float


def summarize_kind(
    run_log: RunLog,
    kind: OperationKind,
) -> OperationStats | None:
    """Summarize the successful calls of one kind, or None if there are none."""
    latencies = sorted(
        r.latency_ms for r in run_log.results_for(kind, success=True)
    )
    if not latencies:
        return None
    n = len(latencies)
    return OperationStats(
        kind=kind,
        count=n,
        mean=sum(latencies) / n,
        median=percentile(latencies, 0.5),
        p90=percentile(latencies, 0.9),
        p99=percentile(latencies, 0.99),
        min=latencies[0],
        max=latencies[-1],
    )


def summarize(run_log: RunLog) -> list[OperationStats]:
    """Summaries for every kind with at least one success."""
    summaries = []
    for kind in SUMMARY_ORDER:
        stats = summarize_kind(run_log, kind)
        if stats is not None:
            summaries.append(stats)
    return summaries


def format_summary(run_log: RunLog) -> str:
    """Render the end-of-run report."""
    lines = ["", RULE, "BENCHMARK SUMMARY", RULE]

    for stats in summarize(run_log):
        lines.extend([
            "",
            f"{stats.kind.value}:",
            f"  Successful operations: {stats.count}",
            f"  Average latency: {format_ms(stats.mean)}",
            f"  Median latency: {format_ms(stats.median)}",
            f"  P90 latency: {format_ms(stats.p90)}",
            f"  P99 latency: {format_ms(stats.p99)}",
            f"  Min latency: {format_ms(stats.min)}",
            f"  Max latency: {format_ms(stats.max)}",
        ])

    failures = run_log.failures()
    if failures:
        lines.append("")
        lines.append(f"Failures: {len(failures)}")
        for failure in failures:
            lines.append(f"  {failure.kind.value}: {failure.error}")

    return "\n".join(lines)
