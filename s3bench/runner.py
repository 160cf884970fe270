"""Benchmark Runner — drives the timed List/Put/Get/Delete rounds.

Each iteration runs, strictly in sequence:

1. List (always)
2. Put of a fresh random payload under a new unique key
3. Get then Delete of that key, only if the Put succeeded

Every call is timed on its own and recorded in the ``RunLog``; a failed
call becomes a failed result and the run carries on. Keys whose
in-iteration Delete did not succeed are swept by ``cleanup()``.
"""

from __future__ import annotations

import sys
import time
from typing import Any, Callable, TextIO

from s3bench.backends import StorageClient
from s3bench.config import ITERATION_PAUSE, LIST_MAX_KEYS, BenchmarkConfig
from s3bench.logging_setup import get_logger
from s3bench.results import OperationKind, OperationResult, RunLog
from s3bench.utils import format_bytes, generate_data, generate_object_key

PASS_MARK = "✓"
FAIL_MARK = "✗"


class BenchmarkRunner:
    """Sequential latency benchmark against one bucket."""

    def __init__(
        self,
        config: BenchmarkConfig,
        client: StorageClient,
        *,
        pause: float = ITERATION_PAUSE,
        out: TextIO | None = None,
    ) -> None:
        """Initialize the runner.

        Args:
            config: Validated run configuration.
            client: Storage client bound to ``config.bucket``.
            pause: Seconds to sleep after each iteration.
            out: Stream for progress lines (default: stdout).
        """
        self.config = config
        self.client = client
        self.pause = pause
        self.out = out
        self.run_log = RunLog()
        self.logger = get_logger(bucket=config.bucket)

    def log(self, msg: str, level: str = "info", **extra: object) -> None:
        """Log message with run context."""
        log_func = getattr(self.logger, level.lower(), self.logger.info)
        log_func(msg, extra=extra)

    def emit(self, line: str) -> None:
        """Write one progress line and flush it right away."""
        out = self.out or sys.stdout
        print(line, file=out, flush=True)

    def _timed(
        self,
        kind: OperationKind,
        call: Callable[[], Any],
        *,
        object_key: str | None = None,
    ) -> OperationResult:
        """Run one storage call, timing it and capturing any failure."""
        start = time.perf_counter()
        try:
            call()
        except Exception as exc:
            elapsed_ms = (time.perf_counter() - start) * 1000
            self.log(
                f"{kind.value} failed: {exc}", "debug", op_type=kind.name,
            )
            return OperationResult.failed(kind, elapsed_ms, str(exc))
        elapsed_ms = (time.perf_counter() - start) * 1000
        return OperationResult.ok(kind, elapsed_ms, object_key=object_key)

    def _record(self, result: OperationResult) -> OperationResult:
        self.run_log.append(result)
        mark = PASS_MARK if result.success else FAIL_MARK
        self.emit(
            f"  {result.kind.value}: {result.latency_ms:.2f}ms {mark}"
        )
        return result

    def benchmark_list(self) -> OperationResult:
        return self._record(self._timed(
            OperationKind.LIST,
            lambda: self.client.list_objects(LIST_MAX_KEYS),
        ))

    def benchmark_put(self) -> OperationResult:
        """Upload a fresh random payload under a new key."""
        data = generate_data(self.config.object_size)
        key = generate_object_key()
        return self._record(self._timed(
            OperationKind.PUT,
            lambda: self.client.put_object(key, data),
            object_key=key,
        ))

    def benchmark_get(self, key: str) -> OperationResult:
        return self._record(self._timed(
            OperationKind.GET,
            lambda: self.client.get_object(key),
        ))

    def benchmark_delete(self, key: str) -> OperationResult:
        result = self._record(self._timed(
            OperationKind.DELETE,
            lambda: self.client.delete_object(key),
        ))
        if result.success:
            self.run_log.confirm_deleted(key)
        return result

    def run_iteration(self) -> None:
        """One List -> Put -> (Get, Delete) round."""
        self.benchmark_list()
        put = self.benchmark_put()
        if put.success and put.object_key:
            self.run_log.track_key(put.object_key)
            self.benchmark_get(put.object_key)
            # Delete even if the Get failed
            self.benchmark_delete(put.object_key)

    def run(self) -> RunLog:
        """Run all configured iterations and return the results."""
        iterations = self.config.iterations
        self.emit(f"Starting S3 benchmark with {iterations} iterations")
        self.emit(f"Endpoint: {self.config.endpoint}")
        self.emit(f"Bucket: {self.config.bucket}")
        self.emit(
            f"Object size: {self.config.object_size} bytes "
            f"({format_bytes(self.config.object_size)})"
        )
        self.emit("=" * 50)

        for i in range(iterations):
            self.emit(f"Iteration {i + 1}/{iterations}")
            self.run_iteration()
            if self.pause:
                time.sleep(self.pause)

        failures = len(self.run_log.failures())
        self.log(
            f"Completed {iterations} iterations, "
            f"{len(self.run_log)} calls, {failures} failed"
        )
        return self.run_log

    def cleanup(self) -> int:
        """Best-effort delete of keys not removed during the run.

        Failures are logged as warnings and never raised.

        Returns:
            Number of keys deleted by the sweep.
        """
        pending = self.run_log.pending_keys()
        if not pending:
            self.log("No remaining test objects to clean up", "debug")
            return 0

        self.emit("\nCleaning up remaining test objects...")
        deleted = 0
        for key in pending:
            try:
                self.client.delete_object(key)
            except Exception as exc:
                self.log(
                    f"Failed to cleanup object {key}: {exc}",
                    "warning",
                    op_type="CLEANUP",
                )
                continue
            self.run_log.confirm_deleted(key)
            deleted += 1

        remaining = len(self.run_log.pending_keys())
        if remaining:
            self.log(
                f"{remaining} test object(s) could not be removed",
                "warning",
                op_type="CLEANUP",
            )
        else:
            self.log(f"Cleaned up {deleted} test object(s)")
        return deleted
