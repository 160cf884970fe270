"""CLI commands for s3bench."""

from __future__ import annotations

from s3bench.cli.run import cmd_run

__all__ = [
    "cmd_run",
]
