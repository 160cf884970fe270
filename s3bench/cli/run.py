"""Run command — Execute the benchmark and print the summary.

Loads configuration, builds the storage client, drives the runner,
prints the report, then sweeps any test objects left behind.
"""

from __future__ import annotations

import sys
from typing import Mapping, TextIO

from s3bench.config import ConfigurationError, load_config, load_dotenv
from s3bench.logging_setup import get_logger, setup_logging
from s3bench.runner import BenchmarkRunner
from s3bench.s3_client import S3Client
from s3bench.stats import format_summary


def cmd_run(
    args: object,
    environ: Mapping[str, str] | None = None,
    out: TextIO | None = None,
) -> int:
    """Run the benchmark.

    Args:
        args: Parsed CLI arguments with the connection and run flags
            plus ``log_level``.
        environ: Environment to read fallbacks from. When omitted,
            ``.env`` is loaded into ``os.environ`` and that is used.
        out: Stream for progress and summary (default: stdout).

    Returns:
        Exit code (0 for success, 1 for error).
    """
    setup_logging(level=getattr(args, "log_level", None))
    logger = get_logger()

    if environ is None:
        env_path = load_dotenv()
        if env_path is not None:
            logger.debug(f"Loaded environment from {env_path}")

    try:
        config = load_config(args, environ)
    except ConfigurationError as exc:
        logger.error(f"Error: {exc}")
        return 1

    logger.debug(f"Configuration: {config}")

    try:
        client = S3Client(config)
    except Exception as exc:
        logger.exception(f"Error: could not create S3 client: {exc}")
        return 1

    logger.debug(
        f"Using {type(client).__name__} against {config.endpoint}"
    )

    runner = BenchmarkRunner(config, client, out=out)
    try:
        run_log = runner.run()
        print(format_summary(run_log), file=out or sys.stdout, flush=True)
    finally:
        # Sweep even when interrupted; cleanup() never raises
        runner.cleanup()
    return 0
