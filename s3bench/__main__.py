#!/usr/bin/env python3
"""Entry point for s3bench package.

Usage::

    s3bench --bucket my-test-bucket --iterations 20
    s3bench --endpoint http://localhost:9000 --object-size 2048
"""

from __future__ import annotations

import argparse
import sys

from s3bench import __version__
from s3bench.config import BACKENDS, DEFAULT_ITERATIONS, DEFAULT_OBJECT_SIZE


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="s3bench",
        description="S3 Benchmark Tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment Variables:
  S3_ENDPOINT          S3 endpoint URL
  S3_REGION            S3 region
  S3_BUCKET            S3 bucket name
  S3_ACCESS_KEY_ID     S3 access key ID
  S3_SECRET_ACCESS_KEY S3 secret access key
  S3_VERIFY_SSL        Verify TLS certificates (default: true)
  S3BENCH_BACKEND      Client backend (boto3 or minio)

Variables may also be set in ./.env or ~/.s3bench/.env.

Examples:
  # Using environment variables
  export S3_BUCKET=my-test-bucket
  export S3_ACCESS_KEY_ID=your-access-key
  export S3_SECRET_ACCESS_KEY=your-secret-key
  s3bench

  # Using command line arguments
  s3bench --bucket my-test-bucket \\
    --access-key-id your-access-key \\
    --secret-access-key your-secret-key \\
    --iterations 20 \\
    --object-size 2048
""",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--endpoint",
        type=str,
        default=None,
        help="S3 endpoint URL (default: https://s3.amazonaws.com)",
    )
    parser.add_argument(
        "--region",
        type=str,
        default=None,
        help="S3 region (default: us-east-1)",
    )
    parser.add_argument(
        "--bucket",
        type=str,
        default=None,
        help="S3 bucket name (required)",
    )
    parser.add_argument(
        "--access-key-id",
        type=str,
        default=None,
        help="S3 access key ID (required)",
    )
    parser.add_argument(
        "--secret-access-key",
        type=str,
        default=None,
        help="S3 secret access key (required)",
    )
    parser.add_argument(
        "--iterations",
        type=int,
        default=DEFAULT_ITERATIONS,
        help=f"Number of benchmark iterations (default: {DEFAULT_ITERATIONS})",
    )
    parser.add_argument(
        "--object-size",
        type=int,
        default=DEFAULT_OBJECT_SIZE,
        help=(
            "Size of test objects in bytes "
            f"(default: {DEFAULT_OBJECT_SIZE})"
        ),
    )
    parser.add_argument(
        "--backend",
        type=str,
        default=None,
        choices=list(BACKENDS),
        help="S3 client backend (default: boto3)",
    )
    parser.add_argument(
        "--no-verify-ssl",
        action="store_true",
        help="Don't verify TLS certificates",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Parse CLI arguments and run the benchmark."""
    args = build_parser().parse_args(argv)

    from s3bench.cli import cmd_run

    try:
        return cmd_run(args) or 0
    except KeyboardInterrupt:
        print("\nInterrupted")
        return 130
    except Exception:
        from s3bench.logging_setup import get_logger

        get_logger().exception("Error: unexpected failure")
        return 1


if __name__ == "__main__":
    sys.exit(main())
