"""Configuration — Defaults, .env loading and the run configuration.

Configuration is merged from these sources (in priority order):
    1. Command-line flags (highest priority)
    2. Environment variables
    3. ``.env`` file in current working directory
    4. ``.env`` file in ``~/.s3bench/``
    5. Built-in defaults

The ``.env`` file only fills in variables that are not already present
in the environment. Nothing here is read at import time; callers build
a ``BenchmarkConfig`` explicitly with ``load_config`` and pass it on.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping


# ---------------------------------------------------------------------------
# Stdlib .env file loader (no external dependency)
# ---------------------------------------------------------------------------

def load_dotenv(
    candidates: list[Path] | None = None,
    environ: dict[str, str] | None = None,
) -> Path | None:
    """Load KEY=VALUE pairs from a .env file into the environment.

    Searches the current working directory first, then
    ``~/.s3bench/``. Only sets variables that are not already
    present in the environment (env vars take priority).

    Args:
        candidates: Files to try, in order. Defaults to the two
            standard locations.
        environ: Mapping to update. Defaults to ``os.environ``.

    Returns:
        The path that was loaded, or None if no file was found.
    """
    if candidates is None:
        candidates = [
            Path.cwd() / ".env",
            Path.home() / ".s3bench" / ".env",
        ]
    if environ is None:
        environ = os.environ  # type: ignore[assignment]
    for env_path in candidates:
        if env_path.is_file():
            parse_env_file(env_path, environ)
            return env_path
    return None


def parse_env_file(path: Path, environ: dict[str, str]) -> None:
    """Parse a .env file and inject into ``environ``."""
    try:
        with open(path) as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                if line.startswith("export "):
                    line = line[len("export "):]
                if "=" not in line:
                    continue
                key, _, value = line.partition("=")
                key = key.strip()
                value = value.strip()
                # Strip surrounding quotes
                if (
                    len(value) >= 2
                    and value[0] == value[-1]
                    and value[0] in ('"', "'")
                ):
                    value = value[1:-1]
                if key and key not in environ:
                    environ[key] = value
    except OSError:
        # An unreadable .env is treated like a missing one
        return


# ---------------------------------------------------------------------------
# Logging Configuration
# ---------------------------------------------------------------------------
DEFAULT_LOG_LEVEL = "INFO"

# ---------------------------------------------------------------------------
# S3 Connection Defaults
# ---------------------------------------------------------------------------
DEFAULT_ENDPOINT = "https://s3.amazonaws.com"
DEFAULT_REGION = "us-east-1"
DEFAULT_BACKEND = "boto3"
BACKENDS: tuple[str, ...] = ("boto3", "minio")

CONNECT_TIMEOUT = 10  # seconds
READ_TIMEOUT = 300  # seconds

# ---------------------------------------------------------------------------
# Benchmark Behavior
# ---------------------------------------------------------------------------
DEFAULT_ITERATIONS = 10
DEFAULT_OBJECT_SIZE = 1024  # bytes
LIST_MAX_KEYS = 10
ITERATION_PAUSE = 0.1  # seconds
KEY_PREFIX = "benchmark"

_TRUE_VALUES = ("true", "1", "yes")


class ConfigurationError(ValueError):
    """Raised when the run configuration is missing or invalid."""


@dataclass(frozen=True)
class BenchmarkConfig:
    """Immutable parameters for one benchmark run."""

    endpoint: str
    region: str
    bucket: str
    access_key_id: str
    secret_access_key: str = field(repr=False)
    iterations: int = DEFAULT_ITERATIONS
    object_size: int = DEFAULT_OBJECT_SIZE
    backend: str = DEFAULT_BACKEND
    verify_ssl: bool = True

    def __post_init__(self) -> None:
        if not self.bucket:
            raise ConfigurationError(
                "S3 bucket name is required. "
                "Set S3_BUCKET env var or use --bucket flag."
            )
        if not self.access_key_id or not self.secret_access_key:
            raise ConfigurationError(
                "S3 credentials are required. Set S3_ACCESS_KEY_ID "
                "and S3_SECRET_ACCESS_KEY env vars or use "
                "--access-key-id and --secret-access-key flags."
            )
        if self.iterations < 0:
            raise ConfigurationError(
                f"Iterations must be zero or positive: {self.iterations}"
            )
        if self.object_size < 0:
            raise ConfigurationError(
                f"Object size must be zero or positive: {self.object_size}"
            )
        if self.backend not in BACKENDS:
            available = ", ".join(BACKENDS)
            raise ConfigurationError(
                f"Unknown S3 backend '{self.backend}'. "
                f"Available: {available}"
            )


def _pick(args: Any, attr: str, environ: Mapping[str, str], var: str) -> Any:
    """Return the flag value if given, else the environment value."""
    value = getattr(args, attr, None)
    if value is None or value == "":
        value = environ.get(var) or None
    return value


def load_config(
    args: Any,
    environ: Mapping[str, str] | None = None,
) -> BenchmarkConfig:
    """Build a validated ``BenchmarkConfig`` from flags and environment.

    Args:
        args: Parsed CLI arguments (any object with the flag attributes;
            missing attributes count as not given).
        environ: Environment mapping. Defaults to ``os.environ``.

    Returns:
        The frozen run configuration.

    Raises:
        ConfigurationError: If bucket or credentials are missing, or a
            value is out of range.
    """
    if environ is None:
        environ = os.environ

    iterations = getattr(args, "iterations", None)
    object_size = getattr(args, "object_size", None)

    # An empty S3_VERIFY_SSL counts as unset
    verify_env = environ.get("S3_VERIFY_SSL") or "true"
    verify_ssl = verify_env.lower() in _TRUE_VALUES
    if getattr(args, "no_verify_ssl", False):
        verify_ssl = False

    return BenchmarkConfig(
        endpoint=_pick(args, "endpoint", environ, "S3_ENDPOINT")
        or DEFAULT_ENDPOINT,
        region=_pick(args, "region", environ, "S3_REGION") or DEFAULT_REGION,
        bucket=_pick(args, "bucket", environ, "S3_BUCKET") or "",
        access_key_id=_pick(
            args, "access_key_id", environ, "S3_ACCESS_KEY_ID",
        ) or "",
        secret_access_key=_pick(
            args, "secret_access_key", environ, "S3_SECRET_ACCESS_KEY",
        ) or "",
        iterations=DEFAULT_ITERATIONS if iterations is None else iterations,
        object_size=(
            DEFAULT_OBJECT_SIZE if object_size is None else object_size
        ),
        backend=(
            _pick(args, "backend", environ, "S3BENCH_BACKEND")
            or DEFAULT_BACKEND
        ).lower(),
        verify_ssl=verify_ssl,
    )
