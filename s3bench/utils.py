"""Utility functions — key and data generation, formatting."""

from __future__ import annotations

import os
import random
import string
import time

from s3bench.config import KEY_PREFIX


def generate_random_suffix(length: int = 9) -> str:
    """Generate random suffix with S3-safe characters.

    Args:
        length: Length of suffix to generate.

    Returns:
        Random lowercase alphanumeric string safe for S3 keys.
    """
    safe_chars = string.ascii_lowercase + string.digits
    return "".join(
        random.choice(safe_chars) for _ in range(length)
    )


def generate_object_key(prefix: str = KEY_PREFIX) -> str:
    """Generate a unique object key from the current time.

    Args:
        prefix: Leading key component.

    Returns:
        Key like ``benchmark-1718031234567-k3j9x0a2b``.
    """
    millis = int(time.time() * 1000)
    return f"{prefix}-{millis}-{generate_random_suffix()}"


def generate_data(size: int) -> bytes:
    """Generate random data of specified size.

    Args:
        size: Number of bytes to generate.

    Returns:
        Random bytes.
    """
    return os.urandom(size)


def format_bytes(size: float) -> str:
    """Format bytes as human-readable string.

    Args:
        size: Size in bytes.

    Returns:
        Human-readable size string.
    """
    if size < 1024:
        return f"{size}B"
    elif size < 1024**2:
        return f"{size / 1024:.1f}KB"
    elif size < 1024**3:
        return f"{size / 1024**2:.1f}MB"
    else:
        return f"{size / 1024**3:.1f}GB"


def format_ms(value: float) -> str:
    """Format a latency in milliseconds with two decimals."""
    return f"{value:.2f}ms"
