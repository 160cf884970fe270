"""S3 Client Factory — Creates S3 clients from a run configuration.

Usage::

    from s3bench.s3_client import S3Client

    client = S3Client(config)   # Backend chosen by config.backend
"""

from __future__ import annotations

from s3bench.backends import StorageClient
from s3bench.config import BenchmarkConfig

_BACKEND_CACHE: dict[str, type] = {}


def _get_backend_class(backend_name: str) -> type:
    """Resolve backend name to class (cached).

    Args:
        backend_name: Backend identifier.

    Returns:
        The S3 client class for the requested backend.

    Raises:
        ValueError: If the backend name is not recognized.
    """
    name = backend_name.lower()
    if name in _BACKEND_CACHE:
        return _BACKEND_CACHE[name]

    from s3bench.backends import S3ClientBoto3, S3ClientMinio

    mapping: dict[str, type] = {
        "boto3": S3ClientBoto3,
        "minio": S3ClientMinio,
    }

    cls = mapping.get(name)
    if cls is None:
        available = ", ".join(mapping.keys())
        raise ValueError(
            f"Unknown S3 backend '{name}'. "
            f"Available: {available}"
        )

    _BACKEND_CACHE[name] = cls
    return cls


def S3Client(config: BenchmarkConfig) -> StorageClient:
    """Create an S3 client for the configured endpoint and bucket.

    Args:
        config: Validated run configuration.

    Returns:
        S3 client instance for ``config.backend``.
    """
    cls = _get_backend_class(config.backend)
    return cls(
        bucket=config.bucket,
        endpoint=config.endpoint,
        access_key_id=config.access_key_id,
        secret_access_key=config.secret_access_key,
        region=config.region,
        verify_ssl=config.verify_ssl,
    )
