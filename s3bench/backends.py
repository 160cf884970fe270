"""S3 client backends for benchmarking.

Available clients:
    S3ClientBoto3  - Pure boto3 (default, works everywhere)
    S3ClientMinio  - MinIO Python SDK (optional, requires minio package)

Every backend binds the bucket at construction and exposes the four
operations the benchmark times. No backend retries a failed call; the
first error is what gets measured.
"""

from __future__ import annotations

import itertools
import urllib.parse
from io import BytesIO
from typing import Any, Protocol, runtime_checkable

import boto3
import urllib3
from botocore.config import Config

from s3bench.config import CONNECT_TIMEOUT, READ_TIMEOUT


@runtime_checkable
class StorageClient(Protocol):
    """The four storage operations the benchmark runner needs."""

    def list_objects(self, max_keys: int) -> Any:
        ...

    def put_object(self, key: str, data: bytes) -> Any:
        ...

    def get_object(self, key: str) -> bytes:
        ...

    def delete_object(self, key: str) -> Any:
        ...


class S3ClientBoto3:
    """Pure boto3 S3 client bound to a single endpoint and bucket."""

    def __init__(
        self,
        *,
        bucket: str,
        endpoint: str,
        access_key_id: str,
        secret_access_key: str,
        region: str,
        verify_ssl: bool = True,
    ) -> None:
        self.bucket = bucket
        self.endpoint = endpoint
        if not verify_ssl:
            # Suppress SSL warnings for self-signed certificates
            urllib3.disable_warnings(
                urllib3.exceptions.InsecureRequestWarning,
            )
        self.client = boto3.client(
            "s3",
            endpoint_url=endpoint,
            region_name=region,
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
            verify=verify_ssl,
            config=Config(
                retries={"mode": "standard", "max_attempts": 1},
                connect_timeout=CONNECT_TIMEOUT,
                read_timeout=READ_TIMEOUT,
            ),
        )

    def list_objects(self, max_keys: int) -> dict:
        """List objects using ListObjectsV2."""
        return self.client.list_objects_v2(
            Bucket=self.bucket, MaxKeys=max_keys,
        )

    def put_object(self, key: str, data: bytes) -> dict:
        """Upload object."""
        return self.client.put_object(
            Bucket=self.bucket, Key=key, Body=data,
        )

    def get_object(self, key: str) -> bytes:
        """Download object, reading the whole body."""
        response = self.client.get_object(Bucket=self.bucket, Key=key)
        return response["Body"].read()

    def delete_object(self, key: str) -> dict:
        """Delete single object."""
        return self.client.delete_object(Bucket=self.bucket, Key=key)


class S3ClientMinio:
    """MinIO Python SDK client.

    Requires the ``minio`` package to be installed. Uses minio-py
    for all operations; works with any S3-compatible endpoint.
    """

    def __init__(
        self,
        *,
        bucket: str,
        endpoint: str,
        access_key_id: str,
        secret_access_key: str,
        region: str,
        verify_ssl: bool = True,
    ) -> None:
        """Initialize minio-py client.

        Args:
            bucket: S3 bucket name.
            endpoint: S3 endpoint URL (scheme selects TLS).
            access_key_id: Access key ID.
            secret_access_key: Secret access key.
            region: Bucket region.
            verify_ssl: Verify TLS certificates.
        """
        try:
            from minio import Minio
        except ImportError as exc:
            raise ImportError(
                "minio package not installed. "
                "Run: pip install 's3bench[minio]'"
            ) from exc

        self.bucket = bucket

        parsed = urllib.parse.urlparse(endpoint)
        use_secure = parsed.scheme == "https"

        http_client = urllib3.PoolManager(
            timeout=urllib3.Timeout(
                connect=CONNECT_TIMEOUT, read=READ_TIMEOUT,
            ),
            cert_reqs="CERT_REQUIRED" if verify_ssl else "CERT_NONE",
            retries=False,
        )
        if not verify_ssl:
            urllib3.disable_warnings(
                urllib3.exceptions.InsecureRequestWarning,
            )

        self.client = Minio(
            parsed.netloc,
            access_key=access_key_id,
            secret_key=secret_access_key,
            region=region,
            secure=use_secure,
            http_client=http_client,
        )

    def list_objects(self, max_keys: int) -> list[dict]:
        """List up to ``max_keys`` objects."""
        listing = self.client.list_objects(self.bucket, recursive=True)
        return [
            {"Key": obj.object_name, "Size": obj.size}
            for obj in itertools.islice(listing, max_keys)
        ]

    def put_object(self, key: str, data: bytes) -> Any:
        """Upload object."""
        return self.client.put_object(
            self.bucket, key, BytesIO(data), len(data),
        )

    def get_object(self, key: str) -> bytes:
        """Download object."""
        response = self.client.get_object(self.bucket, key)
        try:
            return response.read()
        finally:
            response.close()
            response.release_conn()

    def delete_object(self, key: str) -> None:
        """Delete single object."""
        self.client.remove_object(self.bucket, key)
