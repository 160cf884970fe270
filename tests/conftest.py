"""Shared fixtures: an in-memory storage client and a valid config."""

from __future__ import annotations

import io

import pytest

from s3bench.config import BenchmarkConfig


class FakeStorageClient:
    """In-memory stand-in for an S3 backend.

    ``fail`` maps an op name (list, put, get, delete) to an exception
    raised on every call. ``script`` maps an op name to a queue of
    outcomes consumed one per call; ``None`` means succeed.
    """

    def __init__(self, fail=None, script=None):
        self.objects: dict[str, bytes] = {}
        self.calls: list[tuple[str, str | None]] = []
        self.fail = dict(fail or {})
        self.script = {op: list(q) for op, q in (script or {}).items()}

    def _check(self, op):
        queue = self.script.get(op)
        if queue:
            outcome = queue.pop(0)
            if outcome is not None:
                raise outcome
            return
        if op in self.fail:
            raise self.fail[op]

    def list_objects(self, max_keys):
        self.calls.append(("list", None))
        self._check("list")
        return {"Contents": [{"Key": k} for k in list(self.objects)[:max_keys]]}

    def put_object(self, key, data):
        self.calls.append(("put", key))
        self._check("put")
        self.objects[key] = bytes(data)
        return {"ETag": "etag"}

    def get_object(self, key):
        self.calls.append(("get", key))
        self._check("get")
        return self.objects[key]

    def delete_object(self, key):
        self.calls.append(("delete", key))
        self._check("delete")
        self.objects.pop(key, None)
        return {}

    def count(self, op):
        return sum(1 for name, _ in self.calls if name == op)

    def keys_for(self, op):
        return [key for name, key in self.calls if name == op]


def make_config(**overrides):
    values = dict(
        endpoint="http://localhost:9000",
        region="us-east-1",
        bucket="bench-bucket",
        access_key_id="AKIATEST",
        secret_access_key="secret",
        iterations=3,
        object_size=16,
    )
    values.update(overrides)
    return BenchmarkConfig(**values)


@pytest.fixture
def config():
    return make_config()


@pytest.fixture
def fake_client():
    return FakeStorageClient()


@pytest.fixture
def out():
    return io.StringIO()
