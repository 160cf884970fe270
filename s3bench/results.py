"""Result records — one entry per timed call, kept in call order."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator


class OperationKind(Enum):
    """The four timed operations, valued by their display names."""

    LIST = "ListObjects"
    PUT = "PutObject"
    GET = "GetObject"
    DELETE = "DeleteObject"


@dataclass(frozen=True)
class OperationResult:
    """One measured call."""

    kind: OperationKind
    latency_ms: float
    success: bool
    error: str | None = None
    object_key: str | None = None

    @classmethod
    def ok(
        cls,
        kind: OperationKind,
        latency_ms: float,
        object_key: str | None = None,
    ) -> OperationResult:
        return cls(kind, latency_ms, True, object_key=object_key)

    @classmethod
    def failed(
        cls,
        kind: OperationKind,
        latency_ms: float,
        error: str,
    ) -> OperationResult:
        return cls(kind, latency_ms, False, error=error)


@dataclass
class RunLog:
    """Ordered results plus the keys still waiting to be deleted.

    Pending keys live in a dict so the cleanup sweep visits them in
    creation order.
    """

    results: list[OperationResult] = field(default_factory=list)
    _pending: dict[str, None] = field(default_factory=dict, repr=False)

    def append(self, result: OperationResult) -> None:
        self.results.append(result)

    def track_key(self, key: str) -> None:
        """Remember a key created by a successful Put."""
        self._pending[key] = None

    def confirm_deleted(self, key: str) -> None:
        self._pending.pop(key, None)

    def pending_keys(self) -> list[str]:
        """Keys created but not yet confirmed deleted, oldest first."""
        return list(self._pending)

    def results_for(
        self,
        kind: OperationKind,
        *,
        success: bool | None = None,
    ) -> list[OperationResult]:
        return [
            r for r in self.results
            if r.kind is kind and (success is None or r.success is success)
        ]

    def count(self, kind: OperationKind) -> int:
        return len(self.results_for(kind))

    def failures(self) -> list[OperationResult]:
        return [r for r in self.results if not r.success]

    def __iter__(self) -> Iterator[OperationResult]:
        return iter(self.results)

    def __len__(self) -> int:
        return len(self.results)
