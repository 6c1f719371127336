"""Outbound results of catalog operations."""

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Any


class OutcomeKind(Enum):
    """Result kinds a caller can branch on."""

    SUCCESS = "SUCCESS"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    RATE_LIMITED = "RATE_LIMITED"
    UNAUTHENTICATED = "UNAUTHENTICATED"
    INTERNAL_FAILURE = "INTERNAL_FAILURE"


@dataclass(frozen=True)
class Outcome:
    """Success payload or failure kind with a caller-safe message."""

    kind: OutcomeKind
    value: Any = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS

    @classmethod
    def success(cls, value: Any = None, message: str = "") -> "Outcome":
        return cls(kind=OutcomeKind.SUCCESS, value=value, message=message)

    @classmethod
    def failure(cls, kind: OutcomeKind, message: str) -> "Outcome":
        return cls(kind=kind, message=message)


@dataclass(frozen=True)
class BulkCreateResult:
    """Progress report of a bulk insert.

    ``error`` is set when a window failed to commit; ``created_count`` then
    holds the rows committed before the failure.
    """

    created_count: int
    requested_count: int
    category_name: str
    elapsed: timedelta
    error: str | None = None

    @property
    def completed(self) -> bool:
        return self.error is None and self.created_count == self.requested_count

    @property
    def elapsed_seconds(self) -> float:
        return self.elapsed.total_seconds()

    @property
    def products_per_second(self) -> float:
        seconds = self.elapsed_seconds
        return self.created_count / seconds if seconds > 0 else float(self.created_count)

    @property
    def message(self) -> str:
        text = (
            f"Created {self.created_count}/{self.requested_count} products in "
            f"{self.elapsed_seconds:.2f} seconds "
            f"({self.products_per_second:.0f} products/sec)"
        )
        if self.error:
            text += "; stopped early after a storage failure"
        return text


@dataclass(frozen=True)
class Subject:
    """Authenticated caller identity returned by the identity collaborator."""

    subject_id: str
    email: str | None = None
