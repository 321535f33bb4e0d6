"""Error and diagnostic types returned by the layout and ranking engines."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


class ConfigurationError(ValueError):
    """Raised when the configured rings or weights cannot be satisfied."""

    def __init__(self, message: str, category_id: Optional[str] = None):
        super().__init__(message)
        self.category_id = category_id


class InvalidRecordError(ValueError):
    """Raised when a single edge record violates its field constraints."""

    def __init__(self, record_id: str, message: str):
        super().__init__(f"edge {record_id!r}: {message}")
        self.record_id = record_id
        self.reason = message


class MalformedQueryError(ValueError):
    """Raised when search filters or pagination reference unknown values."""

    def __init__(self, field_name: str, message: str):
        super().__init__(f"{field_name}: {message}")
        self.field_name = field_name


@dataclass(frozen=True)
class LayoutWarning:
    kind: str
    node_id: str
    message: str

    def __str__(self) -> str:  # pragma: no cover - trivial string formatting
        return self.message


@dataclass(frozen=True)
class UnresolvedReferenceWarning(LayoutWarning):
    reference_id: str = ""


@dataclass(frozen=True)
class RejectedRecord:
    record_id: str
    message: str

    @classmethod
    def from_error(cls, exc: InvalidRecordError) -> "RejectedRecord":
        return cls(record_id=exc.record_id, message=exc.reason)

    def __str__(self) -> str:  # pragma: no cover - trivial string formatting
        return f"{self.record_id}: {self.message}"


__all__ = [
    "ConfigurationError",
    "InvalidRecordError",
    "MalformedQueryError",
    "LayoutWarning",
    "UnresolvedReferenceWarning",
    "RejectedRecord",
]
