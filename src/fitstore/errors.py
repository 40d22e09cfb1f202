"""Structured error types for fitstore."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


class FitstoreError(Exception):
    """Base error for all fitstore errors."""


@dataclass
class TableSchemaDiff:
    """Describes the difference between expected and live columns for one table."""

    table: str
    expected: dict[str, dict[str, Any]]
    found: dict[str, dict[str, Any]]
    missing_columns: list[str] = field(default_factory=list)
    unexpected_columns: list[str] = field(default_factory=list)
    changed_columns: dict[str, dict[str, Any]] = field(default_factory=dict)

    def describe(self) -> str:
        parts = [f"table '{self.table}'"]
        if not self.found:
            parts.append("missing table")
        if self.missing_columns:
            parts.append(f"missing columns {self.missing_columns}")
        if self.unexpected_columns:
            parts.append(f"unexpected columns {self.unexpected_columns}")
        for name, change in sorted(self.changed_columns.items()):
            parts.append(f"column '{name}' expected {change['expected']} found {change['found']}")
        return "; ".join(parts)


class SchemaMismatchError(FitstoreError):
    """Raised at open when the live database schema differs from the expected schema."""

    def __init__(self, diffs: list[TableSchemaDiff]) -> None:
        self.diffs = diffs
        details = " | ".join(d.describe() for d in diffs)
        super().__init__(
            f"Schema mismatch in {len(diffs)} table(s): {details}. "
            "Recreate the database or abort."
        )


class MigrationError(FitstoreError):
    """Raised when a schema migration cannot be planned or applied."""


class MissingMigrationError(MigrationError):
    """Raised when no ordered migration step exists for a stored version."""

    def __init__(self, missing: list[int]) -> None:
        self.missing = missing
        super().__init__(f"Missing migration steps from versions: {missing}")


class ConstraintViolationError(FitstoreError):
    """Raised when a write violates a constraint (e.g., duplicate session id)."""

    def __init__(self, operation: str, detail: str) -> None:
        self.operation = operation
        self.detail = detail
        super().__init__(f"Constraint violation during {operation}: {detail}")


class StorageBackendError(FitstoreError):
    """Raised when backend storage operations fail."""

    def __init__(self, operation: str, detail: str) -> None:
        self.operation = operation
        self.detail = detail
        super().__init__(f"Storage backend error during {operation}: {detail}")


class StoreClosedError(FitstoreError):
    """Raised when an operation is issued against a closed store."""

    def __init__(self) -> None:
        super().__init__("Store is closed")
