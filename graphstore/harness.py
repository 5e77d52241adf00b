"""
Contract between the benchmark harness and a database binding.

The harness creates one binding instance per worker thread, hands it the
run's property map, calls ``init()`` once, drives the workload through the
five record operations and finally calls ``cleanup()``. Operations report
a ``Status``; read and scan also fill a result container the harness owns.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from enum import Enum
from typing import Any

FieldSet = dict[str, str]


class Status(Enum):
    """Outcome of a single record operation."""

    OK = ("OK", "The operation completed successfully.")
    ERROR = ("ERROR", "The operation failed.")
    NOT_FOUND = ("NOT_FOUND", "The requested record was not found.")
    BAD_REQUEST = ("BAD_REQUEST", "The request was not valid.")

    def __init__(self, label: str, description: str) -> None:
        self.label = label
        self.description = description

    def is_ok(self) -> bool:
        return self is Status.OK


class DBError(Exception):
    """Fatal error raised from ``init()`` or ``cleanup()``.

    The harness aborts the run when a binding cannot be set up.
    """


class DB(ABC):
    """Base class for database bindings driven by the harness."""

    def __init__(self, properties: Mapping[str, str] | None = None) -> None:
        self._properties: dict[str, str] = dict(properties or {})

    @property
    def properties(self) -> dict[str, str]:
        """Run properties supplied by the harness."""
        return self._properties

    def set_properties(self, properties: Mapping[str, str]) -> None:
        self._properties = dict(properties)

    def init(self) -> None:
        """Prepare this instance for use. One call per instance."""

    def cleanup(self) -> None:
        """Release what ``init()`` acquired. One call per instance."""

    def __enter__(self) -> DB:
        self.init()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.cleanup()

    @abstractmethod
    def read(
        self,
        table: str,
        key: str,
        fields: set[str] | None,
        result: FieldSet,
    ) -> Status:
        """Read one record into ``result``; ``fields=None`` means all fields."""

    @abstractmethod
    def scan(
        self,
        table: str,
        start_key: str,
        record_count: int,
        fields: set[str] | None,
        result: list[FieldSet],
    ) -> Status:
        """Append up to ``record_count`` records, from ``start_key`` in key order."""

    @abstractmethod
    def update(self, table: str, key: str, values: Mapping[str, Any]) -> Status:
        """Replace the record's fields with ``values``."""

    @abstractmethod
    def insert(self, table: str, key: str, values: Mapping[str, Any]) -> Status:
        """Insert a new record."""

    @abstractmethod
    def delete(self, table: str, key: str) -> Status:
        """Delete a record."""
