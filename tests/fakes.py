"""
Fake driver results for testing.

``Neo4jClient`` only touches ``EagerResult.records`` and ``Record.data()``,
so these stand-ins implement just that much.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class FakeRecord:
    """Record stand-in returning a fixed row."""

    row: dict[str, Any]

    def data(self) -> dict[str, Any]:
        return dict(self.row)


@dataclass
class FakeEagerResult:
    """EagerResult stand-in."""

    records: list[FakeRecord] = field(default_factory=list)


def make_result(*rows: dict[str, Any]) -> FakeEagerResult:
    """Build a result whose records yield ``rows``."""
    return FakeEagerResult(records=[FakeRecord(row) for row in rows])
