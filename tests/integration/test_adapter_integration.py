"""
Integration tests against a live Neo4j server.

Skipped unless NEO4J_INTEGRATION=1. Connection settings come from the usual
NEO4J_URL / NEO4J_USER / NEO4J_PASSWORD environment variables. Each test
uses its own label and removes its nodes afterwards.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import Iterator

import pytest

from graphstore.adapter import GraphStoreAdapter
from graphstore.graph.driver_pool import DriverPool
from graphstore.harness import Status

pytestmark = pytest.mark.skipif(
    os.environ.get("NEO4J_INTEGRATION") != "1",
    reason="set NEO4J_INTEGRATION=1 to run against a live Neo4j",
)


@pytest.fixture
def table() -> str:
    return f"bench_{uuid.uuid4().hex[:12]}"


@pytest.fixture
def live_adapter(table: str) -> Iterator[GraphStoreAdapter]:
    adapter = GraphStoreAdapter(pool=DriverPool())
    adapter.init()
    yield adapter
    for i in range(1, 6):
        adapter.delete(table, f"user{i}")
    adapter.cleanup()


class TestLiveCrud:
    """CRUD round trips through the real driver."""

    def test_insert_read_update_delete(self, live_adapter: GraphStoreAdapter, table: str) -> None:
        assert live_adapter.insert(table, "user1", {"name": "alice", "city": "paris"}) is Status.OK

        result: dict[str, str] = {}
        assert live_adapter.read(table, "user1", None, result) is Status.OK
        assert result == {"name": "alice", "city": "paris"}

        assert live_adapter.update(table, "user1", {"name": "bob"}) is Status.OK
        result = {}
        live_adapter.read(table, "user1", None, result)
        assert result == {"name": "bob"}

        assert live_adapter.delete(table, "user1") is Status.OK
        assert live_adapter.delete(table, "user1") is Status.OK
        assert live_adapter.read(table, "user1", None, {}) is Status.NOT_FOUND

    def test_scan_is_key_ordered(self, live_adapter: GraphStoreAdapter, table: str) -> None:
        for i in [3, 1, 5, 2, 4]:
            live_adapter.insert(table, f"user{i}", {"n": str(i)})

        rows: list[dict[str, str]] = []
        assert live_adapter.scan(table, "user2", 3, {"n"}, rows) is Status.OK

        assert rows == [{"n": "2"}, {"n": "3"}, {"n": "4"}]
