"""
Neo4j record repository used by the workload adapter.

This module provides:
- Neo4jClient: record operations over a shared ``neo4j.Driver``
- FakeNeo4jClient: in-memory fake for testing
- Both share the same interface (duck typing, see Neo4jClientProtocol)

Records are nodes identified by (label, ``_key``). Labels passed to these
methods must already have been checked with ``schema.validate_label``.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from neo4j import RoutingControl
from neo4j.exceptions import DriverError, Neo4jError

from graphstore.graph.exceptions import GraphStoreQueryError, GraphStoreWriteError
from graphstore.graph.schema import (
    KEY_PROPERTY,
    generate_create_cypher,
    generate_delete_cypher,
    generate_read_cypher,
    generate_replace_cypher,
    generate_scan_cypher,
)

if TYPE_CHECKING:
    from neo4j import Driver


@runtime_checkable
class Neo4jClientProtocol(Protocol):
    """Protocol defining the record repository interface."""

    def find_node(self, label: str, key: str) -> dict[str, Any] | None:
        """Return the properties of the node with ``key``, or None."""
        ...

    def scan_nodes(
        self, label: str, start_key: str, limit: int
    ) -> list[dict[str, Any]]:
        """Return up to ``limit`` nodes with ``_key >= start_key``, key-ordered."""
        ...

    def replace_node(self, label: str, key: str, props: dict[str, Any]) -> int:
        """Overwrite matching nodes' properties; return the match count."""
        ...

    def create_node(self, label: str, props: dict[str, Any]) -> None:
        """Create a node from ``props``."""
        ...

    def delete_nodes(self, label: str, key: str) -> int:
        """Delete matching nodes; return the number deleted."""
        ...


class Neo4jClient:
    """Record repository backed by a (shared) Neo4j driver.

    The client does not own the driver: closing it is the job of
    whoever handed it out (see ``driver_pool.DriverPool``).

    Usage:
        driver = get_driver_pool().acquire(settings)
        client = Neo4jClient(driver, database=settings.neo4j_database)
        client.create_node("usertable", {"_key": "user1", "name": "alice"})
        client.find_node("usertable", "user1")
    """

    def __init__(self, driver: Driver, database: str = "neo4j") -> None:
        self._driver = driver
        self._database = database

    @property
    def database(self) -> str:
        """Get the database name."""
        return self._database

    def query(
        self,
        cypher: str,
        parameters: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """Execute a read query and return results.

        Args:
            cypher: Cypher query string
            parameters: Optional query parameters

        Returns:
            List of records as dictionaries

        Raises:
            GraphStoreQueryError: If query execution fails
        """
        try:
            result = self._driver.execute_query(
                cypher,
                parameters or {},
                routing_=RoutingControl.READ,
                database_=self._database,
            )
        except (Neo4jError, DriverError) as e:
            raise GraphStoreQueryError(
                f"Query failed: {e}", query=cypher, cause=e
            ) from e
        except Exception as e:
            raise GraphStoreQueryError(
                f"Unexpected error executing query: {e}", query=cypher, cause=e
            ) from e
        return [record.data() for record in result.records]

    def execute_write(
        self,
        cypher: str,
        parameters: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """Execute a write query in an auto-committed transaction.

        Raises:
            GraphStoreWriteError: If the transaction fails
        """
        try:
            result = self._driver.execute_query(
                cypher,
                parameters or {},
                routing_=RoutingControl.WRITE,
                database_=self._database,
            )
        except (Neo4jError, DriverError) as e:
            raise GraphStoreWriteError(
                f"Write failed: {e}", query=cypher, cause=e
            ) from e
        except Exception as e:
            raise GraphStoreWriteError(
                f"Unexpected error in write: {e}", query=cypher, cause=e
            ) from e
        return [record.data() for record in result.records]

    def find_node(self, label: str, key: str) -> dict[str, Any] | None:
        rows = self.query(generate_read_cypher(label), {"key": key})
        if not rows:
            return None
        return dict(rows[0]["props"])

    def scan_nodes(
        self, label: str, start_key: str, limit: int
    ) -> list[dict[str, Any]]:
        rows = self.query(
            generate_scan_cypher(label),
            {"start_key": start_key, "limit": limit},
        )
        return [dict(row["props"]) for row in rows]

    def replace_node(self, label: str, key: str, props: dict[str, Any]) -> int:
        rows = self.execute_write(
            generate_replace_cypher(label),
            {"key": key, "props": {**props, KEY_PROPERTY: key}},
        )
        return rows[0]["matched"] if rows else 0

    def create_node(self, label: str, props: dict[str, Any]) -> None:
        self.execute_write(generate_create_cypher(label), {"props": props})

    def delete_nodes(self, label: str, key: str) -> int:
        rows = self.execute_write(generate_delete_cypher(label), {"key": key})
        return rows[0]["deleted"] if rows else 0


class FakeNeo4jClient:
    """In-memory fake record repository for testing.

    Implements the same interface as Neo4jClient, storing nodes per
    label in insertion order. With ``unique_keys=True`` a duplicate
    create raises GraphStoreWriteError, like a uniqueness constraint
    on ``_key`` would.

    Usage:
        fake = FakeNeo4jClient()
        fake.create_node("usertable", {"_key": "user1", "name": "alice"})
        fake.find_node("usertable", "user1")
    """

    def __init__(self, unique_keys: bool = False) -> None:
        self._unique_keys = unique_keys
        self._lock = threading.Lock()
        self._nodes: dict[str, list[dict[str, Any]]] = {}

    def find_node(self, label: str, key: str) -> dict[str, Any] | None:
        with self._lock:
            for node in self._nodes.get(label, []):
                if node.get(KEY_PROPERTY) == key:
                    return dict(node)
        return None

    def scan_nodes(
        self, label: str, start_key: str, limit: int
    ) -> list[dict[str, Any]]:
        with self._lock:
            matching = [
                dict(node)
                for node in self._nodes.get(label, [])
                if node.get(KEY_PROPERTY, "") >= start_key
            ]
        matching.sort(key=lambda node: node[KEY_PROPERTY])
        return matching[:limit]

    def replace_node(self, label: str, key: str, props: dict[str, Any]) -> int:
        matched = 0
        with self._lock:
            for node in self._nodes.get(label, []):
                if node.get(KEY_PROPERTY) == key:
                    node.clear()
                    node.update(props)
                    node[KEY_PROPERTY] = key
                    matched += 1
        return matched

    def create_node(self, label: str, props: dict[str, Any]) -> None:
        with self._lock:
            nodes = self._nodes.setdefault(label, [])
            key = props.get(KEY_PROPERTY)
            if self._unique_keys and any(n.get(KEY_PROPERTY) == key for n in nodes):
                raise GraphStoreWriteError(
                    f"Node({label}) already exists with {KEY_PROPERTY} = {key!r}",
                    query=generate_create_cypher(label),
                )
            nodes.append(dict(props))

    def delete_nodes(self, label: str, key: str) -> int:
        with self._lock:
            nodes = self._nodes.get(label, [])
            kept = [n for n in nodes if n.get(KEY_PROPERTY) != key]
            self._nodes[label] = kept
            return len(nodes) - len(kept)

    def get_stored_nodes(self, label: str) -> list[dict[str, Any]]:
        """Get copies of all nodes stored under ``label``."""
        with self._lock:
            return [dict(n) for n in self._nodes.get(label, [])]

    def clear(self) -> None:
        """Clear all stored data."""
        with self._lock:
            self._nodes.clear()
