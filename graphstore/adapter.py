"""
Neo4j binding for the benchmark harness.

Each harness table is a node label and each record key is stored in the
node's ``_key`` property; the remaining properties are the record's fields.
The harness creates one ``GraphStoreAdapter`` per worker thread, and all of
them share the process-wide driver from ``get_driver_pool()``.

No schema is created here. Create a uniqueness constraint on ``_key`` for
each workload label before loading, e.g.::

    CREATE CONSTRAINT usertable_key IF NOT EXISTS
    FOR (n:usertable) REQUIRE n._key IS UNIQUE
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable, Mapping
from typing import Any

from graphstore.core.config import Settings
from graphstore.core.logging import set_worker_id
from graphstore.graph.driver_pool import DriverPool, get_driver_pool
from graphstore.graph.exceptions import (
    GraphStoreConnectionError,
    GraphStoreError,
    InvalidLabelError,
)
from graphstore.graph.neo4j_client import Neo4jClient, Neo4jClientProtocol
from graphstore.graph.schema import KEY_PROPERTY, validate_label
from graphstore.harness import DB, DBError, FieldSet, Status

logger = logging.getLogger(__name__)

ClientFactory = Callable[[Any, str], Neo4jClientProtocol]

_instance_ids = itertools.count(1)


def _select_fields(props: Mapping[str, Any], fields: set[str] | None) -> FieldSet:
    # None means every stored field; the key property is bookkeeping, not a field
    if fields is None:
        return {name: str(value) for name, value in props.items() if name != KEY_PROPERTY}
    return {name: str(props[name]) for name in fields if name in props}


def _to_text(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8")
    return str(value)


def _to_properties(key: str, values: Mapping[str, Any]) -> dict[str, str]:
    props = {str(name): _to_text(value) for name, value in values.items()}
    props[KEY_PROPERTY] = key
    return props


class GraphStoreAdapter(DB):
    """Runs harness record operations against Neo4j.

    Args:
        properties: Harness run properties (``neo4j.url``, ``neo4j.user``,
            ``neo4j.passwd``, ...)
        pool: Driver pool to share; defaults to the process-wide pool
        client_factory: Builds the record repository from the shared driver
            and database name; defaults to ``Neo4jClient``
    """

    def __init__(
        self,
        properties: Mapping[str, str] | None = None,
        pool: DriverPool | None = None,
        client_factory: ClientFactory | None = None,
    ) -> None:
        super().__init__(properties)
        self._pool = pool or get_driver_pool()
        self._client_factory = client_factory or Neo4jClient
        self._client: Neo4jClientProtocol | None = None
        self._allowed_tables: frozenset[str] = frozenset()
        self._worker_id = f"worker-{next(_instance_ids)}"

    @property
    def is_initialized(self) -> bool:
        return self._client is not None

    @property
    def worker_id(self) -> str:
        """ID attached to log lines emitted on this instance's worker thread."""
        return self._worker_id

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def init(self) -> None:
        """Acquire the shared driver, connecting on first use in the process.

        Also tags the calling thread's log records with ``worker_id``; the
        harness calls ``init()`` on the worker's own thread.

        Raises:
            DBError: If the configuration is invalid or the database
                cannot be reached.
        """
        if self._client is not None:
            return
        set_worker_id(self._worker_id)
        try:
            settings = Settings.from_properties(self.properties)
        except ValueError as e:
            logger.error("Invalid Neo4j configuration: %s", e)
            raise DBError(f"Invalid Neo4j configuration: {e}") from e

        try:
            driver = self._pool.acquire(settings)
        except GraphStoreConnectionError as e:
            logger.error("Could not initialize connection to Neo4j: %s", e)
            raise DBError(str(e)) from e

        self._allowed_tables = settings.table_allow_list
        self._client = self._client_factory(driver, settings.neo4j_database)

    def cleanup(self) -> None:
        """Release the shared driver; the last release in the process closes it.

        Raises:
            DBError: If closing the driver fails.
        """
        if self._client is None:
            return
        self._client = None
        try:
            self._pool.release()
        except Exception as e:
            logger.error("Could not close Neo4j connection: %s", e, exc_info=True)
            raise DBError(f"Could not close Neo4j connection: {e}") from e

    # -------------------------------------------------------------------------
    # Record operations
    # -------------------------------------------------------------------------

    def read(
        self,
        table: str,
        key: str,
        fields: set[str] | None,
        result: FieldSet,
    ) -> Status:
        def _read(client: Neo4jClientProtocol, label: str) -> Status:
            props = client.find_node(label, key)
            if props is None:
                return Status.NOT_FOUND
            result.update(_select_fields(props, fields))
            return Status.OK

        return self._execute("read", table, key, _read)

    def scan(
        self,
        table: str,
        start_key: str,
        record_count: int,
        fields: set[str] | None,
        result: list[FieldSet],
    ) -> Status:
        if not isinstance(record_count, int) or record_count <= 0:
            logger.error("scan rejected: record count must be positive, got %s", record_count)
            return Status.BAD_REQUEST

        def _scan(client: Neo4jClientProtocol, label: str) -> Status:
            nodes = client.scan_nodes(label, start_key, record_count)
            result.extend(_select_fields(props, fields) for props in nodes)
            return Status.OK

        return self._execute("scan", table, start_key, _scan)

    def update(self, table: str, key: str, values: Mapping[str, Any]) -> Status:
        def _update(client: Neo4jClientProtocol, label: str) -> Status:
            matched = client.replace_node(label, key, _to_properties(key, values))
            if matched == 0:
                logger.debug("update matched no node for %s/%s", table, key)
            return Status.OK

        return self._execute("update", table, key, _update)

    def insert(self, table: str, key: str, values: Mapping[str, Any]) -> Status:
        def _insert(client: Neo4jClientProtocol, label: str) -> Status:
            client.create_node(label, _to_properties(key, values))
            return Status.OK

        return self._execute("insert", table, key, _insert)

    def delete(self, table: str, key: str) -> Status:
        def _delete(client: Neo4jClientProtocol, label: str) -> Status:
            client.delete_nodes(label, key)
            return Status.OK

        return self._execute("delete", table, key, _delete)

    def _execute(
        self,
        operation: str,
        table: str,
        key: str,
        action: Callable[[Neo4jClientProtocol, str], Status],
    ) -> Status:
        try:
            label = validate_label(table, self._allowed_tables)
            if self._client is None:
                raise GraphStoreConnectionError(
                    "Not connected to Neo4j. Call init() first."
                )
            return action(self._client, label)
        except InvalidLabelError as e:
            logger.error("%s rejected: %s", operation, e)
            return Status.BAD_REQUEST
        except GraphStoreError as e:
            logger.error("%s failed for %s/%s: %s", operation, table, key, e, exc_info=True)
            return Status.ERROR
        except Exception as e:
            logger.error(
                "%s failed unexpectedly for %s/%s: %s", operation, table, key, e, exc_info=True
            )
            return Status.ERROR
