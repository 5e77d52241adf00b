"""
Process-wide Neo4j driver sharing.

Every adapter instance in a process talks to the database through one
``neo4j.Driver``. The driver keeps its own thread-safe connection pool, so
the only coordination needed here is creating it once and closing it once:

    pool = get_driver_pool()
    driver = pool.acquire(settings)   # first caller creates + verifies
    ...
    pool.release()                    # last caller closes
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import TYPE_CHECKING

from neo4j import GraphDatabase

from graphstore.graph.exceptions import GraphStoreConnectionError

if TYPE_CHECKING:
    from neo4j import Driver

    from graphstore.core.config import Settings

logger = logging.getLogger(__name__)

VALID_URL_SCHEMES = (
    "bolt://",
    "bolt+s://",
    "bolt+ssc://",
    "neo4j://",
    "neo4j+s://",
    "neo4j+ssc://",
)


def get_neo4j_driver(settings: Settings) -> Driver:
    """
    Create a Neo4j driver and verify it can reach the server.

    Args:
        settings: Settings with neo4j_url, neo4j_user, neo4j_password

    Returns:
        Connected Neo4j driver instance

    Raises:
        GraphStoreConnectionError: If the URL is invalid or the server
            cannot be reached with the given credentials
    """
    if not settings.neo4j_url.startswith(VALID_URL_SCHEMES):
        raise GraphStoreConnectionError(
            f"Invalid Neo4j URL scheme: {settings.neo4j_url}"
        )

    try:
        driver = GraphDatabase.driver(
            settings.neo4j_url,
            auth=(settings.neo4j_user, settings.neo4j_password),
        )
    except Exception as e:
        raise GraphStoreConnectionError(
            f"Failed to create Neo4j driver: {e}", cause=e
        ) from e

    try:
        driver.verify_connectivity()
    except Exception as e:
        driver.close()
        raise GraphStoreConnectionError(
            f"Failed to connect to Neo4j at {settings.neo4j_url}", cause=e
        ) from e
    return driver


class DriverPool:
    """Reference-counted owner of a single shared driver.

    ``acquire`` and ``release`` are serialized by a lock; query execution
    on the returned driver is not.

    Args:
        driver_factory: Creates the driver on first acquire; defaults to
            ``get_neo4j_driver``
    """

    def __init__(
        self, driver_factory: Callable[[Settings], Driver] | None = None
    ) -> None:
        self._driver_factory = driver_factory or get_neo4j_driver
        self._lock = threading.Lock()
        self._driver: Driver | None = None
        self._users = 0

    @property
    def users(self) -> int:
        """Number of outstanding acquisitions."""
        return self._users

    @property
    def is_connected(self) -> bool:
        """Check if the shared driver exists."""
        return self._driver is not None

    def acquire(self, settings: Settings) -> Driver:
        """Register a user and return the shared driver, creating it if needed.

        Settings are only consulted by the call that creates the driver;
        later callers share it regardless of their own settings.

        Raises:
            GraphStoreConnectionError: If the driver has to be created and
                creation fails. The user count is left unchanged.
        """
        with self._lock:
            if self._driver is None:
                self._driver = self._driver_factory(settings)
                logger.info("Neo4j driver connected to %s", settings.neo4j_url)
            self._users += 1
            return self._driver

    def release(self) -> None:
        """Unregister a user, closing the driver when none remain.

        Releasing with no outstanding users is a no-op.
        """
        with self._lock:
            if self._users == 0:
                return
            self._users -= 1
            if self._users == 0 and self._driver is not None:
                driver, self._driver = self._driver, None
                driver.close()
                logger.info("Neo4j driver closed")


_default_pool = DriverPool()


def get_driver_pool() -> DriverPool:
    """Get the process-wide driver pool."""
    return _default_pool
