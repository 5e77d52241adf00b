# Graph module for Neo4j integration
"""
Graph layer for the Neo4j binding:
- DriverPool: process-wide, reference-counted driver sharing
- Neo4jClient: record repository over the shared driver
- Schema helpers: label validation and Cypher templates
"""

from graphstore.graph.driver_pool import DriverPool, get_driver_pool
from graphstore.graph.exceptions import (
    GraphStoreConnectionError,
    GraphStoreError,
    GraphStoreQueryError,
    GraphStoreWriteError,
    InvalidLabelError,
)
from graphstore.graph.neo4j_client import (
    FakeNeo4jClient,
    Neo4jClient,
    Neo4jClientProtocol,
)
from graphstore.graph.schema import KEY_PROPERTY, validate_label

__all__ = [
    # Exceptions
    "GraphStoreError",
    "GraphStoreConnectionError",
    "GraphStoreQueryError",
    "GraphStoreWriteError",
    "InvalidLabelError",
    # Driver
    "DriverPool",
    "get_driver_pool",
    # Client
    "Neo4jClient",
    "Neo4jClientProtocol",
    "FakeNeo4jClient",
    # Schema
    "KEY_PROPERTY",
    "validate_label",
]
