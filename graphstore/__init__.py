"""Neo4j binding for key-value benchmark harnesses."""

from graphstore.adapter import GraphStoreAdapter
from graphstore.harness import DB, DBError, Status

__all__ = ["DB", "DBError", "GraphStoreAdapter", "Status"]
