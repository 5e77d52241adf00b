"""
Custom exceptions for the graph module.

Names carry a GraphStore prefix so they never shadow Python builtins
(ConnectionError) or the driver's own ``neo4j.exceptions`` classes.
"""

from __future__ import annotations


class GraphStoreError(Exception):
    """Base exception for all graph store errors."""

    pass


class GraphStoreConnectionError(GraphStoreError):
    """Raised when the driver cannot be created or cannot reach the server."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        """Initialize with message and optional cause.

        Args:
            message: Human-readable error description
            cause: Original exception that caused this error
        """
        super().__init__(message)
        self.cause = cause


class GraphStoreQueryError(GraphStoreError):
    """Raised when a read query fails.

    This includes syntax errors, unavailable servers and
    other query execution failures.
    """

    def __init__(
        self,
        message: str,
        query: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize with message, failed query, and optional cause.

        Args:
            message: Human-readable error description
            query: The Cypher query that failed
            cause: Original exception that caused this error
        """
        super().__init__(message)
        self.query = query
        self.cause = cause


class GraphStoreWriteError(GraphStoreQueryError):
    """Raised when a write query fails, e.g. on a uniqueness constraint violation."""


class InvalidLabelError(GraphStoreError):
    """Raised when a table name cannot be used as a node label."""

    def __init__(self, label: str, reason: str) -> None:
        super().__init__(f"Invalid table name {label!r}: {reason}")
        self.label = label
