"""
Graph schema helpers for the CRUD workload.

Provides utilities for:
- The reserved ``_key`` property that identifies a record within a label
- Table name validation before it is used as a node label
- Cypher generation for the five workload operations

Labels cannot be passed as query parameters, so every generator takes a
label that has already been through ``validate_label``. Record keys and
property maps are always bound as ``$`` parameters.
"""

from __future__ import annotations

import re
from collections.abc import Collection

from graphstore.graph.exceptions import InvalidLabelError

# Property holding the record key on every workload node
KEY_PROPERTY = "_key"

_LABEL_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


# =============================================================================
# Label Validation
# =============================================================================


def validate_label(
    table: str,
    allowed: Collection[str] | None = None,
) -> str:
    """Return ``table`` if it is safe to interpolate as a node label.

    Args:
        table: Table name supplied by the harness
        allowed: Optional allow list; when non-empty, ``table`` must be in it

    Returns:
        The table name, unchanged

    Raises:
        InvalidLabelError: If the name is not a plain identifier or is
            not in the allow list.
    """
    if not isinstance(table, str) or not _LABEL_PATTERN.match(table):
        raise InvalidLabelError(str(table), "must be a plain identifier")
    if allowed and table not in allowed:
        raise InvalidLabelError(table, "not in the allowed table list")
    return table


# =============================================================================
# Cypher Generation Functions
# =============================================================================


def generate_read_cypher(label: str) -> str:
    """Generate Cypher to fetch one node's properties by key."""
    return (
        f"MATCH (n:{label} {{{KEY_PROPERTY}: $key}}) "
        "RETURN properties(n) AS props LIMIT 1"
    )


def generate_scan_cypher(label: str) -> str:
    """Generate Cypher for a key-ordered range scan.

    Binds ``$start_key`` (inclusive lower bound) and ``$limit``.
    """
    return (
        f"MATCH (n:{label}) WHERE n.{KEY_PROPERTY} >= $start_key "
        f"RETURN properties(n) AS props ORDER BY n.{KEY_PROPERTY} LIMIT $limit"
    )


def generate_replace_cypher(label: str) -> str:
    """Generate Cypher overwriting every property of the matched node.

    ``SET n = $props`` drops properties missing from ``$props``, so the
    caller must include ``_key`` in the map.
    """
    return (
        f"MATCH (n:{label} {{{KEY_PROPERTY}: $key}}) SET n = $props "
        "RETURN count(n) AS matched"
    )


def generate_create_cypher(label: str) -> str:
    """Generate Cypher to CREATE a node from a property map."""
    return f"CREATE (n:{label}) SET n = $props"


def generate_delete_cypher(label: str) -> str:
    """Generate Cypher deleting every node of ``label`` with the given key."""
    return (
        f"MATCH (n:{label} {{{KEY_PROPERTY}: $key}}) DETACH DELETE n "
        "RETURN count(n) AS deleted"
    )
