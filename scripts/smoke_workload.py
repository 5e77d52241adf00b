#!/usr/bin/env python3
"""
Smoke-test the Neo4j binding with a small CRUD workload.

Inserts N records, reads them back, updates them, scans the table and
deletes everything, printing a status count per operation.

Usage:
    python scripts/smoke_workload.py --records 100
    python scripts/smoke_workload.py --dry-run   # in-memory store, no server

Environment Variables:
    NEO4J_URL: Neo4j connection URL (default: bolt://localhost:7687)
    NEO4J_USER: Neo4j username (default: neo4j)
    NEO4J_PASSWORD: Neo4j password
"""

import argparse
import sys
from collections import Counter

from graphstore.adapter import GraphStoreAdapter
from graphstore.core.config import Settings
from graphstore.core.logging import setup_structured_logging
from graphstore.graph.driver_pool import DriverPool
from graphstore.graph.neo4j_client import FakeNeo4jClient
from graphstore.harness import DBError, Status


class _OfflineDriver:
    """Stands in for the driver in --dry-run; the fake client never uses it."""

    def close(self) -> None:
        pass


def _offline_driver(settings: Settings) -> _OfflineDriver:
    return _OfflineDriver()


def run_workload(adapter: GraphStoreAdapter, table: str, records: int) -> dict[str, Counter]:
    """Run insert/read/update/scan/delete and count statuses per operation."""
    counts: dict[str, Counter] = {}
    keys = [f"user{i:06d}" for i in range(records)]

    def record(operation: str, status: Status) -> None:
        counts.setdefault(operation, Counter())[status.label] += 1

    for key in keys:
        record("insert", adapter.insert(table, key, {"field0": f"{key}-v1", "field1": "x"}))

    for key in keys:
        record("read", adapter.read(table, key, None, {}))

    for key in keys:
        record("update", adapter.update(table, key, {"field0": f"{key}-v2"}))

    if keys:
        rows: list = []
        record("scan", adapter.scan(table, keys[0], records, None, rows))

    for key in keys:
        record("delete", adapter.delete(table, key))

    for key in keys:
        # Every record is gone, so NOT_FOUND is the expected outcome here
        record("read-after-delete", adapter.read(table, key, None, {}))

    return counts


def _failed(counts: dict[str, Counter]) -> bool:
    for operation, statuses in counts.items():
        expected = "NOT_FOUND" if operation == "read-after-delete" else "OK"
        if any(label != expected for label in statuses):
            return True
    return False


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Run a small CRUD workload through the Neo4j binding",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--records",
        type=int,
        default=10,
        help="Number of records to write (default: 10)",
    )
    parser.add_argument(
        "--table",
        default="usertable",
        help="Table (node label) to use (default: usertable)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Use an in-memory store instead of a Neo4j server",
    )
    args = parser.parse_args()

    setup_structured_logging()

    if args.dry_run:
        fake = FakeNeo4jClient(unique_keys=True)
        adapter = GraphStoreAdapter(
            pool=DriverPool(driver_factory=_offline_driver),
            client_factory=lambda driver, database: fake,
        )
    else:
        adapter = GraphStoreAdapter()

    try:
        adapter.init()
    except DBError as e:
        print(f"❌ Could not connect: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        counts = run_workload(adapter, args.table, args.records)
    finally:
        adapter.cleanup()

    for operation, statuses in counts.items():
        summary = ", ".join(f"{label}={n}" for label, n in sorted(statuses.items()))
        print(f"  {operation:<18} {summary}")

    if _failed(counts):
        print("❌ Unexpected statuses", file=sys.stderr)
        sys.exit(1)
    print("✅ Workload completed")


if __name__ == "__main__":
    main()
