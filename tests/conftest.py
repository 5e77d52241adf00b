"""
Pytest configuration and fixtures for graphstore-bench tests.
"""

from unittest.mock import MagicMock

import pytest

from graphstore.adapter import GraphStoreAdapter
from graphstore.core.config import Settings
from graphstore.core.logging import clear_worker_id
from graphstore.graph.driver_pool import DriverPool
from graphstore.graph.neo4j_client import FakeNeo4jClient
from tests.fakes import make_result


@pytest.fixture(autouse=True)
def _reset_worker_id():
    """Adapters bind a worker ID to the calling thread on init()."""
    clear_worker_id()
    yield
    clear_worker_id()


@pytest.fixture
def settings() -> Settings:
    """Provide test settings."""
    return Settings(
        neo4j_url="bolt://localhost:7687",
        neo4j_user="neo4j",
        neo4j_password="testpassword",
        neo4j_database="neo4j",
    )


@pytest.fixture
def properties() -> dict[str, str]:
    """Harness property map matching the ``settings`` fixture."""
    return {
        "neo4j.url": "bolt://localhost:7687",
        "neo4j.user": "neo4j",
        "neo4j.passwd": "testpassword",
    }


@pytest.fixture
def mock_neo4j_driver() -> MagicMock:
    """Mock Neo4j driver for unit tests."""
    driver = MagicMock()
    driver.verify_connectivity = MagicMock(return_value=None)
    driver.execute_query = MagicMock(return_value=make_result())
    return driver


@pytest.fixture
def mock_pool(mock_neo4j_driver: MagicMock) -> MagicMock:
    """Driver pool that hands out the mock driver without connecting."""
    pool = MagicMock(spec=DriverPool)
    pool.acquire.return_value = mock_neo4j_driver
    return pool


@pytest.fixture
def fake_client() -> FakeNeo4jClient:
    """In-memory record repository."""
    return FakeNeo4jClient()


@pytest.fixture
def adapter(properties, mock_pool, fake_client):
    """Initialized adapter backed by the in-memory repository."""
    db = GraphStoreAdapter(
        properties,
        pool=mock_pool,
        client_factory=lambda driver, database: fake_client,
    )
    db.init()
    yield db
    db.cleanup()
