"""
Pytest configuration and shared fixtures for MONGO_INDEX_COPY tests.

This module provides:
- Mock source/destination collection fixtures
- Index descriptor factories
- Real MongoDB fixtures (testcontainers) for integration tests
"""

import uuid
from typing import Any, Dict, List
from unittest.mock import MagicMock

import pytest
from bson.son import SON
from pymongo.collection import Collection

from mongo_index_copy.observability import clear_correlation_id, get_metrics_collector


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "integration: tests that need a real MongoDB (run via testcontainers)"
    )


# ============================================================================
# DESCRIPTOR FACTORIES
# ============================================================================


def make_descriptor(name: str, keys: List[tuple], **options: Any) -> SON:
    """Build a descriptor shaped like the documents pymongo's list_indexes() yields."""
    descriptor = SON([("v", 2), ("key", SON(keys)), ("name", name)])
    for field, value in options.items():
        descriptor[field] = value
    return descriptor


def without_store_fields(descriptor: Dict[str, Any]) -> Dict[str, Any]:
    """Drop fields the server assigns itself."""
    return {k: v for k, v in descriptor.items() if k != "ns"}


@pytest.fixture
def id_descriptor() -> SON:
    return make_descriptor("_id_", [("_id", 1)])


@pytest.fixture
def sample_descriptors(id_descriptor) -> List[SON]:
    """Default _id index plus three user indexes."""
    return [
        id_descriptor,
        make_descriptor("email_idx", [("email", 1)], unique=True),
        make_descriptor("created_ttl", [("created_at", 1)], expireAfterSeconds=3600),
        make_descriptor(
            "name_ci",
            [("last_name", 1), ("first_name", -1)],
            collation=SON(
                [
                    ("locale", "fr"),
                    ("caseLevel", False),
                    ("caseFirst", "off"),
                    ("strength", 2),
                    ("numericOrdering", True),
                    ("alternate", "shifted"),
                    ("maxVariable", "space"),
                    ("normalization", True),
                    ("backwards", True),
                    ("version", "57.1"),
                ]
            ),
        ),
    ]


# ============================================================================
# MOCK COLLECTION FIXTURES
# ============================================================================


def make_collection(full_name: str, descriptors: List[SON] | None = None) -> MagicMock:
    """Create a mock pymongo collection."""
    collection = MagicMock(spec=Collection)
    collection.full_name = full_name
    collection.list_indexes.return_value = list(descriptors or [])
    collection.create_indexes.side_effect = lambda models, **kwargs: [
        m.document["name"] for m in models
    ]
    return collection


@pytest.fixture
def source_collection(sample_descriptors) -> MagicMock:
    return make_collection("test_db.source", sample_descriptors)


@pytest.fixture
def empty_source_collection() -> MagicMock:
    return make_collection("test_db.empty")


@pytest.fixture
def destination_collection() -> MagicMock:
    return make_collection("test_db.destination")


# ============================================================================
# ENVIRONMENT / GLOBAL STATE
# ============================================================================


@pytest.fixture(autouse=True)
def reset_environment(monkeypatch):
    """Reset environment variables and global observability state before each test."""
    for var in ["MONGO_INDEX_COPY_UNKNOWN_FIELDS", "MONGO_INDEX_COPY_METRICS_ENABLED"]:
        monkeypatch.delenv(var, raising=False)
    get_metrics_collector().reset()
    clear_correlation_id()
    yield
    get_metrics_collector().reset()


# ============================================================================
# TESTCONTAINERS FIXTURES (Real MongoDB for Integration Tests)
# ============================================================================


@pytest.fixture(scope="session")
def mongodb_container():
    """
    Start a MongoDB container for integration tests.

    Session-scoped: container starts once and is reused for all integration tests.
    """
    try:
        from testcontainers.mongodb import MongoDbContainer
    except ImportError:
        pytest.skip("testcontainers not installed. Install with: pip install -e '.[test]'")

    container = MongoDbContainer("mongo:6.0")
    try:
        container.start()
    except Exception as e:  # Docker missing or not running
        pytest.skip(f"Could not start MongoDB container: {e}")

    yield container
    container.stop()


@pytest.fixture(scope="session")
def real_mongo_client(mongodb_container):
    from pymongo import MongoClient

    client = MongoClient(mongodb_container.get_connection_url())
    client.admin.command("ping")
    yield client
    client.close()


@pytest.fixture
def real_mongo_db(real_mongo_client):
    """
    Unique database per test, dropped afterwards.
    """
    db_name = f"test_db_{uuid.uuid4().hex[:12]}"
    yield real_mongo_client[db_name]
    real_mongo_client.drop_database(db_name)


@pytest.fixture
def source_and_destination(real_mongo_db):
    """Freshly created source and destination collections."""
    source = real_mongo_db.create_collection(f"source_{uuid.uuid4().hex[:8]}")
    destination = real_mongo_db.create_collection(f"destination_{uuid.uuid4().hex[:8]}")
    return source, destination
