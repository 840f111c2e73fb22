"""Shared fixtures for fluid_indexer tests."""

from __future__ import annotations

import pytest
from pytest_metadata.plugin import metadata_key

from fluid_indexer.indexer import Indexer
from fluid_indexer.models.config import IndexerConfig
from fluid_indexer.storage.sqlite import SQLiteEntityStore

from tests.mocks import MockDataSourceRegistry

PROGRAM_MANAGER_ADDRESS = "0x" + "a1" * 20
LOCKER_FACTORY_ADDRESS = "0x" + "b2" * 20

ADMIN = "0x" + "01" * 20
SIGNER = "0x" + "02" * 20
TOKEN = "0x" + "03" * 20
POOL = "0x" + "04" * 20
OWNER = "0x" + "05" * 20
LOCKER_ADDRESS = "0x" + "c3" * 20
AGENT = "0x" + "06" * 20


# ── Report metadata ──────────────────────────────────────────────


def pytest_configure(config):
    """Add contract info to the report Environment table."""
    meta = config.stash.setdefault(metadata_key, {})
    meta["Program Manager"] = PROGRAM_MANAGER_ADDRESS
    meta["Locker Factory"] = LOCKER_FACTORY_ADDRESS


def make_test_config(**overrides) -> IndexerConfig:
    """Build an IndexerConfig suitable for testing."""
    defaults = dict(
        network="testnet",
        program_manager_address=PROGRAM_MANAGER_ADDRESS,
        locker_factory_address=LOCKER_FACTORY_ADDRESS,
        db_path=":memory:",
    )
    defaults.update(overrides)
    return IndexerConfig(**defaults)


@pytest.fixture
def test_config():
    """Default IndexerConfig for tests."""
    return make_test_config()


@pytest.fixture
async def store():
    """Initialized in-memory SQLiteEntityStore."""
    s = SQLiteEntityStore(":memory:")
    await s.initialize()
    yield s
    await s.close()


@pytest.fixture
def mock_templates():
    return MockDataSourceRegistry()


@pytest.fixture
async def indexer(test_config, store):
    """Indexer over the in-memory store, which also holds data sources."""
    return Indexer(test_config, store=store)
