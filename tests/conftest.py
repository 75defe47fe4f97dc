"""
Shared test fixtures for all test modules.
"""

from collections.abc import AsyncGenerator
from datetime import datetime

import pytest

from branchgraph.core.graph_store.sqlite_store import SQLiteGraphStore
from tests.fragments import REFERENCE_TIME, make_fragment


@pytest.fixture
def reference_time() -> datetime:
    return REFERENCE_TIME


@pytest.fixture
def fragment_factory():
    """Factory building fragments with deterministic timestamps."""
    return make_fragment


@pytest.fixture
async def sqlite_store(tmp_path) -> AsyncGenerator[SQLiteGraphStore, None]:
    """Initialized SQLite graph store on a per-test database file."""
    store = SQLiteGraphStore(db_path=str(tmp_path / "graph.db"))
    await store.initialize()
    try:
        yield store
    finally:
        await store.close()
