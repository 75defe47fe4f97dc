"""Fixtures for service tests.

Fixtures use function scope; each test gets a fresh SQLite database under
``tmp_path`` (see ``sqlite_store`` in the top-level conftest).
"""

from datetime import timedelta

import pytest

from branchgraph.config import AutoLinkConfig
from branchgraph.services import (
    AutoLinker,
    BranchService,
    FragmentService,
    MemoryTreeBuilder,
    VisualizationService,
)
from tests.fragments import REFERENCE_TIME, make_fragment

# Fixtures


@pytest.fixture
def fragment_service(sqlite_store) -> FragmentService:
    return FragmentService(sqlite_store)


@pytest.fixture
def branch_service(sqlite_store) -> BranchService:
    return BranchService(sqlite_store)


@pytest.fixture
def auto_linker(sqlite_store) -> AutoLinker:
    return AutoLinker(sqlite_store, config=AutoLinkConfig())


@pytest.fixture
def memory_tree_builder(sqlite_store) -> MemoryTreeBuilder:
    return MemoryTreeBuilder(sqlite_store)


@pytest.fixture
def visualization_service(sqlite_store) -> VisualizationService:
    return VisualizationService(sqlite_store)


@pytest.fixture
async def linked_fragments(sqlite_store):
    """
    Three fragments of user-1 plus one of user-2.

    f1 and f2 are twelve hours apart and share a tag and an emotional family;
    f3 is months later with nothing in common.
    """
    fragments = [
        make_fragment("f1", tags=["growth", "focus"], mood="happy"),
        make_fragment(
            "f2",
            tags=["growth", "calm"],
            mood="grateful",
            created_at=REFERENCE_TIME + timedelta(hours=12),
        ),
        make_fragment(
            "f3",
            content="grocery list",
            created_at=REFERENCE_TIME + timedelta(days=200),
        ),
        make_fragment("foreign", owner_id="user-2"),
    ]
    for fragment in fragments:
        await sqlite_store.add_fragment(fragment)
    return {fragment.id: fragment for fragment in fragments}
