"""
Tests for graph store base class.
"""

import pytest

from branchgraph.core.graph_store.base import GraphStore
from branchgraph.models.branch import (
    Branch,
    BranchFilters,
    BranchPatch,
    BranchType,
    BranchWriteResult,
)
from branchgraph.models.fragment import Fragment, FragmentFilters
from branchgraph.utils.exceptions import NotFoundError
from tests.fragments import make_fragment


class MockGraphStore(GraphStore):
    """In-memory graph store for testing the interface contract."""

    def __init__(self):
        """Initialize mock store."""
        self.fragments: dict[str, Fragment] = {}
        self.branches: dict[str, Branch] = {}
        self.initialized = False

    async def initialize(self) -> None:
        self.initialized = True

    async def add_fragment(self, fragment: Fragment) -> None:
        self.fragments[fragment.id] = fragment

    async def update_fragment(self, fragment: Fragment) -> None:
        if await self.find_fragment_by_id(fragment.id, fragment.owner_id) is None:
            raise NotFoundError(f"Fragment not found: {fragment.id}")
        self.fragments[fragment.id] = fragment

    async def delete_fragment(self, fragment_id: str, owner_id: str) -> None:
        if await self.find_fragment_by_id(fragment_id, owner_id) is None:
            raise NotFoundError(f"Fragment not found: {fragment_id}")
        del self.fragments[fragment_id]
        self.branches = {k: b for k, b in self.branches.items() if not b.touches(fragment_id)}

    async def find_fragment_by_id(self, fragment_id: str, owner_id: str) -> Fragment | None:
        fragment = self.fragments.get(fragment_id)
        if fragment is None or fragment.owner_id != owner_id:
            return None
        return fragment

    async def find_fragments(
        self, owner_id: str, filters: FragmentFilters | None = None
    ) -> list[Fragment]:
        results = [f for f in self.fragments.values() if f.owner_id == owner_id]
        if filters and filters.tags:
            results = [f for f in results if set(filters.tags) <= set(f.tags)]
        results.sort(key=lambda f: f.created_at, reverse=True)
        return results[: filters.limit] if filters and filters.limit else results

    async def find_unlinked_fragments(self, owner_id: str, focus_id: str) -> list[Fragment]:
        return [
            f
            for f in await self.find_fragments(owner_id)
            if f.id != focus_id and not await self.branch_exists(f.id, focus_id)
        ]

    async def add_branch(self, branch: Branch) -> BranchWriteResult:
        for existing in self.branches.values():
            if existing.pair == branch.pair:
                return BranchWriteResult.conflict(existing.id)
        self.branches[branch.id] = branch
        return BranchWriteResult.ok(branch)

    async def get_branch(self, branch_id: str, owner_id: str) -> Branch | None:
        branch = self.branches.get(branch_id)
        if branch is None or branch.source_id not in self.fragments:
            return None
        return branch if self.fragments[branch.source_id].owner_id == owner_id else None

    async def find_branches(
        self, owner_id: str, filters: BranchFilters | None = None
    ) -> list[Branch]:
        owned = {f.id for f in self.fragments.values() if f.owner_id == owner_id}
        results = [b for b in self.branches.values() if b.source_id in owned]
        if filters and filters.min_weight is not None:
            results = [b for b in results if b.weight >= filters.min_weight]
        return results

    async def branch_exists(self, first_id: str, second_id: str) -> bool:
        probe = Branch(id="probe", source_id=first_id, target_id=second_id, type=BranchType.MANUAL)
        return any(b.pair == probe.pair for b in self.branches.values())

    async def update_branch(self, branch_id: str, patch: BranchPatch) -> Branch:
        if branch_id not in self.branches:
            raise NotFoundError(f"Branch not found: {branch_id}")
        current = self.branches[branch_id]
        updated = current.model_copy(
            update={
                "type": patch.type or current.type,
                "weight": patch.weight if patch.weight is not None else current.weight,
                "metadata": {**current.metadata, **(patch.metadata or {})},
            }
        )
        self.branches[branch_id] = updated
        return updated

    async def delete_branch(self, branch_id: str) -> None:
        if self.branches.pop(branch_id, None) is None:
            raise NotFoundError(f"Branch not found: {branch_id}")

    async def count_incident_branches(self, owner_id: str) -> dict[str, int]:
        return {
            f.id: sum(1 for b in self.branches.values() if b.touches(f.id))
            for f in self.fragments.values()
            if f.owner_id == owner_id
        }

    async def close(self) -> None:
        self.initialized = False


@pytest.fixture
def mock_store():
    """Create mock graph store."""
    return MockGraphStore()


class TestGraphStoreBase:
    """Test graph store base class."""

    def test_cannot_instantiate_abstract_class(self):
        """Test that GraphStore cannot be instantiated directly."""
        with pytest.raises(TypeError):
            GraphStore()

    def test_partial_implementation_is_rejected(self):
        class Partial(GraphStore):
            async def initialize(self) -> None:
                pass

        with pytest.raises(TypeError):
            Partial()

    @pytest.mark.asyncio
    async def test_mock_store_lifecycle(self, mock_store):
        await mock_store.initialize()
        assert mock_store.initialized is True

        await mock_store.close()
        assert mock_store.initialized is False

    @pytest.mark.asyncio
    async def test_add_branch_reports_conflict_for_reverse_pair(self, mock_store):
        await mock_store.add_fragment(make_fragment("a"))
        await mock_store.add_fragment(make_fragment("b"))

        first = await mock_store.add_branch(
            Branch(id="b1", source_id="a", target_id="b", type=BranchType.MANUAL)
        )
        second = await mock_store.add_branch(
            Branch(id="b2", source_id="b", target_id="a", type=BranchType.THEME)
        )

        assert first.created is True
        assert second.created is False
        assert second.existing_id == "b1"
        assert list(mock_store.branches) == ["b1"]

    @pytest.mark.asyncio
    async def test_delete_fragment_removes_incident_branches(self, mock_store):
        for fragment_id in ("a", "b", "c"):
            await mock_store.add_fragment(make_fragment(fragment_id))
        await mock_store.add_branch(
            Branch(id="b1", source_id="a", target_id="b", type=BranchType.MANUAL)
        )
        await mock_store.add_branch(
            Branch(id="b2", source_id="b", target_id="c", type=BranchType.MANUAL)
        )

        await mock_store.delete_fragment("a", "user-1")

        assert list(mock_store.branches) == ["b2"]
