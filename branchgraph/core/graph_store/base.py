"""
Base interface for graph storage.

Every query is scoped by owner. Uniqueness of undirected branches is the
store's responsibility: add_branch reports a conflict instead of writing a
second edge for an already connected pair.
"""

from abc import ABC, abstractmethod

from branchgraph.models.branch import Branch, BranchFilters, BranchPatch, BranchWriteResult
from branchgraph.models.fragment import Fragment, FragmentFilters


class GraphStore(ABC):
    """Abstract base class for graph storage implementations."""

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize the graph store (create tables/schema)."""
        pass

    # ═══════════════════════════════════════════════════════════
    # FRAGMENT OPERATIONS (nodes)
    # ═══════════════════════════════════════════════════════════

    @abstractmethod
    async def add_fragment(self, fragment: Fragment) -> None:
        """
        Add a fragment node.

        Args:
            fragment: Fragment to store
        """
        pass

    @abstractmethod
    async def update_fragment(self, fragment: Fragment) -> None:
        """
        Replace a stored fragment with its updated version.

        Args:
            fragment: Updated fragment

        Raises:
            NotFoundError: If the fragment doesn't exist for its owner
        """
        pass

    @abstractmethod
    async def delete_fragment(self, fragment_id: str, owner_id: str) -> None:
        """
        Delete a fragment and its incident branches.

        Args:
            fragment_id: Fragment identifier
            owner_id: Owner the fragment must belong to

        Raises:
            NotFoundError: If the fragment doesn't exist for the owner
        """
        pass

    @abstractmethod
    async def find_fragment_by_id(self, fragment_id: str, owner_id: str) -> Fragment | None:
        """
        Retrieve a fragment owned by the given user.

        Returns:
            Fragment or None if missing or owned by someone else
        """
        pass

    @abstractmethod
    async def find_fragments(
        self, owner_id: str, filters: FragmentFilters | None = None
    ) -> list[Fragment]:
        """
        Query an owner's fragments, newest first.

        Args:
            owner_id: Owner user ID
            filters: Optional filter conditions

        Returns:
            List of matching fragments
        """
        pass

    @abstractmethod
    async def find_unlinked_fragments(self, owner_id: str, focus_id: str) -> list[Fragment]:
        """
        Fragments of the owner with no branch in either direction to ``focus_id``.

        The focus fragment itself is excluded.
        """
        pass

    # ═══════════════════════════════════════════════════════════
    # BRANCH OPERATIONS (edges)
    # ═══════════════════════════════════════════════════════════

    @abstractmethod
    async def add_branch(self, branch: Branch) -> BranchWriteResult:
        """
        Insert a branch unless its unordered pair is already connected.

        Args:
            branch: Branch to insert

        Returns:
            CREATED result with the stored branch, or CONFLICT result
        """
        pass

    @abstractmethod
    async def get_branch(self, branch_id: str, owner_id: str) -> Branch | None:
        """
        Get a branch touching at least one fragment owned by the user.

        Returns:
            Branch or None
        """
        pass

    @abstractmethod
    async def find_branches(
        self, owner_id: str, filters: BranchFilters | None = None
    ) -> list[Branch]:
        """
        Query branches involving the owner's fragments, newest first.

        Args:
            owner_id: Owner user ID
            filters: Optional filter conditions

        Returns:
            List of matching branches
        """
        pass

    @abstractmethod
    async def branch_exists(self, first_id: str, second_id: str) -> bool:
        """Whether any branch connects the two fragments, in either direction."""
        pass

    @abstractmethod
    async def update_branch(self, branch_id: str, patch: BranchPatch) -> Branch:
        """
        Apply a patch to a branch. Metadata is shallow-merged, new keys win.

        Raises:
            NotFoundError: If the branch doesn't exist
        """
        pass

    @abstractmethod
    async def delete_branch(self, branch_id: str) -> None:
        """
        Delete a single branch.

        Raises:
            NotFoundError: If the branch doesn't exist
        """
        pass

    # ═══════════════════════════════════════════════════════════
    # UTILITY METHODS
    # ═══════════════════════════════════════════════════════════

    @abstractmethod
    async def count_incident_branches(self, owner_id: str) -> dict[str, int]:
        """
        Count branches incident to each of the owner's fragments.

        Returns:
            Mapping of fragment ID to edge count (fragments without edges map to 0)
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close the connection to the graph store."""
        pass
