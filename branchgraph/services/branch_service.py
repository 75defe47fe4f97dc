"""
Explicit branch management: create, read, list, update and delete connections.
"""

from typing import Any

import pydantic

from branchgraph.core.graph_store.base import GraphStore
from branchgraph.models.branch import (
    Branch,
    BranchFilters,
    BranchPatch,
    BranchRecord,
    BranchType,
    BranchWriteResult,
)
from branchgraph.models.fragment import Fragment, FragmentSummary
from branchgraph.utils.exceptions import (
    ConflictError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from branchgraph.utils.id_generator import generate_branch_id
from branchgraph.utils.logger import get_logger


def to_branch_record(
    branch: Branch, source: Fragment | FragmentSummary, target: Fragment | FragmentSummary
) -> BranchRecord:
    """Attach endpoint summaries to a branch."""
    return BranchRecord(
        id=branch.id,
        type=branch.type,
        weight=branch.weight,
        metadata=dict(branch.metadata),
        created_at=branch.created_at,
        updated_at=branch.updated_at,
        source=source.to_summary() if isinstance(source, Fragment) else source,
        target=target.to_summary() if isinstance(target, Fragment) else target,
    )


class BranchService:
    """
    Branch CRUD scoped by owner.

    NotFoundError, ValidationError and ConflictError reach the caller as-is;
    any other store failure is logged and raised as InternalError.
    """

    def __init__(self, graph_store: GraphStore, logger=None):
        """
        Initialize branch service.

        Args:
            graph_store: Graph store holding fragments and branches
            logger: Optional bound logger (defaults to this module's logger)
        """
        self.graph_store = graph_store
        self.logger = logger or get_logger(__name__)

    async def create_branch(
        self,
        owner_id: str,
        source_id: str,
        target_id: str,
        type: BranchType = BranchType.MANUAL,
        weight: float = 1.0,
        metadata: dict[str, Any] | None = None,
    ) -> BranchRecord:
        """
        Connect two of the owner's fragments.

        Args:
            owner_id: Owner of both fragments
            source_id: Source fragment ID
            target_id: Target fragment ID
            type: Connection type
            weight: Connection strength in [0, 1]
            metadata: Free-form metadata

        Returns:
            The created branch record

        Raises:
            ValidationError: On a self-connection or out-of-range weight
            NotFoundError: If either fragment is missing or not owned
            ConflictError: If the pair is already connected in either direction
        """
        if source_id == target_id:
            raise ValidationError(
                "Cannot create connection to the same fragment",
                context={"fragment_id": source_id},
            )

        try:
            branch = Branch(
                id=generate_branch_id(),
                source_id=source_id,
                target_id=target_id,
                type=type,
                weight=weight,
                metadata=metadata or {},
            )
        except pydantic.ValidationError as e:
            raise ValidationError(
                f"Invalid connection: {e}",
                context={"source_id": source_id, "target_id": target_id, "weight": weight},
            ) from e

        context = {"operation": "create_branch", "source_id": source_id, "target_id": target_id}

        try:
            source = await self.graph_store.find_fragment_by_id(source_id, owner_id)
            target = await self.graph_store.find_fragment_by_id(target_id, owner_id)

            if source is None:
                raise NotFoundError("Source fragment not found", context=context)
            if target is None:
                raise NotFoundError("Target fragment not found", context=context)

            if await self.graph_store.branch_exists(source_id, target_id):
                result = BranchWriteResult.conflict()
            else:
                result = await self.graph_store.add_branch(branch)
        except NotFoundError:
            raise
        except Exception as e:
            self.logger.bind(**context, error=str(e)).error(f"Failed to create branch: {e}")
            raise InternalError(f"Failed to create connection: {e}") from e

        if not result.created:
            raise ConflictError(
                "Connection already exists between these fragments",
                context={**context, "existing_id": result.existing_id},
            )

        self.logger.bind(branch_id=branch.id, owner_id=owner_id).info(
            f"Branch created: {branch.id} ({branch.type.value})"
        )
        return to_branch_record(result.branch, source, target)

    async def get_branch(self, branch_id: str, owner_id: str) -> BranchRecord:
        """
        Fetch one branch with its endpoints.

        Raises:
            NotFoundError: If the branch doesn't exist for the owner
        """
        try:
            branch = await self.graph_store.get_branch(branch_id, owner_id)
            if branch is None:
                raise NotFoundError(
                    "Connection not found", context={"branch_id": branch_id, "owner_id": owner_id}
                )
            return await self._to_record(branch, owner_id)
        except NotFoundError:
            raise
        except Exception as e:
            self.logger.bind(operation="get_branch", branch_id=branch_id, error=str(e)).error(
                f"Failed to fetch branch {branch_id} for owner {owner_id}: {e}"
            )
            raise InternalError(f"Failed to fetch connection: {e}") from e

    async def list_branches(
        self, owner_id: str, filters: BranchFilters | None = None
    ) -> list[BranchRecord]:
        """Owner's branches matching the filters, newest first."""
        try:
            branches = await self.graph_store.find_branches(owner_id, filters)
            fragments = {f.id: f for f in await self.graph_store.find_fragments(owner_id)}
        except Exception as e:
            self.logger.bind(operation="list_branches", owner_id=owner_id, error=str(e)).error(
                f"Failed to fetch branches for owner {owner_id}: {e}"
            )
            raise InternalError(f"Failed to fetch connections: {e}") from e

        return [
            to_branch_record(branch, fragments[branch.source_id], fragments[branch.target_id])
            for branch in branches
            if branch.source_id in fragments and branch.target_id in fragments
        ]

    async def update_branch(
        self,
        branch_id: str,
        owner_id: str,
        type: BranchType | None = None,
        weight: float | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> BranchRecord:
        """
        Replace type/weight and merge metadata (new keys win).

        Raises:
            NotFoundError: If the branch doesn't exist for the owner
            ValidationError: If the weight is out of range
        """
        try:
            patch = BranchPatch(type=type, weight=weight, metadata=metadata)
        except pydantic.ValidationError as e:
            raise ValidationError(
                f"Invalid connection update: {e}", context={"branch_id": branch_id}
            ) from e

        try:
            if await self.graph_store.get_branch(branch_id, owner_id) is None:
                raise NotFoundError(
                    "Connection not found", context={"branch_id": branch_id, "owner_id": owner_id}
                )
            branch = await self.graph_store.update_branch(branch_id, patch)
            record = await self._to_record(branch, owner_id)
        except NotFoundError:
            raise
        except Exception as e:
            self.logger.bind(operation="update_branch", branch_id=branch_id, error=str(e)).error(
                f"Failed to update branch {branch_id} for owner {owner_id}: {e}"
            )
            raise InternalError(f"Failed to update connection: {e}") from e

        self.logger.bind(branch_id=branch_id, owner_id=owner_id).info(
            f"Branch {branch_id} updated for owner {owner_id}"
        )
        return record

    async def delete_branch(self, branch_id: str, owner_id: str) -> None:
        """
        Remove a single branch; its fragments are untouched.

        Raises:
            NotFoundError: If the branch doesn't exist for the owner
        """
        try:
            if await self.graph_store.get_branch(branch_id, owner_id) is None:
                raise NotFoundError(
                    "Connection not found", context={"branch_id": branch_id, "owner_id": owner_id}
                )
            await self.graph_store.delete_branch(branch_id)
        except NotFoundError:
            raise
        except Exception as e:
            self.logger.bind(operation="delete_branch", branch_id=branch_id, error=str(e)).error(
                f"Failed to delete branch {branch_id} for owner {owner_id}: {e}"
            )
            raise InternalError(f"Failed to delete connection: {e}") from e

        self.logger.bind(branch_id=branch_id, owner_id=owner_id).info(
            f"Branch {branch_id} deleted for owner {owner_id}"
        )

    async def _to_record(self, branch: Branch, owner_id: str) -> BranchRecord:
        source = await self.graph_store.find_fragment_by_id(branch.source_id, owner_id)
        target = await self.graph_store.find_fragment_by_id(branch.target_id, owner_id)
        if source is None or target is None:
            raise NotFoundError("Connection not found", context={"branch_id": branch.id})
        return to_branch_record(branch, source, target)
