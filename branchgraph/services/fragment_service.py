"""
Fragment CRUD scoped by owner.
"""

from typing import Any

import pydantic

from branchgraph.core.graph_store.base import GraphStore
from branchgraph.models.fragment import Fragment, FragmentFilters, FragmentType
from branchgraph.utils.exceptions import InternalError, NotFoundError, ValidationError
from branchgraph.utils.id_generator import generate_fragment_id
from branchgraph.utils.logger import get_logger
from branchgraph.utils.time import utc_now


class FragmentService:
    """Create, read, update and delete an owner's fragments."""

    def __init__(self, graph_store: GraphStore, logger=None):
        """
        Initialize fragment service.

        Args:
            graph_store: Graph store holding fragments
            logger: Optional bound logger (defaults to this module's logger)
        """
        self.graph_store = graph_store
        self.logger = logger or get_logger(__name__)

    async def create_fragment(
        self,
        owner_id: str,
        content: str,
        type: FragmentType = FragmentType.TEXT,
        tags: list[str] | None = None,
        mood: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> Fragment:
        """
        Record a new fragment.

        Raises:
            ValidationError: If content, tags or mood violate their limits
            InternalError: If the store fails
        """
        try:
            now = utc_now()
            fragment = Fragment(
                id=generate_fragment_id(),
                owner_id=owner_id,
                content=content,
                type=type,
                tags=tags or [],
                mood=mood,
                metadata=metadata or {},
                created_at=now,
                updated_at=now,
            )
        except pydantic.ValidationError as e:
            raise ValidationError(f"Invalid fragment: {e}", context={"owner_id": owner_id}) from e

        try:
            await self.graph_store.add_fragment(fragment)
        except Exception as e:
            self.logger.bind(operation="create_fragment", owner_id=owner_id, error=str(e)).error(
                f"Failed to create fragment for owner {owner_id}: {e}"
            )
            raise InternalError(f"Failed to create fragment: {e}") from e

        self.logger.bind(fragment_id=fragment.id, owner_id=owner_id, type=fragment.type.value).info(
            f"Fragment created: {fragment.id}"
        )
        return fragment

    async def get_fragment(self, fragment_id: str, owner_id: str) -> Fragment:
        """
        Fetch one fragment.

        Raises:
            NotFoundError: If missing or owned by someone else
        """
        try:
            fragment = await self.graph_store.find_fragment_by_id(fragment_id, owner_id)
        except Exception as e:
            self.logger.bind(operation="get_fragment", fragment_id=fragment_id, error=str(e)).error(
                f"Failed to fetch fragment {fragment_id}: {e}"
            )
            raise InternalError(f"Failed to fetch fragment: {e}") from e

        if fragment is None:
            raise NotFoundError(
                f"Fragment not found: {fragment_id}",
                context={"fragment_id": fragment_id, "owner_id": owner_id},
            )
        return fragment

    async def list_fragments(
        self, owner_id: str, filters: FragmentFilters | None = None
    ) -> list[Fragment]:
        """Owner's fragments matching the filters, newest first."""
        try:
            return await self.graph_store.find_fragments(owner_id, filters)
        except Exception as e:
            self.logger.bind(operation="list_fragments", owner_id=owner_id, error=str(e)).error(
                f"Failed to fetch fragments for owner {owner_id}: {e}"
            )
            raise InternalError(f"Failed to fetch fragments: {e}") from e

    async def update_fragment(
        self,
        fragment_id: str,
        owner_id: str,
        content: str | None = None,
        type: FragmentType | None = None,
        tags: list[str] | None = None,
        mood: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> Fragment:
        """
        Update selected fields; metadata is merged into the existing map.

        Raises:
            NotFoundError: If the fragment doesn't exist for the owner
            ValidationError: If the new values violate their limits
        """
        current = await self.get_fragment(fragment_id, owner_id)

        changes: dict[str, Any] = {"updated_at": utc_now()}
        if content is not None:
            changes["content"] = content
        if type is not None:
            changes["type"] = type
        if tags is not None:
            changes["tags"] = tags
        if mood is not None:
            changes["mood"] = mood
        if metadata:
            changes["metadata"] = {**current.metadata, **metadata}

        try:
            updated = Fragment.model_validate({**current.model_dump(), **changes})
        except pydantic.ValidationError as e:
            raise ValidationError(
                f"Invalid fragment update: {e}", context={"fragment_id": fragment_id}
            ) from e

        try:
            await self.graph_store.update_fragment(updated)
        except NotFoundError:
            raise
        except Exception as e:
            self.logger.bind(
                operation="update_fragment", fragment_id=fragment_id, error=str(e)
            ).error(f"Failed to update fragment {fragment_id}: {e}")
            raise InternalError(f"Failed to update fragment: {e}") from e

        self.logger.bind(fragment_id=fragment_id, owner_id=owner_id).info(
            f"Fragment {fragment_id} updated"
        )
        return updated

    async def delete_fragment(self, fragment_id: str, owner_id: str) -> None:
        """
        Delete a fragment together with its branches.

        Raises:
            NotFoundError: If the fragment doesn't exist for the owner
        """
        try:
            await self.graph_store.delete_fragment(fragment_id, owner_id)
        except NotFoundError:
            raise
        except Exception as e:
            self.logger.bind(
                operation="delete_fragment", fragment_id=fragment_id, error=str(e)
            ).error(f"Failed to delete fragment {fragment_id}: {e}")
            raise InternalError(f"Failed to delete fragment: {e}") from e

        self.logger.bind(fragment_id=fragment_id, owner_id=owner_id).info(
            f"Fragment {fragment_id} deleted"
        )
