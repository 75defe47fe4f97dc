"""
Visualization pipeline: load, filter, focus, derive.
"""

from datetime import datetime

from branchgraph.config import VisualizationDefaults
from branchgraph.core.graph_store.base import GraphStore
from branchgraph.core.traversal import connected_set, restrict_to
from branchgraph.core.visualization import VisualizationDeriver
from branchgraph.models.branch import BranchFilters
from branchgraph.models.fragment import FragmentFilters
from branchgraph.models.visualization import VisualizationQuery, VisualizationResult
from branchgraph.utils.exceptions import InternalError, NotFoundError
from branchgraph.utils.logger import get_logger


class VisualizationService:
    """
    Produces the styled subgraph for an owner.

    Filters in the query are pushed down to the store; an optional focus
    fragment narrows the result to its bounded neighborhood before styling.
    """

    def __init__(
        self,
        graph_store: GraphStore,
        deriver: VisualizationDeriver | None = None,
        config: VisualizationDefaults | None = None,
        logger=None,
    ):
        self.graph_store = graph_store
        self.config = config or VisualizationDefaults()
        self.logger = logger or get_logger(__name__)
        self.deriver = deriver or VisualizationDeriver(logger=self.logger)

    async def get_visualization(
        self,
        owner_id: str,
        query: VisualizationQuery | None = None,
        now: datetime | None = None,
    ) -> VisualizationResult:
        """
        Build the visualization for an owner.

        Args:
            owner_id: Owner whose graph is drawn
            query: Styling options and filters
            now: Reference time for recency-based attributes

        Returns:
            Styled nodes, edges and stats

        Raises:
            NotFoundError: If the focus fragment doesn't exist for the owner
            InternalError: If the store fails
        """
        query = query or VisualizationQuery(
            min_weight=self.config.min_weight, max_depth=self.config.max_depth
        )
        context = {
            "operation": "get_visualization",
            "owner_id": owner_id,
            "focus_id": query.focus_fragment_id,
        }

        fragment_filters = FragmentFilters(
            types=query.fragment_types or None,
            tags=query.tags or None,
            created_after=query.start_date,
            created_before=query.end_date,
        )
        branch_filters = BranchFilters(
            types=query.connection_types or None,
            min_weight=query.min_weight or None,
        )

        try:
            if query.focus_fragment_id:
                focus = await self.graph_store.find_fragment_by_id(
                    query.focus_fragment_id, owner_id
                )
                if focus is None:
                    raise NotFoundError("Fragment not found", context=context)

            fragments = await self.graph_store.find_fragments(owner_id, fragment_filters)
            branches = await self.graph_store.find_branches(owner_id, branch_filters)
            connection_counts = await self.graph_store.count_incident_branches(owner_id)
        except NotFoundError:
            raise
        except Exception as e:
            self.logger.bind(**context, error=str(e)).error(
                f"Failed to get visualization for owner {owner_id}: {e}"
            )
            raise InternalError(f"Failed to get visualization: {e}") from e

        if query.focus_fragment_id:
            connected = connected_set(query.focus_fragment_id, branches, query.max_depth)
            fragments = [f for f in fragments if f.id in connected]

        visible = {f.id for f in fragments}
        branches = restrict_to(branches, visible)

        return self.deriver.derive(
            fragments,
            branches,
            config=query.style(),
            now=now,
            connection_counts=connection_counts,
        )
