"""Whole-graph summary of an owner's fragments and branches."""

from collections import Counter

from branchgraph.core.graph_store.base import GraphStore
from branchgraph.core.visualization import VisualizationDeriver
from branchgraph.models.branch import Branch
from branchgraph.models.fragment import Fragment
from branchgraph.models.memory_tree import (
    MemoryTree,
    MemoryTreeEdge,
    MemoryTreeNode,
    MemoryTreeStats,
)
from branchgraph.utils.exceptions import InternalError
from branchgraph.utils.logger import get_logger


class MemoryTreeBuilder:
    """Builds the unfiltered memory tree for an owner."""

    def __init__(self, graph_store: GraphStore, logger=None):
        self.graph_store = graph_store
        self.logger = logger or get_logger(__name__)

    async def build(self, owner_id: str) -> MemoryTree:
        """
        Load every fragment and branch of the owner and summarize them.

        Raises:
            InternalError: If the store fails
        """
        try:
            fragments = await self.graph_store.find_fragments(owner_id)
            branches = await self.graph_store.find_branches(owner_id)
        except Exception as e:
            self.logger.bind(operation="build_memory_tree", owner_id=owner_id, error=str(e)).error(
                f"Failed to get memory tree for owner {owner_id}: {e}"
            )
            raise InternalError(f"Failed to get memory tree: {e}") from e

        return self.summarize(fragments, branches)

    @staticmethod
    def summarize(fragments: list[Fragment], branches: list[Branch]) -> MemoryTree:
        """Map fragments and branches to tree nodes/edges and compute totals."""
        counts = VisualizationDeriver.count_connections(branches)

        nodes = [
            MemoryTreeNode(
                id=fragment.id,
                content=fragment.content,
                type=fragment.type,
                tags=list(fragment.tags),
                mood=fragment.mood,
                created_at=fragment.created_at,
                connection_count=counts.get(fragment.id, 0),
            )
            for fragment in fragments
        ]
        edges = [
            MemoryTreeEdge(
                id=branch.id,
                source=branch.source_id,
                target=branch.target_id,
                type=branch.type,
                weight=branch.weight,
                metadata=dict(branch.metadata),
            )
            for branch in branches
        ]

        stats = MemoryTreeStats(
            total_fragments=len(fragments),
            total_connections=len(branches),
            average_connections=len(branches) / len(fragments) if fragments else 0.0,
            strongest_connection=max((b.weight for b in branches), default=0.0),
            connection_types=dict(Counter(b.type.value for b in branches)),
        )

        return MemoryTree(nodes=nodes, edges=edges, stats=stats)
