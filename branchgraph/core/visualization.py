"""
Visualization attribute derivation.

Turns a fragment/branch set into styled nodes and edges plus summary
statistics. Only styling hints are produced; positions are left to the
renderer. Output depends solely on the inputs and the reference time
``now``, so repeated calls with the same arguments give identical results.
"""

import math
from collections import Counter
from collections.abc import Sequence
from datetime import datetime

from branchgraph.models.branch import Branch, BranchType
from branchgraph.models.fragment import Fragment, FragmentType
from branchgraph.models.visualization import (
    ColorBy,
    NodeSizeBy,
    SizeLegend,
    TimeSpan,
    VisualizationConfig,
    VisualizationEdge,
    VisualizationNode,
    VisualizationResult,
    VisualizationStats,
)
from branchgraph.utils.logger import get_logger
from branchgraph.utils.time import SECONDS_PER_DAY, days_since, ensure_utc, utc_now

BASE_NODE_SIZE = 10
MAX_NODE_SIZE = 50
DEFAULT_COLOR = "#6B7280"

MOOD_COLORS: dict[str, str] = {
    "happy": "#10B981",
    "sad": "#3B82F6",
    "angry": "#EF4444",
    "anxious": "#F59E0B",
    "peaceful": "#8B5CF6",
    "excited": "#EC4899",
    "calm": "#06B6D4",
    "frustrated": "#DC2626",
    "grateful": "#059669",
    "worried": "#D97706",
}

# (label, max age in days, color); the last band catches everything older
AGE_BANDS: tuple[tuple[str, float, str], ...] = (
    ("Today", 1, "#10B981"),
    ("This Week", 7, "#3B82F6"),
    ("This Month", 30, "#F59E0B"),
    ("This Quarter", 90, "#8B5CF6"),
    ("Older", math.inf, DEFAULT_COLOR),
)


def fragment_type_color(fragment_type: FragmentType | str) -> str:
    match fragment_type:
        case FragmentType.TEXT:
            return "#3B82F6"
        case FragmentType.AUDIO:
            return "#10B981"
        case FragmentType.DREAM:
            return "#8B5CF6"
        case FragmentType.QUOTE:
            return "#F59E0B"
        case FragmentType.FEELING:
            return "#EF4444"
        case FragmentType.REFLECTION:
            return "#6366F1"
        case _:
            return DEFAULT_COLOR


def branch_type_color(branch_type: BranchType | str) -> str:
    match branch_type:
        case BranchType.THEME:
            return "#3B82F6"
        case BranchType.EMOTION:
            return "#EF4444"
        case BranchType.TIME:
            return "#10B981"
        case BranchType.MEMORY:
            return "#8B5CF6"
        case BranchType.MANUAL:
            return "#F59E0B"
        case BranchType.SEMANTIC:
            return "#6366F1"
        case _:
            return DEFAULT_COLOR


def mood_color(mood: str | None) -> str:
    if not mood:
        return DEFAULT_COLOR
    return MOOD_COLORS.get(mood.lower(), DEFAULT_COLOR)


def age_color(created_at: datetime, now: datetime) -> str:
    age = days_since(created_at, now)
    for _, max_days, color in AGE_BANDS:
        if age <= max_days:
            return color
    return DEFAULT_COLOR


def edge_width(weight: float) -> float:
    return max(1.0, weight * 5)


class VisualizationDeriver:
    """
    Computes node size, color and cluster, edge color and width, and summary stats.

    Stateless; a single instance can serve any number of calls.
    """

    def __init__(self, logger=None):
        self.logger = logger or get_logger(__name__)

    def derive(
        self,
        fragments: Sequence[Fragment],
        branches: Sequence[Branch],
        config: VisualizationConfig | None = None,
        now: datetime | None = None,
        connection_counts: dict[str, int] | None = None,
    ) -> VisualizationResult:
        """
        Derive display attributes for a fragment/branch set.

        Args:
            fragments: Fragments to draw (filters and focus already applied)
            branches: Branches to draw
            config: Layout, size metric and color attribute
            now: Reference time for recency and age bands (defaults to current UTC time)
            connection_counts: Edge count per fragment; counted from ``branches`` if omitted

        Returns:
            VisualizationResult with nodes, edges, layout and stats
        """
        config = config or VisualizationConfig()
        now = ensure_utc(now or utc_now())
        counts = (
            connection_counts
            if connection_counts is not None
            else self.count_connections(branches)
        )

        nodes = [
            self._build_node(fragment, counts.get(fragment.id, 0), config, now)
            for fragment in fragments
        ]
        edges = [self._build_edge(branch) for branch in branches]
        stats = self._build_stats(fragments, nodes, edges, config, now)

        self.logger.bind(
            color_by=config.color_by.value, node_size_by=config.node_size_by.value
        ).debug(f"Derived visualization: {len(nodes)} nodes, {len(edges)} edges")

        return VisualizationResult(nodes=nodes, edges=edges, layout=config.layout, stats=stats)

    @staticmethod
    def count_connections(branches: Sequence[Branch]) -> dict[str, int]:
        """Incident edge count per fragment ID."""
        counts: Counter[str] = Counter()
        for branch in branches:
            counts[branch.source_id] += 1
            counts[branch.target_id] += 1
        return dict(counts)

    @staticmethod
    def node_size(
        fragment: Fragment, connection_count: int, size_by: NodeSizeBy, now: datetime
    ) -> float:
        match size_by:
            case NodeSizeBy.CONNECTIONS:
                size = BASE_NODE_SIZE + connection_count * 5
            case NodeSizeBy.CONTENT_LENGTH:
                size = BASE_NODE_SIZE + len(fragment.content) / 10
            case NodeSizeBy.RECENCY:
                size = BASE_NODE_SIZE + max(0.0, 30 - days_since(fragment.created_at, now))
            case _:
                size = BASE_NODE_SIZE + 5
        return min(size, MAX_NODE_SIZE)

    @staticmethod
    def node_color(fragment: Fragment, color_by: ColorBy, now: datetime) -> str:
        match color_by:
            case ColorBy.MOOD:
                return mood_color(fragment.mood)
            case ColorBy.TIME:
                return age_color(fragment.created_at, now)
            case ColorBy.CONNECTIONS:
                # Relative scale is computed by the client
                return DEFAULT_COLOR
            case _:
                return fragment_type_color(fragment.type)

    @staticmethod
    def cluster_key(fragment: Fragment, color_by: ColorBy) -> str:
        match color_by:
            case ColorBy.MOOD:
                return fragment.mood or "neutral"
            case ColorBy.TAGS:
                return fragment.tags[0] if fragment.tags else "untagged"
            case ColorBy.TIME:
                return ensure_utc(fragment.created_at).strftime("%Y-%m")
            case _:
                return fragment.type.value

    @staticmethod
    def color_legend(color_by: ColorBy, fragments: Sequence[Fragment]) -> dict[str, str]:
        match color_by:
            case ColorBy.TYPE:
                return {t.value: fragment_type_color(t) for t in FragmentType}
            case ColorBy.MOOD:
                legend: dict[str, str] = {}
                for fragment in fragments:
                    if fragment.mood and fragment.mood not in legend:
                        legend[fragment.mood] = mood_color(fragment.mood)
                return legend
            case ColorBy.TIME:
                return {label: color for label, _, color in AGE_BANDS}
            case _:
                return {}

    def _build_node(
        self,
        fragment: Fragment,
        connection_count: int,
        config: VisualizationConfig,
        now: datetime,
    ) -> VisualizationNode:
        return VisualizationNode(
            id=fragment.id,
            content=fragment.content,
            type=fragment.type,
            tags=list(fragment.tags),
            mood=fragment.mood,
            created_at=fragment.created_at,
            connection_count=connection_count,
            size=self.node_size(fragment, connection_count, config.node_size_by, now),
            color=self.node_color(fragment, config.color_by, now),
            cluster=self.cluster_key(fragment, config.color_by),
        )

    def _build_edge(self, branch: Branch) -> VisualizationEdge:
        return VisualizationEdge(
            id=branch.id,
            source=branch.source_id,
            target=branch.target_id,
            type=branch.type,
            weight=branch.weight,
            color=branch_type_color(branch.type),
            width=edge_width(branch.weight),
            metadata=dict(branch.metadata),
        )

    def _build_stats(
        self,
        fragments: Sequence[Fragment],
        nodes: list[VisualizationNode],
        edges: list[VisualizationEdge],
        config: VisualizationConfig,
        now: datetime,
    ) -> VisualizationStats:
        if fragments:
            created = [ensure_utc(f.created_at) for f in fragments]
            start, end = min(created), max(created)
        else:
            start = end = now

        span_days = math.ceil((end - start).total_seconds() / SECONDS_PER_DAY)
        sizes = [node.size for node in nodes]

        return VisualizationStats(
            total_nodes=len(nodes),
            total_edges=len(edges),
            clusters=len({node.cluster for node in nodes}),
            time_span=TimeSpan(start=start, end=end, days=span_days),
            color_legend=self.color_legend(config.color_by, fragments),
            size_legend=SizeLegend(
                min=min(sizes) if sizes else 0,
                max=max(sizes) if sizes else 0,
                metric=config.node_size_by,
            ),
        )
