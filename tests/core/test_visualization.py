"""
Tests for visualization attribute derivation.

Tests cover:
1. Node size per metric
2. Node color and cluster per attribute
3. Edge color and width
4. Summary statistics and legends
5. Determinism for a fixed reference time
"""

from datetime import timedelta

import pytest

from branchgraph.core.visualization import (
    AGE_BANDS,
    BASE_NODE_SIZE,
    DEFAULT_COLOR,
    MAX_NODE_SIZE,
    VisualizationDeriver,
    age_color,
    branch_type_color,
    edge_width,
    fragment_type_color,
    mood_color,
)
from branchgraph.models.branch import Branch, BranchType
from branchgraph.models.fragment import FragmentType
from branchgraph.models.visualization import (
    ColorBy,
    NodeSizeBy,
    VisualizationConfig,
    VisualizationLayout,
)
from tests.fragments import REFERENCE_TIME, make_fragment

NOW = REFERENCE_TIME + timedelta(days=2)


def edge(source: str, target: str, weight: float = 0.6, type=BranchType.THEME) -> Branch:
    return Branch(
        id=f"{source}-{target}",
        source_id=source,
        target_id=target,
        type=type,
        weight=weight,
        created_at=REFERENCE_TIME,
        updated_at=REFERENCE_TIME,
    )


@pytest.fixture
def deriver():
    return VisualizationDeriver()


@pytest.fixture
def fragments():
    return [
        make_fragment("a", content="x" * 120, tags=["work", "focus"], mood="Happy"),
        make_fragment(
            "b",
            type=FragmentType.DREAM,
            tags=["sleep"],
            created_at=REFERENCE_TIME - timedelta(days=10),
        ),
        make_fragment(
            "c",
            type=FragmentType.FEELING,
            mood="sad",
            created_at=REFERENCE_TIME - timedelta(days=40, hours=6),
        ),
    ]


@pytest.fixture
def branches():
    return [edge("a", "b", 0.9), edge("a", "c", 0.1, BranchType.EMOTION)]


class TestStylingTables:
    def test_fragment_type_colors(self):
        assert fragment_type_color(FragmentType.TEXT) == "#3B82F6"
        assert fragment_type_color(FragmentType.DREAM) == "#8B5CF6"
        assert fragment_type_color("UNKNOWN") == DEFAULT_COLOR

    def test_branch_type_colors(self):
        assert branch_type_color(BranchType.EMOTION) == "#EF4444"
        assert branch_type_color(BranchType.MANUAL) == "#F59E0B"
        assert branch_type_color("OTHER") == DEFAULT_COLOR

    def test_mood_color_case_insensitive(self):
        assert mood_color("Happy") == mood_color("happy") == "#10B981"
        assert mood_color("bored") == DEFAULT_COLOR
        assert mood_color(None) == DEFAULT_COLOR

    @pytest.mark.parametrize(
        "age,label",
        [
            (timedelta(hours=3), "Today"),
            (timedelta(days=5), "This Week"),
            (timedelta(days=20), "This Month"),
            (timedelta(days=60), "This Quarter"),
            (timedelta(days=400), "Older"),
        ],
    )
    def test_age_bands(self, age, label):
        colors = {name: color for name, _, color in AGE_BANDS}

        assert age_color(NOW - age, NOW) == colors[label]

    def test_edge_width(self):
        assert edge_width(0.1) == 1.0
        assert edge_width(0.6) == pytest.approx(3.0)
        assert edge_width(1.0) == 5.0


class TestNodeAttributes:
    def test_size_by_connections(self, deriver, fragments, branches):
        result = deriver.derive(fragments, branches, now=NOW)
        sizes = {node.id: node.size for node in result.nodes}

        assert sizes == {"a": BASE_NODE_SIZE + 10, "b": BASE_NODE_SIZE + 5, "c": BASE_NODE_SIZE + 5}

    def test_size_is_capped(self):
        fragment = make_fragment("a", content="y" * 2000)

        size = VisualizationDeriver.node_size(fragment, 100, NodeSizeBy.CONNECTIONS, NOW)
        content_size = VisualizationDeriver.node_size(fragment, 0, NodeSizeBy.CONTENT_LENGTH, NOW)

        assert size == MAX_NODE_SIZE
        assert content_size == MAX_NODE_SIZE

    def test_size_by_content_length(self, fragments):
        assert VisualizationDeriver.node_size(
            fragments[0], 0, NodeSizeBy.CONTENT_LENGTH, NOW
        ) == pytest.approx(22.0)

    def test_size_by_recency(self, fragments):
        recent = VisualizationDeriver.node_size(fragments[0], 0, NodeSizeBy.RECENCY, NOW)
        stale = VisualizationDeriver.node_size(fragments[2], 0, NodeSizeBy.RECENCY, NOW)

        assert recent == pytest.approx(BASE_NODE_SIZE + 28)
        assert stale == BASE_NODE_SIZE

    def test_uniform_size(self, fragments):
        for fragment in fragments:
            assert VisualizationDeriver.node_size(fragment, 7, NodeSizeBy.UNIFORM, NOW) == 15

    def test_color_and_cluster_by_type(self, deriver, fragments, branches):
        result = deriver.derive(fragments, branches, now=NOW)
        node = result.nodes[1]

        assert node.color == fragment_type_color(FragmentType.DREAM)
        assert node.cluster == "DREAM"

    def test_color_and_cluster_by_mood(self, deriver, fragments, branches):
        config = VisualizationConfig(color_by=ColorBy.MOOD)

        result = deriver.derive(fragments, branches, config=config, now=NOW)

        assert [n.color for n in result.nodes] == ["#10B981", DEFAULT_COLOR, "#3B82F6"]
        assert [n.cluster for n in result.nodes] == ["Happy", "neutral", "sad"]

    def test_cluster_by_first_tag(self, deriver):
        fragments = [make_fragment("a", tags=["work", "focus"]), make_fragment("b")]

        result = deriver.derive(fragments, [], config=VisualizationConfig(color_by=ColorBy.TAGS))

        assert [n.cluster for n in result.nodes] == ["work", "untagged"]

    def test_cluster_by_month(self, deriver, fragments):
        config = VisualizationConfig(color_by=ColorBy.TIME)

        result = deriver.derive(fragments, [], config=config, now=NOW)

        assert [n.cluster for n in result.nodes] == ["2024-06", "2024-05", "2024-04"]
        assert result.nodes[0].color == "#3B82F6"  # two days old: This Week

    def test_color_by_connections_uses_default(self, deriver, fragments, branches):
        config = VisualizationConfig(color_by=ColorBy.CONNECTIONS)

        result = deriver.derive(fragments, branches, config=config, now=NOW)

        assert {n.color for n in result.nodes} == {DEFAULT_COLOR}

    def test_supplied_connection_counts_take_precedence(self, deriver, fragments):
        result = deriver.derive(fragments, [], now=NOW, connection_counts={"a": 3})

        assert [n.connection_count for n in result.nodes] == [3, 0, 0]


class TestEdgesAndStats:
    def test_edges(self, deriver, fragments, branches):
        result = deriver.derive(fragments, branches, now=NOW)

        assert [(e.color, e.width) for e in result.edges] == [
            (branch_type_color(BranchType.THEME), pytest.approx(4.5)),
            (branch_type_color(BranchType.EMOTION), 1.0),
        ]

    def test_stats(self, deriver, fragments, branches):
        result = deriver.derive(fragments, branches, now=NOW)
        stats = result.stats

        assert stats.total_nodes == 3
        assert stats.total_edges == 2
        assert stats.clusters == 3
        assert stats.time_span.start == fragments[2].created_at
        assert stats.time_span.end == fragments[0].created_at
        assert stats.time_span.days == 41
        assert stats.size_legend.min == 15
        assert stats.size_legend.max == 20
        assert stats.size_legend.metric == NodeSizeBy.CONNECTIONS

    def test_type_legend_lists_every_type(self, deriver, fragments):
        result = deriver.derive(fragments, [], now=NOW)

        assert set(result.stats.color_legend) == {t.value for t in FragmentType}

    def test_mood_legend_in_first_seen_order(self, deriver, fragments):
        config = VisualizationConfig(color_by=ColorBy.MOOD)

        result = deriver.derive(fragments, [], config=config, now=NOW)

        assert list(result.stats.color_legend.items()) == [("Happy", "#10B981"), ("sad", "#3B82F6")]

    def test_time_legend(self, deriver, fragments):
        config = VisualizationConfig(color_by=ColorBy.TIME)

        result = deriver.derive(fragments, [], config=config, now=NOW)

        assert list(result.stats.color_legend) == [label for label, _, _ in AGE_BANDS]

    def test_tags_legend_is_empty(self, deriver, fragments):
        config = VisualizationConfig(color_by=ColorBy.TAGS)

        assert deriver.derive(fragments, [], config=config, now=NOW).stats.color_legend == {}

    def test_empty_input(self, deriver):
        result = deriver.derive([], [], now=NOW)

        assert result.nodes == []
        assert result.edges == []
        assert result.layout == VisualizationLayout.FORCE
        assert result.stats.total_nodes == 0
        assert result.stats.clusters == 0
        assert result.stats.time_span.start == result.stats.time_span.end == NOW
        assert result.stats.time_span.days == 0
        assert result.stats.size_legend.min == 0
        assert result.stats.size_legend.max == 0

    def test_layout_passthrough(self, deriver, fragments):
        config = VisualizationConfig(layout=VisualizationLayout.TIMELINE)

        assert deriver.derive(fragments, [], config=config, now=NOW).layout == "timeline"

    def test_idempotent_for_fixed_now(self, deriver, fragments, branches):
        config = VisualizationConfig(color_by=ColorBy.TIME, node_size_by=NodeSizeBy.RECENCY)

        first = deriver.derive(fragments, branches, config=config, now=NOW)
        second = deriver.derive(fragments, branches, config=config, now=NOW)

        assert first == second

    def test_serializes_with_camel_case(self, deriver, fragments, branches):
        data = deriver.derive(fragments, branches, now=NOW).model_dump(by_alias=True)

        assert set(data["stats"]) == {
            "totalNodes",
            "totalEdges",
            "clusters",
            "timeSpan",
            "colorLegend",
            "sizeLegend",
        }
        assert "connectionCount" in data["nodes"][0]
