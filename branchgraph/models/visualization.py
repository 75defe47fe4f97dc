"""
Visualization models.

VisualizationConfig selects how display attributes are derived; the query
model adds the upstream filters applied before derivation.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from branchgraph.models.branch import BranchType
from branchgraph.models.fragment import FragmentType


class VisualizationLayout(str, Enum):
    """Layout hint passed through to the renderer."""

    FORCE = "force"
    HIERARCHICAL = "hierarchical"
    CIRCULAR = "circular"
    TIMELINE = "timeline"


class NodeSizeBy(str, Enum):
    """Metric driving node size."""

    CONNECTIONS = "connections"
    CONTENT_LENGTH = "content_length"
    RECENCY = "recency"
    UNIFORM = "uniform"


class ColorBy(str, Enum):
    """Attribute driving node color and cluster assignment."""

    TYPE = "type"
    MOOD = "mood"
    TAGS = "tags"
    TIME = "time"
    CONNECTIONS = "connections"


class VisualizationConfig(BaseModel):
    layout: VisualizationLayout = VisualizationLayout.FORCE
    node_size_by: NodeSizeBy = NodeSizeBy.CONNECTIONS
    color_by: ColorBy = ColorBy.TYPE


class VisualizationQuery(VisualizationConfig):
    """Styling options plus the filters narrowing which fragments and branches are drawn."""

    min_weight: float = Field(default=0.1, ge=0.0, le=1.0)
    fragment_types: list[FragmentType] | None = None
    connection_types: list[BranchType] | None = None
    tags: list[str] | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    focus_fragment_id: str | None = None
    max_depth: int = Field(default=2, ge=1, le=5)

    def style(self) -> VisualizationConfig:
        return VisualizationConfig(
            layout=self.layout, node_size_by=self.node_size_by, color_by=self.color_by
        )


class VisualizationNode(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    content: str
    type: FragmentType
    tags: list[str] = Field(default_factory=list)
    mood: str | None = None
    created_at: datetime
    connection_count: int = 0
    size: float
    color: str
    cluster: str


class VisualizationEdge(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    source: str
    target: str
    type: BranchType
    weight: float
    color: str
    width: float
    metadata: dict[str, Any] = Field(default_factory=dict)


class TimeSpan(BaseModel):
    start: datetime
    end: datetime
    days: int


class SizeLegend(BaseModel):
    min: float
    max: float
    metric: NodeSizeBy


class VisualizationStats(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_nodes: int
    total_edges: int
    clusters: int
    time_span: TimeSpan
    color_legend: dict[str, str] = Field(default_factory=dict)
    size_legend: SizeLegend


class VisualizationResult(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    nodes: list[VisualizationNode] = Field(default_factory=list)
    edges: list[VisualizationEdge] = Field(default_factory=list)
    layout: VisualizationLayout
    stats: VisualizationStats
