"""Whole-graph view of a user's fragments and branches."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from branchgraph.models.branch import BranchType
from branchgraph.models.fragment import FragmentType


class MemoryTreeNode(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    content: str
    type: FragmentType
    tags: list[str] = Field(default_factory=list)
    mood: str | None = None
    created_at: datetime
    connection_count: int = 0


class MemoryTreeEdge(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    source: str
    target: str
    type: BranchType
    weight: float
    metadata: dict[str, Any] = Field(default_factory=dict)


class MemoryTreeStats(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_fragments: int = 0
    total_connections: int = 0
    average_connections: float = 0.0
    strongest_connection: float = 0.0
    connection_types: dict[str, int] = Field(default_factory=dict)


class MemoryTree(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    nodes: list[MemoryTreeNode] = Field(default_factory=list)
    edges: list[MemoryTreeEdge] = Field(default_factory=list)
    stats: MemoryTreeStats = Field(default_factory=MemoryTreeStats)
