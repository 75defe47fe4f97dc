"""Branch (graph edge) models and the records exchanged with the graph store."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from branchgraph.models.fragment import FragmentSummary
from branchgraph.utils.time import utc_now


class BranchType(str, Enum):
    """Types of connections between fragments."""

    THEME = "THEME"
    EMOTION = "EMOTION"
    TIME = "TIME"
    MEMORY = "MEMORY"
    MANUAL = "MANUAL"
    SEMANTIC = "SEMANTIC"


class Branch(BaseModel):
    """
    Typed, weighted connection between two fragments.

    Stored with a direction but treated as undirected for uniqueness: at most
    one branch exists per unordered pair of fragments.
    """

    id: str = Field(..., description="Unique branch ID (branch_xxx)")
    source_id: str = Field(..., description="Source fragment ID")
    target_id: str = Field(..., description="Target fragment ID")
    type: BranchType
    weight: float = Field(default=1.0, ge=0.0, le=1.0, description="Connection strength")
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def pair(self) -> tuple[str, str]:
        """Canonical ordered endpoint pair used for the uniqueness constraint."""
        return canonical_pair(self.source_id, self.target_id)

    def touches(self, fragment_id: str) -> bool:
        """Whether the branch is incident to the given fragment."""
        return fragment_id in (self.source_id, self.target_id)


def canonical_pair(first: str, second: str) -> tuple[str, str]:
    """Order two fragment IDs so that {a, b} and {b, a} map to the same key."""
    return (first, second) if first <= second else (second, first)


class BranchPatch(BaseModel):
    """Partial update for a branch; metadata is merged into the existing map."""

    type: BranchType | None = None
    weight: float | None = Field(default=None, ge=0.0, le=1.0)
    metadata: dict[str, Any] | None = None


class BranchFilters(BaseModel):
    """Filters accepted by branch queries. Unset fields do not filter."""

    type: BranchType | None = None
    types: list[BranchType] | None = None
    source_id: str | None = None
    target_id: str | None = None
    fragment_id: str | None = None
    min_weight: float | None = Field(default=None, ge=0.0, le=1.0)
    max_weight: float | None = Field(default=None, ge=0.0, le=1.0)
    search: str | None = None
    created_after: datetime | None = None
    created_before: datetime | None = None
    limit: int | None = Field(default=None, ge=1)


class ConnectionScore(BaseModel):
    """Strongest scoring dimension for a pair of fragments."""

    type: BranchType
    weight: float = Field(ge=0.0, le=1.0)
    metadata: dict[str, Any] = Field(default_factory=dict)


class BranchCandidate(BaseModel):
    """Scored connection proposed by the auto-linker, not yet persisted."""

    source_id: str
    target_id: str
    type: BranchType
    weight: float = Field(ge=0.0, le=1.0)
    metadata: dict[str, Any] = Field(default_factory=dict)

    def reversed(self) -> "BranchCandidate":
        """Same candidate pointing the other way."""
        return self.model_copy(update={"source_id": self.target_id, "target_id": self.source_id})


class BranchWriteStatus(str, Enum):
    """Outcome of an attempted branch insert."""

    CREATED = "created"
    CONFLICT = "conflict"


class BranchWriteResult(BaseModel):
    """
    Result of GraphStore.add_branch.

    A conflict is a normal outcome (the pair is already connected, possibly by
    a concurrent writer) rather than an exception.
    """

    status: BranchWriteStatus
    branch: Branch | None = None
    existing_id: str | None = None

    @property
    def created(self) -> bool:
        return self.status == BranchWriteStatus.CREATED

    @classmethod
    def ok(cls, branch: Branch) -> "BranchWriteResult":
        return cls(status=BranchWriteStatus.CREATED, branch=branch)

    @classmethod
    def conflict(cls, existing_id: str | None = None) -> "BranchWriteResult":
        return cls(status=BranchWriteStatus.CONFLICT, existing_id=existing_id)


class BranchRecord(BaseModel):
    """Branch with its endpoint fragments, as returned to callers."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    type: BranchType
    weight: float
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime
    source: FragmentSummary
    target: FragmentSummary
