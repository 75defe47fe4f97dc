"""
Fragment model: a single short note authored by one owner.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from branchgraph.utils.time import utc_now

MAX_CONTENT_LENGTH = 10000
MAX_TAGS = 10
MAX_MOOD_LENGTH = 50


class FragmentType(str, Enum):
    """Kinds of fragments a user can record."""

    TEXT = "TEXT"
    AUDIO = "AUDIO"
    DREAM = "DREAM"
    QUOTE = "QUOTE"
    FEELING = "FEELING"
    REFLECTION = "REFLECTION"


class Fragment(BaseModel):
    """
    A user-authored note.

    Fragments are owned exclusively by their creator and only change through
    an explicit update. Tags keep their insertion order; the first tag is used
    as the cluster key when visualizing by tags.
    """

    id: str = Field(..., description="Unique fragment ID (frag_xxx)")
    owner_id: str = Field(..., description="Owner user ID")
    content: str = Field(
        ..., min_length=1, max_length=MAX_CONTENT_LENGTH, description="Fragment text"
    )
    type: FragmentType = Field(default=FragmentType.TEXT, description="Fragment type")
    tags: list[str] = Field(default_factory=list, max_length=MAX_TAGS, description="Ordered tags")
    mood: str | None = Field(default=None, max_length=MAX_MOOD_LENGTH, description="Mood label")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Additional metadata")

    created_at: datetime = Field(default_factory=utc_now, description="Creation timestamp")
    updated_at: datetime = Field(default_factory=utc_now, description="Last update timestamp")

    def to_summary(self) -> "FragmentSummary":
        """Project the fragment onto the summary embedded in branch records."""
        return FragmentSummary(
            id=self.id,
            content=self.content,
            type=self.type,
            created_at=self.created_at,
            tags=list(self.tags),
            mood=self.mood,
        )


class FragmentSummary(BaseModel):
    """Fragment fields exposed alongside a branch."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    content: str
    type: FragmentType
    created_at: datetime
    tags: list[str] = Field(default_factory=list)
    mood: str | None = None


class FragmentFilters(BaseModel):
    """Filters accepted by fragment queries. Unset fields do not filter."""

    type: FragmentType | None = None
    types: list[FragmentType] | None = None
    search: str | None = None
    tags: list[str] | None = None
    mood: str | None = None
    created_after: datetime | None = None
    created_before: datetime | None = None
    limit: int | None = Field(default=None, ge=1)
