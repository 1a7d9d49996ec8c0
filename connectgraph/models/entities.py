"""
Inbound record models.

Content, Memo and Tag are owned by the persistence layer; the graph engine
only reads snapshots of them.
"""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field


class EntityKind(str, Enum):
    """Kinds of entities that can be connected in the knowledge graph."""

    CONTENT = "content"
    MEMO = "memo"
    TAG = "tag"


class Content(BaseModel):
    """Captured content item (article, note, thought)."""

    model_config = {"extra": "ignore"}

    id: str = Field(..., description="Unique content ID")
    title: str = Field(..., description="Display title")
    tags: list[str] = Field(default_factory=list, description="Tag names attached to the content")
    counterpoint: str | None = Field(default=None, description="Opposing viewpoint, if captured")
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class Memo(BaseModel):
    """Free-form memo written by the user."""

    model_config = {"extra": "ignore"}

    id: str = Field(..., description="Unique memo ID")
    text: str = Field(..., description="Memo body")
    tags: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class Tag(BaseModel):
    """Tag with its usage count."""

    model_config = {"extra": "ignore"}

    id: str = Field(..., description="Unique tag ID")
    name: str = Field(..., description="Tag name without the leading '#'")
    count: int = Field(default=0, ge=0, description="Number of records using this tag")
