"""
Connection model and relationship styling.

A Connection is a directed, typed, weighted edge between two entities of
any kind. Strength is clamped to [MIN_STRENGTH, MAX_STRENGTH] whenever it is
set, including on attribute assignment.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from connectgraph.models.entities import EntityKind
from connectgraph.utils.id_generator import generate_connection_id

MIN_STRENGTH = 1
MAX_STRENGTH = 10
DEFAULT_STRENGTH = 5


def clamp_strength(value: int | float) -> int:
    """Clamp a strength value into the valid [1, 10] range."""
    return max(MIN_STRENGTH, min(int(value), MAX_STRENGTH))


class ConnectionType(str, Enum):
    """Canonical relationship labels. Arbitrary strings are accepted too."""

    RELATED = "related"
    CONTRAST = "contrast"
    CAUSES = "causes"
    SUPPORTS = "supports"
    QUESTIONS = "questions"
    EXTENDS = "extends"


class RelationshipStyle(BaseModel):
    """Display label and color for a relationship."""

    model_config = ConfigDict(frozen=True)

    label: str
    color: str


_RELATIONSHIP_STYLES: dict[ConnectionType, RelationshipStyle] = {
    ConnectionType.RELATED: RelationshipStyle(label="Related", color="cyan"),
    ConnectionType.CONTRAST: RelationshipStyle(label="Contrast", color="magenta"),
    ConnectionType.CAUSES: RelationshipStyle(label="Cause → Effect", color="amber"),
    ConnectionType.SUPPORTS: RelationshipStyle(label="Supports", color="green"),
    ConnectionType.QUESTIONS: RelationshipStyle(label="Questions", color="orange"),
    ConnectionType.EXTENDS: RelationshipStyle(label="Extends", color="blue"),
}

NEUTRAL_COLOR = "gray"


def parse_connection_type(relationship: str) -> ConnectionType | None:
    """Return the canonical type for a relationship string, or None if free-form."""
    try:
        return ConnectionType(relationship)
    except ValueError:
        return None


def relationship_style(relationship: str) -> RelationshipStyle:
    """
    Resolve the rendering style of a relationship.

    Free-form relationships get a neutral style labelled with the raw string.
    """
    match parse_connection_type(relationship):
        case None:
            return RelationshipStyle(label=relationship, color=NEUTRAL_COLOR)
        case kind:
            return _RELATIONSHIP_STYLES[kind]


class Connection(BaseModel):
    """Stored edge between two entities."""

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(default_factory=generate_connection_id)
    source_id: str
    target_id: str
    source_type: EntityKind
    target_type: EntityKind
    relationship: str = ConnectionType.RELATED.value
    strength: int = DEFAULT_STRENGTH
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @field_validator("strength", mode="before")
    @classmethod
    def _clamp_strength(cls, value: Any) -> int:
        if value is None:
            return DEFAULT_STRENGTH
        return clamp_strength(value)

    @field_validator("relationship", mode="before")
    @classmethod
    def _relationship_value(cls, value: Any) -> str:
        if isinstance(value, ConnectionType):
            return value.value
        return value

    def touches(self, node_id: str) -> bool:
        """Check whether the node is this connection's source or target."""
        return self.source_id == node_id or self.target_id == node_id

    def other_end(self, node_id: str) -> str | None:
        """Return the opposite endpoint of node_id, or None if not touching."""
        if self.source_id == node_id:
            return self.target_id
        if self.target_id == node_id:
            return self.source_id
        return None


class ConnectionUpdate(BaseModel):
    """Partial patch for a stored connection. Identity and creation time are immutable."""

    model_config = {"extra": "ignore"}

    relationship: str | None = None
    strength: int | None = None
    source_type: EntityKind | None = None
    target_type: EntityKind | None = None
