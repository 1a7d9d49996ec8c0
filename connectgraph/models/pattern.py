"""Derived analysis results: discovered patterns and suggested connections."""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from connectgraph.models.entities import EntityKind


class PatternType(str, Enum):
    """Pattern taxonomy. Only TAG_CLUSTER and REPEAT_CONNECTION have detection rules."""

    TAG_CLUSTER = "tag-cluster"
    CONTENT_CHAIN = "content-chain"
    TOPIC_BRIDGE = "topic-bridge"
    REPEAT_CONNECTION = "repeat-connection"


class PatternStyle(BaseModel):
    """Display metadata for a pattern type."""

    model_config = ConfigDict(frozen=True)

    label: str
    color: str
    insight: str


_PATTERN_STYLES: dict[PatternType, PatternStyle] = {
    PatternType.TAG_CLUSTER: PatternStyle(
        label="Tag cluster",
        color="magenta",
        insight="Several items are connected around this tag. It may be a core interest.",
    ),
    PatternType.CONTENT_CHAIN: PatternStyle(
        label="Content chain",
        color="cyan",
        insight="A continuous chain of linked items forms a single learning journey.",
    ),
    PatternType.TOPIC_BRIDGE: PatternStyle(
        label="Topic bridge",
        color="green",
        insight="This bridges different fields. Expect crossover insights.",
    ),
    PatternType.REPEAT_CONNECTION: PatternStyle(
        label="Repeat connection",
        color="amber",
        insight="This kind of connection keeps appearing. It may be an important way of thinking.",
    ),
}

DEFAULT_PATTERN_STYLE = PatternStyle(
    label="Pattern", color="gray", insight="An interesting pattern was found."
)


def pattern_style(pattern_type: PatternType | str) -> PatternStyle:
    """Resolve display metadata, with an explicit default for unknown types."""
    try:
        kind = PatternType(pattern_type)
    except ValueError:
        kind = None

    match kind:
        case None:
            return DEFAULT_PATTERN_STYLE
        case known:
            return _PATTERN_STYLES[known]


class Pattern(BaseModel):
    """Structural finding over the connection set. Ephemeral."""

    id: str
    description: str
    type: PatternType
    related_nodes: list[str] = Field(default_factory=list)
    strength: float = Field(..., ge=0.0, le=1.0)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class SuggestedConnection(BaseModel):
    """Non-committed connection recommendation."""

    target_id: str
    target_type: EntityKind
    target_label: str
    reason: str
    confidence: float = Field(..., ge=0.0, le=1.0)
