"""Renderable graph projection models."""

from pydantic import BaseModel, ConfigDict, Field

from connectgraph.models.entities import Content, EntityKind, Memo, Tag

NODE_GROUPS: dict[EntityKind, int] = {
    EntityKind.CONTENT: 1,
    EntityKind.MEMO: 2,
    EntityKind.TAG: 3,
}

NODE_COLORS: dict[EntityKind, str] = {
    EntityKind.CONTENT: "cyan",
    EntityKind.MEMO: "amber",
    EntityKind.TAG: "magenta",
}


class GraphNode(BaseModel):
    """Graph vertex. Recomputed on every projection, never stored."""

    model_config = ConfigDict(frozen=True)

    id: str
    kind: EntityKind
    label: str
    group: int
    size: int
    source_ref: Content | Memo | Tag | None = Field(default=None, exclude=True)

    @property
    def color(self) -> str:
        return NODE_COLORS[self.kind]


class GraphEdge(BaseModel):
    """Graph edge, one per stored connection."""

    model_config = ConfigDict(frozen=True)

    connection_id: str
    source: str
    target: str
    relationship: str
    strength: int


class GraphData(BaseModel):
    """Nodes and links handed to the renderer."""

    nodes: list[GraphNode] = Field(default_factory=list)
    links: list[GraphEdge] = Field(default_factory=list)

    def node_ids(self) -> set[str]:
        return {node.id for node in self.nodes}

    def is_empty(self) -> bool:
        return not self.nodes


class MostConnectedNode(BaseModel):
    id: str
    label: str
    count: int


class ConnectionStats(BaseModel):
    """Aggregate statistics over the connection set."""

    total_connections: int = 0
    by_type: dict[str, int] = Field(default_factory=dict)
    avg_strength: float = 0.0
    most_connected_node: MostConnectedNode | None = None
