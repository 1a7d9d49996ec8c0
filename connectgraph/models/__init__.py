"""
Data models for ConnectGraph.

- Content, Memo, Tag: inbound records (read-only snapshots)
- Connection: typed, weighted edge with clamped strength
- GraphNode, GraphEdge, GraphData: renderable projection
- Pattern, SuggestedConnection: derived analysis results
"""

from connectgraph.models.connection import (
    DEFAULT_STRENGTH,
    MAX_STRENGTH,
    MIN_STRENGTH,
    Connection,
    ConnectionType,
    ConnectionUpdate,
    RelationshipStyle,
    clamp_strength,
    parse_connection_type,
    relationship_style,
)
from connectgraph.models.entities import Content, EntityKind, Memo, Tag
from connectgraph.models.graph import (
    ConnectionStats,
    GraphData,
    GraphEdge,
    GraphNode,
    MostConnectedNode,
)
from connectgraph.models.pattern import (
    Pattern,
    PatternStyle,
    PatternType,
    SuggestedConnection,
    pattern_style,
)

__all__ = [
    # Record models
    "Content",
    "Memo",
    "Tag",
    "EntityKind",
    # Connection models
    "Connection",
    "ConnectionType",
    "ConnectionUpdate",
    "RelationshipStyle",
    "clamp_strength",
    "parse_connection_type",
    "relationship_style",
    "MIN_STRENGTH",
    "MAX_STRENGTH",
    "DEFAULT_STRENGTH",
    # Graph models
    "GraphNode",
    "GraphEdge",
    "GraphData",
    "ConnectionStats",
    "MostConnectedNode",
    # Analysis models
    "Pattern",
    "PatternType",
    "PatternStyle",
    "SuggestedConnection",
    "pattern_style",
]
