"""
Graph projection: raw records + connections -> renderable nodes and links.

Visibility rules:
- every Content becomes a node
- a Memo becomes a node only when at least one connection touches it
- a Tag becomes a node when a connection touches it or its count is >= 2

Sizing rules:
- content/memo: min(degree * 5 + 15, 50)
- tag: min(count * 5 + 10, 40), usage-driven rather than degree-driven
"""

from collections import Counter
from collections.abc import Iterable

from connectgraph.models.connection import Connection
from connectgraph.models.entities import Content, EntityKind, Memo, Tag
from connectgraph.models.graph import (
    NODE_GROUPS,
    ConnectionStats,
    GraphData,
    GraphEdge,
    GraphNode,
    MostConnectedNode,
)
from connectgraph.utils.logger import get_logger

logger = get_logger(__name__)

MEMO_LABEL_LENGTH = 30
TAG_VISIBILITY_COUNT = 2


def degree_counts(connections: Iterable[Connection]) -> Counter[str]:
    """Count connections touching each entity ID."""
    degrees: Counter[str] = Counter()
    for connection in connections:
        degrees[connection.source_id] += 1
        degrees[connection.target_id] += 1
    return degrees


def connected_node_size(degree: int) -> int:
    return min(degree * 5 + 15, 50)


def tag_node_size(count: int) -> int:
    return min(count * 5 + 10, 40)


def memo_label(text: str) -> str:
    """Truncate memo text to a short label."""
    if len(text) > MEMO_LABEL_LENGTH:
        return text[:MEMO_LABEL_LENGTH] + "..."
    return text


class GraphProjector:
    """Builds GraphData snapshots. Stateless; safe to reuse across projections."""

    def project(
        self,
        contents: list[Content],
        memos: list[Memo],
        tags: list[Tag],
        connections: list[Connection],
    ) -> GraphData:
        """
        Project the current record snapshot into a renderable graph.

        Args:
            contents: All content items
            memos: All memos
            tags: All tags
            connections: All connections

        Returns:
            GraphData with nodes and links; links with missing endpoints are skipped
        """
        degrees = degree_counts(connections)
        nodes: list[GraphNode] = []

        for content in contents:
            nodes.append(
                GraphNode(
                    id=content.id,
                    kind=EntityKind.CONTENT,
                    label=content.title,
                    group=NODE_GROUPS[EntityKind.CONTENT],
                    size=connected_node_size(degrees[content.id]),
                    source_ref=content,
                )
            )

        for memo in memos:
            if degrees[memo.id] == 0:
                continue
            nodes.append(
                GraphNode(
                    id=memo.id,
                    kind=EntityKind.MEMO,
                    label=memo_label(memo.text),
                    group=NODE_GROUPS[EntityKind.MEMO],
                    size=connected_node_size(degrees[memo.id]),
                    source_ref=memo,
                )
            )

        for tag in tags:
            if degrees[tag.id] == 0 and tag.count < TAG_VISIBILITY_COUNT:
                continue
            nodes.append(
                GraphNode(
                    id=tag.id,
                    kind=EntityKind.TAG,
                    label=f"#{tag.name}",
                    group=NODE_GROUPS[EntityKind.TAG],
                    size=tag_node_size(tag.count),
                    source_ref=tag,
                )
            )

        node_ids = {node.id for node in nodes}
        links: list[GraphEdge] = []
        skipped = 0

        for connection in connections:
            if connection.source_id not in node_ids or connection.target_id not in node_ids:
                skipped += 1
                continue
            links.append(
                GraphEdge(
                    connection_id=connection.id,
                    source=connection.source_id,
                    target=connection.target_id,
                    relationship=connection.relationship,
                    strength=connection.strength,
                )
            )

        if skipped:
            logger.debug(f"Skipped {skipped} connection(s) with endpoints outside the graph")

        return GraphData(nodes=nodes, links=links)


def related_nodes(graph: GraphData, connections: list[Connection], node_id: str) -> list[GraphNode]:
    """
    Nodes of the graph directly connected to node_id, in either direction.

    Args:
        graph: Current projection
        connections: Connections the projection was built from
        node_id: Node to look around

    Returns:
        Related nodes in projection order
    """
    related_ids = {c.other_end(node_id) for c in connections if c.touches(node_id)}
    return [node for node in graph.nodes if node.id in related_ids]


def connection_stats(graph: GraphData, connections: list[Connection]) -> ConnectionStats:
    """
    Aggregate statistics over the connection set.

    The most-connected node is the first entity reaching the highest degree,
    labelled from the projection when present and by its ID otherwise.
    """
    if not connections:
        return ConnectionStats()

    by_type = Counter(c.relationship for c in connections)
    avg_strength = sum(c.strength for c in connections) / len(connections)

    labels = {node.id: node.label for node in graph.nodes}
    most_connected: MostConnectedNode | None = None
    for node_id, count in degree_counts(connections).items():
        if most_connected is None or count > most_connected.count:
            most_connected = MostConnectedNode(
                id=node_id, label=labels.get(node_id, node_id), count=count
            )

    return ConnectionStats(
        total_connections=len(connections),
        by_type=dict(by_type),
        avg_strength=avg_strength,
        most_connected_node=most_connected,
    )
