"""Fixtures for layout tests."""

import pytest

from connectgraph.config import LayoutConfig
from connectgraph.models import EntityKind, GraphData, GraphEdge, GraphNode


def build_graph(node_ids: list[str], links: list[tuple[str, str, int]] | None = None) -> GraphData:
    """Graph of content nodes of size 20 with the given (source, target, strength) links."""
    nodes = [
        GraphNode(id=node_id, kind=EntityKind.CONTENT, label=node_id, group=1, size=20)
        for node_id in node_ids
    ]
    edges = [
        GraphEdge(
            connection_id=f"conn_{source}_{target}",
            source=source,
            target=target,
            relationship="related",
            strength=strength,
        )
        for source, target, strength in links or []
    ]
    return GraphData(nodes=nodes, links=edges)


@pytest.fixture
def make_graph():
    return build_graph


@pytest.fixture
def layout_config() -> LayoutConfig:
    """Layout config with a zero frame interval so loops tick on every yield."""
    return LayoutConfig(frame_interval=0.0)
