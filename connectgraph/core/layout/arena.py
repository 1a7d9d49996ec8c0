"""
Physics state for the force layout, kept apart from the immutable graph nodes.

All per-node state lives in parallel numpy arrays addressed by index; links
are stored as index pairs. Pinned coordinates use NaN for "not pinned".
"""

import math

import numpy as np

from connectgraph.models.graph import GraphData

INITIAL_RADIUS = 10.0
INITIAL_ANGLE = math.pi * (3 - math.sqrt(5))


class LayoutArena:
    """
    Struct-of-arrays physics state.

    Attributes:
        ids: Node IDs, index-aligned with every array
        x, y: Positions
        vx, vy: Velocities
        fx, fy: Pinned positions (NaN when free)
        radius: Collision radius per node
        link_source, link_target: Endpoint indices per link
        link_strength: Connection strength per link (1-10)
    """

    def __init__(
        self,
        ids: list[str],
        radius: np.ndarray,
        link_source: np.ndarray,
        link_target: np.ndarray,
        link_strength: np.ndarray,
    ):
        n = len(ids)
        self.ids = list(ids)
        self.index = {node_id: i for i, node_id in enumerate(self.ids)}

        self.x = np.zeros(n)
        self.y = np.zeros(n)
        self.vx = np.zeros(n)
        self.vy = np.zeros(n)
        self.fx = np.full(n, np.nan)
        self.fy = np.full(n, np.nan)
        self.radius = np.asarray(radius, dtype=float)

        self.link_source = np.asarray(link_source, dtype=int)
        self.link_target = np.asarray(link_target, dtype=int)
        self.link_strength = np.asarray(link_strength, dtype=float)

    @classmethod
    def from_graph(
        cls,
        graph: GraphData,
        collision_padding: float = 10.0,
        center: tuple[float, float] = (0.0, 0.0),
        previous: "LayoutArena | None" = None,
    ) -> "LayoutArena":
        """
        Build an arena for a graph projection.

        Nodes already present in `previous` keep their position and velocity,
        so a data change does not re-seed the whole layout. New nodes are
        placed on a phyllotaxis spiral around the center.

        Args:
            graph: Projected graph
            collision_padding: Added to node.size / 2 for the collision radius
            center: Spiral origin for newly placed nodes
            previous: Arena of the prior projection, if any
        """
        ids = [node.id for node in graph.nodes]
        index = {node_id: i for i, node_id in enumerate(ids)}
        radius = np.array([node.size / 2 + collision_padding for node in graph.nodes], dtype=float)

        sources, targets, strengths = [], [], []
        for link in graph.links:
            if link.source not in index or link.target not in index:
                continue
            sources.append(index[link.source])
            targets.append(index[link.target])
            strengths.append(link.strength)

        arena = cls(ids, radius, np.array(sources), np.array(targets), np.array(strengths))

        cx, cy = center
        for i, node_id in enumerate(ids):
            if previous is not None and node_id in previous.index:
                j = previous.index[node_id]
                arena.x[i], arena.y[i] = previous.x[j], previous.y[j]
                arena.vx[i], arena.vy[i] = previous.vx[j], previous.vy[j]
                continue
            r = INITIAL_RADIUS * math.sqrt(0.5 + i)
            angle = i * INITIAL_ANGLE
            arena.x[i] = cx + r * math.cos(angle)
            arena.y[i] = cy + r * math.sin(angle)

        return arena

    def __len__(self) -> int:
        return len(self.ids)

    @property
    def link_count(self) -> int:
        return len(self.link_source)

    def pin(self, i: int, x: float, y: float) -> None:
        self.fx[i] = x
        self.fy[i] = y

    def unpin(self, i: int) -> None:
        self.fx[i] = np.nan
        self.fy[i] = np.nan

    def is_pinned(self, i: int) -> bool:
        return not np.isnan(self.fx[i])

    def position(self, i: int) -> tuple[float, float]:
        return float(self.x[i]), float(self.y[i])

    def positions(self) -> dict[str, tuple[float, float]]:
        """Snapshot of every node position keyed by node ID."""
        return {node_id: (float(self.x[i]), float(self.y[i])) for i, node_id in enumerate(self.ids)}
