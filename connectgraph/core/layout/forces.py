"""
Layout forces.

Each force mutates arena velocities in place for one tick. The formulas
follow the usual velocity-Verlet force-directed model: forces add to
velocities, the simulation integrates and applies velocity decay.
"""

from abc import ABC, abstractmethod

import numpy as np

from connectgraph.core.layout.arena import LayoutArena
from connectgraph.models.connection import DEFAULT_STRENGTH

JIGGLE_SCALE = 1e-6


def link_distance(
    strength: float, base_distance: float = 100.0, per_strength: float = 5.0
) -> float:
    """
    Target length of a link. Stronger connections pull endpoints closer.

    A missing or zero strength counts as the default strength.
    """
    return base_distance - (strength or DEFAULT_STRENGTH) * per_strength


class Force(ABC):
    """A force acting on the arena once per tick."""

    def initialize(self, arena: LayoutArena) -> None:
        """Precompute per-node or per-link constants for a new arena."""
        pass

    @abstractmethod
    def apply(self, arena: LayoutArena, alpha: float) -> None:
        """Add this force's contribution to arena velocities."""
        pass


class ManyBodyForce(Force):
    """
    Pairwise charge between every pair of nodes. Negative strength repels.

    Computed exactly over all pairs; graphs here are small enough that an
    approximation tree is not needed.
    """

    def __init__(self, strength: float = -200.0, distance_min: float = 1.0, seed: int = 0):
        self.strength = strength
        self.distance_min2 = distance_min * distance_min
        self._rng = np.random.default_rng(seed)

    def apply(self, arena: LayoutArena, alpha: float) -> None:
        n = len(arena)
        if n < 2:
            return

        dx = arena.x[np.newaxis, :] - arena.x[:, np.newaxis]
        dy = arena.y[np.newaxis, :] - arena.y[:, np.newaxis]

        off_diagonal = ~np.eye(n, dtype=bool)
        coincident = (dx == 0) & (dy == 0) & off_diagonal
        if coincident.any():
            dx = dx + coincident * (self._rng.random((n, n)) - 0.5) * JIGGLE_SCALE
            dy = dy + coincident * (self._rng.random((n, n)) - 0.5) * JIGGLE_SCALE

        l2 = dx * dx + dy * dy
        l2 = np.where(l2 < self.distance_min2, np.sqrt(self.distance_min2 * l2), l2)
        l2[~off_diagonal] = np.inf

        weight = self.strength * alpha / l2
        arena.vx += (dx * weight).sum(axis=1)
        arena.vy += (dy * weight).sum(axis=1)


class LinkForce(Force):
    """
    Spring along each link toward its target distance.

    Springs on low-degree endpoints are stiffer, and the correction is split
    between endpoints in proportion to their degree.
    """

    def __init__(self, base_distance: float = 100.0, per_strength: float = 5.0, seed: int = 0):
        self.base_distance = base_distance
        self.per_strength = per_strength
        self._rng = np.random.default_rng(seed)
        self.distance = np.zeros(0)
        self.stiffness = np.zeros(0)
        self.bias = np.zeros(0)

    def initialize(self, arena: LayoutArena) -> None:
        if arena.link_count == 0:
            self.distance = np.zeros(0)
            self.stiffness = np.zeros(0)
            self.bias = np.zeros(0)
            return

        self.distance = np.array(
            [link_distance(s, self.base_distance, self.per_strength) for s in arena.link_strength]
        )

        degree = np.bincount(
            np.concatenate([arena.link_source, arena.link_target]), minlength=len(arena)
        ).astype(float)
        source_degree = degree[arena.link_source]
        target_degree = degree[arena.link_target]
        self.stiffness = 1.0 / np.minimum(source_degree, target_degree)
        self.bias = source_degree / (source_degree + target_degree)

    def apply(self, arena: LayoutArena, alpha: float) -> None:
        if arena.link_count == 0:
            return

        s, t = arena.link_source, arena.link_target
        dx = arena.x[t] + arena.vx[t] - arena.x[s] - arena.vx[s]
        dy = arena.y[t] + arena.vy[t] - arena.y[s] - arena.vy[s]

        zero = (dx == 0) & (dy == 0)
        if zero.any():
            dx = np.where(zero, (self._rng.random(len(dx)) - 0.5) * JIGGLE_SCALE, dx)
            dy = np.where(zero, (self._rng.random(len(dy)) - 0.5) * JIGGLE_SCALE, dy)

        length = np.sqrt(dx * dx + dy * dy)
        scale = (length - self.distance) / length * alpha * self.stiffness
        dx *= scale
        dy *= scale

        np.add.at(arena.vx, t, -dx * self.bias)
        np.add.at(arena.vy, t, -dy * self.bias)
        np.add.at(arena.vx, s, dx * (1 - self.bias))
        np.add.at(arena.vy, s, dy * (1 - self.bias))


class CenterForce(Force):
    """Translates all nodes so their mean position sits on the center."""

    def __init__(self, x: float = 0.0, y: float = 0.0, strength: float = 1.0):
        self.x = x
        self.y = y
        self.strength = strength

    def set_center(self, x: float, y: float) -> None:
        self.x = x
        self.y = y

    def apply(self, arena: LayoutArena, alpha: float) -> None:
        if len(arena) == 0:
            return
        shift_x = (arena.x.mean() - self.x) * self.strength
        shift_y = (arena.y.mean() - self.y) * self.strength
        arena.x -= shift_x
        arena.y -= shift_y


class CollideForce(Force):
    """
    Pushes apart nodes whose collision circles overlap.

    Uses positions predicted from current velocities; independent of alpha.
    """

    def __init__(self, strength: float = 1.0, seed: int = 0):
        self.strength = strength
        self._rng = np.random.default_rng(seed)

    def apply(self, arena: LayoutArena, alpha: float) -> None:
        n = len(arena)
        if n < 2:
            return

        px = arena.x + arena.vx
        py = arena.y + arena.vy
        i, j = np.triu_indices(n, k=1)

        dx = px[i] - px[j]
        dy = py[i] - py[j]
        r = arena.radius[i] + arena.radius[j]
        l2 = dx * dx + dy * dy

        overlap = l2 < r * r
        if not overlap.any():
            return

        i, j, dx, dy, r = i[overlap], j[overlap], dx[overlap], dy[overlap], r[overlap]
        zero_x = dx == 0
        zero_y = dy == 0
        dx = np.where(zero_x, (self._rng.random(len(dx)) - 0.5) * JIGGLE_SCALE, dx)
        dy = np.where(zero_y, (self._rng.random(len(dy)) - 0.5) * JIGGLE_SCALE, dy)

        length = np.sqrt(dx * dx + dy * dy)
        scale = (r - length) / length * self.strength
        dx *= scale
        dy *= scale

        ri2 = arena.radius[i] ** 2
        rj2 = arena.radius[j] ** 2
        share = rj2 / (ri2 + rj2)

        np.add.at(arena.vx, i, dx * share)
        np.add.at(arena.vy, i, dy * share)
        np.add.at(arena.vx, j, -dx * (1 - share))
        np.add.at(arena.vy, j, -dy * (1 - share))
