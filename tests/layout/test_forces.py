"""
Tests for layout forces and the arena.

Tests cover:
1. Link distance formula
2. Arena construction and position reuse
3. Individual force behavior
"""

import math

import numpy as np
import pytest

from connectgraph.core.layout import (
    CenterForce,
    CollideForce,
    LayoutArena,
    LinkForce,
    ManyBodyForce,
    link_distance,
)


class TestLinkDistance:
    """Target distance per connection strength."""

    def test_stronger_links_are_shorter(self):
        assert link_distance(2) == 90
        assert link_distance(8) == 60
        assert link_distance(8) < link_distance(2)

    @pytest.mark.parametrize("strength", [0, None])
    def test_missing_strength_uses_default(self, strength):
        assert link_distance(strength) == 75

    def test_configurable(self):
        assert link_distance(4, base_distance=200, per_strength=10) == 160


class TestLayoutArena:
    """Arena construction."""

    def test_from_graph(self, make_graph):
        graph = make_graph(["a", "b", "c"], [("a", "b", 8), ("b", "c", 2)])

        arena = LayoutArena.from_graph(graph, collision_padding=10, center=(400, 200))

        assert len(arena) == 3
        assert arena.link_count == 2
        assert list(arena.link_source) == [0, 1]
        assert list(arena.link_target) == [1, 2]
        assert list(arena.link_strength) == [8, 2]
        # size / 2 + padding
        assert np.allclose(arena.radius, 20.0)
        assert not any(arena.is_pinned(i) for i in range(3))

    def test_new_nodes_placed_near_center(self, make_graph):
        arena = LayoutArena.from_graph(make_graph(["a", "b", "c", "d"]), center=(400, 200))

        for i in range(len(arena)):
            x, y = arena.position(i)
            assert math.hypot(x - 400, y - 200) < 50
        # Distinct starting positions
        assert len(set(arena.positions().values())) == 4

    def test_previous_positions_reused(self, make_graph):
        previous = LayoutArena.from_graph(make_graph(["a", "b"]), center=(0, 0))
        previous.x[:] = [123.0, -45.0]
        previous.y[:] = [6.0, 78.0]

        arena = LayoutArena.from_graph(make_graph(["b", "c", "a"]), previous=previous)

        assert arena.position(arena.index["a"]) == (123.0, 6.0)
        assert arena.position(arena.index["b"]) == (-45.0, 78.0)

    def test_pin_and_unpin(self, make_graph):
        arena = LayoutArena.from_graph(make_graph(["a"]))

        arena.pin(0, 5.0, 6.0)
        assert arena.is_pinned(0)
        arena.unpin(0)
        assert not arena.is_pinned(0)

    def test_empty_graph(self, make_graph):
        arena = LayoutArena.from_graph(make_graph([]))

        assert len(arena) == 0
        assert arena.link_count == 0
        assert arena.positions() == {}


def two_node_arena(distance: float, strength: int = 5) -> LayoutArena:
    arena = LayoutArena(
        ["a", "b"],
        radius=np.array([20.0, 20.0]),
        link_source=np.array([0]),
        link_target=np.array([1]),
        link_strength=np.array([strength]),
    )
    arena.x[:] = [0.0, distance]
    return arena


class TestForces:
    """Each force in isolation."""

    def test_many_body_repels(self):
        arena = two_node_arena(50.0)
        ManyBodyForce(strength=-200).apply(arena, alpha=1.0)

        assert arena.vx[0] < 0
        assert arena.vx[1] > 0
        assert arena.vx[0] == pytest.approx(-arena.vx[1])

    def test_many_body_coincident_nodes_separate(self):
        arena = two_node_arena(0.0)
        ManyBodyForce().apply(arena, alpha=1.0)

        assert np.all(np.isfinite(arena.vx))
        assert arena.vx[0] != arena.vx[1] or arena.vy[0] != arena.vy[1]

    def test_link_pulls_when_too_long(self):
        arena = two_node_arena(200.0, strength=5)
        force = LinkForce()
        force.initialize(arena)

        assert list(force.distance) == [75.0]
        force.apply(arena, alpha=1.0)

        assert arena.vx[0] > 0
        assert arena.vx[1] < 0

    def test_link_pushes_when_too_short(self):
        arena = two_node_arena(10.0, strength=5)
        force = LinkForce()
        force.initialize(arena)
        force.apply(arena, alpha=1.0)

        assert arena.vx[0] < 0
        assert arena.vx[1] > 0

    def test_link_stiffness_from_degree(self, make_graph):
        graph = make_graph(["hub", "a", "b"], [("hub", "a", 5), ("hub", "b", 5)])
        arena = LayoutArena.from_graph(graph)
        force = LinkForce()
        force.initialize(arena)

        # min(degree(hub)=2, degree(leaf)=1) -> stiffness 1
        assert list(force.stiffness) == [1.0, 1.0]
        # bias = degree(source) / (degree(source) + degree(target))
        assert force.bias == pytest.approx([2 / 3, 2 / 3])

    def test_center_moves_mean(self):
        arena = two_node_arena(100.0)
        CenterForce(400.0, 200.0).apply(arena, alpha=1.0)

        assert arena.x.mean() == pytest.approx(400.0)
        assert arena.y.mean() == pytest.approx(200.0)

    def test_center_set_center(self):
        force = CenterForce()
        force.set_center(10.0, 20.0)
        assert (force.x, force.y) == (10.0, 20.0)

    def test_collide_separates_overlap(self):
        arena = two_node_arena(10.0)
        CollideForce().apply(arena, alpha=0.0)

        assert arena.vx[0] < 0
        assert arena.vx[1] > 0

    def test_collide_ignores_distant_nodes(self):
        arena = two_node_arena(100.0)
        CollideForce().apply(arena, alpha=1.0)

        assert np.all(arena.vx == 0)
