"""
Tests for ForceSimulation.

Tests cover:
1. State machine: running -> settling -> idle, and re-entry
2. Alpha schedule controls (reheat, refresh, alpha target)
3. Pinned nodes
4. Ownership (single driver)
5. Settled geometry
"""

import math

import numpy as np
import pytest

from connectgraph.config import LayoutConfig
from connectgraph.core.layout import ForceSimulation, LayoutArena, SimulationState
from connectgraph.utils.exceptions import LayoutError


def make_simulation(graph, config: LayoutConfig | None = None) -> ForceSimulation:
    config = config or LayoutConfig()
    arena = LayoutArena.from_graph(
        graph, collision_padding=config.collision_padding, center=(config.width / 2, config.height / 2)
    )
    return ForceSimulation(arena, config)


def distance(simulation: ForceSimulation, first: str, second: str) -> float:
    arena = simulation.arena
    (x1, y1), (x2, y2) = (arena.position(arena.index[first]), arena.position(arena.index[second]))
    return math.hypot(x2 - x1, y2 - y1)


class TestStateMachine:
    """Lifecycle states."""

    def test_new_simulation_is_running(self, make_graph):
        simulation = make_simulation(make_graph(["a", "b"], [("a", "b", 5)]))

        assert simulation.state == SimulationState.RUNNING
        assert simulation.alpha == 1.0
        assert simulation.is_active

    def test_empty_graph_stays_idle(self, make_graph):
        simulation = make_simulation(make_graph([]))

        assert simulation.state == SimulationState.IDLE
        simulation.tick(10)
        assert simulation.tick_count == 0

        simulation.refresh()
        assert simulation.state == SimulationState.IDLE

    def test_runs_through_settling_to_idle(self, make_graph):
        simulation = make_simulation(make_graph(["a", "b", "c"], [("a", "b", 5)]))
        seen = set()

        while simulation.is_active and simulation.tick_count < 1000:
            simulation.tick()
            seen.add(simulation.state)

        assert SimulationState.SETTLING in seen
        assert simulation.state == SimulationState.IDLE
        assert simulation.alpha < simulation.alpha_min

    def test_settles_in_about_300_ticks(self, make_graph):
        simulation = make_simulation(make_graph(["a", "b"], [("a", "b", 5)]))

        ticks = simulation.run_until_settled()

        assert 250 < ticks < 350
        assert simulation.state == SimulationState.IDLE

    def test_run_until_settled_respects_limit(self, make_graph):
        simulation = make_simulation(make_graph(["a", "b"]))

        assert simulation.run_until_settled(max_ticks=10) == 10
        assert simulation.is_active

    def test_idle_tick_is_noop(self, make_graph):
        simulation = make_simulation(make_graph(["a", "b"], [("a", "b", 5)]))
        simulation.run_until_settled()
        before = simulation.arena.positions()

        simulation.tick(5)

        assert simulation.arena.positions() == before

    def test_stop(self, make_graph):
        simulation = make_simulation(make_graph(["a"]))
        simulation.stop()
        assert simulation.state == SimulationState.IDLE


class TestAlphaControls:
    """reheat, refresh and alpha target."""

    def test_refresh_restarts_from_one(self, make_graph):
        simulation = make_simulation(make_graph(["a", "b"]))
        simulation.run_until_settled()

        simulation.refresh()

        assert simulation.alpha == 1.0
        assert simulation.state == SimulationState.RUNNING

    def test_reheat_never_lowers_alpha(self, make_graph):
        simulation = make_simulation(make_graph(["a", "b"]))
        simulation.reheat(0.3)
        assert simulation.alpha == 1.0

        simulation.run_until_settled()
        simulation.reheat(0.3)
        assert simulation.alpha == 0.3
        assert simulation.is_active

    def test_alpha_target_keeps_simulation_running(self, make_graph):
        """A raised alpha target (drag) keeps the simulation hot."""
        simulation = make_simulation(make_graph(["a", "b"], [("a", "b", 5)]))
        simulation.run_until_settled()

        simulation.set_alpha_target(0.3)
        simulation.tick(600)

        assert simulation.state == SimulationState.RUNNING
        assert simulation.alpha == pytest.approx(0.3, abs=0.01)

        simulation.set_alpha_target(0.0)
        simulation.run_until_settled()
        assert simulation.state == SimulationState.IDLE

    def test_wake_callback_fires_when_leaving_idle(self, make_graph):
        simulation = make_simulation(make_graph(["a", "b"]))
        wakes = []
        simulation.on_wake(lambda: wakes.append(1))

        simulation.reheat(0.5)  # already running
        assert wakes == []

        simulation.run_until_settled()
        simulation.refresh()
        assert wakes == [1]


class TestPinnedNodes:
    """Pinned nodes are held in place."""

    def test_pinned_node_does_not_move(self, make_graph):
        simulation = make_simulation(make_graph(["a", "b", "c"], [("a", "b", 5), ("a", "c", 5)]))
        arena = simulation.arena
        arena.pin(arena.index["a"], 50.0, 60.0)

        simulation.tick(50)

        assert arena.position(arena.index["a"]) == (50.0, 60.0)
        assert arena.vx[arena.index["a"]] == 0.0

    def test_unpinned_node_moves_again(self, make_graph):
        simulation = make_simulation(make_graph(["a", "b"], [("a", "b", 5)]))
        arena = simulation.arena
        arena.pin(0, 0.0, 0.0)
        simulation.tick(5)
        arena.unpin(0)

        simulation.tick(5)

        assert arena.position(0) != (0.0, 0.0)


class TestOwnership:
    """Single tick-loop driver."""

    def test_second_owner_rejected(self, make_graph):
        simulation = make_simulation(make_graph(["a"]))
        first, second = object(), object()

        simulation.attach(first)
        simulation.attach(first)  # re-attach by the same owner is fine
        with pytest.raises(LayoutError):
            simulation.attach(second)

    def test_detach_frees_simulation(self, make_graph):
        simulation = make_simulation(make_graph(["a"]))
        first, second = object(), object()

        simulation.attach(first)
        simulation.detach(second)  # not the owner; ignored
        assert simulation.owner is first

        simulation.detach(first)
        simulation.attach(second)
        assert simulation.owner is second


class TestSettledGeometry:
    """Shape of the settled layout."""

    def test_stronger_link_settles_shorter(self, make_graph):
        strong = make_simulation(make_graph(["a", "b"], [("a", "b", 8)]))
        weak = make_simulation(make_graph(["a", "b"], [("a", "b", 2)]))

        strong.run_until_settled()
        weak.run_until_settled()

        assert distance(strong, "a", "b") < distance(weak, "a", "b")

    def test_symmetric_pair_centered(self, make_graph):
        simulation = make_simulation(make_graph(["a", "b"], [("a", "b", 5)]))
        simulation.run_until_settled()

        arena = simulation.arena
        assert arena.x.mean() == pytest.approx(400.0, abs=1.0)
        assert arena.y.mean() == pytest.approx(200.0, abs=1.0)

    def test_unlinked_nodes_spread_apart(self, make_graph):
        simulation = make_simulation(make_graph(["a", "b", "c"]))
        simulation.run_until_settled()

        assert distance(simulation, "a", "b") > 40
        assert np.all(np.isfinite(simulation.arena.x))

    def test_set_center_moves_layout(self, make_graph):
        simulation = make_simulation(make_graph(["a", "b"], [("a", "b", 5)]))
        simulation.set_center(100.0, 100.0)

        simulation.run_until_settled()

        assert simulation.arena.x.mean() == pytest.approx(100.0, abs=1.0)
