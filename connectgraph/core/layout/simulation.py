"""
Force simulation: alpha schedule, integration and lifecycle state.

State machine:
    idle -> running -> settling -> idle
Re-enters running on drag start, data change or an explicit refresh.
There is no error state; an empty graph stays idle.
"""

from collections.abc import Callable
from enum import Enum

import numpy as np

from connectgraph.config import LayoutConfig
from connectgraph.core.layout.arena import LayoutArena
from connectgraph.core.layout.forces import (
    CenterForce,
    CollideForce,
    Force,
    LinkForce,
    ManyBodyForce,
)
from connectgraph.utils.exceptions import LayoutError
from connectgraph.utils.logger import get_logger

logger = get_logger(__name__)


class SimulationState(str, Enum):
    """Lifecycle of a simulation."""

    IDLE = "idle"
    RUNNING = "running"
    SETTLING = "settling"


class ForceSimulation:
    """
    Ticks an arena under a set of forces.

    Each tick moves alpha toward alpha_target by alpha_decay, applies every
    force, then integrates velocities with velocity decay. Pinned nodes are
    held at their pinned coordinates with zero velocity.
    """

    def __init__(self, arena: LayoutArena, config: LayoutConfig | None = None):
        """
        Initialize simulation.

        Args:
            arena: Physics state to mutate
            config: Layout configuration (defaults if omitted)
        """
        self.arena = arena
        self.config = config or LayoutConfig()

        self.alpha = 1.0
        self.alpha_min = self.config.alpha_min
        self.alpha_decay = self.config.alpha_decay
        self.alpha_target = 0.0
        self.velocity_decay = self.config.velocity_decay

        self.center = CenterForce(self.config.width / 2, self.config.height / 2)
        self.forces: dict[str, Force] = {
            "link": LinkForce(
                base_distance=self.config.base_link_distance,
                per_strength=self.config.link_distance_per_strength,
            ),
            "charge": ManyBodyForce(strength=self.config.charge_strength),
            "center": self.center,
            "collision": CollideForce(),
        }
        for force in self.forces.values():
            force.initialize(arena)

        self.state = SimulationState.RUNNING if len(arena) else SimulationState.IDLE
        self.tick_count = 0
        self._owner: object | None = None
        self._wake_listeners: list[Callable[[], None]] = []

    # ═══════════════════════════════════════════════════════════
    # OWNERSHIP
    # ═══════════════════════════════════════════════════════════

    def attach(self, owner: object) -> None:
        """
        Claim this simulation for a tick loop.

        Raises:
            LayoutError: If another live owner already drives it
        """
        if self._owner is not None and self._owner is not owner:
            raise LayoutError("Simulation is already driven by another layout task")
        self._owner = owner

    def detach(self, owner: object) -> None:
        if self._owner is owner:
            self._owner = None

    @property
    def owner(self) -> object | None:
        return self._owner

    def on_wake(self, callback: Callable[[], None]) -> None:
        """Register a callback fired whenever the simulation leaves idle."""
        self._wake_listeners.append(callback)

    def off_wake(self, callback: Callable[[], None]) -> None:
        """Unregister a wake callback. Unknown callbacks are ignored."""
        if callback in self._wake_listeners:
            self._wake_listeners.remove(callback)

    @property
    def wake_listener_count(self) -> int:
        return len(self._wake_listeners)

    # ═══════════════════════════════════════════════════════════
    # LIFECYCLE
    # ═══════════════════════════════════════════════════════════

    @property
    def is_active(self) -> bool:
        return self.state != SimulationState.IDLE

    def restart(self) -> None:
        """Resume ticking from the current alpha."""
        if len(self.arena) == 0:
            return
        was_idle = self.state == SimulationState.IDLE
        self._update_state()
        if self.state == SimulationState.IDLE:
            self.state = SimulationState.RUNNING
        if was_idle:
            for callback in self._wake_listeners:
                callback()

    def reheat(self, alpha: float = 1.0) -> None:
        """Raise alpha (never lower it) and restart."""
        self.alpha = max(self.alpha, alpha)
        self.restart()

    def refresh(self) -> None:
        """Explicit re-layout: alpha back to 1."""
        self.alpha = 1.0
        self.restart()

    def set_alpha_target(self, target: float) -> None:
        self.alpha_target = target
        if target > 0:
            self.restart()

    def stop(self) -> None:
        """Stop advancing positions without touching alpha."""
        self.state = SimulationState.IDLE

    def set_center(self, x: float, y: float) -> None:
        self.center.set_center(x, y)

    # ═══════════════════════════════════════════════════════════
    # TICKING
    # ═══════════════════════════════════════════════════════════

    def tick(self, iterations: int = 1) -> None:
        """
        Advance the simulation. Does nothing while idle.

        Args:
            iterations: Number of steps to take
        """
        arena = self.arena
        for _ in range(iterations):
            if self.state == SimulationState.IDLE:
                return

            self.alpha += (self.alpha_target - self.alpha) * self.alpha_decay

            for force in self.forces.values():
                force.apply(arena, self.alpha)

            keep = 1 - self.velocity_decay
            arena.vx *= keep
            arena.vy *= keep
            arena.x += arena.vx
            arena.y += arena.vy

            pinned_x = ~np.isnan(arena.fx)
            pinned_y = ~np.isnan(arena.fy)
            arena.x[pinned_x] = arena.fx[pinned_x]
            arena.vx[pinned_x] = 0.0
            arena.y[pinned_y] = arena.fy[pinned_y]
            arena.vy[pinned_y] = 0.0

            self.tick_count += 1
            self._update_state()

        if self.state == SimulationState.IDLE:
            logger.debug(f"Simulation settled after {self.tick_count} ticks")

    def run_until_settled(self, max_ticks: int | None = None) -> int:
        """
        Tick synchronously until idle or max_ticks is reached.

        Returns:
            Number of ticks taken
        """
        limit = max_ticks if max_ticks is not None else self.config.max_headless_ticks
        taken = 0
        while self.is_active and taken < limit:
            self.tick()
            taken += 1
        return taken

    def _update_state(self) -> None:
        if self.alpha < self.alpha_min:
            self.state = SimulationState.IDLE
        elif self.alpha < self.config.settling_alpha and self.alpha_target < self.alpha_min:
            self.state = SimulationState.SETTLING
        else:
            self.state = SimulationState.RUNNING
