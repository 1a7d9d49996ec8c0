"""
Tick loop and layout controller.

A LayoutTask is the cancellable handle of one running tick loop. The
LayoutController owns at most one task at a time and always stops the
current one before starting another, so only one loop ever writes to an
arena's positions.
"""

import asyncio
from collections.abc import Callable

from connectgraph.config import LayoutConfig
from connectgraph.core.layout.arena import LayoutArena
from connectgraph.core.layout.interaction import (
    GestureEvent,
    PointerGesture,
    TargetKind,
    ViewTransform,
)
from connectgraph.core.layout.simulation import ForceSimulation, SimulationState
from connectgraph.models.graph import GraphData
from connectgraph.utils.logger import get_logger

logger = get_logger(__name__)

TickListener = Callable[[dict[str, tuple[float, float]]], None]


class LayoutTask:
    """
    Handle to a per-frame tick loop over one simulation.

    While the simulation is active the loop ticks once per frame and
    notifies listeners with a position snapshot. Once it settles the loop
    parks on an event until the simulation wakes again.
    """

    def __init__(
        self,
        simulation: ForceSimulation,
        frame_interval: float = 1 / 60,
        listeners: list[TickListener] | None = None,
    ):
        self.simulation = simulation
        self.frame_interval = frame_interval
        self.listeners = listeners if listeners is not None else []
        self._wake = asyncio.Event()
        self._task: asyncio.Task | None = None

    def start(self) -> "LayoutTask":
        """
        Start the loop on the running event loop.

        Raises:
            LayoutError: If the simulation is already driven by another task
        """
        self.simulation.attach(self)
        self.simulation.on_wake(self._wake.set)
        if self.simulation.is_active:
            self._wake.set()
        self._task = asyncio.create_task(self._run())
        return self

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def stop(self) -> None:
        """Cancel the loop and wait for it to finish. Safe to call twice."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self.simulation.off_wake(self._wake.set)
        self.simulation.detach(self)

    async def _run(self) -> None:
        simulation = self.simulation
        while True:
            if not simulation.is_active:
                self._wake.clear()
                await self._wake.wait()
                continue

            simulation.tick()
            self._notify(simulation.arena.positions())

            await asyncio.sleep(self.frame_interval)

    def _notify(self, positions: dict[str, tuple[float, float]]) -> None:
        # A failing listener must not take the loop down with it.
        for listener in self.listeners:
            try:
                listener(positions)
            except Exception:
                logger.exception(f"Tick listener {listener!r} failed")


class LayoutController:
    """
    Owns the layout of one graph view: simulation, tick loop, view transform
    and pointer gestures.
    """

    def __init__(self, config: LayoutConfig | None = None):
        """
        Initialize controller.

        Args:
            config: Layout configuration (defaults if omitted)
        """
        self.config = config or LayoutConfig()
        self.width = self.config.width
        self.height = self.config.height

        self.view = ViewTransform(self.config.min_zoom, self.config.max_zoom)
        self.simulation: ForceSimulation | None = None
        self.gesture: PointerGesture | None = None
        self.task: LayoutTask | None = None
        self.listeners: list[TickListener] = []

    @property
    def state(self) -> SimulationState:
        if self.simulation is None:
            return SimulationState.IDLE
        return self.simulation.state

    def add_tick_listener(self, listener: TickListener) -> None:
        self.listeners.append(listener)

    def build(self, graph: GraphData) -> ForceSimulation | None:
        """
        Build a simulation for a graph, keeping positions of surviving nodes.

        Returns:
            New simulation, or None for an empty graph
        """
        if graph.is_empty():
            return None

        previous = self.simulation.arena if self.simulation is not None else None
        arena = LayoutArena.from_graph(
            graph,
            collision_padding=self.config.collision_padding,
            center=(self.width / 2, self.height / 2),
            previous=previous,
        )
        config = self.config.model_copy(update={"width": self.width, "height": self.height})
        return ForceSimulation(arena, config)

    async def load(self, graph: GraphData) -> LayoutTask | None:
        """
        Replace the dataset: stop the current loop, then start a new one.

        Args:
            graph: New projection

        Returns:
            Handle of the new tick loop, or None when the graph is empty
        """
        await self.stop()

        simulation = self.build(graph)
        self.simulation = simulation
        if simulation is None:
            self.gesture = None
            logger.debug("Empty graph; layout stays idle")
            return None

        self.gesture = PointerGesture(
            simulation,
            self.view,
            threshold=self.config.drag_threshold,
            drag_alpha_target=self.config.alpha_target_drag,
        )
        self.task = LayoutTask(simulation, self.config.frame_interval, self.listeners).start()
        logger.debug(f"Layout started for {len(simulation.arena)} nodes")
        return self.task

    async def stop(self) -> None:
        """Halt the running tick loop, if any."""
        if self.gesture is not None:
            self.gesture.cancel()
        if self.task is not None:
            await self.task.stop()
            self.task = None

    def layout_headless(self, graph: GraphData) -> dict[str, tuple[float, float]]:
        """
        Run a layout to rest synchronously, without a tick loop.

        Returns:
            Final positions keyed by node ID (empty for an empty graph)
        """
        simulation = self.build(graph)
        if simulation is None:
            return {}
        simulation.run_until_settled()
        return simulation.arena.positions()

    # ═══════════════════════════════════════════════════════════
    # VIEW CONTROLS
    # ═══════════════════════════════════════════════════════════

    def resize(self, width: float, height: float) -> None:
        """Track the container size: move the center target and nudge alpha."""
        self.width = width
        self.height = height
        if self.simulation is not None:
            self.simulation.set_center(width / 2, height / 2)
            self.simulation.reheat(self.config.resize_alpha)

    def refresh(self) -> None:
        if self.simulation is not None:
            self.simulation.refresh()

    def zoom_in(self) -> None:
        self.view.scale_by(self.config.zoom_in_factor, (self.width / 2, self.height / 2))

    def zoom_out(self) -> None:
        self.view.scale_by(self.config.zoom_out_factor, (self.width / 2, self.height / 2))

    def reset_view(self) -> None:
        self.view.reset()

    def pan(self, dx: float, dy: float) -> None:
        self.view.translate_by(dx, dy)

    # ═══════════════════════════════════════════════════════════
    # POINTER EVENTS
    # ═══════════════════════════════════════════════════════════

    def pointer_down(self, target_kind: TargetKind, target_id: str, x: float, y: float) -> None:
        if self.gesture is not None:
            self.gesture.press(target_kind, target_id, x, y)

    def pointer_move(self, x: float, y: float) -> GestureEvent | None:
        if self.gesture is None:
            return None
        return self.gesture.move(x, y)

    def pointer_up(self, x: float, y: float) -> GestureEvent | None:
        if self.gesture is None:
            return None
        return self.gesture.release(x, y)
