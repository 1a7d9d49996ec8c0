"""
User interaction: view transform (zoom/pan) and pointer gestures (click vs drag).

The view transform never touches the simulation; it maps between screen
and world coordinates. Gestures turn raw pointer events into click or drag
events, using a movement threshold so a click never starts a drag.
"""

import math
from enum import Enum

from pydantic import BaseModel

from connectgraph.core.layout.simulation import ForceSimulation


class ViewTransform:
    """Scale + translation applied to the rendered container."""

    def __init__(self, min_scale: float = 0.3, max_scale: float = 3.0):
        self.min_scale = min_scale
        self.max_scale = max_scale
        self.k = 1.0
        self.x = 0.0
        self.y = 0.0

    def clamp(self, scale: float) -> float:
        return max(self.min_scale, min(scale, self.max_scale))

    def scale_to(self, scale: float, anchor: tuple[float, float] = (0.0, 0.0)) -> None:
        """
        Set the scale, keeping the world point under `anchor` fixed on screen.

        Args:
            scale: Requested scale, clamped to [min_scale, max_scale]
            anchor: Screen point that stays put
        """
        world_x, world_y = self.invert(anchor)
        self.k = self.clamp(scale)
        self.x = anchor[0] - world_x * self.k
        self.y = anchor[1] - world_y * self.k

    def scale_by(self, factor: float, anchor: tuple[float, float] = (0.0, 0.0)) -> None:
        self.scale_to(self.k * factor, anchor)

    def translate_by(self, dx: float, dy: float) -> None:
        """Pan by a screen-space offset."""
        self.x += dx
        self.y += dy

    def reset(self) -> None:
        self.k = 1.0
        self.x = 0.0
        self.y = 0.0

    def apply(self, point: tuple[float, float]) -> tuple[float, float]:
        """World -> screen."""
        return point[0] * self.k + self.x, point[1] * self.k + self.y

    def invert(self, point: tuple[float, float]) -> tuple[float, float]:
        """Screen -> world."""
        return (point[0] - self.x) / self.k, (point[1] - self.y) / self.k

    def to_dict(self) -> dict[str, float]:
        return {"k": self.k, "x": self.x, "y": self.y}


class TargetKind(str, Enum):
    NODE = "node"
    EDGE = "edge"


class GestureKind(str, Enum):
    CLICK = "click"
    DRAG_START = "drag_start"
    DRAG = "drag"
    DRAG_END = "drag_end"


class GestureEvent(BaseModel):
    """Interpreted pointer event handed back to the UI."""

    kind: GestureKind
    target_kind: TargetKind
    target_id: str
    x: float
    y: float


class PointerGesture:
    """
    Disambiguates click from drag for a single pointer.

    A press on a node becomes a drag only once the pointer has moved more
    than `threshold` screen pixels. Dragging pins the node at the pointer's
    world position and raises the simulation's alpha target so neighbours
    react; releasing unpins it and lets alpha decay. Edges are never dragged.
    """

    def __init__(
        self,
        simulation: ForceSimulation,
        view: ViewTransform,
        threshold: float = 3.0,
        drag_alpha_target: float = 0.3,
    ):
        self.simulation = simulation
        self.view = view
        self.threshold = threshold
        self.drag_alpha_target = drag_alpha_target

        self._target: tuple[TargetKind, str] | None = None
        self._origin: tuple[float, float] | None = None
        self.dragging = False

    @property
    def pressed(self) -> bool:
        return self._target is not None

    def press(self, target_kind: TargetKind, target_id: str, x: float, y: float) -> None:
        """Pointer down on a node or edge at screen (x, y)."""
        self._target = (TargetKind(target_kind), target_id)
        self._origin = (x, y)
        self.dragging = False

    def move(self, x: float, y: float) -> GestureEvent | None:
        """
        Pointer moved to screen (x, y).

        Returns:
            DRAG_START when the threshold is first crossed on a node, DRAG
            afterwards, None while still within the click threshold
        """
        if self._target is None:
            return None
        kind, target_id = self._target
        if kind != TargetKind.NODE:
            return None

        if not self.dragging:
            ox, oy = self._origin
            if math.hypot(x - ox, y - oy) <= self.threshold:
                return None
            self.dragging = True
            self._pin(target_id, x, y)
            self.simulation.set_alpha_target(self.drag_alpha_target)
            return self._event(GestureKind.DRAG_START, x, y)

        self._pin(target_id, x, y)
        return self._event(GestureKind.DRAG, x, y)

    def release(self, x: float, y: float) -> GestureEvent | None:
        """
        Pointer up at screen (x, y).

        Returns:
            DRAG_END after a drag, CLICK otherwise, None without a press
        """
        if self._target is None:
            return None

        if self.dragging:
            _, target_id = self._target
            index = self.simulation.arena.index.get(target_id)
            if index is not None:
                self.simulation.arena.unpin(index)
            self.simulation.set_alpha_target(0.0)
            event = self._event(GestureKind.DRAG_END, x, y)
        else:
            event = self._event(GestureKind.CLICK, x, y)

        self._target = None
        self._origin = None
        self.dragging = False
        return event

    def cancel(self) -> None:
        """Abort the gesture, unpinning any dragged node."""
        if self._target is not None and self.dragging:
            index = self.simulation.arena.index.get(self._target[1])
            if index is not None:
                self.simulation.arena.unpin(index)
            self.simulation.set_alpha_target(0.0)
        self._target = None
        self._origin = None
        self.dragging = False

    def _pin(self, node_id: str, x: float, y: float) -> None:
        index = self.simulation.arena.index.get(node_id)
        if index is None:
            return
        world_x, world_y = self.view.invert((x, y))
        self.simulation.arena.pin(index, world_x, world_y)

    def _event(self, kind: GestureKind, x: float, y: float) -> GestureEvent:
        target_kind, target_id = self._target
        return GestureEvent(kind=kind, target_kind=target_kind, target_id=target_id, x=x, y=y)
