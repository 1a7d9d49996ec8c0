"""Force-directed layout engine."""

from .arena import LayoutArena
from .forces import CenterForce, CollideForce, Force, LinkForce, ManyBodyForce, link_distance
from .interaction import (
    GestureEvent,
    GestureKind,
    PointerGesture,
    TargetKind,
    ViewTransform,
)
from .runner import LayoutController, LayoutTask
from .simulation import ForceSimulation, SimulationState

__all__ = [
    "LayoutArena",
    "Force",
    "ManyBodyForce",
    "LinkForce",
    "CenterForce",
    "CollideForce",
    "link_distance",
    "ForceSimulation",
    "SimulationState",
    "ViewTransform",
    "PointerGesture",
    "GestureEvent",
    "GestureKind",
    "TargetKind",
    "LayoutTask",
    "LayoutController",
]
