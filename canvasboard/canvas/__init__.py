"""
CanvasBoard canvas core: the client-side interaction model of a board.

Geometry, viewport, selection/drag, the board aggregate, connection layout,
persistence adapters, the CanvasStore and its input bindings.
"""

from canvasboard.canvas.board import BoardAggregate
from canvasboard.canvas.input import CanvasInput, KeyEvent, PointerEvent, WheelEvent
from canvasboard.canvas.store import CanvasStore

__all__ = [
    "BoardAggregate",
    "CanvasInput",
    "CanvasStore",
    "KeyEvent",
    "PointerEvent",
    "WheelEvent",
]
