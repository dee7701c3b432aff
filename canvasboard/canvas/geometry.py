"""
CanvasBoard — Screen/World Coordinate Mapping
===============================================

What:  Pure functions relating world-space (where cards and sections live) to
       screen-space (rendered pixels) for a given viewport.
How:   screen = world * zoom + pan, and its inverse world = (screen - pan) / zoom.
       Rendering applies ``css_transform`` once to a container so children can
       keep world coordinates.
"""

import math

from canvasboard.canvas.models import Bounds, Position, Viewport


def to_screen(point: Position, viewport: Viewport) -> Position:
    return Position(
        x=point.x * viewport.zoom + viewport.pan_x,
        y=point.y * viewport.zoom + viewport.pan_y,
    )


def to_world(point: Position, viewport: Viewport) -> Position:
    return Position(
        x=(point.x - viewport.pan_x) / viewport.zoom,
        y=(point.y - viewport.pan_y) / viewport.zoom,
    )


def screen_delta_to_world(dx: float, dy: float, viewport: Viewport) -> Position:
    """Convert a pointer movement (pixels) into a world-space displacement."""
    return Position(x=dx / viewport.zoom, y=dy / viewport.zoom)


def css_transform(viewport: Viewport) -> str:
    """Combined translate+scale transform for the world container."""
    return f"translate({viewport.pan_x}px, {viewport.pan_y}px) scale({viewport.zoom})"


def offset(point: Position, dx: float, dy: float) -> Position:
    return Position(x=point.x + dx, y=point.y + dy)


def distance(a: Position, b: Position) -> float:
    return math.hypot(b.x - a.x, b.y - a.y)


def center(origin: Position, width: float, height: float) -> Position:
    return Position(x=origin.x + width / 2, y=origin.y + height / 2)


def contains(bounds: Bounds, point: Position) -> bool:
    """Inclusive containment test of a point against an axis-aligned box."""
    return (
        bounds.x <= point.x <= bounds.x + bounds.width
        and bounds.y <= point.y <= bounds.y + bounds.height
    )
