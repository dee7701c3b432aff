"""
CanvasBoard — Viewport Controller
===================================

What:  Owns the zoom level and pan offset of the open board and turns wheel and
       background-drag gestures into viewport changes.
How:   Every write goes through the ``Viewport`` model, whose validator clamps
       zoom into [MIN_ZOOM, MAX_ZOOM]; stepped and direct writes are treated
       the same way.
When:  Purely local state. Persisting the viewport is an explicit store call
       (``CanvasStore.save_viewport``).
"""

import logging
from typing import Optional

from canvasboard.canvas.models import Position, Viewport, ZOOM_STEP

logger = logging.getLogger(__name__)


class ViewportController:
    """Zoom/pan state with stepped zoom, wheel handling and background panning."""

    def __init__(self, viewport: Optional[Viewport] = None):
        self.viewport = viewport.model_copy() if viewport else Viewport()
        # Screen point minus pan at pan start; None when not panning
        self._pan_anchor: Optional[Position] = None

    # ── Direct writes ─────────────────────────────────────────────────────

    @property
    def zoom(self) -> float:
        return self.viewport.zoom

    def load(self, viewport: Viewport) -> None:
        """Replace the state wholesale (board opened)."""
        self.viewport = viewport.model_copy()
        self._pan_anchor = None

    def set_viewport(
        self,
        zoom: Optional[float] = None,
        pan_x: Optional[float] = None,
        pan_y: Optional[float] = None,
    ) -> Viewport:
        """Merge the given fields into the current viewport."""
        if zoom is not None:
            self.viewport.zoom = zoom
        if pan_x is not None:
            self.viewport.pan_x = pan_x
        if pan_y is not None:
            self.viewport.pan_y = pan_y
        return self.viewport

    # ── Stepped zoom ──────────────────────────────────────────────────────

    def zoom_in(self) -> float:
        self.viewport.zoom = self.viewport.zoom + ZOOM_STEP
        return self.viewport.zoom

    def zoom_out(self) -> float:
        self.viewport.zoom = self.viewport.zoom - ZOOM_STEP
        return self.viewport.zoom

    def reset_zoom(self) -> Viewport:
        """Back to 100% at the origin (zoom and pan reset together)."""
        return self.set_viewport(zoom=1.0, pan_x=0.0, pan_y=0.0)

    # ── Gestures ──────────────────────────────────────────────────────────

    def handle_wheel(self, delta_x: float, delta_y: float, modifier: bool = False) -> Viewport:
        """
        Apply one wheel event.

        With the zoom modifier held, scrolling up (negative delta_y) zooms in by
        one step and scrolling down zooms out. Without it, the content scrolls:
        the pan moves opposite to the wheel delta.
        """
        if modifier:
            if delta_y > 0:
                self.zoom_out()
            elif delta_y < 0:
                self.zoom_in()
            return self.viewport
        return self.set_viewport(
            pan_x=self.viewport.pan_x - delta_x,
            pan_y=self.viewport.pan_y - delta_y,
        )

    @property
    def is_panning(self) -> bool:
        return self._pan_anchor is not None

    def begin_pan(self, screen_point: Position) -> None:
        self._pan_anchor = Position(
            x=screen_point.x - self.viewport.pan_x,
            y=screen_point.y - self.viewport.pan_y,
        )

    def update_pan(self, screen_point: Position) -> Viewport:
        if self._pan_anchor is None:
            return self.viewport
        return self.set_viewport(
            pan_x=screen_point.x - self._pan_anchor.x,
            pan_y=screen_point.y - self._pan_anchor.y,
        )

    def end_pan(self) -> None:
        if self._pan_anchor is not None:
            logger.debug(
                "Pan ended at (%.1f, %.1f)", self.viewport.pan_x, self.viewport.pan_y
            )
        self._pan_anchor = None
