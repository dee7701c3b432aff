"""
CanvasBoard — Input Bindings
==============================

What:  Translates keyboard, wheel and pointer events into viewport, selection,
       drag and store operations.
How:   Events are plain frozen dataclasses in screen coordinates; a renderer
       builds them from whatever its toolkit delivers. Drags move entities
       locally in world space and commit once, when the gesture ends.

Key map (only while a board is open):
    +  or  =        zoom in
    -               zoom out
    Ctrl/Cmd + 0    reset zoom and pan
    Escape          clear selection, cancel any drag back to where it started,
                    end any pan
"""

import logging
from dataclasses import dataclass
from typing import Literal, Optional

from canvasboard.canvas import geometry
from canvasboard.canvas.models import Position
from canvasboard.canvas.store import CanvasStore

logger = logging.getLogger(__name__)

PointerTarget = Literal["card", "section", "connection"]


@dataclass(frozen=True)
class KeyEvent:
    key: str
    ctrl: bool = False
    meta: bool = False
    shift: bool = False


@dataclass(frozen=True)
class WheelEvent:
    delta_x: float
    delta_y: float
    ctrl: bool = False
    meta: bool = False


@dataclass(frozen=True)
class PointerEvent:
    """Pointer position in screen pixels plus what was under it (None = background)."""

    x: float
    y: float
    target: Optional[PointerTarget] = None
    target_id: Optional[str] = None
    shift: bool = False

    @property
    def point(self) -> Position:
        return Position(x=self.x, y=self.y)


class CanvasInput:
    def __init__(self, store: CanvasStore):
        self.store = store
        # World position of the dragged entity when the drag started
        self._drag_origin: Optional[Position] = None

    @property
    def _board_open(self) -> bool:
        return self.store.active is not None

    # ── Keyboard & wheel ──────────────────────────────────────────────────

    def handle_key(self, event: KeyEvent) -> bool:
        """Apply a key press. Returns True when the key was consumed."""
        if not self._board_open:
            return False
        viewport = self.store.viewport
        if event.key in ("+", "="):
            viewport.zoom_in()
        elif event.key == "-":
            viewport.zoom_out()
        elif event.key == "0" and (event.ctrl or event.meta):
            viewport.reset_zoom()
        elif event.key == "Escape":
            self.store.selection.clear()
            self._cancel_drag()
            viewport.end_pan()
        else:
            return False
        return True

    def handle_wheel(self, event: WheelEvent) -> bool:
        if not self._board_open:
            return False
        self.store.viewport.handle_wheel(
            event.delta_x, event.delta_y, modifier=event.ctrl or event.meta
        )
        return True

    # ── Pointer ───────────────────────────────────────────────────────────

    def pointer_down(self, event: PointerEvent) -> None:
        if not self._board_open:
            return
        store = self.store
        # A press ends whatever drag never saw its release
        self._cancel_drag()
        if event.target is None or event.target_id is None:
            store.selection.clear()
            store.viewport.begin_pan(event.point)
            return

        if event.target == "connection":
            store.selection.select_connection(event.target_id, additive=event.shift)
            return

        if event.target == "card":
            selected = store.selection.select_card(event.target_id, additive=event.shift).card_ids
            origin = store.active.get_card(event.target_id).position
        else:
            selected = store.selection.select_section(event.target_id, additive=event.shift).section_ids
            origin = store.active.get_section(event.target_id).position
        # Shift-click that toggled the entity off the selection does not drag it
        if event.target_id not in selected:
            return
        store.drag.start_drag(event.target, event.target_id, event.point)
        self._drag_origin = origin

    def pointer_move(self, event: PointerEvent) -> None:
        store = self.store
        if store.viewport.is_panning:
            store.viewport.update_pan(event.point)
            return
        state = store.drag.update_drag(event.point)
        if state is None or self._drag_origin is None:
            return
        target = self._dragged_position()
        if state.kind == "card":
            store.move_card(state.entity_id, target)
        elif state.kind == "section":
            store.move_section(state.entity_id, target)

    async def pointer_up(self, event: Optional[PointerEvent] = None) -> None:
        """End the current gesture, committing a moved card or section."""
        store = self.store
        if store.viewport.is_panning:
            store.viewport.end_pan()
            return
        if event is not None and store.drag.is_dragging:
            store.drag.update_drag(event.point)

        origin = self._drag_origin
        target = self._dragged_position()
        state = store.drag.end_drag()
        self._drag_origin = None
        if state is None or origin is None or target is None:
            return
        if state.delta.x == 0 and state.delta.y == 0:
            store.cancel_drag(state.entity_id)
            return

        logger.debug("Committing %s %s at (%.1f, %.1f)", state.kind, state.entity_id, target.x, target.y)
        if state.kind == "card":
            await store.drop_card(state.entity_id, target)
        elif state.kind == "section":
            await store.update_section(state.entity_id, position=target)

    async def pointer_leave(self) -> None:
        await self.pointer_up()

    async def blur(self) -> None:
        await self.pointer_up()

    def _cancel_drag(self) -> None:
        """Drop the active drag and put its entity back at the drag-start position."""
        state = self.store.drag.end_drag()
        self._drag_origin = None
        if state is not None:
            self.store.cancel_drag(state.entity_id)

    def _dragged_position(self) -> Optional[Position]:
        """Entity origin plus the drag's screen delta converted to world units."""
        state = self.store.drag.state
        if state is None or self._drag_origin is None:
            return None
        delta = geometry.screen_delta_to_world(
            state.delta.x, state.delta.y, self.store.viewport.viewport
        )
        return geometry.offset(self._drag_origin, delta.x, delta.y)
