"""
CanvasBoard — Canvas Application State
========================================

What:  The single owned state object of a canvas session: board list, the open
       board, viewport, selection, drag, loading flag and last error.
How:   Board mutations are applied to the BoardAggregate immediately, then
       mirrored to the persistence adapter. Each mutation records its own
       inverse; if the adapter raises PersistenceError only that mutation is
       undone and ``error`` is set. The exception does not propagate.
Who:   CanvasInput and any UI layer. Create one per session; there is no
       module-level instance.

Overlapping calls:
    Several adapter calls may be in flight at once. Undoing a failed one
    leaves every other local change alone, including changes made while it
    was pending.

Local-only moves:
    ``move_card`` / ``move_section`` change positions during a drag without
    persisting. The first move remembers the entity as it was at drag start.
    ``drop_card`` / ``update_section`` undo to that version on failure, and
    ``cancel_drag`` puts it back without persisting anything.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from canvasboard.canvas import geometry
from canvasboard.canvas.board import AnyCard, BoardAggregate, index_of
from canvasboard.canvas.layout import ConnectionPath, layout_connections
from canvasboard.canvas.models import (
    AnchorSide,
    Board,
    BoardSummary,
    Connection,
    Position,
    Section,
    Viewport,
)
from canvasboard.canvas.persistence import PersistenceAdapter, create_adapter
from canvasboard.canvas.selection import DragController, SelectionController
from canvasboard.canvas.viewport import ViewportController
from canvasboard.exceptions import PersistenceError, ValidationError

logger = logging.getLogger(__name__)

Undo = Callable[[], None]


class CanvasStore:
    def __init__(self, adapter: Optional[PersistenceAdapter] = None):
        self.adapter = adapter or create_adapter()
        self.boards: List[BoardSummary] = []
        self.active: Optional[BoardAggregate] = None
        self.viewport = ViewportController()
        self.selection = SelectionController()
        self.drag = DragController()
        self.is_loading = False
        self.error: Optional[str] = None
        # Entity id → the card or section as it was before its current local drag
        self._drag_start: Dict[str, Union[AnyCard, Section]] = {}

    # ── Internals ─────────────────────────────────────────────────────────

    @property
    def board(self) -> Optional[Board]:
        return self.active.board if self.active else None

    def _require_board(self) -> BoardAggregate:
        if self.active is None:
            raise ValidationError(message="No board is open", field="board")
        return self.active

    def _sync_summary(self) -> None:
        if self.active is None:
            return
        summary = self.active.board.summary()
        self.boards = [summary if s.id == summary.id else s for s in self.boards]

    async def _mirror(
        self, action: str, call: Awaitable[Any], aggregate: BoardAggregate, undo: Undo
    ) -> bool:
        """Await the adapter call; on PersistenceError run ``undo`` on ``aggregate``."""
        try:
            await call
        except PersistenceError as e:
            logger.warning("Failed to %s, reverting local change: %s", action, e.message)
            self.error = f"Failed to {action}"
            # The board may have been closed or switched while the call was pending
            if aggregate is self.active:
                undo()
                self.selection.prune(aggregate.board)
                self._sync_summary()
            return False
        self._sync_summary()
        return True

    def _card_before(self, aggregate: BoardAggregate, card_id: str) -> AnyCard:
        """The card at drag start if it is being dragged, else its current version."""
        start = self._drag_start.pop(card_id, None)
        return start if start is not None else aggregate.get_card(card_id)

    def _section_before(self, aggregate: BoardAggregate, section_id: str) -> Section:
        start = self._drag_start.pop(section_id, None)
        return start if start is not None else aggregate.get_section(section_id)

    def _reset_board_state(self) -> None:
        self.selection.clear()
        self.drag.end_drag()
        self._drag_start.clear()

    # ── Boards ────────────────────────────────────────────────────────────

    async def load_boards(self) -> List[BoardSummary]:
        self.is_loading = True
        self.error = None
        try:
            self.boards = await self.adapter.list_boards()
        except PersistenceError as e:
            logger.error("Failed to load boards: %s", e.message)
            self.error = "Failed to load boards"
        finally:
            self.is_loading = False
        return self.boards

    async def open_board(self, board_id: str) -> Optional[BoardAggregate]:
        self.is_loading = True
        self.error = None
        try:
            board = await self.adapter.get_board(board_id)
        except PersistenceError as e:
            logger.error("Failed to open board %s: %s", board_id, e.message)
            self.error = "Failed to load board"
            return None
        finally:
            self.is_loading = False

        self.active = BoardAggregate(board)
        self.viewport.load(board.viewport)
        self._reset_board_state()
        logger.info(
            "Opened board %s (%d sections, %d cards, %d connections)",
            board.id,
            len(board.sections),
            len(board.cards),
            len(board.connections),
        )
        return self.active

    def close_board(self) -> None:
        self.active = None
        self.viewport.load(Viewport())
        self._reset_board_state()

    async def create_board(
        self, name: str, description: Optional[str] = None
    ) -> Optional[Board]:
        try:
            created = await self.adapter.create_board(
                Board(name=name, description=description)
            )
        except PersistenceError as e:
            logger.error("Failed to create board: %s", e.message)
            self.error = "Failed to create board"
            return None
        self.boards.insert(0, created.summary())
        return created

    async def rename_board(self, board_id: str, name: str) -> bool:
        summary = next((s for s in self.boards if s.id == board_id), None)
        if self.active is not None and self.active.id == board_id:
            target = self.active.board
        else:
            target = Board(id=board_id, name=summary.name if summary else name)
        previous_name = summary.name if summary else target.name
        self._set_board_name(board_id, name)

        try:
            await self.adapter.update_board(target, name=name)
        except PersistenceError as e:
            logger.warning("Failed to rename board %s: %s", board_id, e.message)
            self.error = "Failed to rename board"
            self._set_board_name(board_id, previous_name)
            return False
        return True

    def _set_board_name(self, board_id: str, name: str) -> None:
        self.boards = [
            s.model_copy(update={"name": name}) if s.id == board_id else s
            for s in self.boards
        ]
        if self.active is not None and self.active.id == board_id:
            self.active.board.name = name

    async def delete_board(self, board_id: str) -> bool:
        try:
            await self.adapter.delete_board(board_id)
        except PersistenceError as e:
            logger.error("Failed to delete board %s: %s", board_id, e.message)
            self.error = "Failed to delete board"
            return False
        self.boards = [s for s in self.boards if s.id != board_id]
        if self.active is not None and self.active.id == board_id:
            self.close_board()
        return True

    async def save_viewport(self) -> bool:
        """Persist the live viewport onto the open board."""
        aggregate = self._require_board()
        viewport = self.viewport.viewport.model_copy()
        aggregate.board.viewport = viewport
        try:
            await self.adapter.update_board(aggregate.board, viewport=viewport)
        except PersistenceError as e:
            logger.warning("Failed to save viewport: %s", e.message)
            self.error = "Failed to save viewport"
            return False
        return True

    # ── Sections ──────────────────────────────────────────────────────────

    async def add_section(
        self, name: str, position: Position, **options: Any
    ) -> Optional[Section]:
        aggregate = self._require_board()
        section = aggregate.add_section(name, position, **options)
        ok = await self._mirror(
            "create section",
            self.adapter.create_section(aggregate.board, section),
            aggregate,
            lambda: aggregate.discard_section(section.id),
        )
        return section if ok else None

    def move_section(self, section_id: str, position: Position) -> Section:
        """Local-only section move during a drag."""
        aggregate = self._require_board()
        self._drag_start.setdefault(section_id, aggregate.get_section(section_id))
        return aggregate.update_section(section_id, position=position)

    async def update_section(self, section_id: str, **changes: Any) -> Optional[Section]:
        aggregate = self._require_board()
        before = self._section_before(aggregate, section_id)
        section = aggregate.update_section(section_id, **changes)
        ok = await self._mirror(
            "update section",
            self.adapter.update_section(aggregate.board, section, changes),
            aggregate,
            lambda: aggregate.replace_section(before),
        )
        return section if ok else None

    async def delete_section(self, section_id: str) -> bool:
        aggregate = self._require_board()
        self._drag_start.pop(section_id, None)
        index = index_of(aggregate.board.sections, section_id)
        section, released = aggregate.delete_section(section_id)
        member_ids = [card.id for card in released]
        self.selection.prune(aggregate.board)
        return await self._mirror(
            "delete section",
            self.adapter.delete_section(aggregate.board, section_id),
            aggregate,
            lambda: aggregate.restore_section(section, index, member_ids),
        )

    # ── Cards ─────────────────────────────────────────────────────────────

    async def add_card(self, card: Union[AnyCard, Dict[str, Any]]) -> Optional[AnyCard]:
        aggregate = self._require_board()
        created = aggregate.add_card(card)
        ok = await self._mirror(
            "create card",
            self.adapter.create_card(aggregate.board, created),
            aggregate,
            lambda: aggregate.discard_card(created.id),
        )
        return created if ok else None

    async def update_card(self, card_id: str, **changes: Any) -> Optional[AnyCard]:
        aggregate = self._require_board()
        before = aggregate.get_card(card_id)
        card = aggregate.update_card(card_id, **changes)
        ok = await self._mirror(
            "update card",
            self.adapter.update_card(aggregate.board, card),
            aggregate,
            lambda: aggregate.replace_card(before),
        )
        return card if ok else None

    def move_card(self, card_id: str, position: Position) -> AnyCard:
        """Local-only card move during a drag; persisted by drop/commit."""
        aggregate = self._require_board()
        self._drag_start.setdefault(card_id, aggregate.get_card(card_id))
        return aggregate.move_card(card_id, position)

    def cancel_drag(self, entity_id: Optional[str] = None) -> bool:
        """
        Put locally dragged entities back where their drag started.

        Only ``entity_id`` when given, otherwise every pending local move.
        Nothing is persisted. Returns True when something was put back.
        """
        if entity_id is not None:
            start = self._drag_start.pop(entity_id, None)
            pending = {entity_id: start} if start is not None else {}
        else:
            pending, self._drag_start = self._drag_start, {}
        if self.active is None:
            return False
        restored = False
        for start in pending.values():
            if isinstance(start, Section):
                restored = self.active.replace_section(start) or restored
            else:
                restored = self.active.replace_card(start) or restored
        if restored:
            logger.debug("Cancelled local drag of %s", ", ".join(pending))
        return restored

    async def commit_card_position(
        self, card_id: str, position: Optional[Position] = None
    ) -> Optional[AnyCard]:
        """Persist a card's position (its current one when ``position`` is None)."""
        aggregate = self._require_board()
        before = self._card_before(aggregate, card_id)
        target = position or aggregate.get_card(card_id).position
        card = aggregate.move_card(card_id, target)
        ok = await self._mirror(
            "save card position",
            self.adapter.update_card(aggregate.board, card),
            aggregate,
            lambda: aggregate.replace_card(before),
        )
        return card if ok else None

    async def drop_card(self, card_id: str, position: Position) -> Optional[AnyCard]:
        """Finish a card drag: commit the position and adopt the section under it."""
        aggregate = self._require_board()
        before = self._card_before(aggregate, card_id)
        card = aggregate.drop_card(card_id, position)
        ok = await self._mirror(
            "move card",
            self.adapter.update_card(aggregate.board, card),
            aggregate,
            lambda: aggregate.replace_card(before),
        )
        return card if ok else None

    async def delete_card(self, card_id: str) -> bool:
        aggregate = self._require_board()
        self._drag_start.pop(card_id, None)
        index = index_of(aggregate.board.cards, card_id)
        card, removed = aggregate.delete_card(card_id)
        self.selection.prune(aggregate.board)
        return await self._mirror(
            "delete card",
            self.adapter.delete_card(aggregate.board, card_id),
            aggregate,
            lambda: aggregate.restore_card(card, index, removed),
        )

    async def duplicate_card(self, card_id: str) -> Optional[AnyCard]:
        aggregate = self._require_board()
        copy = aggregate.duplicate_card(card_id)
        ok = await self._mirror(
            "duplicate card",
            self.adapter.create_card(aggregate.board, copy),
            aggregate,
            lambda: aggregate.discard_card(copy.id),
        )
        return copy if ok else None

    # ── Connections ───────────────────────────────────────────────────────

    async def add_connection(
        self,
        from_card_id: str,
        to_card_id: str,
        from_anchor: AnchorSide = "bottom",
        to_anchor: AnchorSide = "top",
        color: Optional[str] = None,
        label: Optional[str] = None,
    ) -> Optional[Connection]:
        """Connect two cards. Self-connections and duplicate pairs return None."""
        aggregate = self._require_board()
        connection = aggregate.add_connection(
            from_card_id, to_card_id, from_anchor, to_anchor, color=color, label=label
        )
        if connection is None:
            return None
        ok = await self._mirror(
            "create connection",
            self.adapter.create_connection(aggregate.board, connection),
            aggregate,
            lambda: aggregate.discard_connection(connection.id),
        )
        return connection if ok else None

    async def delete_connection(self, connection_id: str) -> bool:
        aggregate = self._require_board()
        index = index_of(aggregate.board.connections, connection_id)
        connection = aggregate.delete_connection(connection_id)
        self.selection.prune(aggregate.board)
        return await self._mirror(
            "delete connection",
            self.adapter.delete_connection(aggregate.board, connection_id),
            aggregate,
            lambda: aggregate.restore_connection(connection, index),
        )

    # ── Rendering ─────────────────────────────────────────────────────────

    def transform(self) -> str:
        return geometry.css_transform(self.viewport.viewport)

    def connection_paths(self) -> List[ConnectionPath]:
        if self.active is None:
            return []
        return layout_connections(self.active.board)

    async def close(self) -> None:
        await self.adapter.close()
