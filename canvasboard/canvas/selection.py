"""
CanvasBoard — Selection & Drag Controller
===========================================

What:  Tracks which cards, sections and connections are selected, and which
       single entity (if any) is being dragged.
How:   Plain clicks replace the selection; modifier-clicks toggle membership
       within one set. Drag state is exclusive: at most one entity at a time.
Who:   Driven by CanvasInput; read by the store and renderers.

The drag controller only records positions. Committing a dragged position to
the board is the caller's job, so ending a drag never persists anything.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Set

from canvasboard.canvas.models import Board, DragKind, Position

logger = logging.getLogger(__name__)


@dataclass
class Selection:
    card_ids: Set[str] = field(default_factory=set)
    section_ids: Set[str] = field(default_factory=set)
    connection_ids: Set[str] = field(default_factory=set)

    @property
    def is_empty(self) -> bool:
        return not (self.card_ids or self.section_ids or self.connection_ids)


class SelectionController:
    """Click/modifier-click selection semantics over three disjoint id sets."""

    def __init__(self):
        self.selection = Selection()

    def select_card(self, card_id: str, additive: bool = False) -> Selection:
        if additive:
            _toggle(self.selection.card_ids, card_id)
        else:
            self.selection = Selection(card_ids={card_id})
        return self.selection

    def select_section(self, section_id: str, additive: bool = False) -> Selection:
        if additive:
            _toggle(self.selection.section_ids, section_id)
        else:
            self.selection = Selection(section_ids={section_id})
        return self.selection

    def select_connection(self, connection_id: str, additive: bool = False) -> Selection:
        if additive:
            _toggle(self.selection.connection_ids, connection_id)
        else:
            self.selection = Selection(connection_ids={connection_id})
        return self.selection

    def clear(self) -> Selection:
        self.selection = Selection()
        return self.selection

    def prune(self, board: Optional[Board]) -> Selection:
        """Drop selected ids that no longer exist on the board."""
        if board is None:
            return self.clear()
        # The board is the source of truth; selection never outlives an entity
        self.selection.card_ids &= {c.id for c in board.cards}
        self.selection.section_ids &= {s.id for s in board.sections}
        self.selection.connection_ids &= {c.id for c in board.connections}
        return self.selection


def _toggle(target: Set[str], entity_id: str) -> None:
    if entity_id in target:
        target.discard(entity_id)
    else:
        target.add(entity_id)


@dataclass(frozen=True)
class DragState:
    kind: DragKind
    entity_id: str
    start: Position
    current: Position

    @property
    def delta(self) -> Position:
        return Position(x=self.current.x - self.start.x, y=self.current.y - self.start.y)


class DragController:
    """Single-entity drag tracking. ``state`` is None while idle."""

    def __init__(self):
        self.state: Optional[DragState] = None

    @property
    def is_dragging(self) -> bool:
        return self.state is not None

    def start_drag(self, kind: DragKind, entity_id: str, start: Position) -> DragState:
        if self.state is not None:
            logger.debug(
                "Ending stale %s drag of %s before starting a new one",
                self.state.kind,
                self.state.entity_id,
            )
            self.end_drag()
        self.state = DragState(kind=kind, entity_id=entity_id, start=start, current=start)
        return self.state

    def update_drag(self, position: Position) -> Optional[DragState]:
        if self.state is None:
            return None
        self.state = DragState(
            kind=self.state.kind,
            entity_id=self.state.entity_id,
            start=self.state.start,
            current=position,
        )
        return self.state

    def end_drag(self) -> Optional[DragState]:
        """Clear the drag, returning the final state so the caller can commit it."""
        finished, self.state = self.state, None
        return finished
