"""
CanvasBoard — Board Aggregate
===============================

What:  The in-memory working copy of one board. Every section, card and
       connection mutation goes through this class.
How:   Mutations validate references, apply the cascades, refresh timestamps
       and replace entities with freshly validated models.
Who:   CanvasStore (client) and LocalSnapshotPersistence.

Cascades:
    delete_section  → member cards get section_id = None (cards are kept)
    delete_card     → every connection touching the card is removed
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from pydantic import ValidationError as ModelValidationError

from canvasboard.canvas import geometry
from canvasboard.canvas.layout import CARD_HEIGHT, CARD_WIDTH
from canvasboard.canvas.models import (
    AnchorSide,
    Board,
    Bounds,
    Connection,
    ConnectionAnchor,
    LinkCard,
    MediaCard,
    Position,
    Section,
    TextCard,
    new_id,
    parse_card,
    utcnow,
)
from canvasboard.exceptions import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

DUPLICATE_OFFSET = 20.0

SECTION_FIELDS = {"name", "position", "bounds", "color", "is_collapsed"}

AnyCard = Union[TextCard, MediaCard, LinkCard]

_UNSET: Any = object()


class BoardAggregate:
    """Owns one ``Board`` and enforces its invariants."""

    def __init__(self, board: Board):
        self.board = board

    @property
    def id(self) -> str:
        return self.board.id

    # ── Lookups ───────────────────────────────────────────────────────────

    def find_card(self, card_id: str) -> Optional[AnyCard]:
        return next((c for c in self.board.cards if c.id == card_id), None)

    def get_card(self, card_id: str) -> AnyCard:
        card = self.find_card(card_id)
        if card is None:
            raise NotFoundError(resource="card", resource_id=card_id)
        return card

    def get_section(self, section_id: str) -> Section:
        for section in self.board.sections:
            if section.id == section_id:
                return section
        raise NotFoundError(resource="section", resource_id=section_id)

    def get_connection(self, connection_id: str) -> Connection:
        for connection in self.board.connections:
            if connection.id == connection_id:
                return connection
        raise NotFoundError(resource="connection", resource_id=connection_id)

    def cards_in_section(self, section_id: Optional[str]) -> List[AnyCard]:
        return [c for c in self.board.cards if c.section_id == section_id]

    def section_at(self, point: Position) -> Optional[Section]:
        """Top-most section (last in draw order) whose bounds contain the point."""
        for section in reversed(self.board.sections):
            if geometry.contains(section.bounds, point):
                return section
        return None

    def _check_section_ref(self, section_id: Optional[str]) -> None:
        if section_id is None:
            return
        if not any(s.id == section_id for s in self.board.sections):
            raise ValidationError(
                message=f"Section '{section_id}' does not belong to this board",
                field="section_id",
            )

    def _touch(self) -> None:
        self.board.updated_at = utcnow()

    # ── Sections ──────────────────────────────────────────────────────────

    def add_section(
        self,
        name: str,
        position: Position,
        width: float = 400.0,
        height: float = 300.0,
        color: Optional[str] = None,
        is_collapsed: bool = False,
        section_id: Optional[str] = None,
    ) -> Section:
        now = utcnow()
        section = Section(
            id=section_id or new_id(),
            name=name,
            position=position,
            bounds=Bounds(x=position.x, y=position.y, width=width, height=height),
            color=color,
            is_collapsed=is_collapsed,
            created_at=now,
            updated_at=now,
        )
        self.board.sections.append(section)
        self._touch()
        logger.debug("Added section %s to board %s", section.id, self.id)
        return section

    def update_section(self, section_id: str, **changes: Any) -> Section:
        """
        Shallow-merge ``changes`` into the section.

        ``position`` and ``bounds`` stay in sync: a new position moves the
        bounds origin, and new bounds without a position move the position.
        """
        unknown = set(changes) - SECTION_FIELDS
        if unknown:
            raise ValidationError(
                message=f"Unknown section fields: {sorted(unknown)}",
                field="section",
            )
        current = self.get_section(section_id)
        data = current.model_dump()
        data.update(changes)

        try:
            position = Position.model_validate(data["position"])
            bounds = Bounds.model_validate(data["bounds"])
            if "position" in changes:
                bounds = Bounds(
                    x=position.x, y=position.y, width=bounds.width, height=bounds.height
                )
            elif "bounds" in changes:
                position = bounds.origin
            data["position"] = position
            data["bounds"] = bounds
            data["updated_at"] = utcnow()
            updated = Section.model_validate(data)
        except ModelValidationError as e:
            raise ValidationError(
                message=f"Invalid section update: {e.errors()[0]['msg']}",
                field=_failed_field(e, changes),
                context={"section_id": section_id},
            )
        self.board.sections[index_of(self.board.sections, section_id)] = updated
        self._touch()
        return updated

    def delete_section(self, section_id: str) -> Tuple[Section, List[AnyCard]]:
        """Remove the section; its cards become unsectioned. Returns the released cards."""
        section = self.get_section(section_id)
        self.board.sections.remove(section)
        now = utcnow()
        released: List[AnyCard] = []
        for index, card in enumerate(self.board.cards):
            if card.section_id == section_id:
                card = card.model_copy(update={"section_id": None, "updated_at": now})
                self.board.cards[index] = card
                released.append(card)
        self._touch()
        logger.debug(
            "Deleted section %s, released %d cards", section_id, len(released)
        )
        return section, released

    # ── Cards ─────────────────────────────────────────────────────────────

    def add_card(self, card: Union[AnyCard, Dict[str, Any]]) -> AnyCard:
        """Append a card, stamping fresh timestamps (and a fresh id if absent)."""
        if isinstance(card, dict):
            card = parse_card(card)
        if self.find_card(card.id) is not None:
            raise ConflictError(message=f"Card '{card.id}' already exists on this board")
        self._check_section_ref(card.section_id)
        now = utcnow()
        card = card.model_copy(update={"created_at": now, "updated_at": now})
        self.board.cards.append(card)
        self._touch()
        return card

    def update_card(self, card_id: str, **changes: Any) -> AnyCard:
        current = self.get_card(card_id)
        if "id" in changes and changes["id"] != card_id:
            raise ValidationError(message="A card's id cannot change", field="id")
        if "type" in changes and changes["type"] != current.type:
            raise ValidationError(
                message=f"Cannot change a {current.type} card into a {changes['type']} card",
                field="type",
            )
        if "section_id" in changes:
            self._check_section_ref(changes["section_id"])

        data = current.model_dump()
        data.update(changes)
        data["updated_at"] = utcnow()
        try:
            updated = parse_card(data)
        except ModelValidationError as e:
            raise ValidationError(
                message=f"Invalid card update: {e.errors()[0]['msg']}",
                field=_failed_field(e, changes),
                context={"card_id": card_id},
            )

        self.board.cards[index_of(self.board.cards, card_id)] = updated
        self._touch()
        return updated

    def move_card(
        self, card_id: str, position: Position, section_id: Optional[str] = _UNSET
    ) -> AnyCard:
        """Reposition a card; ``section_id`` is only changed when passed explicitly."""
        changes: Dict[str, Any] = {"position": position}
        if section_id is not _UNSET:
            changes["section_id"] = section_id
        return self.update_card(card_id, **changes)

    def drop_card(self, card_id: str, position: Position) -> AnyCard:
        """
        Finish a card drag: move it and adopt the section under its center.

        Dropping outside every section un-sections the card.
        """
        target = self.section_at(geometry.center(position, CARD_WIDTH, CARD_HEIGHT))
        return self.move_card(card_id, position, target.id if target else None)

    def delete_card(self, card_id: str) -> Tuple[AnyCard, List[Connection]]:
        """Remove the card and every connection touching it."""
        card = self.get_card(card_id)
        self.board.cards.remove(card)
        removed = [c for c in self.board.connections if c.touches(card_id)]
        self.board.connections = [
            c for c in self.board.connections if not c.touches(card_id)
        ]
        self._touch()
        logger.debug(
            "Deleted card %s and %d connections", card_id, len(removed)
        )
        return card, removed

    def duplicate_card(self, card_id: str, card_copy_id: Optional[str] = None) -> AnyCard:
        """Copy a card's content into a new card offset by (+20, +20), same section."""
        source = self.get_card(card_id)
        now = utcnow()
        copy = source.model_copy(
            update={
                "id": card_copy_id or new_id(),
                "position": geometry.offset(source.position, DUPLICATE_OFFSET, DUPLICATE_OFFSET),
                "created_at": now,
                "updated_at": now,
            }
        )
        self.board.cards.append(copy)
        self._touch()
        return copy

    # ── Connections ───────────────────────────────────────────────────────

    def find_connection_between(self, card_a: str, card_b: str) -> Optional[Connection]:
        pair = frozenset((card_a, card_b))
        return next((c for c in self.board.connections if c.card_pair == pair), None)

    def add_connection(
        self,
        from_card_id: str,
        to_card_id: str,
        from_anchor: AnchorSide = "bottom",
        to_anchor: AnchorSide = "top",
        color: Optional[str] = None,
        label: Optional[str] = None,
        connection_id: Optional[str] = None,
    ) -> Optional[Connection]:
        """
        Connect two cards.

        Returns None without changing anything for a self-connection or when
        the unordered pair is already connected. Unknown cards raise
        NotFoundError.
        """
        if from_card_id == to_card_id:
            logger.debug("Ignoring self-connection on card %s", from_card_id)
            return None
        self.get_card(from_card_id)
        self.get_card(to_card_id)
        if self.find_connection_between(from_card_id, to_card_id) is not None:
            logger.debug(
                "Cards %s and %s are already connected", from_card_id, to_card_id
            )
            return None

        connection = Connection(
            id=connection_id or new_id(),
            from_=ConnectionAnchor(card_id=from_card_id, position=from_anchor),
            to=ConnectionAnchor(card_id=to_card_id, position=to_anchor),
            color=color,
            label=label,
        )
        self.board.connections.append(connection)
        self._touch()
        return connection

    def delete_connection(self, connection_id: str) -> Connection:
        connection = self.get_connection(connection_id)
        self.board.connections.remove(connection)
        self._touch()
        return connection

    # ── Undo ──────────────────────────────────────────────────────────────
    # Inverses of single mutations. They roll back one failed remote call
    # without touching anything that happened after it.

    def replace_section(self, section: Section) -> bool:
        """Put back an earlier version of a section that still exists."""
        if not any(s.id == section.id for s in self.board.sections):
            return False
        self.board.sections[index_of(self.board.sections, section.id)] = section
        self._touch()
        return True

    def restore_section(
        self, section: Section, index: int, member_ids: Iterable[str] = ()
    ) -> None:
        """Re-insert a deleted section and re-attach its former, still unsectioned cards."""
        if any(s.id == section.id for s in self.board.sections):
            return
        self.board.sections.insert(min(index, len(self.board.sections)), section)
        members = set(member_ids)
        for i, card in enumerate(self.board.cards):
            if card.id in members and card.section_id is None:
                self.board.cards[i] = card.model_copy(update={"section_id": section.id})
        self._touch()

    def discard_section(self, section_id: str) -> None:
        if any(s.id == section_id for s in self.board.sections):
            self.delete_section(section_id)

    def replace_card(self, card: AnyCard) -> bool:
        """Put back an earlier version of a card that still exists."""
        if self.find_card(card.id) is None:
            return False
        self.board.cards[index_of(self.board.cards, card.id)] = self._attachable(card)
        self._touch()
        return True

    def restore_card(
        self, card: AnyCard, index: int, connections: Iterable[Connection] = ()
    ) -> None:
        """Re-insert a deleted card together with the connections removed with it."""
        if self.find_card(card.id) is not None:
            return
        self.board.cards.insert(min(index, len(self.board.cards)), self._attachable(card))
        for connection in connections:
            self.restore_connection(connection, len(self.board.connections))
        self._touch()

    def discard_card(self, card_id: str) -> None:
        if self.find_card(card_id) is not None:
            self.delete_card(card_id)

    def restore_connection(self, connection: Connection, index: int) -> None:
        """Re-insert a connection if both cards exist and the pair is still free."""
        if any(c.id == connection.id for c in self.board.connections):
            return
        if self.find_card(connection.from_.card_id) is None:
            return
        if self.find_card(connection.to.card_id) is None:
            return
        if self.find_connection_between(connection.from_.card_id, connection.to.card_id):
            return
        self.board.connections.insert(min(index, len(self.board.connections)), connection)
        self._touch()

    def discard_connection(self, connection_id: str) -> None:
        if any(c.id == connection_id for c in self.board.connections):
            self.delete_connection(connection_id)

    def _attachable(self, card: AnyCard) -> AnyCard:
        """The card, un-sectioned if its section has since been deleted."""
        if card.section_id is None or any(s.id == card.section_id for s in self.board.sections):
            return card
        return card.model_copy(update={"section_id": None})


def index_of(items: List[Any], entity_id: str) -> int:
    """Position of the entity with ``entity_id`` in a board list."""
    for index, item in enumerate(items):
        if item.id == entity_id:
            return index
    raise NotFoundError(resource="entity", resource_id=entity_id)


def _failed_field(error: ModelValidationError, changes: Dict[str, Any]) -> str:
    """Name of the changed field a model validation error points at."""
    # Card errors are prefixed with the union tag, e.g. ("media", "image_url")
    for part in error.errors()[0]["loc"]:
        if part in changes:
            return str(part)
    # Position/Bounds errors report the inner field (``width``), not ``bounds``
    for name in ("bounds", "position"):
        if name in changes:
            return name
    return next(iter(changes), "")
