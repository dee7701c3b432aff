"""
CanvasBoard — Card Service
============================

What:  Place, update and remove cards on a board.
How:   Creating a card also creates the note it displays, unless the request
       names an existing ``noteId``. Updates write position and section to the
       card row and content fields through to the note.
Who:   Card routes.

Invariants enforced here:
    - a card's section must belong to the card's board (400 otherwise)
    - deleting a card deletes every connection that touches it
    - the note survives the card (notes are a shared library)
"""

import logging
import uuid
from typing import Optional

from sqlalchemy import delete, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from canvasboard.exceptions import ConflictError, DatabaseError, NotFoundError, ValidationError
from canvasboard.models import Card, Connection, Note, Section
from canvasboard.models.base import utcnow
from canvasboard.models.note import DEFAULT_NOTE_TITLE
from canvasboard.schemas.card import CardCreate, CardResponse, CardUpdate
from canvasboard.services.board_service import require_board, touch_board

logger = logging.getLogger(__name__)

NOTE_FIELDS = ("title", "content", "tags", "color")
VARIANT_FIELDS = ("image_url", "caption", "url", "description", "favicon", "preview_image")


class CardService:
    async def _get(self, db: AsyncSession, card_id: uuid.UUID) -> Card:
        card = await db.get(Card, card_id)
        if card is None:
            raise NotFoundError(resource="card", resource_id=str(card_id))
        return card

    async def _check_section(
        self, db: AsyncSession, board_id: uuid.UUID, section_id: Optional[uuid.UUID]
    ) -> None:
        if section_id is None:
            return
        section = await db.get(Section, section_id)
        if section is None or section.board_id != board_id:
            raise ValidationError(
                message="The section does not belong to this board",
                field="sectionId",
                context={"section_id": str(section_id), "board_id": str(board_id)},
            )

    async def create_card(self, db: AsyncSession, data: CardCreate) -> CardResponse:
        try:
            await require_board(db, data.board_id)
            await self._check_section(db, data.board_id, data.section_id)
            if data.id is not None and await db.get(Card, data.id) is not None:
                raise ConflictError(message=f"Card '{data.id}' already exists")

            if data.note_id is not None:
                note = await db.get(Note, data.note_id)
                if note is None:
                    raise NotFoundError(resource="note", resource_id=str(data.note_id))
            else:
                # Text cards get the library's default title; media/link keep theirs
                default_title = DEFAULT_NOTE_TITLE if data.kind == "text" else ""
                note = Note(
                    title=data.title if data.title is not None else default_title,
                    content=data.content or "",
                    tags=list(data.tags or []),
                    color=data.color,
                )
                db.add(note)
                await db.flush()

            card = Card(
                board_id=data.board_id,
                section_id=data.section_id,
                note_id=note.id,
                kind=data.kind,
                pos_x=data.pos_x,
                pos_y=data.pos_y,
                **{field: getattr(data, field) for field in VARIANT_FIELDS},
            )
            if data.id is not None:
                card.id = data.id
            card.note = note
            db.add(card)
            await db.flush()
            await touch_board(db, data.board_id)
            logger.info("Card created: %s (%s) on board %s", card.id, card.kind, data.board_id)
            return CardResponse.model_validate(card)
        except SQLAlchemyError as e:
            logger.error("Database error creating card: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the card. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def update_card(
        self, db: AsyncSession, card_id: uuid.UUID, data: CardUpdate
    ) -> CardResponse:
        """
        Partial update.

        Position fields are applied when present and non-null. ``section_id``
        is applied whenever present, so an explicit null un-sections the card.
        Content fields present in the body are written to the note (title,
        content, tags, color) or the card row (variant fields).
        """
        try:
            card = await self._get(db, card_id)
            present = data.model_fields_set

            if data.pos_x is not None:
                card.pos_x = data.pos_x
            if data.pos_y is not None:
                card.pos_y = data.pos_y
            if "section_id" in present:
                await self._check_section(db, card.board_id, data.section_id)
                card.section_id = data.section_id

            note = card.note
            for field in NOTE_FIELDS:
                if field not in present:
                    continue
                value = getattr(data, field)
                if field == "tags":
                    value = list(value or [])
                elif field in ("title", "content") and value is None:
                    value = ""
                setattr(note, field, value)
            if any(field in present for field in NOTE_FIELDS):
                note.updated_at = utcnow()

            for field in VARIANT_FIELDS:
                if field in present:
                    setattr(card, field, getattr(data, field))

            card.updated_at = utcnow()
            await db.flush()
            await touch_board(db, card.board_id)
            return CardResponse.model_validate(card)
        except SQLAlchemyError as e:
            logger.error("Database error updating card %s: %s", card_id, str(e))
            raise DatabaseError(
                message="Could not update the card. Please try again.",
                context={"card_id": str(card_id)},
            )

    async def delete_card(self, db: AsyncSession, card_id: uuid.UUID) -> None:
        try:
            card = await self._get(db, card_id)
            board_id = card.board_id
            result = await db.execute(
                delete(Connection).where(
                    or_(Connection.from_card_id == card_id, Connection.to_card_id == card_id)
                )
            )
            await db.delete(card)
            await db.flush()
            await touch_board(db, board_id)
            logger.info("Card deleted: %s (%d connections removed)", card_id, result.rowcount)
        except SQLAlchemyError as e:
            logger.error("Database error deleting card %s: %s", card_id, str(e))
            raise DatabaseError(
                message="Could not delete the card. Please try again.",
                context={"card_id": str(card_id)},
            )


card_service = CardService()
