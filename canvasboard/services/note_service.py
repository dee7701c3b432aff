"""
CanvasBoard — Note Service
============================

What:  The standalone note library: list and create notes.
Who:   Note routes. CardService creates notes itself when placing a new card.
"""

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from canvasboard.exceptions import ConflictError, DatabaseError
from canvasboard.models import Note
from canvasboard.schemas.note import NoteCreate, NoteResponse

logger = logging.getLogger(__name__)


class NoteService:
    async def list_notes(self, db: AsyncSession) -> List[NoteResponse]:
        """All notes, most recently updated first."""
        try:
            result = await db.execute(select(Note).order_by(Note.updated_at.desc()))
            return [NoteResponse.model_validate(note) for note in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error("Database error listing notes: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve notes. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def create_note(self, db: AsyncSession, data: NoteCreate) -> NoteResponse:
        try:
            if data.id is not None and await db.get(Note, data.id) is not None:
                raise ConflictError(message=f"Note '{data.id}' already exists")
            note = Note(
                title=data.title,
                content=data.content,
                tags=list(data.tags),
                color=data.color,
            )
            if data.id is not None:
                note.id = data.id
            db.add(note)
            await db.flush()
            logger.info("Note created: %s", note.id)
            return NoteResponse.model_validate(note)
        except SQLAlchemyError as e:
            logger.error("Database error creating note: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the note. Please try again.",
                context={"error_type": type(e).__name__},
            )


note_service = NoteService()
