"""
CanvasBoard — Section Service
===============================

What:  Create, partially update and delete sections.
How:   Deleting a section first un-sections its cards (section_id = NULL) in
       the same transaction, then removes the section row.
"""

import logging
import uuid

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from canvasboard.exceptions import ConflictError, DatabaseError, NotFoundError
from canvasboard.models import Card, Section
from canvasboard.models.base import utcnow
from canvasboard.schemas.section import SectionCreate, SectionResponse, SectionUpdate
from canvasboard.services.board_service import require_board, touch_board

logger = logging.getLogger(__name__)

# Columns that cannot be NULL; an explicit null for them is ignored
_REQUIRED_FIELDS = {"name", "pos_x", "pos_y", "width", "height", "is_collapsed"}


class SectionService:
    async def _get(self, db: AsyncSession, section_id: uuid.UUID) -> Section:
        section = await db.get(Section, section_id)
        if section is None:
            raise NotFoundError(resource="section", resource_id=str(section_id))
        return section

    async def create_section(self, db: AsyncSession, data: SectionCreate) -> SectionResponse:
        try:
            await require_board(db, data.board_id)
            if data.id is not None and await db.get(Section, data.id) is not None:
                raise ConflictError(message=f"Section '{data.id}' already exists")
            section = Section(**data.model_dump(exclude={"id"}))
            if data.id is not None:
                section.id = data.id
            db.add(section)
            await db.flush()
            await touch_board(db, data.board_id)
            logger.info("Section created: %s on board %s", section.id, data.board_id)
            return SectionResponse.model_validate(section)
        except SQLAlchemyError as e:
            logger.error("Database error creating section: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the section. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def update_section(
        self, db: AsyncSession, section_id: uuid.UUID, data: SectionUpdate
    ) -> SectionResponse:
        """Apply only the fields present in the request body."""
        try:
            section = await self._get(db, section_id)
            for field, value in data.model_dump(exclude_unset=True).items():
                if value is None and field in _REQUIRED_FIELDS:
                    continue
                setattr(section, field, value)
            section.updated_at = utcnow()
            await db.flush()
            await touch_board(db, section.board_id)
            return SectionResponse.model_validate(section)
        except SQLAlchemyError as e:
            logger.error("Database error updating section %s: %s", section_id, str(e))
            raise DatabaseError(
                message="Could not update the section. Please try again.",
                context={"section_id": str(section_id)},
            )

    async def delete_section(self, db: AsyncSession, section_id: uuid.UUID) -> None:
        try:
            section = await self._get(db, section_id)
            board_id = section.board_id
            result = await db.execute(
                update(Card)
                .where(Card.section_id == section_id)
                .values(section_id=None, updated_at=utcnow())
                .execution_options(synchronize_session="fetch")
            )
            await db.delete(section)
            await db.flush()
            await touch_board(db, board_id)
            logger.info(
                "Section deleted: %s (%d cards released)", section_id, result.rowcount
            )
        except SQLAlchemyError as e:
            logger.error("Database error deleting section %s: %s", section_id, str(e))
            raise DatabaseError(
                message="Could not delete the section. Please try again.",
                context={"section_id": str(section_id)},
            )


section_service = SectionService()
