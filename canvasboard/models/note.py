"""
CanvasBoard — Note SQLAlchemy Model
=====================================

What:  ORM model for the `notes` table, the standalone note library.
How:   A card on a board references a note for its title and content, so the
       same note can be placed on several boards. Deleting a card leaves its
       note in the library.
Who:   NoteService, CardService (creates a note per new card unless one is
       given).
"""

import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy import JSON, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from canvasboard.database import Base
from canvasboard.models.base import created_at_column, updated_at_column, uuid_pk

DEFAULT_NOTE_TITLE = "New Note"


class Note(Base):
    __tablename__ = "notes"

    id: Mapped[uuid.UUID] = uuid_pk()
    title: Mapped[str] = mapped_column(
        String(255), nullable=False, default=DEFAULT_NOTE_TITLE
    )
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # JSON rather than ARRAY so the table also works on SQLite
    tags: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    color: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)

    created_at: Mapped[datetime] = created_at_column()
    updated_at: Mapped[datetime] = updated_at_column()

    __table_args__ = (Index("idx_notes_updated_at", updated_at.desc()),)

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title='{self.title}')>"
