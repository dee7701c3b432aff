"""
CanvasBoard — Card SQLAlchemy Model
=====================================

What:  ORM model for the `cards` table: the placement of a note on a board.
How:   ``kind`` selects the variant (text, media, link). Text cards take all
       their content from the note; media and link cards keep their extra
       fields (image_url, url, ...) on the card row and their title on the note.

Foreign keys:
    board_id   → boards    ON DELETE CASCADE
    section_id → sections  ON DELETE SET NULL (card survives its section)
    note_id    → notes
"""

import uuid
from datetime import datetime
from typing import Optional, TYPE_CHECKING

from sqlalchemy import Float, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from canvasboard.database import Base
from canvasboard.models.base import created_at_column, updated_at_column, uuid_pk

if TYPE_CHECKING:
    from canvasboard.models.board import Board
    from canvasboard.models.note import Note
    from canvasboard.models.section import Section

CARD_KINDS = ("text", "media", "link")


class Card(Base):
    __tablename__ = "cards"

    id: Mapped[uuid.UUID] = uuid_pk()
    board_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("boards.id", ondelete="CASCADE"), nullable=False, index=True
    )
    section_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        ForeignKey("sections.id", ondelete="SET NULL"), nullable=True, index=True
    )
    note_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("notes.id"), nullable=False)

    kind: Mapped[str] = mapped_column(String(16), nullable=False, default="text")
    pos_x: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    pos_y: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    # ── Media fields ──────────────────────────────────────────────────────
    image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    caption: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # ── Link fields ───────────────────────────────────────────────────────
    url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    favicon: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    preview_image: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = created_at_column()
    updated_at: Mapped[datetime] = updated_at_column()

    board: Mapped["Board"] = relationship(back_populates="cards")
    section: Mapped[Optional["Section"]] = relationship(back_populates="cards")
    note: Mapped["Note"] = relationship(lazy="joined")

    def __repr__(self) -> str:
        return f"<Card(id={self.id}, kind='{self.kind}', board_id={self.board_id})>"
