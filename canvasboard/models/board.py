"""
CanvasBoard — Board SQLAlchemy Model
======================================

What:  ORM model for the `boards` table: a named canvas plus its saved
       viewport (zoom, pan_x, pan_y).
Who:   BoardService, and Alembic through Base.metadata.

Children (sections, cards, connections) reference the board with
ON DELETE CASCADE. BoardService also deletes them explicitly, so the cascade
holds on databases that do not enforce foreign keys.
"""

import uuid
from datetime import datetime
from typing import List, Optional, TYPE_CHECKING

from sqlalchemy import Float, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from canvasboard.database import Base
from canvasboard.models.base import created_at_column, updated_at_column, uuid_pk

if TYPE_CHECKING:
    from canvasboard.models.card import Card
    from canvasboard.models.connection import Connection
    from canvasboard.models.section import Section


class Board(Base):
    __tablename__ = "boards"

    id: Mapped[uuid.UUID] = uuid_pk()
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    thumbnail: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # ── Saved viewport ────────────────────────────────────────────────────
    zoom: Mapped[float] = mapped_column(Float, nullable=False, default=1.0)
    pan_x: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    pan_y: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    created_at: Mapped[datetime] = created_at_column()
    updated_at: Mapped[datetime] = updated_at_column()

    sections: Mapped[List["Section"]] = relationship(
        back_populates="board", passive_deletes=True, order_by="Section.created_at"
    )
    cards: Mapped[List["Card"]] = relationship(
        back_populates="board", passive_deletes=True, order_by="Card.created_at"
    )
    connections: Mapped[List["Connection"]] = relationship(
        back_populates="board", passive_deletes=True, order_by="Connection.created_at"
    )

    # Board list is ordered by most recently updated
    __table_args__ = (Index("idx_boards_updated_at", updated_at.desc()),)

    def __repr__(self) -> str:
        return f"<Board(id={self.id}, name='{self.name}')>"
