"""ORM model for the `sections` table: grouping frames on a board."""

import uuid
from datetime import datetime
from typing import List, Optional, TYPE_CHECKING

from sqlalchemy import Boolean, Float, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from canvasboard.database import Base
from canvasboard.models.base import created_at_column, updated_at_column, uuid_pk

if TYPE_CHECKING:
    from canvasboard.models.board import Board
    from canvasboard.models.card import Card


class Section(Base):
    __tablename__ = "sections"

    id: Mapped[uuid.UUID] = uuid_pk()
    board_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("boards.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    # Top-left corner in world coordinates, and size
    pos_x: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    pos_y: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    width: Mapped[float] = mapped_column(Float, nullable=False, default=400.0)
    height: Mapped[float] = mapped_column(Float, nullable=False, default=300.0)

    color: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    is_collapsed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = created_at_column()
    updated_at: Mapped[datetime] = updated_at_column()

    board: Mapped["Board"] = relationship(back_populates="sections")
    cards: Mapped[List["Card"]] = relationship(back_populates="section", passive_deletes=True)

    def __repr__(self) -> str:
        return f"<Section(id={self.id}, board_id={self.board_id}, name='{self.name}')>"
