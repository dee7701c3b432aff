"""ORM model for the `connections` table: directed edges between two cards of one board."""

import uuid
from datetime import datetime
from typing import Optional, TYPE_CHECKING

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from canvasboard.database import Base
from canvasboard.models.base import created_at_column, uuid_pk

if TYPE_CHECKING:
    from canvasboard.models.board import Board


class Connection(Base):
    __tablename__ = "connections"

    id: Mapped[uuid.UUID] = uuid_pk()
    board_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("boards.id", ondelete="CASCADE"), nullable=False, index=True
    )
    from_card_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("cards.id", ondelete="CASCADE"), nullable=False, index=True
    )
    to_card_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("cards.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # One of: top, right, bottom, left
    from_anchor: Mapped[str] = mapped_column(String(8), nullable=False, default="bottom")
    to_anchor: Mapped[str] = mapped_column(String(8), nullable=False, default="top")

    color: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    label: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = created_at_column()

    board: Mapped["Board"] = relationship(back_populates="connections")

    def __repr__(self) -> str:
        return (
            f"<Connection(id={self.id}, {self.from_card_id}:{self.from_anchor} -> "
            f"{self.to_card_id}:{self.to_anchor})>"
        )
