"""
CanvasBoard — Board Service
=============================

What:  Business logic for boards: listing, creation, full-board loading,
       rename/viewport updates, deletion with cascades, connection layout.
How:   Stateless; each call receives the request's AsyncSession. Commit and
       rollback happen in get_db_session, so methods only flush.
Who:   Board routes, and the section/card/connection services (board lookup
       and ``touch_board``).

Error Handling Strategy:
    Our own exceptions (NotFoundError, ConflictError, ...) propagate as-is.
    Unexpected SQLAlchemy errors are logged and wrapped in DatabaseError so
    no database detail reaches the client.
"""

import logging
import uuid
from typing import List

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from canvasboard.canvas.layout import layout_connections
from canvasboard.canvas.persistence.rest import board_from_wire
from canvasboard.exceptions import ConflictError, DatabaseError, NotFoundError
from canvasboard.models import Board, Card, Connection, Section
from canvasboard.models.base import utcnow
from canvasboard.schemas.board import (
    BoardCreate,
    BoardDetailResponse,
    BoardLayoutResponse,
    BoardResponse,
    BoardSummaryResponse,
    BoardUpdate,
    ConnectionPathResponse,
    PointOut,
)

logger = logging.getLogger(__name__)


async def require_board(db: AsyncSession, board_id: uuid.UUID) -> Board:
    board = await db.get(Board, board_id)
    if board is None:
        raise NotFoundError(resource="board", resource_id=str(board_id))
    return board


async def touch_board(db: AsyncSession, board_id: uuid.UUID) -> None:
    """Bump the board's updated_at after a change to one of its children."""
    await db.execute(update(Board).where(Board.id == board_id).values(updated_at=utcnow()))


class BoardService:
    async def list_boards(self, db: AsyncSession) -> List[BoardSummaryResponse]:
        """
        Board summaries with their card count, most recently updated first.

        Query plan:
            SELECT boards.*, count(cards.id) FROM boards
            LEFT OUTER JOIN cards ON cards.board_id = boards.id
            GROUP BY boards.id ORDER BY boards.updated_at DESC
        """
        try:
            result = await db.execute(
                select(Board, func.count(Card.id))
                .outerjoin(Card, Card.board_id == Board.id)
                .group_by(Board.id)
                .order_by(Board.updated_at.desc())
            )
            summaries = []
            for board, card_count in result.all():
                summary = BoardSummaryResponse.model_validate(board)
                summary.card_count = card_count
                summaries.append(summary)
            return summaries
        except SQLAlchemyError as e:
            logger.error("Database error listing boards: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve boards. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def create_board(self, db: AsyncSession, data: BoardCreate) -> BoardResponse:
        """New board with the default viewport (zoom 1, pan 0,0)."""
        try:
            if data.id is not None and await db.get(Board, data.id) is not None:
                raise ConflictError(
                    message=f"Board '{data.id}' already exists",
                    context={"board_id": str(data.id)},
                )
            board = Board(
                name=data.name,
                description=data.description,
                zoom=1.0,
                pan_x=0.0,
                pan_y=0.0,
            )
            if data.id is not None:
                board.id = data.id
            db.add(board)
            await db.flush()
            logger.info("Board created: %s ('%s')", board.id, board.name)
            return BoardResponse.model_validate(board)
        except SQLAlchemyError as e:
            logger.error("Database error creating board: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the board. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def get_board(self, db: AsyncSession, board_id: uuid.UUID) -> BoardDetailResponse:
        """Full board: sections, cards with their notes, connections."""
        try:
            result = await db.execute(
                select(Board)
                .where(Board.id == board_id)
                .options(
                    selectinload(Board.sections),
                    selectinload(Board.cards).joinedload(Card.note),
                    selectinload(Board.connections),
                )
                .execution_options(populate_existing=True)
            )
            board = result.scalar_one_or_none()
            if board is None:
                raise NotFoundError(resource="board", resource_id=str(board_id))
            return BoardDetailResponse.model_validate(board)
        except SQLAlchemyError as e:
            logger.error("Database error fetching board %s: %s", board_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the board. Please try again.",
                context={"board_id": str(board_id)},
            )

    async def update_board(
        self, db: AsyncSession, board_id: uuid.UUID, data: BoardUpdate
    ) -> BoardResponse:
        try:
            board = await require_board(db, board_id)
            if data.name is not None:
                board.name = data.name
            if "description" in data.model_fields_set:
                board.description = data.description
            if "thumbnail" in data.model_fields_set:
                board.thumbnail = data.thumbnail
            if data.viewport is not None:
                board.zoom = data.viewport.zoom
                board.pan_x = data.viewport.pan_x
                board.pan_y = data.viewport.pan_y
            board.updated_at = utcnow()
            await db.flush()
            return BoardResponse.model_validate(board)
        except SQLAlchemyError as e:
            logger.error("Database error updating board %s: %s", board_id, str(e))
            raise DatabaseError(
                message="Could not update the board. Please try again.",
                context={"board_id": str(board_id)},
            )

    async def delete_board(self, db: AsyncSession, board_id: uuid.UUID) -> None:
        """Delete the board and everything on it (connections, cards, sections)."""
        try:
            board = await require_board(db, board_id)
            await db.execute(delete(Connection).where(Connection.board_id == board_id))
            await db.execute(delete(Card).where(Card.board_id == board_id))
            await db.execute(delete(Section).where(Section.board_id == board_id))
            await db.delete(board)
            await db.flush()
            logger.info("Board deleted: %s", board_id)
        except SQLAlchemyError as e:
            logger.error("Database error deleting board %s: %s", board_id, str(e))
            raise DatabaseError(
                message="Could not delete the board. Please try again.",
                context={"board_id": str(board_id)},
            )

    async def get_layout(self, db: AsyncSession, board_id: uuid.UUID) -> BoardLayoutResponse:
        """Bezier paths for every connection on the board, as the canvas draws them."""
        detail = await self.get_board(db, board_id)
        board = board_from_wire(detail.model_dump(mode="json", by_alias=True))
        paths = [
            ConnectionPathResponse(
                connection_id=p.connection_id,
                start=PointOut(x=p.start.x, y=p.start.y),
                control1=PointOut(x=p.control1.x, y=p.control1.y),
                control2=PointOut(x=p.control2.x, y=p.control2.y),
                end=PointOut(x=p.end.x, y=p.end.y),
                curvature=p.curvature,
                color=p.color,
                label=p.label,
                path=p.svg_path,
            )
            for p in layout_connections(board)
        ]
        return BoardLayoutResponse(board_id=board_id, connections=paths)


board_service = BoardService()
