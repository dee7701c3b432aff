"""
CanvasBoard — Connection Service
==================================

What:  Create and delete connections between two cards of the same board.
How:   Rejects self-connections (400), endpoints on another board (400), and
       a second connection between the same unordered pair of cards (409).
"""

import logging
import uuid

from sqlalchemy import and_, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from canvasboard.exceptions import ConflictError, DatabaseError, NotFoundError, ValidationError
from canvasboard.models import Card, Connection
from canvasboard.schemas.connection import ConnectionCreate, ConnectionResponse
from canvasboard.services.board_service import require_board, touch_board

logger = logging.getLogger(__name__)


class ConnectionService:
    async def create_connection(
        self, db: AsyncSession, data: ConnectionCreate
    ) -> ConnectionResponse:
        if data.from_card_id == data.to_card_id:
            raise ValidationError(
                message="A card cannot be connected to itself",
                field="toCardId",
                context={"card_id": str(data.from_card_id)},
            )
        try:
            await require_board(db, data.board_id)
            for card_id in (data.from_card_id, data.to_card_id):
                card = await db.get(Card, card_id)
                if card is None:
                    raise NotFoundError(resource="card", resource_id=str(card_id))
                if card.board_id != data.board_id:
                    raise ValidationError(
                        message="Both cards must be on the connection's board",
                        field="boardId",
                        context={"card_id": str(card_id)},
                    )

            a, b = data.from_card_id, data.to_card_id
            existing = await db.execute(
                select(Connection.id).where(
                    or_(
                        and_(Connection.from_card_id == a, Connection.to_card_id == b),
                        and_(Connection.from_card_id == b, Connection.to_card_id == a),
                    )
                )
            )
            existing_id = existing.scalar_one_or_none()
            if existing_id is not None:
                raise ConflictError(
                    message="These cards are already connected",
                    context={"connection_id": str(existing_id)},
                )
            if data.id is not None and await db.get(Connection, data.id) is not None:
                raise ConflictError(message=f"Connection '{data.id}' already exists")

            connection = Connection(**data.model_dump(exclude={"id"}))
            if data.id is not None:
                connection.id = data.id
            db.add(connection)
            await db.flush()
            await touch_board(db, data.board_id)
            logger.info("Connection created: %s (%s -> %s)", connection.id, a, b)
            return ConnectionResponse.model_validate(connection)
        except SQLAlchemyError as e:
            logger.error("Database error creating connection: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the connection. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def delete_connection(self, db: AsyncSession, connection_id: uuid.UUID) -> None:
        try:
            connection = await db.get(Connection, connection_id)
            if connection is None:
                raise NotFoundError(resource="connection", resource_id=str(connection_id))
            board_id = connection.board_id
            await db.delete(connection)
            await db.flush()
            await touch_board(db, board_id)
        except SQLAlchemyError as e:
            logger.error("Database error deleting connection %s: %s", connection_id, str(e))
            raise DatabaseError(
                message="Could not delete the connection. Please try again.",
                context={"connection_id": str(connection_id)},
            )


connection_service = ConnectionService()
