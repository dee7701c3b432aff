"""Route handlers for /api/connections."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from canvasboard.database import get_db_session
from canvasboard.schemas.common import DeleteResponse, ErrorResponse
from canvasboard.schemas.connection import ConnectionCreate, ConnectionResponse
from canvasboard.services.connection_service import connection_service

router = APIRouter(prefix="/api", tags=["Connections"])


@router.post(
    "/connections",
    response_model=ConnectionResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Self-connection or cards on another board", "model": ErrorResponse},
        404: {"description": "Board or card not found", "model": ErrorResponse},
        409: {"description": "Cards already connected", "model": ErrorResponse},
    },
    summary="Connect two cards",
)
async def create_connection(
    body: ConnectionCreate,
    db: AsyncSession = Depends(get_db_session),
) -> ConnectionResponse:
    return await connection_service.create_connection(db, body)


@router.delete(
    "/connections/{connection_id}",
    response_model=DeleteResponse,
    responses={404: {"description": "Connection not found", "model": ErrorResponse}},
    summary="Delete a connection",
)
async def delete_connection(
    connection_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> DeleteResponse:
    await connection_service.delete_connection(db, connection_id)
    return DeleteResponse()
