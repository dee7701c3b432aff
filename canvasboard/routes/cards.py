"""Route handlers for /api/cards."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from canvasboard.database import get_db_session
from canvasboard.schemas.card import CardCreate, CardResponse, CardUpdate
from canvasboard.schemas.common import DeleteResponse, ErrorResponse
from canvasboard.services.card_service import card_service

router = APIRouter(prefix="/api", tags=["Cards"])


@router.post(
    "/cards",
    response_model=CardResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Section is on another board", "model": ErrorResponse},
        404: {"description": "Board or note not found", "model": ErrorResponse},
    },
    summary="Place a card (creates its note unless noteId is given)",
)
async def create_card(
    body: CardCreate,
    db: AsyncSession = Depends(get_db_session),
) -> CardResponse:
    return await card_service.create_card(db, body)


@router.put(
    "/cards/{card_id}",
    response_model=CardResponse,
    responses={
        400: {"description": "Section is on another board", "model": ErrorResponse},
        404: {"description": "Card not found", "model": ErrorResponse},
    },
    summary="Move a card, change its section or edit its content",
)
async def update_card(
    card_id: UUID,
    body: CardUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> CardResponse:
    return await card_service.update_card(db, card_id, body)


@router.delete(
    "/cards/{card_id}",
    response_model=DeleteResponse,
    responses={404: {"description": "Card not found", "model": ErrorResponse}},
    summary="Delete a card and its connections",
)
async def delete_card(
    card_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> DeleteResponse:
    await card_service.delete_card(db, card_id)
    return DeleteResponse()
