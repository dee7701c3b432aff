"""
CanvasBoard — Board Route Handlers
====================================

What:  /api/boards collection and item endpoints, plus the computed
       connection layout of a board.
How:   Thin handlers: parse the request, call BoardService, return schemas.
       Errors raised by the service are rendered by the global handlers.
"""

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from canvasboard.database import get_db_session
from canvasboard.schemas.board import (
    BoardCreate,
    BoardDetailResponse,
    BoardLayoutResponse,
    BoardResponse,
    BoardSummaryResponse,
    BoardUpdate,
)
from canvasboard.schemas.common import DeleteResponse, ErrorResponse
from canvasboard.services.board_service import board_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Boards"])

_NOT_FOUND = {404: {"description": "Board not found", "model": ErrorResponse}}


@router.get(
    "/boards",
    response_model=List[BoardSummaryResponse],
    summary="List boards",
    description="Board summaries with their card count, most recently updated first.",
)
async def list_boards(
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> List[BoardSummaryResponse]:
    boards = await board_service.list_boards(db)
    response.headers["X-Total-Count"] = str(len(boards))
    return boards


@router.post(
    "/boards",
    response_model=BoardResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"description": "Board id already used", "model": ErrorResponse}},
    summary="Create a board",
)
async def create_board(
    body: BoardCreate,
    db: AsyncSession = Depends(get_db_session),
) -> BoardResponse:
    return await board_service.create_board(db, body)


@router.get(
    "/boards/{board_id}",
    response_model=BoardDetailResponse,
    responses=_NOT_FOUND,
    summary="Get a board with its sections, cards and connections",
)
async def get_board(
    board_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> BoardDetailResponse:
    return await board_service.get_board(db, board_id)


@router.put(
    "/boards/{board_id}",
    response_model=BoardResponse,
    responses=_NOT_FOUND,
    summary="Rename a board or save its viewport",
)
async def update_board(
    board_id: UUID,
    body: BoardUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> BoardResponse:
    return await board_service.update_board(db, board_id, body)


@router.delete(
    "/boards/{board_id}",
    response_model=DeleteResponse,
    responses=_NOT_FOUND,
    summary="Delete a board and everything on it",
)
async def delete_board(
    board_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> DeleteResponse:
    await board_service.delete_board(db, board_id)
    return DeleteResponse()


@router.get(
    "/boards/{board_id}/layout",
    response_model=BoardLayoutResponse,
    responses=_NOT_FOUND,
    summary="Computed connection paths",
    description=(
        "Anchor points, bezier control points and an SVG path string for every "
        "connection whose two cards exist."
    ),
)
async def get_board_layout(
    board_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> BoardLayoutResponse:
    return await board_service.get_layout(db, board_id)
