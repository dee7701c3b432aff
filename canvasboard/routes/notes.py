"""
CanvasBoard — Notes Route Handlers
====================================

What:  GET /api/notes (library listing) and POST /api/notes (new note).
Who:   The note library panel; cards reference these notes by noteId.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from canvasboard.database import get_db_session
from canvasboard.schemas.common import ErrorResponse
from canvasboard.schemas.note import NoteCreate, NoteResponse
from canvasboard.services.note_service import note_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Notes"])


@router.get(
    "/notes",
    response_model=List[NoteResponse],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List notes, most recently updated first",
)
async def list_notes(
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> List[NoteResponse]:
    notes = await note_service.list_notes(db)
    response.headers["X-Total-Count"] = str(len(notes))
    return notes


@router.post(
    "/notes",
    response_model=NoteResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a note",
)
async def create_note(
    body: NoteCreate,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.create_note(db, body)
