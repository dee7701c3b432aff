"""Route handlers for /api/sections."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from canvasboard.database import get_db_session
from canvasboard.schemas.common import DeleteResponse, ErrorResponse
from canvasboard.schemas.section import SectionCreate, SectionResponse, SectionUpdate
from canvasboard.services.section_service import section_service

router = APIRouter(prefix="/api", tags=["Sections"])


@router.post(
    "/sections",
    response_model=SectionResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"description": "Board not found", "model": ErrorResponse}},
    summary="Create a section (default 400×300)",
)
async def create_section(
    body: SectionCreate,
    db: AsyncSession = Depends(get_db_session),
) -> SectionResponse:
    return await section_service.create_section(db, body)


@router.put(
    "/sections/{section_id}",
    response_model=SectionResponse,
    responses={404: {"description": "Section not found", "model": ErrorResponse}},
    summary="Partially update a section",
)
async def update_section(
    section_id: UUID,
    body: SectionUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> SectionResponse:
    return await section_service.update_section(db, section_id, body)


@router.delete(
    "/sections/{section_id}",
    response_model=DeleteResponse,
    responses={404: {"description": "Section not found", "model": ErrorResponse}},
    summary="Delete a section; its cards stay on the board unsectioned",
)
async def delete_section(
    section_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> DeleteResponse:
    await section_service.delete_section(db, section_id)
    return DeleteResponse()
