"""Request/response schemas for `/api/sections`."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import Field

from canvasboard.schemas.common import APIModel


class SectionCreate(APIModel):
    id: Optional[uuid.UUID] = None
    board_id: uuid.UUID
    name: str = Field(min_length=1, max_length=255)
    pos_x: float = 0.0
    pos_y: float = 0.0
    width: float = Field(default=400.0, ge=0)
    height: float = Field(default=300.0, ge=0)
    color: Optional[str] = Field(default=None, max_length=32)
    is_collapsed: bool = False


class SectionUpdate(APIModel):
    """Partial update: only fields present in the request body are applied."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    pos_x: Optional[float] = None
    pos_y: Optional[float] = None
    width: Optional[float] = Field(default=None, ge=0)
    height: Optional[float] = Field(default=None, ge=0)
    color: Optional[str] = Field(default=None, max_length=32)
    is_collapsed: Optional[bool] = None


class SectionResponse(APIModel):
    id: uuid.UUID
    board_id: uuid.UUID
    name: str
    pos_x: float
    pos_y: float
    width: float
    height: float
    color: Optional[str] = None
    is_collapsed: bool
    created_at: datetime
    updated_at: datetime
