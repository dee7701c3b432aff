"""Request/response schemas for the standalone note library (`/api/notes`)."""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from canvasboard.schemas.common import APIModel


class NoteCreate(APIModel):
    id: Optional[uuid.UUID] = None
    title: str = Field(default="New Note", max_length=255)
    content: str = ""
    tags: List[str] = Field(default_factory=list)
    color: Optional[str] = Field(default=None, max_length=32)


class NoteResponse(APIModel):
    id: uuid.UUID
    title: str
    content: str
    tags: List[str] = Field(default_factory=list)
    color: Optional[str] = None
    created_at: datetime
    updated_at: datetime
