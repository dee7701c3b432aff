"""
CanvasBoard — Board Schemas
=============================

What:  Request/response schemas for `/api/boards`.
How:   The list endpoint returns summaries with a card count; the detail
       endpoint nests sections, cards (with notes) and connections. The
       saved viewport is flattened into zoom/panX/panY on responses and
       accepted as a nested ``viewport`` object on update.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from canvasboard.canvas.models import clamp_zoom
from canvasboard.schemas.card import CardResponse
from canvasboard.schemas.common import APIModel
from canvasboard.schemas.connection import ConnectionResponse
from canvasboard.schemas.section import SectionResponse


class ViewportIn(APIModel):
    zoom: float = 1.0
    pan_x: float = 0.0
    pan_y: float = 0.0

    @field_validator("zoom")
    @classmethod
    def clamp(cls, v: float) -> float:
        return clamp_zoom(v)


class BoardCreate(APIModel):
    id: Optional[uuid.UUID] = None
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None


class BoardUpdate(APIModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    thumbnail: Optional[str] = None
    viewport: Optional[ViewportIn] = None


class BoardResponse(APIModel):
    id: uuid.UUID
    name: str
    description: Optional[str] = None
    thumbnail: Optional[str] = None
    zoom: float
    pan_x: float
    pan_y: float
    created_at: datetime
    updated_at: datetime


class BoardSummaryResponse(BoardResponse):
    card_count: int = 0


class BoardDetailResponse(BoardResponse):
    sections: List[SectionResponse] = Field(default_factory=list)
    cards: List[CardResponse] = Field(default_factory=list)
    connections: List[ConnectionResponse] = Field(default_factory=list)


# ── Layout ────────────────────────────────────────────────────────────────


class PointOut(APIModel):
    x: float
    y: float


class ConnectionPathResponse(APIModel):
    connection_id: str
    start: PointOut
    control1: PointOut
    control2: PointOut
    end: PointOut
    curvature: float
    color: Optional[str] = None
    label: Optional[str] = None
    path: str


class BoardLayoutResponse(APIModel):
    board_id: uuid.UUID
    connections: List[ConnectionPathResponse] = Field(default_factory=list)
