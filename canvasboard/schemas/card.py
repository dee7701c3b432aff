"""
CanvasBoard — Card Schemas
============================

What:  Request/response schemas for `/api/cards`.
How:   A card response nests the note it displays. On create, content fields
       (title, content, tags, color) seed a new note unless ``noteId`` names an
       existing one. On update, present content fields are written through to
       the note.
"""

import uuid
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field, model_validator

from canvasboard.schemas.common import APIModel
from canvasboard.schemas.note import NoteResponse

CardKind = Literal["text", "media", "link"]


class CardCreate(APIModel):
    id: Optional[uuid.UUID] = None
    board_id: uuid.UUID
    section_id: Optional[uuid.UUID] = None
    note_id: Optional[uuid.UUID] = None
    kind: CardKind = "text"
    pos_x: float = 0.0
    pos_y: float = 0.0

    # Note content
    title: Optional[str] = Field(default=None, max_length=255)
    content: Optional[str] = None
    tags: Optional[List[str]] = None
    color: Optional[str] = Field(default=None, max_length=32)

    # Variant fields
    image_url: Optional[str] = None
    caption: Optional[str] = None
    url: Optional[str] = None
    description: Optional[str] = None
    favicon: Optional[str] = None
    preview_image: Optional[str] = None

    @model_validator(mode="after")
    def check_variant_fields(self) -> "CardCreate":
        if self.kind == "media" and not self.image_url:
            raise ValueError("Media cards require imageUrl")
        if self.kind == "link" and not self.url:
            raise ValueError("Link cards require url")
        return self


class CardUpdate(APIModel):
    """
    Partial update. ``sectionId: null`` un-sections the card, while an absent
    ``sectionId`` leaves the section unchanged (see ``model_fields_set``).
    """

    pos_x: Optional[float] = None
    pos_y: Optional[float] = None
    section_id: Optional[uuid.UUID] = None

    title: Optional[str] = Field(default=None, max_length=255)
    content: Optional[str] = None
    tags: Optional[List[str]] = None
    color: Optional[str] = Field(default=None, max_length=32)

    image_url: Optional[str] = None
    caption: Optional[str] = None
    url: Optional[str] = None
    description: Optional[str] = None
    favicon: Optional[str] = None
    preview_image: Optional[str] = None


class CardResponse(APIModel):
    id: uuid.UUID
    board_id: uuid.UUID
    section_id: Optional[uuid.UUID] = None
    note_id: uuid.UUID
    kind: CardKind
    pos_x: float
    pos_y: float
    image_url: Optional[str] = None
    caption: Optional[str] = None
    url: Optional[str] = None
    description: Optional[str] = None
    favicon: Optional[str] = None
    preview_image: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    note: NoteResponse
