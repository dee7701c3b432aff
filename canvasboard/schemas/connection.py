"""Request/response schemas for `/api/connections`."""

import uuid
from datetime import datetime
from typing import Literal, Optional

from pydantic import Field

from canvasboard.schemas.common import APIModel

Anchor = Literal["top", "right", "bottom", "left"]


class ConnectionCreate(APIModel):
    id: Optional[uuid.UUID] = None
    board_id: uuid.UUID
    from_card_id: uuid.UUID
    to_card_id: uuid.UUID
    from_anchor: Anchor = "bottom"
    to_anchor: Anchor = "top"
    color: Optional[str] = Field(default=None, max_length=32)
    label: Optional[str] = Field(default=None, max_length=255)


class ConnectionResponse(APIModel):
    id: uuid.UUID
    board_id: uuid.UUID
    from_card_id: uuid.UUID
    to_card_id: uuid.UUID
    from_anchor: Anchor
    to_anchor: Anchor
    color: Optional[str] = None
    label: Optional[str] = None
    created_at: datetime
