"""
CanvasBoard — Canvas Data Model
=================================

What:  Pydantic models for everything that lives on a board: sections, the
       three card variants, connections, and the viewport.
How:   Cards are a tagged union discriminated by ``type``; exhaustive handling
       is done with ``match`` at the call sites, not with subclass overrides.
       JSON uses camelCase aliases so snapshots and REST payloads share a shape.
Who:   Board aggregate, layout, store, persistence adapters, server schemas.

Coordinates are always world-space. Only the viewport transform (see
geometry.py) knows about screen pixels.
"""

import uuid
from datetime import datetime, timezone
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel

# ── Viewport limits ───────────────────────────────────────────────────────
MIN_ZOOM = 0.25
MAX_ZOOM = 3.0
ZOOM_STEP = 0.1

AnchorSide = Literal["top", "right", "bottom", "left"]
CardType = Literal["text", "media", "link"]
DragKind = Literal["card", "section", "connection"]


def new_id() -> str:
    """Fresh unique entity id (UUID4 string)."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def clamp_zoom(zoom: float) -> float:
    """Clamp into [MIN_ZOOM, MAX_ZOOM], rounding off float drift from stepping."""
    return round(max(MIN_ZOOM, min(MAX_ZOOM, zoom)), 4)


class CanvasModel(BaseModel):
    """Shared config: camelCase JSON, snake_case Python, validated assignment."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )

    def to_json_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class Position(CanvasModel):
    model_config = ConfigDict(frozen=True)

    x: float = 0.0
    y: float = 0.0


class Bounds(CanvasModel):
    model_config = ConfigDict(frozen=True)

    x: float = 0.0
    y: float = 0.0
    width: float = Field(default=400.0, ge=0)
    height: float = Field(default=300.0, ge=0)

    @property
    def origin(self) -> Position:
        return Position(x=self.x, y=self.y)


class Viewport(CanvasModel):
    """Zoom and pan offset; zoom is clamped on construction and assignment."""

    zoom: float = 1.0
    pan_x: float = 0.0
    pan_y: float = 0.0

    @field_validator("zoom")
    @classmethod
    def _clamp(cls, v: float) -> float:
        return clamp_zoom(v)


# ══════════════════════════════════════════════════════════════════════════
# Sections
# ══════════════════════════════════════════════════════════════════════════


class Section(CanvasModel):
    """
    Rectangular grouping frame.

    ``position`` is the canonical top-left; ``bounds.x/y`` mirror it. The board
    aggregate keeps the two in sync on every update.
    """

    id: str = Field(default_factory=new_id)
    name: str
    position: Position = Field(default_factory=Position)
    bounds: Bounds = Field(default_factory=Bounds)
    color: Optional[str] = None
    is_collapsed: bool = False
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


# ══════════════════════════════════════════════════════════════════════════
# Cards (tagged union)
# ══════════════════════════════════════════════════════════════════════════


class CardBase(CanvasModel):
    id: str = Field(default_factory=new_id)
    position: Position = Field(default_factory=Position)
    section_id: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class TextCard(CardBase):
    type: Literal["text"] = "text"
    title: str = ""
    content: str = ""
    accent_color: Optional[str] = None


class MediaCard(CardBase):
    type: Literal["media"] = "media"
    image_url: str
    title: Optional[str] = None
    caption: Optional[str] = None


class LinkCard(CardBase):
    type: Literal["link"] = "link"
    title: str
    url: str
    description: Optional[str] = None
    favicon: Optional[str] = None
    preview_image: Optional[str] = None


Card = Annotated[Union[TextCard, MediaCard, LinkCard], Field(discriminator="type")]

_card_adapter: TypeAdapter = TypeAdapter(Card)

# Fields that carry a card's content, per variant. Everything else is placement.
CONTENT_FIELDS: Dict[str, tuple] = {
    "text": ("title", "content", "accent_color"),
    "media": ("title", "image_url", "caption"),
    "link": ("title", "url", "description", "favicon", "preview_image"),
}


def parse_card(data: Dict[str, Any]) -> Union[TextCard, MediaCard, LinkCard]:
    """Validate a raw dict (camelCase or snake_case) into the matching card variant."""
    return _card_adapter.validate_python(data)


def content_of(card: Union[TextCard, MediaCard, LinkCard]) -> Dict[str, Any]:
    return {name: getattr(card, name) for name in CONTENT_FIELDS[card.type]}


# ══════════════════════════════════════════════════════════════════════════
# Connections
# ══════════════════════════════════════════════════════════════════════════


class ConnectionAnchor(CanvasModel):
    model_config = ConfigDict(frozen=True)

    card_id: str
    position: AnchorSide


class Connection(CanvasModel):
    id: str = Field(default_factory=new_id)
    from_: ConnectionAnchor = Field(alias="from")
    to: ConnectionAnchor
    color: Optional[str] = None
    label: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)

    @property
    def card_pair(self) -> frozenset:
        """Unordered endpoint pair used for duplicate suppression."""
        return frozenset((self.from_.card_id, self.to.card_id))

    def touches(self, card_id: str) -> bool:
        return self.from_.card_id == card_id or self.to.card_id == card_id


# ══════════════════════════════════════════════════════════════════════════
# Boards
# ══════════════════════════════════════════════════════════════════════════


class BoardSummary(CanvasModel):
    """Board list entry: no nested entities."""

    id: str
    name: str
    description: Optional[str] = None
    thumbnail: Optional[str] = None
    card_count: int = 0
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class Board(CanvasModel):
    id: str = Field(default_factory=new_id)
    name: str
    description: Optional[str] = None
    thumbnail: Optional[str] = None
    sections: List[Section] = Field(default_factory=list)
    cards: List[Card] = Field(default_factory=list)
    connections: List[Connection] = Field(default_factory=list)
    viewport: Viewport = Field(default_factory=Viewport)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def summary(self) -> BoardSummary:
        return BoardSummary(
            id=self.id,
            name=self.name,
            description=self.description,
            thumbnail=self.thumbnail,
            card_count=len(self.cards),
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
