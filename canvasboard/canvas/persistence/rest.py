"""
CanvasBoard — REST Persistence Adapter
========================================

What:  Mirrors canvas mutations to the CanvasBoard HTTP API and loads boards
       from it.
How:   httpx AsyncClient for the calls; tenacity retries transport-level
       failures (connection refused, timeouts) with exponential backoff and
       jitter. HTTP error statuses are not retried.
Who:   CanvasStore, when settings.persistence_backend == "rest".

Wire mapping:
    The API speaks the relational shape (posX/posY columns, card content in a
    nested ``note``). The ``*_from_wire`` / ``*_to_wire`` helpers translate
    between that and the canvas models.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from canvasboard.canvas.models import (
    Board,
    BoardSummary,
    Bounds,
    Connection,
    ConnectionAnchor,
    LinkCard,
    MediaCard,
    Position,
    Section,
    TextCard,
    Viewport,
)
from canvasboard.canvas.persistence.base import PersistenceAdapter
from canvasboard.config import settings
from canvasboard.exceptions import PersistenceError

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Wire Mappers
# ══════════════════════════════════════════════════════════════════════════


def section_from_wire(data: Dict[str, Any]) -> Section:
    return Section(
        id=str(data["id"]),
        name=data["name"],
        position=Position(x=data["posX"], y=data["posY"]),
        bounds=Bounds(
            x=data["posX"], y=data["posY"], width=data["width"], height=data["height"]
        ),
        color=data.get("color"),
        is_collapsed=data.get("isCollapsed", False),
        created_at=data["createdAt"],
        updated_at=data["updatedAt"],
    )


def card_from_wire(data: Dict[str, Any]):
    note = data.get("note") or {}
    common = {
        "id": str(data["id"]),
        "position": Position(x=data["posX"], y=data["posY"]),
        "section_id": str(data["sectionId"]) if data.get("sectionId") else None,
        "created_at": data["createdAt"],
        "updated_at": data["updatedAt"],
    }
    kind = data.get("kind", "text")
    if kind == "media":
        return MediaCard(
            **common,
            image_url=data.get("imageUrl") or "",
            title=note.get("title") or None,
            caption=data.get("caption"),
        )
    if kind == "link":
        return LinkCard(
            **common,
            title=note.get("title", ""),
            url=data.get("url") or "",
            description=data.get("description"),
            favicon=data.get("favicon"),
            preview_image=data.get("previewImage"),
        )
    return TextCard(
        **common,
        title=note.get("title", ""),
        content=note.get("content", ""),
        accent_color=note.get("color"),
    )


def card_content_to_wire(card) -> Dict[str, Any]:
    """Content fields of a card in request-body form."""
    match card:
        case TextCard():
            return {"title": card.title, "content": card.content, "color": card.accent_color}
        case MediaCard():
            return {
                "title": card.title or "",
                "imageUrl": card.image_url,
                "caption": card.caption,
            }
        case LinkCard():
            return {
                "title": card.title,
                "url": card.url,
                "description": card.description,
                "favicon": card.favicon,
                "previewImage": card.preview_image,
            }
    raise TypeError(f"Not a card: {card!r}")


def card_to_wire(board_id: str, card) -> Dict[str, Any]:
    body = {
        "id": card.id,
        "boardId": board_id,
        "sectionId": card.section_id,
        "kind": card.type,
        "posX": card.position.x,
        "posY": card.position.y,
    }
    body.update(card_content_to_wire(card))
    return body


def connection_from_wire(data: Dict[str, Any]) -> Connection:
    return Connection(
        id=str(data["id"]),
        from_=ConnectionAnchor(card_id=str(data["fromCardId"]), position=data["fromAnchor"]),
        to=ConnectionAnchor(card_id=str(data["toCardId"]), position=data["toAnchor"]),
        color=data.get("color"),
        label=data.get("label"),
        created_at=data["createdAt"],
    )


def summary_from_wire(data: Dict[str, Any]) -> BoardSummary:
    return BoardSummary(
        id=str(data["id"]),
        name=data["name"],
        description=data.get("description"),
        thumbnail=data.get("thumbnail"),
        card_count=data.get("cardCount", 0),
        created_at=data["createdAt"],
        updated_at=data["updatedAt"],
    )


def board_from_wire(data: Dict[str, Any]) -> Board:
    return Board(
        id=str(data["id"]),
        name=data["name"],
        description=data.get("description"),
        thumbnail=data.get("thumbnail"),
        sections=[section_from_wire(s) for s in data.get("sections", [])],
        cards=[card_from_wire(c) for c in data.get("cards", [])],
        connections=[connection_from_wire(c) for c in data.get("connections", [])],
        viewport=Viewport(
            zoom=data.get("zoom") or 1.0,
            pan_x=data.get("panX") or 0.0,
            pan_y=data.get("panY") or 0.0,
        ),
        created_at=data["createdAt"],
        updated_at=data["updatedAt"],
    )


def _viewport_to_wire(viewport: Viewport) -> Dict[str, float]:
    return {"zoom": viewport.zoom, "panX": viewport.pan_x, "panY": viewport.pan_y}


# ══════════════════════════════════════════════════════════════════════════
# Adapter
# ══════════════════════════════════════════════════════════════════════════


class RestPersistence(PersistenceAdapter):
    """
    PersistenceAdapter backed by the CanvasBoard REST API.

    Error Handling Chain:
        transport error → tenacity retries (retry_max_attempts, backoff)
        → retries exhausted → PersistenceError
        HTTP 4xx/5xx → PersistenceError immediately (status_code set)
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        base_url: Optional[str] = None,
        max_attempts: Optional[int] = None,
        min_wait: Optional[float] = None,
        max_wait: Optional[float] = None,
    ):
        self._client = client or httpx.AsyncClient(
            base_url=base_url or settings.api_base_url,
            timeout=settings.api_timeout,
        )
        self._max_attempts = max_attempts or settings.retry_max_attempts
        self._min_wait = settings.retry_min_wait if min_wait is None else min_wait
        self._max_wait = settings.retry_max_wait if max_wait is None else max_wait

    async def _request(
        self, method: str, path: str, json: Optional[Dict[str, Any]] = None
    ) -> Any:
        try:
            async for attempt in AsyncRetrying(
                retry=retry_if_exception_type(httpx.TransportError),
                stop=stop_after_attempt(self._max_attempts),
                wait=wait_exponential_jitter(
                    initial=self._min_wait, max=self._max_wait, jitter=self._min_wait
                ),
                before_sleep=before_sleep_log(logger, logging.WARNING),
                reraise=True,
            ):
                with attempt:
                    response = await self._client.request(method, path, json=json)
        except httpx.TransportError as e:
            logger.error("%s %s failed after %d attempts: %s", method, path, self._max_attempts, e)
            raise PersistenceError(
                message="Could not reach the board server",
                context={"method": method, "path": path, "error_type": type(e).__name__},
            )

        if response.is_error:
            logger.warning("%s %s returned %d", method, path, response.status_code)
            raise PersistenceError(
                message=f"Board server rejected {method} {path}",
                status_code=response.status_code,
                context={"method": method, "path": path},
            )
        if not response.content:
            return None
        return response.json()

    # ── Boards ────────────────────────────────────────────────────────────

    async def list_boards(self) -> List[BoardSummary]:
        data = await self._request("GET", "/boards")
        return [summary_from_wire(item) for item in data]

    async def get_board(self, board_id: str) -> Board:
        return board_from_wire(await self._request("GET", f"/boards/{board_id}"))

    async def create_board(self, board: Board) -> Board:
        data = await self._request(
            "POST",
            "/boards",
            json={"id": board.id, "name": board.name, "description": board.description},
        )
        return board_from_wire(data)

    async def update_board(
        self,
        board: Board,
        name: Optional[str] = None,
        viewport: Optional[Viewport] = None,
    ) -> None:
        body: Dict[str, Any] = {}
        if name is not None:
            body["name"] = name
        if viewport is not None:
            body["viewport"] = _viewport_to_wire(viewport)
        await self._request("PUT", f"/boards/{board.id}", json=body)

    async def delete_board(self, board_id: str) -> None:
        await self._request("DELETE", f"/boards/{board_id}")

    # ── Sections ──────────────────────────────────────────────────────────

    async def create_section(self, board: Board, section: Section) -> None:
        await self._request(
            "POST",
            "/sections",
            json={
                "id": section.id,
                "boardId": board.id,
                "name": section.name,
                "posX": section.position.x,
                "posY": section.position.y,
                "width": section.bounds.width,
                "height": section.bounds.height,
                "color": section.color,
                "isCollapsed": section.is_collapsed,
            },
        )

    async def update_section(
        self, board: Board, section: Section, changes: Dict[str, Any]
    ) -> None:
        body: Dict[str, Any] = {}
        if "name" in changes:
            body["name"] = section.name
        if "position" in changes or "bounds" in changes:
            body["posX"] = section.position.x
            body["posY"] = section.position.y
        if "bounds" in changes:
            body["width"] = section.bounds.width
            body["height"] = section.bounds.height
        if "is_collapsed" in changes:
            body["isCollapsed"] = section.is_collapsed
        if "color" in changes:
            body["color"] = section.color
        await self._request("PUT", f"/sections/{section.id}", json=body)

    async def delete_section(self, board: Board, section_id: str) -> None:
        await self._request("DELETE", f"/sections/{section_id}")

    # ── Cards ─────────────────────────────────────────────────────────────

    async def create_card(self, board: Board, card) -> None:
        await self._request("POST", "/cards", json=card_to_wire(board.id, card))

    async def update_card(self, board: Board, card) -> None:
        body = {
            "posX": card.position.x,
            "posY": card.position.y,
            "sectionId": card.section_id,
        }
        body.update(card_content_to_wire(card))
        await self._request("PUT", f"/cards/{card.id}", json=body)

    async def delete_card(self, board: Board, card_id: str) -> None:
        await self._request("DELETE", f"/cards/{card_id}")

    # ── Connections ───────────────────────────────────────────────────────

    async def create_connection(self, board: Board, connection: Connection) -> None:
        await self._request(
            "POST",
            "/connections",
            json={
                "id": connection.id,
                "boardId": board.id,
                "fromCardId": connection.from_.card_id,
                "toCardId": connection.to.card_id,
                "fromAnchor": connection.from_.position,
                "toAnchor": connection.to.position,
                "color": connection.color,
                "label": connection.label,
            },
        )

    async def delete_connection(self, board: Board, connection_id: str) -> None:
        await self._request("DELETE", f"/connections/{connection_id}")

    async def close(self) -> None:
        await self._client.aclose()
