"""
CanvasBoard — Local Snapshot Persistence
==========================================

What:  Keeps the whole board collection in a single JSON document on disk.
How:   The document is read wholesale on first use and rewritten wholesale
       after every mutation, using aiofiles so the event loop is not blocked.
Who:   CanvasStore, when settings.persistence_backend == "local" (offline use
       and tests).

File layout:
    {"canvasboard-boards": {"boards": [<Board JSON, camelCase>, ...]}}
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import aiofiles

from canvasboard.canvas.models import Board, BoardSummary, Connection, Section, Viewport, utcnow
from canvasboard.canvas.persistence.base import PersistenceAdapter
from canvasboard.config import settings
from canvasboard.exceptions import PersistenceError

logger = logging.getLogger(__name__)

STORAGE_KEY = "canvasboard-boards"


class LocalSnapshotPersistence(PersistenceAdapter):
    """Whole-collection snapshot adapter. Boards are kept in insertion order."""

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path or settings.local_snapshot_path)
        self._boards: Optional[Dict[str, Board]] = None
        self._lock = asyncio.Lock()

    # ── File I/O ──────────────────────────────────────────────────────────

    async def _load(self) -> Dict[str, Board]:
        if self._boards is not None:
            return self._boards
        if not self.path.exists():
            logger.info("No snapshot at %s, starting empty", self.path)
            self._boards = {}
            return self._boards
        try:
            async with aiofiles.open(self.path, "r", encoding="utf-8") as f:
                raw = await f.read()
            document = json.loads(raw) if raw.strip() else {}
            items = document.get(STORAGE_KEY, {}).get("boards", [])
            boards = [Board.model_validate(item) for item in items]
        except (OSError, ValueError) as e:
            logger.error("Could not read snapshot %s: %s", self.path, e)
            raise PersistenceError(
                message="Could not read the local board snapshot",
                context={"path": str(self.path), "error_type": type(e).__name__},
            )
        self._boards = {board.id: board for board in boards}
        logger.info("Loaded %d boards from %s", len(self._boards), self.path)
        return self._boards

    async def _save(self) -> None:
        boards = await self._load()
        document = {
            STORAGE_KEY: {"boards": [board.to_json_dict() for board in boards.values()]}
        }
        async with self._lock:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                async with aiofiles.open(self.path, "w", encoding="utf-8") as f:
                    await f.write(json.dumps(document, indent=2))
            except OSError as e:
                logger.error("Could not write snapshot %s: %s", self.path, e)
                raise PersistenceError(
                    message="Could not save the local board snapshot",
                    context={"path": str(self.path), "error_type": type(e).__name__},
                )

    async def _put(self, board: Board) -> None:
        boards = await self._load()
        boards[board.id] = board.model_copy(deep=True)
        await self._save()

    async def _stored(self, board_id: str) -> Board:
        boards = await self._load()
        if board_id not in boards:
            raise PersistenceError(
                message=f"Board '{board_id}' is not in the local snapshot",
                status_code=404,
                context={"board_id": board_id},
            )
        return boards[board_id]

    # ── Boards ────────────────────────────────────────────────────────────

    async def list_boards(self) -> List[BoardSummary]:
        boards = await self._load()
        summaries = [board.summary() for board in boards.values()]
        return sorted(summaries, key=lambda s: s.updated_at, reverse=True)

    async def get_board(self, board_id: str) -> Board:
        return (await self._stored(board_id)).model_copy(deep=True)

    async def create_board(self, board: Board) -> Board:
        await self._put(board)
        return board.model_copy(deep=True)

    async def update_board(
        self,
        board: Board,
        name: Optional[str] = None,
        viewport: Optional[Viewport] = None,
    ) -> None:
        stored = await self._stored(board.id)
        if name is not None:
            stored.name = name
        if viewport is not None:
            stored.viewport = viewport.model_copy()
        stored.updated_at = utcnow()
        await self._save()

    async def delete_board(self, board_id: str) -> None:
        boards = await self._load()
        boards.pop(board_id, None)
        await self._save()

    # ── Board contents ────────────────────────────────────────────────────
    # The board passed in already carries the mutation; store it whole.

    async def create_section(self, board: Board, section: Section) -> None:
        await self._put(board)

    async def update_section(
        self, board: Board, section: Section, changes: Dict[str, Any]
    ) -> None:
        await self._put(board)

    async def delete_section(self, board: Board, section_id: str) -> None:
        await self._put(board)

    async def create_card(self, board: Board, card: Any) -> None:
        await self._put(board)

    async def update_card(self, board: Board, card: Any) -> None:
        await self._put(board)

    async def delete_card(self, board: Board, card_id: str) -> None:
        await self._put(board)

    async def create_connection(self, board: Board, connection: Connection) -> None:
        await self._put(board)

    async def delete_connection(self, board: Board, connection_id: str) -> None:
        await self._put(board)
