"""
CanvasBoard — Persistence Adapter Interface
=============================================

What:  Abstract contract the canvas store uses to save and load boards.
How:   Concrete adapters inherit from PersistenceAdapter. Every mutation method
       receives the already-mutated board plus the entity involved, so a
       snapshot adapter can save the whole board while a REST adapter sends
       only the entity.

Implementations:
    - RestPersistence:          CRUD calls against the CanvasBoard API (httpx)
    - LocalSnapshotPersistence: whole-collection JSON snapshot on disk

All implementation failures surface as PersistenceError.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from canvasboard.canvas.models import Board, BoardSummary, Connection, Section, Viewport


class PersistenceAdapter(ABC):
    """Storage backend for the canvas store."""

    # ── Boards ────────────────────────────────────────────────────────────

    @abstractmethod
    async def list_boards(self) -> List[BoardSummary]:
        """Summaries only; no sections, cards or connections."""
        ...

    @abstractmethod
    async def get_board(self, board_id: str) -> Board:
        """
        Full board with all nested entities.

        Raises:
            PersistenceError: board missing or backend unavailable
        """
        ...

    @abstractmethod
    async def create_board(self, board: Board) -> Board:
        ...

    @abstractmethod
    async def update_board(
        self,
        board: Board,
        name: Optional[str] = None,
        viewport: Optional[Viewport] = None,
    ) -> None:
        ...

    @abstractmethod
    async def delete_board(self, board_id: str) -> None:
        ...

    # ── Sections ──────────────────────────────────────────────────────────

    @abstractmethod
    async def create_section(self, board: Board, section: Section) -> None:
        ...

    @abstractmethod
    async def update_section(
        self, board: Board, section: Section, changes: Dict[str, Any]
    ) -> None:
        """``changes`` names the fields that were modified."""
        ...

    @abstractmethod
    async def delete_section(self, board: Board, section_id: str) -> None:
        ...

    # ── Cards ─────────────────────────────────────────────────────────────

    @abstractmethod
    async def create_card(self, board: Board, card: Any) -> None:
        ...

    @abstractmethod
    async def update_card(self, board: Board, card: Any) -> None:
        ...

    @abstractmethod
    async def delete_card(self, board: Board, card_id: str) -> None:
        ...

    # ── Connections ───────────────────────────────────────────────────────

    @abstractmethod
    async def create_connection(self, board: Board, connection: Connection) -> None:
        ...

    @abstractmethod
    async def delete_connection(self, board: Board, connection_id: str) -> None:
        ...

    async def close(self) -> None:
        """Release network or file resources. No-op by default."""
        return None
