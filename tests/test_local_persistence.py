"""
CanvasBoard — Local Snapshot Persistence Tests
================================================

What we test:
    ✅ boards survive a fresh adapter instance (written to disk)
    ✅ list_boards is ordered by updated_at, newest first
    ✅ mutations mirrored through the store land in the snapshot
    ✅ unreadable snapshot / unknown board → PersistenceError

How:
    Each test uses its own file under pytest's tmp_path.
"""

import json
from datetime import timedelta

import pytest

from canvasboard.canvas.models import Board, Position, TextCard, Viewport, utcnow
from canvasboard.canvas.persistence.local import STORAGE_KEY, LocalSnapshotPersistence
from canvasboard.canvas.store import CanvasStore
from canvasboard.exceptions import PersistenceError


@pytest.fixture
def snapshot_path(tmp_path):
    return str(tmp_path / "boards.json")


class TestLocalSnapshot:
    @pytest.mark.asyncio
    async def test_board_survives_reload(self, snapshot_path, plan_board):
        await LocalSnapshotPersistence(snapshot_path).create_board(plan_board)

        loaded = await LocalSnapshotPersistence(snapshot_path).get_board("board-plan")

        assert loaded.name == "Plan"
        assert [c.id for c in loaded.cards] == ["card-a", "card-b"]
        assert loaded.sections[0].bounds.width == 400

    @pytest.mark.asyncio
    async def test_file_layout(self, snapshot_path, plan_board):
        await LocalSnapshotPersistence(snapshot_path).create_board(plan_board)
        with open(snapshot_path, encoding="utf-8") as f:
            document = json.load(f)
        [stored] = document[STORAGE_KEY]["boards"]
        assert stored["cards"][0]["sectionId"] == "sec-ideas"

    @pytest.mark.asyncio
    async def test_list_is_newest_first(self, snapshot_path):
        adapter = LocalSnapshotPersistence(snapshot_path)
        now = utcnow()
        await adapter.create_board(Board(id="old", name="Old", updated_at=now - timedelta(days=1)))
        await adapter.create_board(Board(id="new", name="New", updated_at=now))

        summaries = await adapter.list_boards()

        assert [s.id for s in summaries] == ["new", "old"]

    @pytest.mark.asyncio
    async def test_update_board_name_and_viewport(self, snapshot_path, plan_board):
        adapter = LocalSnapshotPersistence(snapshot_path)
        await adapter.create_board(plan_board)

        await adapter.update_board(plan_board, name="Renamed", viewport=Viewport(zoom=2))

        loaded = await LocalSnapshotPersistence(snapshot_path).get_board("board-plan")
        assert loaded.name == "Renamed"
        assert loaded.viewport.zoom == 2.0

    @pytest.mark.asyncio
    async def test_delete_board(self, snapshot_path, plan_board):
        adapter = LocalSnapshotPersistence(snapshot_path)
        await adapter.create_board(plan_board)
        await adapter.delete_board("board-plan")
        assert await adapter.list_boards() == []

    @pytest.mark.asyncio
    async def test_unknown_board(self, snapshot_path):
        with pytest.raises(PersistenceError) as exc_info:
            await LocalSnapshotPersistence(snapshot_path).get_board("nope")
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_corrupt_file(self, snapshot_path):
        with open(snapshot_path, "w", encoding="utf-8") as f:
            f.write("{not json")
        with pytest.raises(PersistenceError):
            await LocalSnapshotPersistence(snapshot_path).list_boards()

    @pytest.mark.asyncio
    async def test_store_mutations_are_persisted(self, snapshot_path, plan_board):
        adapter = LocalSnapshotPersistence(snapshot_path)
        await adapter.create_board(plan_board)
        store = CanvasStore(adapter=adapter)
        await store.open_board("board-plan")

        await store.add_card(TextCard(id="card-c", title="Idea C", position=Position(x=5, y=5)))
        await store.add_connection("card-a", "card-c")
        await store.delete_section("sec-ideas")

        loaded = await LocalSnapshotPersistence(snapshot_path).get_board("board-plan")
        assert {c.id for c in loaded.cards} == {"card-a", "card-b", "card-c"}
        assert loaded.sections == []
        assert all(c.section_id is None for c in loaded.cards)
        assert len(loaded.connections) == 1
