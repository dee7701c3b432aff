"""
CanvasBoard — CanvasStore Unit Tests
======================================

What we test:
    ✅ open/close board loads the saved viewport and resets selection
    ✅ mutations are applied locally and mirrored to the adapter
    ✅ a PersistenceError reverts the local change and sets ``error``
    ✅ a failed drop reverts to where the drag started
    ✅ reverting a failed mutation keeps changes made while it was in flight
    ✅ board list bookkeeping (create, rename, delete)

How:
    The adapter is an AsyncMock(spec=PersistenceAdapter); failures are
    injected with side_effect.
"""

import asyncio

import pytest
import pytest_asyncio

from canvasboard.canvas.models import Board, BoardSummary, Position, TextCard, Viewport
from canvasboard.canvas.store import CanvasStore
from canvasboard.exceptions import PersistenceError, ValidationError


@pytest.fixture
def store(mock_adapter):
    return CanvasStore(adapter=mock_adapter)


@pytest_asyncio.fixture
async def open_store(store, mock_adapter, plan_board):
    mock_adapter.get_board.return_value = plan_board
    await store.open_board("board-plan")
    return store


class TestBoards:
    @pytest.mark.asyncio
    async def test_open_board_loads_viewport(self, store, mock_adapter, plan_board):
        plan_board.viewport = Viewport(zoom=2.0, pan_x=10, pan_y=20)
        mock_adapter.get_board.return_value = plan_board
        store.selection.select_card("stale")

        aggregate = await store.open_board("board-plan")

        assert aggregate.id == "board-plan"
        assert store.viewport.viewport == Viewport(zoom=2.0, pan_x=10, pan_y=20)
        assert store.selection.selection.is_empty
        assert not store.is_loading

    @pytest.mark.asyncio
    async def test_open_board_failure(self, store, mock_adapter):
        mock_adapter.get_board.side_effect = PersistenceError(status_code=404)
        assert await store.open_board("missing") is None
        assert store.error == "Failed to load board"
        assert store.active is None

    @pytest.mark.asyncio
    async def test_load_boards(self, store, mock_adapter):
        mock_adapter.list_boards.return_value = [BoardSummary(id="b1", name="One")]
        boards = await store.load_boards()
        assert [b.id for b in boards] == ["b1"]
        assert store.error is None

    @pytest.mark.asyncio
    async def test_load_boards_failure_keeps_list(self, store, mock_adapter):
        store.boards = [BoardSummary(id="b1", name="One")]
        mock_adapter.list_boards.side_effect = PersistenceError()
        await store.load_boards()
        assert store.error == "Failed to load boards"
        assert [b.id for b in store.boards] == ["b1"]

    @pytest.mark.asyncio
    async def test_create_board_prepends_summary(self, store, mock_adapter):
        store.boards = [BoardSummary(id="old", name="Old")]
        mock_adapter.create_board.side_effect = lambda board: board

        created = await store.create_board("Plan", "weekly")

        assert created.name == "Plan"
        assert [b.name for b in store.boards] == ["Plan", "Old"]

    @pytest.mark.asyncio
    async def test_rename_failure_reverts(self, open_store, mock_adapter):
        open_store.boards = [open_store.board.summary()]
        mock_adapter.update_board.side_effect = PersistenceError()

        assert await open_store.rename_board("board-plan", "Renamed") is False

        assert open_store.board.name == "Plan"
        assert open_store.boards[0].name == "Plan"
        assert open_store.error == "Failed to rename board"

    @pytest.mark.asyncio
    async def test_delete_open_board_closes_it(self, open_store, mock_adapter):
        open_store.boards = [open_store.board.summary()]
        assert await open_store.delete_board("board-plan")
        assert open_store.active is None
        assert open_store.boards == []
        mock_adapter.delete_board.assert_awaited_once_with("board-plan")

    @pytest.mark.asyncio
    async def test_save_viewport(self, open_store, mock_adapter):
        open_store.viewport.zoom_in()
        assert await open_store.save_viewport()
        assert open_store.board.viewport.zoom == 1.1
        mock_adapter.update_board.assert_awaited_once()

    def test_mutation_without_open_board(self, store):
        with pytest.raises(ValidationError):
            store.move_card("card-a", Position())


class TestMirroring:
    @pytest.mark.asyncio
    async def test_add_card_is_mirrored(self, open_store, mock_adapter):
        card = await open_store.add_card(TextCard(title="Idea C"))

        assert open_store.active.find_card(card.id) is not None
        mock_adapter.create_card.assert_awaited_once_with(open_store.board, card)
        assert open_store.error is None

    @pytest.mark.asyncio
    async def test_add_card_failure_reverts(self, open_store, mock_adapter):
        mock_adapter.create_card.side_effect = PersistenceError()

        assert await open_store.add_card(TextCard(id="card-c", title="Idea C")) is None

        assert open_store.active.find_card("card-c") is None
        assert len(open_store.board.cards) == 2
        assert open_store.error == "Failed to create card"

    @pytest.mark.asyncio
    async def test_delete_section_failure_restores_membership(self, open_store, mock_adapter):
        mock_adapter.delete_section.side_effect = PersistenceError()

        assert await open_store.delete_section("sec-ideas") is False

        assert open_store.active.get_section("sec-ideas").name == "Ideas"
        assert open_store.active.get_card("card-a").section_id == "sec-ideas"

    @pytest.mark.asyncio
    async def test_delete_card_prunes_selection(self, open_store):
        open_store.selection.select_card("card-a")
        await open_store.add_connection("card-a", "card-b")

        assert await open_store.delete_card("card-a")

        assert open_store.selection.selection.card_ids == set()
        assert open_store.board.connections == []

    @pytest.mark.asyncio
    async def test_duplicate_connection_skips_adapter(self, open_store, mock_adapter):
        assert await open_store.add_connection("card-a", "card-b") is not None
        assert await open_store.add_connection("card-b", "card-a") is None
        assert await open_store.add_connection("card-a", "card-a") is None
        assert mock_adapter.create_connection.await_count == 1

    @pytest.mark.asyncio
    async def test_failed_drop_reverts_to_drag_start(self, open_store, mock_adapter):
        mock_adapter.update_card.side_effect = PersistenceError()
        open_store.move_card("card-b", Position(x=300, y=300))
        open_store.move_card("card-b", Position(x=180, y=300))

        assert await open_store.drop_card("card-b", Position(x=180, y=300)) is None

        card = open_store.active.get_card("card-b")
        assert card.position == Position(x=600, y=600)
        assert card.section_id is None
        assert open_store.error == "Failed to move card"

    @pytest.mark.asyncio
    async def test_drop_assigns_section(self, open_store, mock_adapter):
        card = await open_store.drop_card("card-b", Position(x=180, y=300))
        assert card.section_id == "sec-ideas"
        mock_adapter.update_card.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_update_section_passes_changes(self, open_store, mock_adapter):
        await open_store.update_section("sec-ideas", name="Backlog")
        board, section, changes = mock_adapter.update_section.await_args.args
        assert section.name == "Backlog"
        assert changes == {"name": "Backlog"}

    @pytest.mark.asyncio
    async def test_mutations_refresh_board_summary(self, open_store):
        open_store.boards = [open_store.board.summary()]
        await open_store.add_card(TextCard(title="Idea C"))
        assert open_store.boards[0].card_count == 3


class TestOverlappingMutations:
    @staticmethod
    def _slow_failure(delay: float = 0.01):
        async def fail(*args, **kwargs):
            await asyncio.sleep(delay)
            raise PersistenceError()

        return fail

    @pytest.mark.asyncio
    async def test_failed_add_keeps_later_section(self, open_store, mock_adapter):
        mock_adapter.create_card.side_effect = self._slow_failure()

        pending = asyncio.create_task(open_store.add_card(TextCard(id="card-c", title="Lost")))
        await asyncio.sleep(0)
        assert open_store.active.find_card("card-c") is not None

        section = await open_store.add_section("Persisted", Position(x=900, y=100))
        assert section is not None
        assert await pending is None

        assert open_store.active.find_card("card-c") is None
        assert [s.name for s in open_store.board.sections] == ["Ideas", "Persisted"]
        assert open_store.error == "Failed to create card"

    @pytest.mark.asyncio
    async def test_failed_update_keeps_later_card_edit(self, open_store, mock_adapter):
        mock_adapter.update_section.side_effect = self._slow_failure()

        pending = asyncio.create_task(open_store.update_section("sec-ideas", name="Backlog"))
        await asyncio.sleep(0)
        await open_store.update_card("card-b", title="Edited while pending")
        assert await pending is None

        assert open_store.active.get_section("sec-ideas").name == "Ideas"
        assert open_store.active.get_card("card-b").title == "Edited while pending"

    @pytest.mark.asyncio
    async def test_failed_delete_restores_card_and_connections(self, open_store, mock_adapter):
        connection = await open_store.add_connection("card-a", "card-b")
        mock_adapter.delete_card.side_effect = self._slow_failure()

        pending = asyncio.create_task(open_store.delete_card("card-a"))
        await asyncio.sleep(0)
        assert open_store.active.find_card("card-a") is None
        extra = await open_store.add_card(TextCard(title="Idea C"))
        assert await pending is False

        assert [c.id for c in open_store.board.cards] == ["card-a", "card-b", extra.id]
        assert [c.id for c in open_store.board.connections] == [connection.id]

    @pytest.mark.asyncio
    async def test_failed_section_delete_keeps_later_drop(self, open_store, mock_adapter):
        mock_adapter.delete_section.side_effect = self._slow_failure()

        pending = asyncio.create_task(open_store.delete_section("sec-ideas"))
        await asyncio.sleep(0)
        await open_store.drop_card("card-b", Position(x=1000, y=1000))
        assert await pending is False

        assert open_store.active.get_section("sec-ideas").name == "Ideas"
        assert open_store.active.get_card("card-a").section_id == "sec-ideas"
        assert open_store.active.get_card("card-b").position == Position(x=1000, y=1000)

    @pytest.mark.asyncio
    async def test_revert_skipped_after_board_closed(self, open_store, mock_adapter):
        mock_adapter.create_card.side_effect = self._slow_failure()
        aggregate = open_store.active

        pending = asyncio.create_task(open_store.add_card(TextCard(id="card-c", title="Lost")))
        await asyncio.sleep(0)
        open_store.close_board()
        assert await pending is None

        assert aggregate.find_card("card-c") is not None
        assert open_store.error == "Failed to create card"

    @pytest.mark.asyncio
    async def test_cancel_drag_restores_without_persisting(self, open_store, mock_adapter):
        open_store.move_card("card-b", Position(x=10, y=10))
        open_store.move_section("sec-ideas", Position(x=0, y=0))

        assert open_store.cancel_drag("card-b")
        assert open_store.active.get_card("card-b").position == Position(x=600, y=600)
        assert open_store.active.get_section("sec-ideas").position == Position(x=0, y=0)

        assert open_store.cancel_drag()
        assert open_store.active.get_section("sec-ideas").position == Position(x=100, y=100)
        assert open_store.cancel_drag() is False
        mock_adapter.update_card.assert_not_awaited()
        mock_adapter.update_section.assert_not_awaited()


class TestRendering:
    @pytest.mark.asyncio
    async def test_connection_paths(self, open_store):
        await open_store.add_connection("card-a", "card-b")
        assert len(open_store.connection_paths()) == 1

    def test_no_paths_without_board(self, store):
        assert store.connection_paths() == []
        assert store.transform() == "translate(0.0px, 0.0px) scale(1.0)"
