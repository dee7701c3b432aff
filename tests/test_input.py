"""
CanvasBoard — Input Binding Unit Tests
========================================

What we test:
    ✅ key map (+/=, -, Ctrl/Cmd+0, Escape), ignored without an open board
    ✅ Escape mid-drag puts the entity back and persists nothing
    ✅ wheel: modifier zooms, otherwise pans
    ✅ background drag pans; card/section drag moves locally, commits on release
    ✅ drag distance is divided by zoom
    ✅ pointer leaving the canvas ends the gesture
    ✅ moving away and back releases without a commit, at the start position
    ✅ shift-click that deselects an entity does not drag it
"""

import pytest
import pytest_asyncio

from canvasboard.canvas.input import CanvasInput, KeyEvent, PointerEvent, WheelEvent
from canvasboard.canvas.models import Position
from canvasboard.canvas.store import CanvasStore


@pytest_asyncio.fixture
async def canvas(mock_adapter, plan_board):
    store = CanvasStore(adapter=mock_adapter)
    mock_adapter.get_board.return_value = plan_board
    await store.open_board("board-plan")
    return CanvasInput(store)


class TestKeys:
    def test_keys_ignored_without_board(self, mock_adapter):
        canvas = CanvasInput(CanvasStore(adapter=mock_adapter))
        assert canvas.handle_key(KeyEvent("+")) is False
        assert canvas.store.viewport.zoom == 1.0

    @pytest.mark.asyncio
    async def test_zoom_keys(self, canvas):
        assert canvas.handle_key(KeyEvent("+"))
        assert canvas.handle_key(KeyEvent("="))
        assert canvas.store.viewport.zoom == 1.2
        canvas.handle_key(KeyEvent("-"))
        assert canvas.store.viewport.zoom == 1.1

    @pytest.mark.asyncio
    async def test_reset_needs_modifier(self, canvas):
        canvas.store.viewport.set_viewport(zoom=2, pan_x=50)
        assert canvas.handle_key(KeyEvent("0")) is False
        assert canvas.handle_key(KeyEvent("0", meta=True))
        assert canvas.store.viewport.viewport.zoom == 1.0
        assert canvas.store.viewport.viewport.pan_x == 0

    @pytest.mark.asyncio
    async def test_escape_clears_selection_and_drag(self, canvas):
        canvas.pointer_down(PointerEvent(0, 0, "card", "card-a"))
        assert canvas.handle_key(KeyEvent("Escape"))
        assert canvas.store.selection.selection.is_empty
        assert not canvas.store.drag.is_dragging

    @pytest.mark.asyncio
    async def test_escape_mid_drag_restores_start_position(self, canvas, mock_adapter):
        canvas.pointer_down(PointerEvent(10, 10, "card", "card-b"))
        canvas.pointer_move(PointerEvent(110, 110))
        assert canvas.store.active.get_card("card-b").position == Position(x=700, y=700)

        canvas.handle_key(KeyEvent("Escape"))
        await canvas.pointer_up(PointerEvent(110, 110))

        assert canvas.store.active.get_card("card-b").position == Position(x=600, y=600)
        mock_adapter.update_card.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_escape_mid_drag_does_not_leak_into_next_commit(self, canvas, mock_adapter):
        canvas.pointer_down(PointerEvent(0, 0, "section", "sec-ideas"))
        canvas.pointer_move(PointerEvent(300, 0))
        canvas.handle_key(KeyEvent("Escape"))

        await canvas.store.update_section("sec-ideas", name="Renamed")

        section = canvas.store.active.get_section("sec-ideas")
        assert section.position == Position(x=100, y=100)
        assert section.name == "Renamed"

    @pytest.mark.asyncio
    async def test_unbound_key(self, canvas):
        assert canvas.handle_key(KeyEvent("q")) is False


class TestWheel:
    @pytest.mark.asyncio
    async def test_ctrl_wheel_zooms(self, canvas):
        canvas.handle_wheel(WheelEvent(0, -120, ctrl=True))
        assert canvas.store.viewport.zoom == 1.1

    @pytest.mark.asyncio
    async def test_plain_wheel_pans(self, canvas):
        canvas.handle_wheel(WheelEvent(10, 20))
        viewport = canvas.store.viewport.viewport
        assert (viewport.pan_x, viewport.pan_y) == (-10, -20)


class TestPointer:
    @pytest.mark.asyncio
    async def test_background_drag_pans_and_clears_selection(self, canvas):
        canvas.store.selection.select_card("card-a")
        canvas.pointer_down(PointerEvent(100, 100))
        canvas.pointer_move(PointerEvent(150, 80))
        await canvas.pointer_up(PointerEvent(150, 80))

        viewport = canvas.store.viewport.viewport
        assert (viewport.pan_x, viewport.pan_y) == (50, -20)
        assert canvas.store.selection.selection.is_empty
        assert not canvas.store.viewport.is_panning

    @pytest.mark.asyncio
    async def test_card_drag_commits_once(self, canvas, mock_adapter):
        canvas.pointer_down(PointerEvent(10, 10, "card", "card-b"))
        canvas.pointer_move(PointerEvent(60, 30))
        canvas.pointer_move(PointerEvent(110, 60))

        assert canvas.store.active.get_card("card-b").position == Position(x=700, y=650)
        mock_adapter.update_card.assert_not_awaited()

        await canvas.pointer_up(PointerEvent(110, 60))

        mock_adapter.update_card.assert_awaited_once()
        assert canvas.store.selection.selection.card_ids == {"card-b"}

    @pytest.mark.asyncio
    async def test_drag_delta_scales_with_zoom(self, canvas):
        canvas.store.viewport.set_viewport(zoom=2)
        canvas.pointer_down(PointerEvent(0, 0, "card", "card-b"))
        canvas.pointer_move(PointerEvent(100, -40))
        assert canvas.store.active.get_card("card-b").position == Position(x=650, y=580)

    @pytest.mark.asyncio
    async def test_drop_into_section(self, canvas):
        canvas.pointer_down(PointerEvent(600, 600, "card", "card-b"))
        await canvas.pointer_up(PointerEvent(180, 300))
        assert canvas.store.active.get_card("card-b").section_id == "sec-ideas"

    @pytest.mark.asyncio
    async def test_click_without_move_does_not_commit(self, canvas, mock_adapter):
        canvas.pointer_down(PointerEvent(5, 5, "card", "card-a"))
        await canvas.pointer_up(PointerEvent(5, 5))
        mock_adapter.update_card.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_section_drag_commits_position(self, canvas, mock_adapter):
        canvas.pointer_down(PointerEvent(0, 0, "section", "sec-ideas"))
        canvas.pointer_move(PointerEvent(-50, 25))
        await canvas.pointer_leave()

        section = canvas.store.active.get_section("sec-ideas")
        assert section.position == Position(x=50, y=125)
        mock_adapter.update_section.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_shift_click_adds_to_selection(self, canvas):
        canvas.pointer_down(PointerEvent(0, 0, "card", "card-a"))
        await canvas.pointer_up()
        canvas.pointer_down(PointerEvent(0, 0, "card", "card-b", shift=True))
        await canvas.blur()
        assert canvas.store.selection.selection.card_ids == {"card-a", "card-b"}

    @pytest.mark.asyncio
    async def test_connection_click_selects(self, canvas):
        canvas.pointer_down(PointerEvent(0, 0, "connection", "conn-1"))
        assert canvas.store.selection.selection.connection_ids == {"conn-1"}
        assert not canvas.store.drag.is_dragging

    @pytest.mark.asyncio
    async def test_move_back_to_start_releases_without_commit(self, canvas, mock_adapter):
        canvas.pointer_down(PointerEvent(10, 10, "card", "card-b"))
        canvas.pointer_move(PointerEvent(90, 40))
        canvas.pointer_move(PointerEvent(10, 10))
        await canvas.pointer_up(PointerEvent(10, 10))

        assert canvas.store.active.get_card("card-b").position == Position(x=600, y=600)
        mock_adapter.update_card.assert_not_awaited()

        # A later drag of the same card commits from its real start
        canvas.pointer_down(PointerEvent(0, 0, "card", "card-b"))
        await canvas.pointer_up(PointerEvent(20, 0))
        mock_adapter.update_card.assert_awaited_once()
        assert canvas.store.active.get_card("card-b").position == Position(x=620, y=600)

    @pytest.mark.asyncio
    async def test_shift_click_deselect_does_not_drag(self, canvas, mock_adapter):
        canvas.pointer_down(PointerEvent(0, 0, "card", "card-a"))
        await canvas.pointer_up()

        canvas.pointer_down(PointerEvent(0, 0, "card", "card-a", shift=True))

        assert "card-a" not in canvas.store.selection.selection.card_ids
        assert not canvas.store.drag.is_dragging
        canvas.pointer_move(PointerEvent(50, 50))
        await canvas.pointer_up(PointerEvent(50, 50))
        assert canvas.store.active.get_card("card-a").position == Position(x=120, y=140)
        mock_adapter.update_card.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_shift_click_deselect_section_does_not_drag(self, canvas):
        canvas.pointer_down(PointerEvent(0, 0, "section", "sec-ideas", shift=True))
        await canvas.pointer_up()
        canvas.pointer_down(PointerEvent(0, 0, "section", "sec-ideas", shift=True))
        assert canvas.store.selection.selection.section_ids == set()
        assert not canvas.store.drag.is_dragging
