"""
CanvasBoard — Selection & Drag Unit Tests
===========================================

What we test:
    ✅ plain click replaces the whole selection
    ✅ modifier click toggles within one set only
    ✅ prune drops ids of deleted entities
    ✅ one drag at a time; end_drag returns the final state
"""

from canvasboard.canvas.models import Position
from canvasboard.canvas.selection import DragController, SelectionController


class TestSelection:
    def setup_method(self):
        self.controller = SelectionController()

    def test_plain_click_replaces_selection(self):
        self.controller.select_card("a")
        self.controller.select_section("s1", additive=True)
        selection = self.controller.select_card("b")
        assert selection.card_ids == {"b"}
        assert selection.section_ids == set()

    def test_plain_click_on_section_clears_cards(self):
        self.controller.select_card("a")
        selection = self.controller.select_section("s1")
        assert selection.card_ids == set()
        assert selection.section_ids == {"s1"}

    def test_modifier_click_toggles(self):
        self.controller.select_card("a")
        self.controller.select_card("b", additive=True)
        assert self.controller.selection.card_ids == {"a", "b"}
        self.controller.select_card("a", additive=True)
        assert self.controller.selection.card_ids == {"b"}

    def test_modifier_click_keeps_other_sets(self):
        self.controller.select_section("s1")
        self.controller.select_connection("c1", additive=True)
        assert self.controller.selection.section_ids == {"s1"}
        assert self.controller.selection.connection_ids == {"c1"}

    def test_clear(self):
        self.controller.select_card("a")
        assert self.controller.clear().is_empty

    def test_prune(self, plan_board):
        self.controller.select_card("card-a")
        self.controller.select_card("gone", additive=True)
        self.controller.select_section("sec-ideas", additive=True)
        selection = self.controller.prune(plan_board)
        assert selection.card_ids == {"card-a"}
        assert selection.section_ids == {"sec-ideas"}

    def test_prune_without_board_clears(self):
        self.controller.select_card("a")
        assert self.controller.prune(None).is_empty


class TestDrag:
    def setup_method(self):
        self.controller = DragController()

    def test_update_while_idle_returns_none(self):
        assert self.controller.update_drag(Position(x=1, y=1)) is None

    def test_drag_lifecycle(self):
        self.controller.start_drag("card", "a", Position(x=10, y=10))
        state = self.controller.update_drag(Position(x=40, y=-5))
        assert (state.delta.x, state.delta.y) == (30, -15)
        final = self.controller.end_drag()
        assert final.current == Position(x=40, y=-5)
        assert not self.controller.is_dragging

    def test_new_drag_replaces_active_one(self):
        self.controller.start_drag("card", "a", Position(x=0, y=0))
        self.controller.start_drag("section", "s1", Position(x=5, y=5))
        assert self.controller.state.kind == "section"
        assert self.controller.state.entity_id == "s1"

    def test_end_drag_when_idle(self):
        assert self.controller.end_drag() is None
