"""
CanvasBoard — Connection Layout Unit Tests
============================================

What we test:
    ✅ anchor points on each card edge
    ✅ bezier control points and curvature (capped at 100)
    ✅ connections with a missing endpoint card are skipped
"""

import pytest

from canvasboard.canvas.board import BoardAggregate
from canvasboard.canvas.layout import (
    MAX_CURVATURE,
    anchor_point,
    curvature_for,
    layout_connections,
)
from canvasboard.canvas.models import Board, Connection, ConnectionAnchor, Position, TextCard


def _stacked_board() -> BoardAggregate:
    aggregate = BoardAggregate(Board(name="Layout"))
    aggregate.add_card(TextCard(id="top", position=Position(x=0, y=0)))
    aggregate.add_card(TextCard(id="below", position=Position(x=0, y=300)))
    return aggregate


class TestAnchors:
    @pytest.mark.parametrize(
        "side, expected",
        [
            ("top", (130, 0)),
            ("right", (260, 75)),
            ("bottom", (130, 150)),
            ("left", (0, 75)),
        ],
    )
    def test_edge_midpoints(self, side, expected):
        point = anchor_point(Position(x=0, y=0), side)
        assert (point.x, point.y) == expected


class TestPaths:
    def test_vertical_bottom_to_top(self):
        aggregate = _stacked_board()
        connection = aggregate.add_connection("top", "below", "bottom", "top")

        [path] = layout_connections(aggregate.board)

        assert path.connection_id == connection.id
        assert (path.start.x, path.start.y) == (130, 150)
        assert (path.end.x, path.end.y) == (130, 300)
        assert path.curvature == pytest.approx(60)
        assert (path.control1.x, path.control1.y) == pytest.approx((130, 210))
        assert (path.control2.x, path.control2.y) == pytest.approx((130, 240))
        assert path.svg_path.startswith("M 130 150 C 130 210")

    def test_curvature_is_capped(self):
        far = curvature_for(Position(x=0, y=0), Position(x=1000, y=0))
        assert far == MAX_CURVATURE

    def test_side_anchors_push_outward(self):
        aggregate = BoardAggregate(Board(name="Sideways"))
        aggregate.add_card(TextCard(id="l", position=Position(x=0, y=0)))
        aggregate.add_card(TextCard(id="r", position=Position(x=500, y=0)))
        aggregate.add_connection("l", "r", "right", "left")

        [path] = layout_connections(aggregate.board)

        assert path.control1.x > path.start.x
        assert path.control2.x < path.end.x

    def test_dangling_connection_is_skipped(self):
        board = Board(
            name="Broken",
            cards=[TextCard(id="only")],
            connections=[
                Connection(
                    from_=ConnectionAnchor(card_id="only", position="bottom"),
                    to=ConnectionAnchor(card_id="gone", position="top"),
                )
            ],
        )
        assert layout_connections(board) == []
