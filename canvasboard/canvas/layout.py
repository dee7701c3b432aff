"""
CanvasBoard — Connection Layout
=================================

What:  Derives anchor points and a cubic bezier path for every connection on a
       board from the endpoint cards' positions and anchor sides.
How:   Each card is assumed to occupy a fixed 260×150 footprint. Control points
       sit ``curvature = min(distance * 0.4, 100)`` away from each endpoint,
       pushed outward from the card edge named by the anchor.

Connections whose endpoint cards are missing are skipped, not reported.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from canvasboard.canvas import geometry
from canvasboard.canvas.models import AnchorSide, Board, Connection, Position

CARD_WIDTH = 260.0
CARD_HEIGHT = 150.0
CURVATURE_FACTOR = 0.4
MAX_CURVATURE = 100.0

# Unit direction a control point leaves each anchor side in
_OUTWARD: Dict[str, Tuple[float, float]] = {
    "top": (0.0, -1.0),
    "right": (1.0, 0.0),
    "bottom": (0.0, 1.0),
    "left": (-1.0, 0.0),
}


@dataclass(frozen=True)
class ConnectionPath:
    connection_id: str
    start: Position
    control1: Position
    control2: Position
    end: Position
    curvature: float
    color: Optional[str] = None
    label: Optional[str] = None

    @property
    def svg_path(self) -> str:
        return (
            f"M {_num(self.start.x)} {_num(self.start.y)} "
            f"C {_num(self.control1.x)} {_num(self.control1.y)}, "
            f"{_num(self.control2.x)} {_num(self.control2.y)}, "
            f"{_num(self.end.x)} {_num(self.end.y)}"
        )


def _num(value: float) -> str:
    """Render 130.0 as '130' and keep fractions as-is."""
    return str(int(value)) if float(value).is_integer() else str(value)


def anchor_point(card_position: Position, side: AnchorSide) -> Position:
    """Mid-point of the named edge of a card at ``card_position``."""
    x, y = card_position.x, card_position.y
    if side == "top":
        return Position(x=x + CARD_WIDTH / 2, y=y)
    if side == "right":
        return Position(x=x + CARD_WIDTH, y=y + CARD_HEIGHT / 2)
    if side == "bottom":
        return Position(x=x + CARD_WIDTH / 2, y=y + CARD_HEIGHT)
    if side == "left":
        return Position(x=x, y=y + CARD_HEIGHT / 2)
    raise ValueError(f"Unknown anchor side: {side!r}")


def control_offset(side: AnchorSide, curvature: float) -> Position:
    dx, dy = _OUTWARD[side]
    return Position(x=dx * curvature, y=dy * curvature)


def curvature_for(start: Position, end: Position) -> float:
    return min(geometry.distance(start, end) * CURVATURE_FACTOR, MAX_CURVATURE)


def connection_path(
    connection: Connection, from_position: Position, to_position: Position
) -> ConnectionPath:
    start = anchor_point(from_position, connection.from_.position)
    end = anchor_point(to_position, connection.to.position)
    curvature = curvature_for(start, end)
    out = control_offset(connection.from_.position, curvature)
    back = control_offset(connection.to.position, curvature)
    return ConnectionPath(
        connection_id=connection.id,
        start=start,
        control1=geometry.offset(start, out.x, out.y),
        control2=geometry.offset(end, back.x, back.y),
        end=end,
        curvature=curvature,
        color=connection.color,
        label=connection.label,
    )


def layout_connections(board: Board) -> List[ConnectionPath]:
    """Paths for every connection whose two endpoint cards exist, in board order."""
    positions = {card.id: card.position for card in board.cards}
    paths: List[ConnectionPath] = []
    for connection in board.connections:
        from_position = positions.get(connection.from_.card_id)
        to_position = positions.get(connection.to.card_id)
        if from_position is None or to_position is None:
            continue
        paths.append(connection_path(connection, from_position, to_position))
    return paths
