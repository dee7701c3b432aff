"""ORM models. Importing this package registers every table on Base.metadata."""

from canvasboard.models.board import Board
from canvasboard.models.card import Card
from canvasboard.models.connection import Connection
from canvasboard.models.note import Note
from canvasboard.models.section import Section

__all__ = ["Board", "Card", "Connection", "Note", "Section"]
