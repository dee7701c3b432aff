"""
CanvasBoard — Package Initializer
===================================

Two halves share this package:

    ┌─────────────────────────────────────┐
    │  canvas/   client interaction core  │  ← viewport, selection, board
    │            (store, input, layout)   │    aggregate, persistence adapters
    ├─────────────────────────────────────┤
    │  routes/   API layer                │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │  services/ business rules           │  ← cascades, reference checks
    ├─────────────────────────────────────┤
    │  models/ + schemas/                 │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │  database.py                        │  ← async SQLAlchemy sessions
    └─────────────────────────────────────┘

The canvas core talks to the server only through its REST persistence adapter.
"""

__version__ = "1.0.0"
