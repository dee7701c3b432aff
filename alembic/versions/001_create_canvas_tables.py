"""Create canvas tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates boards, sections, notes, cards and connections.
How:   Generic UUID/DateTime types so the same revision runs on PostgreSQL
       and SQLite. Child rows reference their board with ON DELETE CASCADE;
       cards reference their section with ON DELETE SET NULL.

Rollback: downgrade() drops all five tables (destructive).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(include_updated: bool = True):
    columns = [sa.Column("created_at", sa.DateTime(timezone=True), nullable=False)]
    if include_updated:
        columns.append(sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False))
    return columns


def upgrade() -> None:
    op.create_table(
        "boards",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("thumbnail", sa.Text(), nullable=True),
        sa.Column("zoom", sa.Float(), nullable=False, server_default=sa.text("1")),
        sa.Column("pan_x", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("pan_y", sa.Float(), nullable=False, server_default=sa.text("0")),
        *_timestamps(),
    )
    op.create_index("idx_boards_updated_at", "boards", [sa.text("updated_at DESC")])

    op.create_table(
        "sections",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "board_id",
            sa.Uuid(),
            sa.ForeignKey("boards.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("pos_x", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("pos_y", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("width", sa.Float(), nullable=False, server_default=sa.text("400")),
        sa.Column("height", sa.Float(), nullable=False, server_default=sa.text("300")),
        sa.Column("color", sa.String(32), nullable=True),
        sa.Column("is_collapsed", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index("ix_sections_board_id", "sections", ["board_id"])

    op.create_table(
        "notes",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False, server_default="New Note"),
        sa.Column("content", sa.Text(), nullable=False, server_default=""),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("color", sa.String(32), nullable=True),
        *_timestamps(),
    )
    op.create_index("idx_notes_updated_at", "notes", [sa.text("updated_at DESC")])

    op.create_table(
        "cards",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "board_id",
            sa.Uuid(),
            sa.ForeignKey("boards.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "section_id",
            sa.Uuid(),
            sa.ForeignKey("sections.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("note_id", sa.Uuid(), sa.ForeignKey("notes.id"), nullable=False),
        sa.Column("kind", sa.String(16), nullable=False, server_default="text"),
        sa.Column("pos_x", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("pos_y", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column("caption", sa.Text(), nullable=True),
        sa.Column("url", sa.Text(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("favicon", sa.Text(), nullable=True),
        sa.Column("preview_image", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_cards_board_id", "cards", ["board_id"])
    op.create_index("ix_cards_section_id", "cards", ["section_id"])

    op.create_table(
        "connections",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "board_id",
            sa.Uuid(),
            sa.ForeignKey("boards.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "from_card_id",
            sa.Uuid(),
            sa.ForeignKey("cards.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "to_card_id",
            sa.Uuid(),
            sa.ForeignKey("cards.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("from_anchor", sa.String(8), nullable=False, server_default="bottom"),
        sa.Column("to_anchor", sa.String(8), nullable=False, server_default="top"),
        sa.Column("color", sa.String(32), nullable=True),
        sa.Column("label", sa.String(255), nullable=True),
        *_timestamps(include_updated=False),
    )
    op.create_index("ix_connections_board_id", "connections", ["board_id"])
    op.create_index("ix_connections_from_card_id", "connections", ["from_card_id"])
    op.create_index("ix_connections_to_card_id", "connections", ["to_card_id"])


def downgrade() -> None:
    op.drop_table("connections")
    op.drop_table("cards")
    op.drop_table("notes")
    op.drop_table("sections")
    op.drop_table("boards")
