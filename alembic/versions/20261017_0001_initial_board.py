"""Initial board schema: fixed columns and per-column ordered tasks."""

from __future__ import annotations

from datetime import UTC, datetime

import sqlalchemy as sa

from alembic import op

revision = "20261017_0001"
down_revision = None
branch_labels = None
depends_on = None

BOARD_COLUMNS = ("todo", "in-progress", "completed")


def upgrade() -> None:
    board_columns = op.create_table(
        "board_columns",
        sa.Column("column_id", sa.String(), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("column_id"),
    )

    op.create_table(
        "tasks",
        sa.Column("task_id", sa.String(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("column_id", sa.String(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["column_id"], ["board_columns.column_id"]),
        sa.PrimaryKeyConstraint("task_id"),
        sa.UniqueConstraint("column_id", "position", name="uq_tasks_column_position"),
    )
    op.create_index("ix_tasks_column_id", "tasks", ["column_id"], unique=False)

    created_at = datetime.now(tz=UTC).replace(tzinfo=None)
    op.bulk_insert(
        board_columns,
        [
            {"column_id": column_id, "version": 0, "updated_at": created_at}
            for column_id in BOARD_COLUMNS
        ],
    )


def downgrade() -> None:
    op.drop_index("ix_tasks_column_id", table_name="tasks")
    op.drop_table("tasks")
    op.drop_table("board_columns")
