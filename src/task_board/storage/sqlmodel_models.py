"""SQLModel ORM tables for board storage."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Text, UniqueConstraint
from sqlmodel import Field, SQLModel

TASK_POSITION_UNIQUE_CONSTRAINT = "uq_tasks_column_position"


class BoardColumn(SQLModel, table=True):
    __tablename__ = "board_columns"  # type: ignore[bad-override]

    column_id: str = Field(primary_key=True)
    version: int = Field(default=0, sa_column=Column(Integer, nullable=False, server_default="0"))
    updated_at: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False))


class BoardTask(SQLModel, table=True):
    __tablename__ = "tasks"  # type: ignore[bad-override]
    __table_args__ = (
        UniqueConstraint(
            "column_id",
            "position",
            name=TASK_POSITION_UNIQUE_CONSTRAINT,
        ),
    )

    task_id: str = Field(primary_key=True)
    title: str
    description: str = Field(
        default="",
        sa_column=Column(Text, nullable=False, server_default=""),
    )
    column_id: str = Field(
        sa_column=Column(
            ForeignKey("board_columns.column_id"),
            nullable=False,
            index=True,
        ),
    )
    position: int
    created_at: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False))
    updated_at: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False))
