"""Domain models for board tasks and ordering operations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class BoardColumnId(str, Enum):
    """Fixed task-status columns, in display order."""

    TODO = "todo"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


BOARD_COLUMN_ORDER: tuple[BoardColumnId, ...] = tuple(BoardColumnId)


@dataclass(slots=True)
class TaskView:
    """Task snapshot returned by the engine."""

    task_id: str
    title: str
    description: str
    column: BoardColumnId
    order: int
    created_at: datetime
    updated_at: datetime


@dataclass(slots=True)
class TaskCreate:
    """Validated payload for a new task.

    ``order=None`` appends the task after the current column maximum.
    """

    title: str
    column: BoardColumnId
    description: str = ""
    order: int | None = None


@dataclass(slots=True, frozen=True)
class ReorderEntry:
    """One ``(task_id, order)`` assignment of a bulk reorder."""

    task_id: str
    order: int


@dataclass(slots=True)
class ColumnSummary:
    """Per-column occupancy and claim counter."""

    column: BoardColumnId
    task_count: int
    max_order: int
    version: int


@dataclass(slots=True)
class SeedResult:
    """Outcome of loading the sample board."""

    tasks_deleted: int
    tasks_inserted: int
    summaries: list[ColumnSummary]
