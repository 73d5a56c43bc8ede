"""Controllers for board CLI commands."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from task_board.config import Settings
from task_board.engine import OrderingEngine
from task_board.errors import ValidationError
from task_board.models import BOARD_COLUMN_ORDER, ColumnSummary, TaskCreate, TaskView
from task_board.repository import SQLiteTaskStore
from task_board.seed import seed_board
from task_board.validation import (
    parse_reorder_entry,
    validate_column,
    validate_description,
    validate_order,
    validate_task_id,
    validate_title,
)


@dataclass(slots=True)
class BoardInitCommand:
    """CLI inputs for schema initialization."""

    db_path: Path | None


@dataclass(slots=True)
class BoardListCommand:
    """CLI inputs for task listing."""

    db_path: Path | None
    column: str | None


@dataclass(slots=True)
class BoardShowCommand:
    """CLI inputs for single task lookup."""

    db_path: Path | None
    task_id: str


@dataclass(slots=True)
class BoardAddCommand:
    """CLI inputs for task creation."""

    db_path: Path | None
    title: str
    description: str
    column: str
    order: int | None


@dataclass(slots=True)
class BoardUpdateCommand:
    """CLI inputs for title/description updates."""

    db_path: Path | None
    task_id: str
    title: str | None
    description: str | None


@dataclass(slots=True)
class BoardMoveCommand:
    """CLI inputs for moving a task."""

    db_path: Path | None
    task_id: str
    column: str
    order: int


@dataclass(slots=True)
class BoardDeleteCommand:
    """CLI inputs for task deletion."""

    db_path: Path | None
    task_id: str


@dataclass(slots=True)
class BoardReorderCommand:
    """CLI inputs for bulk reorder."""

    db_path: Path | None
    column: str
    entries: tuple[str, ...]


@dataclass(slots=True)
class BoardNextOrderCommand:
    """CLI inputs for next-order lookup."""

    db_path: Path | None
    column: str


@dataclass(slots=True)
class BoardSeedCommand:
    """CLI inputs for loading the sample board."""

    db_path: Path | None


class BoardCliController:
    """Validates CLI inputs and coordinates ordering engine calls."""

    def init(self, command: BoardInitCommand) -> list[str]:
        settings = _settings(command.db_path)
        with _engine(settings) as engine:
            summaries = engine.column_summaries()
        return [f"Board schema ready: {settings.db_path}", *_format_summaries(summaries)]

    def list_tasks(self, command: BoardListCommand) -> list[str]:
        settings = _settings(command.db_path)
        column = validate_column(command.column) if command.column else None
        with _engine(settings) as engine:
            tasks = engine.list_tasks(column)

        lines: list[str] = []
        columns = (column,) if column is not None else BOARD_COLUMN_ORDER
        for board_column in columns:
            column_tasks = [task for task in tasks if task.column is board_column]
            lines.append(f"{board_column.value} ({len(column_tasks)}):")
            lines.extend(f"  {_format_task(task)}" for task in column_tasks)
        lines.append(f"Total tasks: {len(tasks)}")
        return lines

    def show(self, command: BoardShowCommand) -> list[str]:
        settings = _settings(command.db_path)
        task_id = validate_task_id(command.task_id)
        with _engine(settings) as engine:
            task = engine.get_task(task_id)
        return _format_task_details(task)

    def add(self, command: BoardAddCommand) -> list[str]:
        settings = _settings(command.db_path)
        payload = TaskCreate(
            title=validate_title(command.title, min_length=settings.board.title_min_length),
            description=validate_description(command.description),
            column=validate_column(command.column),
            order=validate_order(command.order) if command.order is not None else None,
        )
        with _engine(settings) as engine:
            task = engine.insert_task(payload)
        return [f"Created task: {_format_task(task)}"]

    def update(self, command: BoardUpdateCommand) -> list[str]:
        settings = _settings(command.db_path)
        task_id = validate_task_id(command.task_id)
        if command.title is None and command.description is None:
            raise ValidationError("Nothing to update: pass --title and/or --description")
        title = (
            validate_title(command.title, min_length=settings.board.title_min_length)
            if command.title is not None
            else None
        )
        description = (
            validate_description(command.description) if command.description is not None else None
        )
        with _engine(settings) as engine:
            task = engine.update_task_details(task_id, title=title, description=description)
        return [f"Updated task: {_format_task(task)}"]

    def move(self, command: BoardMoveCommand) -> list[str]:
        settings = _settings(command.db_path)
        task_id = validate_task_id(command.task_id)
        column = validate_column(command.column)
        order = validate_order(command.order)
        with _engine(settings) as engine:
            task = engine.move_task(task_id, column, order)
        return [f"Moved task: {_format_task(task)}"]

    def delete(self, command: BoardDeleteCommand) -> list[str]:
        settings = _settings(command.db_path)
        task_id = validate_task_id(command.task_id)
        with _engine(settings) as engine:
            engine.delete_task(task_id)
        return [f"Task deleted successfully: {task_id}"]

    def reorder(self, command: BoardReorderCommand) -> list[str]:
        settings = _settings(command.db_path)
        column = validate_column(command.column)
        if not command.entries:
            raise ValidationError("At least one --entry TASK_ID=ORDER is required")
        entries = [parse_reorder_entry(raw) for raw in command.entries]
        with _engine(settings) as engine:
            tasks = engine.bulk_reorder(column, entries)

        lines = [f"Reordered {column.value} ({len(tasks)}):"]
        lines.extend(f"  {_format_task(task)}" for task in tasks)
        return lines

    def next_order(self, command: BoardNextOrderCommand) -> list[str]:
        settings = _settings(command.db_path)
        column = validate_column(command.column)
        with _engine(settings) as engine:
            order = engine.compute_next_order(column)
        return [f"Next order in {column.value}: {order}"]

    def seed(self, command: BoardSeedCommand) -> list[str]:
        settings = _settings(command.db_path)
        with _store(settings) as store:
            result = seed_board(store)
        total = sum(summary.task_count for summary in result.summaries)
        return [
            f"Cleared {result.tasks_deleted} existing tasks",
            f"Inserted {result.tasks_inserted} sample tasks",
            *_format_summaries(result.summaries),
            f"Total: {total} tasks",
        ]


def _settings(db_path: Path | None) -> Settings:
    try:
        settings = Settings.from_env(db_path=db_path)
        settings.validate()
    except ValueError as error:
        raise ValidationError(str(error)) from error
    return settings


@contextmanager
def _store(settings: Settings) -> Iterator[SQLiteTaskStore]:
    store = SQLiteTaskStore(settings.db_path, busy_timeout_ms=settings.store.busy_timeout_ms)
    try:
        store.init_schema()
        yield store
    finally:
        store.close()


@contextmanager
def _engine(settings: Settings) -> Iterator[OrderingEngine]:
    with _store(settings) as store:
        yield OrderingEngine(store, strict_order_bounds=settings.board.strict_order_bounds)


def _format_task(task: TaskView) -> str:
    return f"[{task.order}] {task.title} (id={task.task_id} column={task.column.value})"


def _format_task_details(task: TaskView) -> list[str]:
    return [
        f"Task: {task.task_id}",
        f"  title: {task.title}",
        f"  description: {task.description or '-'}",
        f"  column: {task.column.value}",
        f"  order: {task.order}",
        f"  created_at: {task.created_at.isoformat()}",
        f"  updated_at: {task.updated_at.isoformat()}",
    ]


def _format_summaries(summaries: list[ColumnSummary]) -> list[str]:
    return [
        f"  {summary.column.value}: tasks={summary.task_count} "
        f"max_order={summary.max_order} version={summary.version}"
        for summary in summaries
    ]
