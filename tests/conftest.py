"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from task_board.engine import OrderingEngine
from task_board.models import BoardColumnId, TaskCreate, TaskView
from task_board.repository import SQLiteTaskStore


@pytest.fixture()
def store(tmp_path: Path) -> Iterator[SQLiteTaskStore]:
    task_store = SQLiteTaskStore(tmp_path / "board.db")
    task_store.init_schema()
    yield task_store
    task_store.close()


@pytest.fixture()
def engine(store: SQLiteTaskStore) -> OrderingEngine:
    return OrderingEngine(store)


@pytest.fixture()
def add_tasks(engine: OrderingEngine) -> Callable[..., list[TaskView]]:
    """Append tasks named by ``titles`` to ``column`` and return them in order."""

    def _add(column: BoardColumnId, *titles: str) -> list[TaskView]:
        return [engine.insert_task(TaskCreate(title=title, column=column)) for title in titles]

    return _add
