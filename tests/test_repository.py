from __future__ import annotations

import sqlite3
from pathlib import Path

import allure
import pytest

from task_board.engine import OrderingEngine
from task_board.errors import ConflictError, StoreError
from task_board.models import BoardColumnId, TaskCreate
from task_board.repository import SQLiteTaskStore
from task_board.storage.common import connect_sqlite_with_policy

pytestmark = [
    allure.epic("Task Board"),
    allure.feature("Task Store"),
]

TODO = BoardColumnId.TODO
IN_PROGRESS = BoardColumnId.IN_PROGRESS


def _insert(store: SQLiteTaskStore, column: BoardColumnId, *orders: int) -> list[str]:
    with store.write_scope(column) as scope:
        return [
            scope.insert_task(
                title=f"Stored task {order}",
                description="",
                column=column,
                order=order,
            )
            for order in orders
        ]


def _positions(store: SQLiteTaskStore, column: BoardColumnId) -> list[tuple[str, int]]:
    return [(task.title, task.order) for task in store.list_tasks(column)]


def test_write_scope_claims_columns_by_bumping_versions(store: SQLiteTaskStore) -> None:
    with store.write_scope(TODO, IN_PROGRESS, TODO):
        pass

    versions = {summary.column: summary.version for summary in store.column_summaries()}
    assert versions == {
        BoardColumnId.TODO: 1,
        BoardColumnId.IN_PROGRESS: 1,
        BoardColumnId.COMPLETED: 0,
    }


def test_write_scope_rolls_back_on_error(store: SQLiteTaskStore) -> None:
    with pytest.raises(RuntimeError, match="boom"):
        with store.write_scope(TODO) as scope:
            scope.insert_task(title="Rolled back task", description="", column=TODO, order=1)
            raise RuntimeError("boom")

    assert store.list_tasks() == []
    assert store.column_summaries()[0].version == 0


def test_duplicate_column_order_is_rejected_with_conflict(store: SQLiteTaskStore) -> None:
    _insert(store, TODO, 1)

    with pytest.raises(ConflictError) as error:
        _insert(store, TODO, 1)

    assert error.value.code == "conflict"
    assert error.value.exit_code == 4
    assert len(store.list_tasks(TODO)) == 1


def test_same_order_is_allowed_in_different_columns(store: SQLiteTaskStore) -> None:
    _insert(store, TODO, 1)
    _insert(store, IN_PROGRESS, 1)

    assert [task.order for task in store.list_tasks()] == [1, 1]


def test_shift_moves_only_the_requested_range(store: SQLiteTaskStore) -> None:
    _insert(store, TODO, 1, 2, 3, 5)

    with store.write_scope(TODO) as scope:
        assert scope.shift(TODO, delta=1, lower=2, upper=3) == 2
        assert scope.max_order(TODO) == 5

    assert _positions(store, TODO) == [
        ("Stored task 1", 1),
        ("Stored task 2", 3),
        ("Stored task 3", 4),
        ("Stored task 5", 5),
    ]


def test_open_ended_shift_keeps_orders_unique(store: SQLiteTaskStore) -> None:
    _insert(store, TODO, 1, 2, 3)

    with store.write_scope(TODO) as scope:
        assert scope.shift(TODO, delta=1, lower=1) == 3
    assert [order for _, order in _positions(store, TODO)] == [2, 3, 4]

    with store.write_scope(TODO) as scope:
        assert scope.shift(TODO, delta=-1, lower=2) == 3
    assert [order for _, order in _positions(store, TODO)] == [1, 2, 3]


def test_colliding_shift_is_rejected_and_rolled_back(store: SQLiteTaskStore) -> None:
    _insert(store, TODO, 1, 2, 3)

    with pytest.raises(ConflictError):
        with store.write_scope(TODO) as scope:
            scope.shift(TODO, delta=1, lower=1, upper=2)

    assert [order for _, order in _positions(store, TODO)] == [1, 2, 3]


def test_column_summaries_report_counts_and_maximum(store: SQLiteTaskStore) -> None:
    _insert(store, TODO, 1, 2, 5)
    _insert(store, IN_PROGRESS, 1)

    summaries = store.column_summaries()

    assert [summary.column for summary in summaries] == list(BoardColumnId)
    assert [(summary.task_count, summary.max_order) for summary in summaries] == [
        (3, 5),
        (1, 1),
        (0, 0),
    ]
    assert store.max_order(TODO) == 5
    assert store.max_order(BoardColumnId.COMPLETED) == 0


def test_list_tasks_sorts_by_board_column_then_order(store: SQLiteTaskStore) -> None:
    _insert(store, BoardColumnId.COMPLETED, 2, 1)
    _insert(store, TODO, 2, 1)

    listed = [(task.column, task.order) for task in store.list_tasks()]

    assert listed == [
        (TODO, 1),
        (TODO, 2),
        (BoardColumnId.COMPLETED, 1),
        (BoardColumnId.COMPLETED, 2),
    ]


def test_write_scope_fails_when_board_columns_are_missing(tmp_path: Path) -> None:
    store = SQLiteTaskStore(tmp_path / "missing-columns.db")
    store.init_schema()
    connection = connect_sqlite_with_policy(db_path=store.db_path, busy_timeout_ms=1_000)
    connection.execute("DELETE FROM board_columns")
    connection.commit()
    connection.close()

    with pytest.raises(StoreError, match="task-board init"):
        with store.write_scope(TODO):
            pass

    store.init_schema()
    with store.write_scope(TODO):
        pass
    store.close()


def test_get_task_returns_none_for_unknown_id(store: SQLiteTaskStore) -> None:
    assert store.get_task("00000000-0000-4000-8000-000000000000") is None


def test_locked_database_surfaces_store_error(tmp_path: Path) -> None:
    db_path = tmp_path / "locked.db"
    store = SQLiteTaskStore(db_path, busy_timeout_ms=50)
    store.init_schema()
    engine = OrderingEngine(store)

    blocker = sqlite3.connect(db_path, isolation_level=None)
    blocker.execute("BEGIN IMMEDIATE")
    try:
        with pytest.raises(StoreError, match="Store operation failed") as error:
            engine.insert_task(TaskCreate(title="Blocked task", column=TODO))
    finally:
        blocker.execute("ROLLBACK")
        blocker.close()

    assert error.value.code == "store_error"
    assert isinstance(error.value.__cause__, Exception)
    assert store.list_tasks() == []
    assert engine.insert_task(TaskCreate(title="Unblocked task", column=TODO)).order == 1
    store.close()


def test_store_holds_only_the_sqlalchemy_engine(store: SQLiteTaskStore) -> None:
    assert not hasattr(store, "_connection")
    assert store.engine.url.database == str(store.db_path)
