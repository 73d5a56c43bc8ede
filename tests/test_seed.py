from __future__ import annotations

import allure

from task_board.models import BoardColumnId, TaskCreate
from task_board.repository import SQLiteTaskStore
from task_board.seed import SAMPLE_TASKS, seed_board

pytestmark = [
    allure.epic("Task Board"),
    allure.feature("Seeding"),
]


def test_seed_board_replaces_all_tasks(store: SQLiteTaskStore) -> None:
    with store.write_scope(BoardColumnId.TODO) as scope:
        scope.insert_task(title="Stale task", description="", column=BoardColumnId.TODO, order=1)

    result = seed_board(store)

    assert result.tasks_deleted == 1
    assert result.tasks_inserted == len(SAMPLE_TASKS)
    assert [summary.task_count for summary in result.summaries] == [4, 3, 4]
    assert "Stale task" not in {task.title for task in store.list_tasks()}
    for column in BoardColumnId:
        orders = [task.order for task in store.list_tasks(column)]
        assert orders == list(range(1, len(orders) + 1))


def test_seed_board_appends_tasks_without_explicit_order(store: SQLiteTaskStore) -> None:
    result = seed_board(
        store,
        (
            TaskCreate(title="First sample", column=BoardColumnId.COMPLETED),
            TaskCreate(title="Second sample", column=BoardColumnId.COMPLETED),
        ),
    )

    assert result.tasks_deleted == 0
    assert [(task.title, task.order) for task in store.list_tasks(BoardColumnId.COMPLETED)] == [
        ("First sample", 1),
        ("Second sample", 2),
    ]
