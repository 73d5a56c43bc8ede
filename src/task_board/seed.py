"""Sample board used by ``task-board seed``."""

from __future__ import annotations

import logging

from task_board.models import BOARD_COLUMN_ORDER, BoardColumnId, SeedResult, TaskCreate
from task_board.repository import SQLiteTaskStore

logger = logging.getLogger(__name__)

SAMPLE_TASKS: tuple[TaskCreate, ...] = (
    TaskCreate(
        title="Design user interface mockups",
        description="Create wireframes and mockups for the new dashboard",
        column=BoardColumnId.TODO,
        order=1,
    ),
    TaskCreate(
        title="Write project documentation",
        description="Document the API endpoints and database schema",
        column=BoardColumnId.TODO,
        order=2,
    ),
    TaskCreate(
        title="Setup CI/CD pipeline",
        description="Configure automated testing and deployment",
        column=BoardColumnId.TODO,
        order=3,
    ),
    TaskCreate(
        title="Research new technologies",
        description="Investigate modern frontend frameworks and libraries",
        column=BoardColumnId.TODO,
        order=4,
    ),
    TaskCreate(
        title="Implement user authentication",
        description="Add login, logout, and registration functionality",
        column=BoardColumnId.IN_PROGRESS,
        order=1,
    ),
    TaskCreate(
        title="Create database migrations",
        description="Setup initial database structure and seed data",
        column=BoardColumnId.IN_PROGRESS,
        order=2,
    ),
    TaskCreate(
        title="Build responsive layout",
        description="Ensure the application works on mobile devices",
        column=BoardColumnId.IN_PROGRESS,
        order=3,
    ),
    TaskCreate(
        title="Setup development environment",
        description="Install Python, SQLite, and configure project",
        column=BoardColumnId.COMPLETED,
        order=1,
    ),
    TaskCreate(
        title="Create project repository",
        description="Initialize Git repository and push to GitHub",
        column=BoardColumnId.COMPLETED,
        order=2,
    ),
    TaskCreate(
        title="Define project requirements",
        description="Gather and document all functional requirements",
        column=BoardColumnId.COMPLETED,
        order=3,
    ),
    TaskCreate(
        title="Choose technology stack",
        description="Select Python, SQLModel, and SQLite",
        column=BoardColumnId.COMPLETED,
        order=4,
    ),
)


def seed_board(
    store: SQLiteTaskStore,
    tasks: tuple[TaskCreate, ...] = SAMPLE_TASKS,
) -> SeedResult:
    """Replace every task on the board with ``tasks`` in one transaction."""

    with store.write_scope(*BOARD_COLUMN_ORDER) as scope:
        deleted = scope.delete_all_tasks()
        next_order = {column: 1 for column in BOARD_COLUMN_ORDER}
        for task in tasks:
            order = task.order if task.order is not None else next_order[task.column]
            scope.insert_task(
                title=task.title,
                description=task.description,
                column=task.column,
                order=order,
            )
            next_order[task.column] = max(next_order[task.column], order + 1)

    logger.info("Seeded board: deleted=%s inserted=%s", deleted, len(tasks))
    return SeedResult(
        tasks_deleted=deleted,
        tasks_inserted=len(tasks),
        summaries=store.column_summaries(),
    )
