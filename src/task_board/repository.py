"""SQLModel-backed task store for the board."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from uuid import uuid4

from sqlalchemy import func
from sqlalchemy import update as sa_update
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlmodel import Session, col, delete, select

from task_board.errors import ConflictError, StoreError
from task_board.models import (
    BOARD_COLUMN_ORDER,
    BoardColumnId,
    ColumnSummary,
    TaskView,
)
from task_board.storage.alembic_runner import upgrade_head
from task_board.storage.common import (
    build_sqlite_engine,
    to_db_datetime,
    to_utc_aware_datetime,
    utc_now,
)
from task_board.storage.sqlmodel_models import BoardColumn, BoardTask

logger = logging.getLogger(__name__)

# SQLite reports the violated columns, not the constraint name.
_POSITION_CONFLICT_MARKER = "tasks.column_id, tasks.position"


class SQLiteTaskStore:
    """Facade that persists board tasks using SQLModel and Alembic.

    Reads run in short standalone sessions. Every multi-record mutation runs in a
    ``write_scope``: one transaction that first claims the columns it touches by
    bumping their version counters. The claim is the first write of the
    transaction, so SQLite grants the database write lock before anything is
    read, which serializes concurrent mutations of the same column.
    """

    def __init__(self, db_path: Path, *, busy_timeout_ms: int = 5_000) -> None:
        self.db_path = db_path
        self.busy_timeout_ms = busy_timeout_ms
        self.engine = build_sqlite_engine(db_path=db_path, busy_timeout_ms=busy_timeout_ms)

    def close(self) -> None:
        self.engine.dispose()

    def init_schema(self) -> None:
        with _translate_store_errors():
            upgrade_head(self.db_path)
            self._ensure_board_columns()

    @contextmanager
    def write_scope(self, *columns: BoardColumnId) -> Iterator[TaskWriteScope]:
        """Open one transaction that claims ``columns`` and commits on success."""

        with _translate_store_errors(), Session(self.engine) as session:
            scope = TaskWriteScope(session)
            scope.claim(columns)
            yield scope
            session.commit()

    def get_task(self, task_id: str) -> TaskView | None:
        with _translate_store_errors(), Session(self.engine) as session:
            row = session.get(BoardTask, task_id)
            return _to_task_view(row) if row is not None else None

    def list_tasks(self, column: BoardColumnId | None = None) -> list[TaskView]:
        """Tasks sorted by board column, then by order."""

        statement = select(BoardTask)
        if column is not None:
            statement = statement.where(col(BoardTask.column_id) == column.value)
        with _translate_store_errors(), Session(self.engine) as session:
            rows = session.exec(statement.order_by(col(BoardTask.position))).all()
            tasks = [_to_task_view(row) for row in rows]
        return sorted(tasks, key=lambda task: (BOARD_COLUMN_ORDER.index(task.column), task.order))

    def max_order(self, column: BoardColumnId) -> int:
        with _translate_store_errors(), Session(self.engine) as session:
            return _max_position(session, column)

    def column_summaries(self) -> list[ColumnSummary]:
        with _translate_store_errors(), Session(self.engine) as session:
            versions = {
                row.column_id: row.version for row in session.exec(select(BoardColumn)).all()
            }
            stats = {
                str(column_id): (int(count), int(max_position or 0))
                for column_id, count, max_position in session.exec(
                    select(
                        col(BoardTask.column_id),
                        func.count(),
                        func.max(col(BoardTask.position)),
                    ).group_by(col(BoardTask.column_id)),
                ).all()
            }

        summaries: list[ColumnSummary] = []
        for column in BOARD_COLUMN_ORDER:
            task_count, max_order = stats.get(column.value, (0, 0))
            summaries.append(
                ColumnSummary(
                    column=column,
                    task_count=task_count,
                    max_order=max_order,
                    version=versions.get(column.value, 0),
                ),
            )
        return summaries

    def _ensure_board_columns(self) -> None:
        with Session(self.engine) as session:
            existing = set(session.exec(select(BoardColumn.column_id)).all())
            for column in BOARD_COLUMN_ORDER:
                if column.value not in existing:
                    session.add(BoardColumn(column_id=column.value, version=0, updated_at=utc_now()))
            session.commit()


class TaskWriteScope:
    """Record-level primitives available inside one store transaction.

    Order shifts are applied in two statements: matching rows are first moved to
    negative orders, then flipped back. SQLite checks uniqueness row by row, so
    this keeps ``(column, order)`` unique after every statement.
    """

    PARKED_ORDER = 0

    def __init__(self, session: Session) -> None:
        self.session = session
        self.now = utc_now()

    def claim(self, columns: tuple[BoardColumnId, ...]) -> None:
        column_ids = [column.value for column in BOARD_COLUMN_ORDER if column in columns]
        if not column_ids:
            raise ValueError("write scope must claim at least one column")
        result = self.session.exec(
            sa_update(BoardColumn)
            .where(col(BoardColumn.column_id).in_(column_ids))
            .values(
                version=col(BoardColumn.version) + 1,
                updated_at=to_db_datetime(self.now),
            )
            .execution_options(synchronize_session=False),
        )
        if result.rowcount != len(column_ids):
            raise StoreError(
                f"Board columns are missing for {column_ids}; run `task-board init` first.",
            )

    def get_task(self, task_id: str) -> TaskView | None:
        row = self.session.get(BoardTask, task_id, populate_existing=True)
        return _to_task_view(row) if row is not None else None

    def max_order(self, column: BoardColumnId) -> int:
        return _max_position(self.session, column)

    def count_tasks(self, column: BoardColumnId) -> int:
        return int(
            self.session.exec(
                select(func.count())
                .select_from(BoardTask)
                .where(col(BoardTask.column_id) == column.value),
            ).one(),
        )

    def shift(
        self,
        column: BoardColumnId,
        *,
        delta: int,
        lower: int,
        upper: int | None = None,
    ) -> int:
        """Add ``delta`` to every order in ``[lower, upper]`` of ``column``."""

        conditions = [
            col(BoardTask.column_id) == column.value,
            col(BoardTask.position) >= lower,
        ]
        if upper is not None:
            conditions.append(col(BoardTask.position) <= upper)
        result = self.session.exec(
            sa_update(BoardTask)
            .where(*conditions)
            .values(
                position=-(col(BoardTask.position) + delta),
                updated_at=to_db_datetime(self.now),
            )
            .execution_options(synchronize_session=False),
        )
        shifted = int(result.rowcount)
        if shifted:
            self.settle_orders(column)
        logger.debug(
            "Shifted %s task(s) in %s by %+d (range %s..%s)",
            shifted,
            column.value,
            delta,
            lower,
            upper if upper is not None else "end",
        )
        return shifted

    def settle_orders(self, column: BoardColumnId) -> int:
        """Flip negative (pending) orders of ``column`` back to positive."""

        result = self.session.exec(
            sa_update(BoardTask)
            .where(
                col(BoardTask.column_id) == column.value,
                col(BoardTask.position) < 0,
            )
            .values(position=-col(BoardTask.position))
            .execution_options(synchronize_session=False),
        )
        return int(result.rowcount)

    def insert_task(
        self,
        *,
        title: str,
        description: str,
        column: BoardColumnId,
        order: int,
    ) -> str:
        task_id = str(uuid4())
        self.session.add(
            BoardTask(
                task_id=task_id,
                title=title,
                description=description,
                column_id=column.value,
                position=order,
                created_at=self.now,
                updated_at=self.now,
            ),
        )
        self.session.flush()
        return task_id

    def delete_task(self, task_id: str) -> bool:
        result = self.session.exec(delete(BoardTask).where(col(BoardTask.task_id) == task_id))
        return int(result.rowcount) == 1

    def delete_all_tasks(self) -> int:
        return int(self.session.exec(delete(BoardTask)).rowcount)

    def park_task(self, task_id: str) -> None:
        """Move a task to the reserved order 0 so its slot can be reused."""

        self._update_task(task_id, position=self.PARKED_ORDER)

    def place_task(self, task_id: str, *, column: BoardColumnId, order: int) -> None:
        self._update_task(task_id, column_id=column.value, position=order)

    def update_details(
        self,
        task_id: str,
        *,
        title: str | None = None,
        description: str | None = None,
    ) -> None:
        values: dict[str, object] = {}
        if title is not None:
            values["title"] = title
        if description is not None:
            values["description"] = description
        self._update_task(task_id, **values)

    def assign_pending_order(self, task_id: str, *, column: BoardColumnId, order: int) -> bool:
        """Stage ``order`` for a task of ``column``; ``settle_orders`` applies it.

        Returns False when the task is not in ``column``.
        """

        result = self.session.exec(
            sa_update(BoardTask)
            .where(
                col(BoardTask.task_id) == task_id,
                col(BoardTask.column_id) == column.value,
            )
            .values(position=-order, updated_at=to_db_datetime(self.now))
            .execution_options(synchronize_session=False),
        )
        return int(result.rowcount) == 1

    def _update_task(self, task_id: str, **values: object) -> None:
        self.session.exec(
            sa_update(BoardTask)
            .where(col(BoardTask.task_id) == task_id)
            .values(updated_at=to_db_datetime(self.now), **values)
            .execution_options(synchronize_session=False),
        )


@contextmanager
def _translate_store_errors() -> Iterator[None]:
    try:
        yield
    except IntegrityError as error:
        if _POSITION_CONFLICT_MARKER in str(error.orig):
            raise ConflictError(
                "A task with this order already exists in the column",
            ) from error
        raise StoreError(f"Store rejected the write: {error.orig}") from error
    except OperationalError as error:
        raise StoreError(f"Store operation failed: {error.orig}") from error


def _max_position(session: Session, column: BoardColumnId) -> int:
    value = session.exec(
        select(func.max(col(BoardTask.position))).where(
            col(BoardTask.column_id) == column.value,
        ),
    ).one()
    return int(value or 0)


def _to_task_view(row: BoardTask) -> TaskView:
    return TaskView(
        task_id=row.task_id,
        title=row.title,
        description=row.description,
        column=BoardColumnId(row.column_id),
        order=row.position,
        created_at=to_utc_aware_datetime(row.created_at),
        updated_at=to_utc_aware_datetime(row.updated_at),
    )
