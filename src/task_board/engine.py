"""Ordering engine: dense per-column task ordering on top of the task store."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from task_board.errors import ConflictError, TaskNotFoundError, ValidationError
from task_board.models import (
    BoardColumnId,
    ColumnSummary,
    ReorderEntry,
    TaskCreate,
    TaskView,
)
from task_board.repository import SQLiteTaskStore, TaskWriteScope
from task_board.validation import validate_order

logger = logging.getLogger(__name__)


class OrderingEngine:
    """Stateless ordering operations over an explicit task store.

    Each operation reads current state inside its own write scope, computes the
    target orders and applies them before returning. Nothing is cached between
    calls.
    """

    def __init__(self, store: SQLiteTaskStore, *, strict_order_bounds: bool = False) -> None:
        self.store = store
        self.strict_order_bounds = strict_order_bounds

    def compute_next_order(self, column: BoardColumnId) -> int:
        """Order that appends a task to ``column`` (``max + 1``, or 1 when empty)."""

        return self.store.max_order(column) + 1

    def insert_task(self, payload: TaskCreate) -> TaskView:
        column = payload.column
        if payload.order is not None:
            validate_order(payload.order)
        with self.store.write_scope(column) as scope:
            if payload.order is None:
                order = scope.max_order(column) + 1
            else:
                order = payload.order
                if self.strict_order_bounds:
                    _check_bounds(order, upper=scope.count_tasks(column) + 1, column=column)
                scope.shift(column, delta=1, lower=order)
            task_id = scope.insert_task(
                title=payload.title,
                description=payload.description,
                column=column,
                order=order,
            )
            task = _require_task(scope, task_id)
        logger.info("Inserted task %s into %s at order %s", task.task_id, column.value, order)
        return task

    def delete_task(self, task_id: str) -> None:
        existing = self._find_task(task_id)
        with self.store.write_scope(existing.column) as scope:
            # Re-read under the claim: the task may have moved since the lookup.
            task = _require_task(scope, task_id)
            if task.column is not existing.column:
                raise ConflictError(
                    f"Task {task_id} moved to {task.column.value} concurrently; retry the delete",
                )
            scope.delete_task(task_id)
            compacted = scope.shift(task.column, delta=-1, lower=task.order + 1)
        logger.info(
            "Deleted task %s from %s at order %s (compacted %s)",
            task_id,
            task.column.value,
            task.order,
            compacted,
        )

    def move_task(self, task_id: str, column: BoardColumnId, order: int) -> TaskView:
        """Move a task to ``order`` in ``column``, shifting its neighbours."""

        order = validate_order(order)
        existing = self._find_task(task_id)
        with self.store.write_scope(existing.column, column) as scope:
            task = _require_task(scope, task_id)
            if task.column is not existing.column:
                raise ConflictError(
                    f"Task {task_id} moved to {task.column.value} concurrently; retry the move",
                )
            if task.column is column:
                moved = self._move_within_column(scope, task, order)
            else:
                moved = self._move_across_columns(scope, task, column, order)
        return moved

    def bulk_reorder(
        self,
        column: BoardColumnId,
        entries: Sequence[ReorderEntry],
    ) -> list[TaskView]:
        """Assign each listed task its order without shifting unlisted tasks.

        Entries are not cross-checked against each other. A colliding assignment
        is rejected by the store and rolls the whole batch back.
        """

        for entry in entries:
            validate_order(entry.order)
        with self.store.write_scope(column) as scope:
            for entry in entries:
                if not scope.assign_pending_order(entry.task_id, column=column, order=entry.order):
                    logger.warning(
                        "Skipping reorder entry for task %s: not found in %s",
                        entry.task_id,
                        column.value,
                    )
            scope.settle_orders(column)
        logger.info("Reordered %s entries in %s", len(entries), column.value)
        return self.store.list_tasks(column)

    def update_task_details(
        self,
        task_id: str,
        *,
        title: str | None = None,
        description: str | None = None,
    ) -> TaskView:
        existing = self._find_task(task_id)
        with self.store.write_scope(existing.column) as scope:
            _require_task(scope, task_id)
            scope.update_details(task_id, title=title, description=description)
            task = _require_task(scope, task_id)
        logger.info("Updated details of task %s", task_id)
        return task

    def get_task(self, task_id: str) -> TaskView:
        return self._find_task(task_id)

    def list_tasks(self, column: BoardColumnId | None = None) -> list[TaskView]:
        return self.store.list_tasks(column)

    def column_summaries(self) -> list[ColumnSummary]:
        return self.store.column_summaries()

    def _move_within_column(self, scope: TaskWriteScope, task: TaskView, order: int) -> TaskView:
        column = task.column
        if self.strict_order_bounds:
            _check_bounds(order, upper=scope.count_tasks(column), column=column)
        if order == task.order:
            logger.info("Task %s already at order %s in %s", task.task_id, order, column.value)
            return task

        scope.park_task(task.task_id)
        if order < task.order:
            scope.shift(column, delta=1, lower=order, upper=task.order - 1)
        else:
            scope.shift(column, delta=-1, lower=task.order + 1, upper=order)
        scope.place_task(task.task_id, column=column, order=order)
        logger.info(
            "Moved task %s within %s from order %s to %s",
            task.task_id,
            column.value,
            task.order,
            order,
        )
        return _require_task(scope, task.task_id)

    def _move_across_columns(
        self,
        scope: TaskWriteScope,
        task: TaskView,
        column: BoardColumnId,
        order: int,
    ) -> TaskView:
        if self.strict_order_bounds:
            _check_bounds(order, upper=scope.count_tasks(column) + 1, column=column)

        scope.park_task(task.task_id)
        scope.shift(task.column, delta=-1, lower=task.order + 1)
        scope.shift(column, delta=1, lower=order)
        scope.place_task(task.task_id, column=column, order=order)
        logger.info(
            "Moved task %s from %s order %s to %s order %s",
            task.task_id,
            task.column.value,
            task.order,
            column.value,
            order,
        )
        return _require_task(scope, task.task_id)

    def _find_task(self, task_id: str) -> TaskView:
        task = self.store.get_task(task_id)
        if task is None:
            raise TaskNotFoundError(f"Task not found: {task_id}", task_id=task_id)
        return task


def _require_task(scope: TaskWriteScope, task_id: str) -> TaskView:
    task = scope.get_task(task_id)
    if task is None:
        raise TaskNotFoundError(f"Task not found: {task_id}", task_id=task_id)
    return task


def _check_bounds(order: int, *, upper: int, column: BoardColumnId) -> None:
    if order > max(upper, 1):
        raise ValidationError(
            f"Order {order} is out of range for {column.value} (allowed 1..{max(upper, 1)})",
        )
