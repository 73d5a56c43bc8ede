"""Input validation for the request layer."""

from __future__ import annotations

from uuid import UUID

from task_board.errors import ValidationError
from task_board.models import BoardColumnId, ReorderEntry

DEFAULT_TITLE_MIN_LENGTH = 5


def validate_column(value: str | BoardColumnId) -> BoardColumnId:
    if isinstance(value, BoardColumnId):
        return value
    try:
        return BoardColumnId(value.strip())
    except ValueError as error:
        allowed = ", ".join(column.value for column in BoardColumnId)
        raise ValidationError(
            f"Invalid column {value!r}. Must be one of: {allowed}",
        ) from error


def validate_title(value: str, *, min_length: int = DEFAULT_TITLE_MIN_LENGTH) -> str:
    """Return the trimmed title or raise when it is shorter than ``min_length``."""

    title = value.strip()
    if not title:
        raise ValidationError("Task title is required")
    if len(title) < min_length:
        raise ValidationError(f"Title must be at least {min_length} characters long")
    return title


def validate_description(value: str | None) -> str:
    return (value or "").strip()


def validate_order(value: object) -> int:
    """Return ``value`` as a positive integer order."""

    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"Order must be a positive integer, got {value!r}")
    if value < 1:
        raise ValidationError(f"Order must be at least 1, got {value}")
    return value


def validate_task_id(value: str) -> str:
    """Return the canonical form of a task identifier (lowercase UUID)."""

    try:
        parsed = UUID(value.strip())
    except ValueError as error:
        raise ValidationError(f"Invalid task ID format: {value!r}") from error
    return str(parsed)


def parse_reorder_entry(raw: str) -> ReorderEntry:
    """Parse ``TASK_ID=ORDER`` into a reorder entry."""

    if "=" not in raw:
        raise ValidationError(
            f"Invalid reorder entry {raw!r}. Expected format '<task_id>=<order>'.",
        )
    task_id_raw, order_raw = raw.rsplit("=", 1)
    order_raw = order_raw.strip()
    if not order_raw:
        raise ValidationError(f"Reorder entry {raw!r} is missing an order")
    try:
        order = int(order_raw)
    except ValueError as error:
        raise ValidationError(
            f"Invalid order in reorder entry {raw!r}: {order_raw!r}",
        ) from error
    return ReorderEntry(task_id=validate_task_id(task_id_raw), order=validate_order(order))
