"""Typed failures raised by board operations."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class BoardError(Exception):
    """Base board error with a stable code and CLI exit status."""

    message: str
    code: str = "board_error"
    exit_code: int = 1

    def __str__(self) -> str:
        return self.message


@dataclass(slots=True)
class ValidationError(BoardError):
    """Malformed input or an operation that would break ordering rules."""

    code: str = "validation_error"
    exit_code: int = 2


@dataclass(slots=True)
class TaskNotFoundError(BoardError):
    """Referenced task identifier does not exist."""

    task_id: str = ""
    code: str = "not_found"
    exit_code: int = 3


@dataclass(slots=True)
class ConflictError(BoardError):
    """The store rejected a write on the ``(column, order)`` uniqueness constraint."""

    code: str = "conflict"
    exit_code: int = 4


@dataclass(slots=True)
class StoreError(BoardError):
    """Underlying persistence failure."""

    code: str = "store_error"
    exit_code: int = 5
