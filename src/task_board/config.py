"""Runtime configuration for the task board."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(slots=True)
class StoreSettings:
    """SQLite store settings."""

    busy_timeout_ms: int = 5_000


@dataclass(slots=True)
class BoardSettings:
    """Ordering and validation rules for board operations."""

    strict_order_bounds: bool = False
    title_min_length: int = 5


@dataclass(slots=True)
class Settings:
    """Application settings grouped by domain concerns."""

    db_path: Path = Path(".task_board.db")
    store: StoreSettings = field(default_factory=StoreSettings)
    board: BoardSettings = field(default_factory=BoardSettings)

    @classmethod
    def from_env(cls, db_path: Path | None = None) -> Settings:
        """Load settings from environment with sane defaults for local development."""

        return cls(
            db_path=db_path or Path(os.getenv("TASK_BOARD_DB_PATH", ".task_board.db")),
            store=StoreSettings(
                busy_timeout_ms=int(os.getenv("TASK_BOARD_SQLITE_BUSY_TIMEOUT_MS", "5000")),
            ),
            board=BoardSettings(
                strict_order_bounds=_env_bool("TASK_BOARD_STRICT_ORDER_BOUNDS", default=False),
                title_min_length=int(os.getenv("TASK_BOARD_TITLE_MIN_LENGTH", "5")),
            ),
        )

    def validate(self) -> None:
        """Raise configuration error for values the board cannot run with."""

        if self.store.busy_timeout_ms <= 0:
            raise ValueError("TASK_BOARD_SQLITE_BUSY_TIMEOUT_MS must be > 0.")
        if self.board.title_min_length <= 0:
            raise ValueError("TASK_BOARD_TITLE_MIN_LENGTH must be > 0.")


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"Invalid boolean value for {name}: {value!r}")
