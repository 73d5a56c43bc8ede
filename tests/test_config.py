from __future__ import annotations

from pathlib import Path

import allure
import pytest

from task_board.config import BoardSettings, Settings, StoreSettings

pytestmark = [
    allure.epic("Task Board"),
    allure.feature("Configuration"),
]


def test_from_env_defaults(monkeypatch) -> None:
    for name in (
        "TASK_BOARD_DB_PATH",
        "TASK_BOARD_SQLITE_BUSY_TIMEOUT_MS",
        "TASK_BOARD_STRICT_ORDER_BOUNDS",
        "TASK_BOARD_TITLE_MIN_LENGTH",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = Settings.from_env()

    assert settings.db_path == Path(".task_board.db")
    assert settings.store.busy_timeout_ms == 5_000
    assert settings.board.strict_order_bounds is False
    assert settings.board.title_min_length == 5
    settings.validate()


def test_from_env_reads_overrides(monkeypatch) -> None:
    monkeypatch.setenv("TASK_BOARD_DB_PATH", "/tmp/board-from-env.db")
    monkeypatch.setenv("TASK_BOARD_SQLITE_BUSY_TIMEOUT_MS", "250")
    monkeypatch.setenv("TASK_BOARD_STRICT_ORDER_BOUNDS", "yes")
    monkeypatch.setenv("TASK_BOARD_TITLE_MIN_LENGTH", "3")

    settings = Settings.from_env()

    assert settings.db_path == Path("/tmp/board-from-env.db")
    assert settings.store.busy_timeout_ms == 250
    assert settings.board.strict_order_bounds is True
    assert settings.board.title_min_length == 3


def test_explicit_db_path_wins_over_env(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TASK_BOARD_DB_PATH", "/tmp/ignored.db")

    settings = Settings.from_env(db_path=tmp_path / "explicit.db")

    assert settings.db_path == tmp_path / "explicit.db"


def test_invalid_boolean_is_rejected(monkeypatch) -> None:
    monkeypatch.setenv("TASK_BOARD_STRICT_ORDER_BOUNDS", "sometimes")

    with pytest.raises(ValueError, match="Invalid boolean value for TASK_BOARD_STRICT_ORDER_BOUNDS"):
        Settings.from_env()


def test_validate_rejects_non_positive_values() -> None:
    with pytest.raises(ValueError, match="BUSY_TIMEOUT_MS"):
        Settings(store=StoreSettings(busy_timeout_ms=0)).validate()
    with pytest.raises(ValueError, match="TITLE_MIN_LENGTH"):
        Settings(board=BoardSettings(title_min_length=0)).validate()
