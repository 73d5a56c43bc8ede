"""CLI entrypoint for task-board."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

import rich_click as click

from task_board import __version__
from task_board.controllers import (
    BoardAddCommand,
    BoardCliController,
    BoardDeleteCommand,
    BoardInitCommand,
    BoardListCommand,
    BoardMoveCommand,
    BoardNextOrderCommand,
    BoardReorderCommand,
    BoardSeedCommand,
    BoardShowCommand,
    BoardUpdateCommand,
)
from task_board.errors import BoardError
from task_board.models import BoardColumnId

click.rich_click.USE_MARKDOWN = True
BOARD_CONTROLLER = BoardCliController()
COLUMN_CHOICES = [column.value for column in BoardColumnId]

CommandT = TypeVar("CommandT")


class BoardCliError(click.ClickException):
    """Board failure rendered as ``code: message`` with a per-kind exit status."""

    def __init__(self, error: BoardError) -> None:
        super().__init__(f"{error.code}: {error.message}")
        self.exit_code = error.exit_code


def _db_path_option(func: Callable[..., None]) -> Callable[..., None]:
    return click.option(
        "--db-path",
        type=click.Path(path_type=Path),
        default=None,
        help="SQLite DB path.",
    )(func)


@click.group()
@click.version_option(version=__version__, prog_name="task-board")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging level for diagnostics on stderr.",
)
def task_board(log_level: str) -> None:
    """Three-column task board CLI."""

    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@task_board.command("init")
@_db_path_option
def board_init(db_path: Path | None) -> None:
    """Apply migrations and show column summaries."""

    _run(BOARD_CONTROLLER.init, BoardInitCommand(db_path=db_path))


@task_board.command("list")
@_db_path_option
@click.option(
    "--column",
    type=click.Choice(COLUMN_CHOICES),
    default=None,
    help="Only list tasks of this column.",
)
def board_list(db_path: Path | None, column: str | None) -> None:
    """List tasks grouped by column, in board order."""

    _run(BOARD_CONTROLLER.list_tasks, BoardListCommand(db_path=db_path, column=column))


@task_board.command("show")
@_db_path_option
@click.argument("task_id")
def board_show(db_path: Path | None, task_id: str) -> None:
    """Show one task."""

    _run(BOARD_CONTROLLER.show, BoardShowCommand(db_path=db_path, task_id=task_id))


@task_board.command("add")
@_db_path_option
@click.option("--title", required=True, help="Task title (at least 5 characters).")
@click.option("--description", default="", help="Optional task description.")
@click.option("--column", type=click.Choice(COLUMN_CHOICES), required=True, help="Target column.")
@click.option(
    "--order",
    type=int,
    default=None,
    help="Insert at this position, shifting later tasks. Appends when omitted.",
)
def board_add(
    db_path: Path | None,
    title: str,
    description: str,
    column: str,
    order: int | None,
) -> None:
    """Create a task."""

    _run(
        BOARD_CONTROLLER.add,
        BoardAddCommand(
            db_path=db_path,
            title=title,
            description=description,
            column=column,
            order=order,
        ),
    )


@task_board.command("update")
@_db_path_option
@click.argument("task_id")
@click.option("--title", default=None, help="New title.")
@click.option("--description", default=None, help="New description.")
def board_update(
    db_path: Path | None,
    task_id: str,
    title: str | None,
    description: str | None,
) -> None:
    """Change a task's title and/or description."""

    _run(
        BOARD_CONTROLLER.update,
        BoardUpdateCommand(
            db_path=db_path,
            task_id=task_id,
            title=title,
            description=description,
        ),
    )


@task_board.command("move")
@_db_path_option
@click.argument("task_id")
@click.option("--column", type=click.Choice(COLUMN_CHOICES), required=True, help="Target column.")
@click.option("--order", type=int, required=True, help="Target position in the column.")
def board_move(db_path: Path | None, task_id: str, column: str, order: int) -> None:
    """Move a task within its column or to another column."""

    _run(
        BOARD_CONTROLLER.move,
        BoardMoveCommand(db_path=db_path, task_id=task_id, column=column, order=order),
    )


@task_board.command("delete")
@_db_path_option
@click.argument("task_id")
def board_delete(db_path: Path | None, task_id: str) -> None:
    """Delete a task and close the gap it leaves."""

    _run(BOARD_CONTROLLER.delete, BoardDeleteCommand(db_path=db_path, task_id=task_id))


@task_board.command("reorder")
@_db_path_option
@click.option("--column", type=click.Choice(COLUMN_CHOICES), required=True, help="Column.")
@click.option(
    "--entry",
    "entries",
    multiple=True,
    help="Assignment TASK_ID=ORDER. Repeat for every task of the new permutation.",
)
def board_reorder(db_path: Path | None, column: str, entries: tuple[str, ...]) -> None:
    """Apply a full order permutation to one column."""

    _run(
        BOARD_CONTROLLER.reorder,
        BoardReorderCommand(db_path=db_path, column=column, entries=entries),
    )


@task_board.command("next-order")
@_db_path_option
@click.option("--column", type=click.Choice(COLUMN_CHOICES), required=True, help="Column.")
def board_next_order(db_path: Path | None, column: str) -> None:
    """Show the order a new task would be appended at."""

    _run(BOARD_CONTROLLER.next_order, BoardNextOrderCommand(db_path=db_path, column=column))


@task_board.command("seed")
@_db_path_option
def board_seed(db_path: Path | None) -> None:
    """Clear all tasks and load the sample board."""

    _run(BOARD_CONTROLLER.seed, BoardSeedCommand(db_path=db_path))


def _run(handler: Callable[[CommandT], list[str]], command: CommandT) -> None:
    try:
        lines = handler(command)
    except BoardError as error:
        raise BoardCliError(error) from error
    _emit_lines(lines)


def _emit_lines(lines: list[str]) -> None:
    for line in lines:
        click.echo(line)


if __name__ == "__main__":  # pragma: no cover
    task_board()
