"""Search projection over a board."""
from dataclasses import dataclass

from .schema import Board


@dataclass(frozen=True)
class BoardProjection(Board):
    """A read-only, derived board. Never persisted."""


def filter_board(board: Board, search_term: str) -> Board:
    """
    Keep only tasks whose content contains search_term (case-insensitive).

    Every column stays present, possibly empty, in its original order.
    The task mapping is shared with the input, not copied. An empty
    term returns the input board itself.
    """
    if not search_term:
        return board
    needle = search_term.lower()
    columns = {}
    for column_id, column in board.columns.items():
        columns[column_id] = column.with_task_ids(
            tid for tid in column.task_ids
            if tid in board.tasks and needle in board.tasks[tid].content.lower()
        )
    return BoardProjection(
        tasks=board.tasks,
        columns=columns,
        column_order=board.column_order,
    )
