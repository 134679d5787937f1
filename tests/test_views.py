"""Tests for the search projection."""
from taskflow.mutations import add_task
from taskflow.schema import default_board
from taskflow.views import BoardProjection, filter_board


def _grocery_board():
    board = default_board()
    for content, tid in [("Buy MILK", "m"), ("Walk dog", "d"), ("Pay rent", "r")]:
        board = add_task(board, content, "low", id_factory=lambda tid=tid: tid)
    return board


def test_empty_term_returns_same_board(board):
    assert filter_board(board, "") is board


def test_filter_keeps_only_matching_task():
    board = _grocery_board()
    snapshot = board.to_dict()

    view = filter_board(board, "milk")

    assert isinstance(view, BoardProjection)
    for column in view.columns.values():
        assert set(column.task_ids) <= {"m"}
    assert view.columns["column-1"].task_ids == ("m",)
    # original untouched
    assert board.to_dict() == snapshot
    assert board.columns["column-1"].task_ids == ("r", "d", "m")


def test_filter_keeps_empty_columns_and_order(board):
    view = filter_board(board, "no such text")
    assert view.column_order == board.column_order
    assert set(view.columns) == set(board.columns)
    assert all(c.task_ids == () for c in view.columns.values())
    assert [c.title for c in view.ordered_columns()] == ["To Do", "In Progress", "Done"]


def test_filter_preserves_relative_order(make_board):
    board = make_board({"column-1": ["A1", "B", "A2", "A3"]})
    view = filter_board(board, "task a")
    assert view.columns["column-1"].task_ids == ("A1", "A2", "A3")


def test_filter_shares_task_records(board):
    view = filter_board(board, "T1")
    assert view.tasks is board.tasks
