"""Shared test fixtures for the board core tests."""

import itertools
import sys
from pathlib import Path

import pytest

# Ensure the package is importable without installation
sys.path.insert(0, str(Path(__file__).parent.parent))

from taskflow.config import Config
from taskflow.schema import Board, Column, Priority, Task, default_board
from taskflow.store import BoardPersistence, MemoryKeyValueStore


def _sequential_ids(prefix: str = "T"):
    counter = itertools.count(1)
    return lambda: f"{prefix}{next(counter)}"


def _build_board(layout: dict, priorities: dict = None) -> Board:
    """
    Build a board over the default columns.

    layout: column id -> list of task ids. Each task gets content
    "Task <id>" and MEDIUM priority unless overridden in `priorities`.
    """
    board = default_board()
    priorities = priorities or {}
    tasks = {}
    columns = dict(board.columns)
    for column_id, task_ids in layout.items():
        for tid in task_ids:
            tasks[tid] = Task(
                id=tid,
                content=f"Task {tid}",
                priority=priorities.get(tid, Priority.MEDIUM),
            )
        columns[column_id] = Column(
            id=column_id, title=board.columns[column_id].title, task_ids=tuple(task_ids)
        )
    return Board(tasks=tasks, columns=columns, column_order=board.column_order)


@pytest.fixture
def id_factory():
    return _sequential_ids()


@pytest.fixture
def make_board():
    return _build_board


@pytest.fixture
def board():
    """To Do = [T1, T2], In Progress = [T3], Done = []."""
    return _build_board({"column-1": ["T1", "T2"], "column-2": ["T3"], "column-3": []})


@pytest.fixture
def memory_store():
    return MemoryKeyValueStore()


@pytest.fixture
def persistence(memory_store):
    return BoardPersistence(memory_store, Config())
