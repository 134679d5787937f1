"""
Task mutations: add, delete, edit.

Each operation takes the current board and returns the next one. When an
operation names a task or column that is no longer on the board it
returns the input board unchanged; ids may have been removed by an
earlier event in the same stream.
"""
import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Optional, Union

from .errors import BoardReferenceError, ValidationError
from .schema import Board, Priority, Task, new_id

logger = logging.getLogger(__name__)


def _coerce_priority(priority: Union[Priority, str, None]) -> Priority:
    if isinstance(priority, Priority):
        return priority
    if not priority:
        raise ValidationError("A priority is required")
    try:
        return Priority.from_str(priority)
    except ValueError as e:
        raise ValidationError(str(e)) from e


def add_task(
    board: Board,
    content: str,
    priority: Union[Priority, str, None],
    due_date: Optional[datetime] = None,
    id_factory: Callable[[], str] = new_id,
) -> Board:
    """
    Create a task at the head of the first column.

    Raises:
        ValidationError: content is blank or priority missing/unknown.
    """
    text = (content or "").strip()
    if not text:
        raise ValidationError("Task content cannot be empty")
    level = _coerce_priority(priority)

    first = board.first_column_id
    if first is None:
        logger.warning("Ignoring add_task: board has no columns")
        return board

    if due_date is not None and due_date.tzinfo is None:
        due_date = due_date.replace(tzinfo=timezone.utc)

    task_id = id_factory()
    while task_id in board.tasks:
        task_id = id_factory()

    task = Task(id=task_id, content=text, priority=level, due_date=due_date)
    column = board.columns[first]
    tasks = dict(board.tasks)
    tasks[task_id] = task
    return replace(board, tasks=tasks).with_columns(
        column.with_task_ids((task_id,) + column.task_ids)
    )


def delete_task(board: Board, task_id: str, column_id: str) -> Board:
    """Remove task_id from column_id and from the task mapping together."""
    try:
        column = board.column(column_id)
    except BoardReferenceError as e:
        logger.debug(f"Ignoring delete_task: {e}")
        return board
    if task_id not in column.task_ids:
        logger.debug(f"Ignoring delete_task: {task_id} not in {column_id}")
        return board

    tasks = dict(board.tasks)
    tasks.pop(task_id, None)
    return replace(board, tasks=tasks).with_columns(
        column.with_task_ids(t for t in column.task_ids if t != task_id)
    )


def edit_task_content(board: Board, task_id: str, new_content: str) -> Board:
    """
    Replace a task's content.

    Blank content deletes the task from whichever column holds it.
    """
    try:
        task = board.task(task_id)
    except BoardReferenceError as e:
        logger.debug(f"Ignoring edit_task_content: {e}")
        return board

    text = (new_content or "").strip()
    if not text:
        column_id = board.column_of(task_id)
        if column_id is None:
            # Orphaned record: no column to remove it from
            tasks = dict(board.tasks)
            tasks.pop(task_id)
            return replace(board, tasks=tasks)
        return delete_task(board, task_id, column_id)

    if text == task.content:
        return board
    tasks = dict(board.tasks)
    tasks[task_id] = task.with_content(text)
    return replace(board, tasks=tasks)
