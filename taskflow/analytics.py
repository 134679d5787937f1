"""
Board analytics: totals, completion, priority breakdown, overdue tasks.

Completion is measured by membership of a configured terminal column,
never by column title.
"""
import math
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from .schema import Board, Priority, Task, utc_now

DEFAULT_TERMINAL_COLUMN = "column-3"


@dataclass(frozen=True)
class BoardStats:
    total_tasks: int = 0
    completed_tasks: int = 0
    completion_percentage: int = 0
    priority_distribution: List[Tuple[Priority, int]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total_tasks,
            "completed": self.completed_tasks,
            "completion_percentage": self.completion_percentage,
            "by_priority": {p.value: n for p, n in self.priority_distribution},
        }


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def board_stats(board: Board, terminal_column_id: str = DEFAULT_TERMINAL_COLUMN) -> BoardStats:
    """Summarize a board. Percentages are 0 for an empty board."""
    total = len(board.tasks)
    terminal = board.columns.get(terminal_column_id)
    completed = len(terminal.task_ids) if terminal else 0
    percentage = _round_half_up(completed / total * 100) if total else 0

    counts = Counter(task.priority for task in board.tasks.values())
    distribution = [(p, counts[p]) for p in Priority if counts[p] > 0]

    return BoardStats(
        total_tasks=total,
        completed_tasks=completed,
        completion_percentage=percentage,
        priority_distribution=distribution,
    )


def is_overdue(task: Task, now: datetime) -> bool:
    """True if the task has a due date strictly before now (naive now is UTC)."""
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return task.due_date is not None and task.due_date < now


def overdue_task_ids(board: Board, now: Optional[datetime] = None) -> List[str]:
    """Ids of overdue tasks, in column order then position."""
    now = now or utc_now()
    return [
        tid
        for column in board.ordered_columns()
        for tid in column.task_ids
        if tid in board.tasks and is_overdue(board.tasks[tid], now)
    ]
