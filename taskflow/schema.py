"""
Board schema: tasks, columns and the board aggregate.

A board is a mapping of tasks, a mapping of columns, and an explicit
column order. Column membership is the only notion of task status.

All three records are frozen. Operations never edit a board in place;
they build a new one, and hand back the very same object when nothing
changed, so `new is old` tells a caller whether to persist or re-render.
"""
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .errors import BoardReferenceError, DeserializationError

DEFAULT_COLUMNS: Tuple[Tuple[str, str], ...] = (
    ("column-1", "To Do"),
    ("column-2", "In Progress"),
    ("column-3", "Done"),
)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Utilities
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def utc_now() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def new_id() -> str:
    """Generate a collision-free task id (random uuid4)."""
    return str(uuid.uuid4())


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Enums
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class Priority(Enum):
    """Task priority, in display order."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def from_str(cls, value: str) -> "Priority":
        try:
            return cls[value.strip().upper()]
        except (KeyError, AttributeError):
            raise ValueError(f"Unknown priority: {value!r}")


class Theme(Enum):
    """Light/dark display preference."""
    LIGHT = "light"
    DARK = "dark"

    @classmethod
    def from_str(cls, value: Optional[str], default: Optional["Theme"] = None) -> "Theme":
        try:
            return cls[(value or "").upper()]
        except KeyError:
            return default or cls.DARK

    def toggled(self) -> "Theme":
        return Theme.LIGHT if self is Theme.DARK else Theme.DARK


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Records
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


@dataclass(frozen=True)
class Task:
    """A single task card."""
    id: str
    content: str
    priority: Priority
    due_date: Optional[datetime] = None

    def with_content(self, content: str) -> "Task":
        return replace(self, content=content)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "content": self.content,
            "priority": self.priority.value,
            "dueDate": self.due_date.isoformat() if self.due_date else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        """Deserialize from dict. Raises DeserializationError on bad fields."""
        if not isinstance(data, dict):
            raise DeserializationError(f"Task entry must be an object, got {type(data).__name__}")
        task_id = data.get("id")
        content = data.get("content")
        if not isinstance(task_id, str) or not task_id:
            raise DeserializationError(f"Task has no id: {data!r}")
        if not isinstance(content, str):
            raise DeserializationError(f"Task {task_id} has no content")
        try:
            priority = Priority.from_str(data.get("priority"))
        except ValueError as e:
            raise DeserializationError(f"Task {task_id}: {e}") from e
        due_raw = data.get("dueDate")
        due_date = None
        if due_raw is not None:
            if not isinstance(due_raw, str):
                raise DeserializationError(f"Task {task_id} has a non-string dueDate")
            try:
                due_date = parse_timestamp(due_raw)
            except ValueError as e:
                raise DeserializationError(f"Task {task_id} has a bad dueDate: {due_raw!r}") from e
        return cls(id=task_id, content=content, priority=priority, due_date=due_date)


@dataclass(frozen=True)
class Column:
    """An ordered bucket of task ids."""
    id: str
    title: str
    task_ids: Tuple[str, ...] = ()

    def with_task_ids(self, task_ids: Iterable[str]) -> "Column":
        return replace(self, task_ids=tuple(task_ids))

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "title": self.title, "taskIds": list(self.task_ids)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Column":
        if not isinstance(data, dict):
            raise DeserializationError(f"Column entry must be an object, got {type(data).__name__}")
        column_id = data.get("id")
        if not isinstance(column_id, str) or not column_id:
            raise DeserializationError(f"Column has no id: {data!r}")
        task_ids = data.get("taskIds", [])
        if not isinstance(task_ids, list) or not all(isinstance(t, str) for t in task_ids):
            raise DeserializationError(f"Column {column_id} taskIds must be a list of strings")
        title = data.get("title", column_id)
        return cls(id=column_id, title=str(title), task_ids=tuple(task_ids))


@dataclass(frozen=True)
class Board:
    """
    The aggregate root.

    Invariants:
        - every id in a column's task_ids is a key of `tasks`
        - no task id appears in more than one column (or twice in one)
        - column_order is a permutation of the keys of `columns`
    """
    tasks: Dict[str, Task] = field(default_factory=dict)
    columns: Dict[str, Column] = field(default_factory=dict)
    column_order: Tuple[str, ...] = ()

    # ── Read accessors ──

    @property
    def first_column_id(self) -> Optional[str]:
        return self.column_order[0] if self.column_order else None

    def column(self, column_id: str) -> Column:
        try:
            return self.columns[column_id]
        except KeyError:
            raise BoardReferenceError(f"Column {column_id} not on board") from None

    def task(self, task_id: str) -> Task:
        try:
            return self.tasks[task_id]
        except KeyError:
            raise BoardReferenceError(f"Task {task_id} not on board") from None

    def column_of(self, task_id: str) -> Optional[str]:
        """Return the id of the column holding task_id, or None."""
        for column_id in self.column_order:
            if task_id in self.columns[column_id].task_ids:
                return column_id
        return None

    def ordered_columns(self) -> List[Column]:
        return [self.columns[cid] for cid in self.column_order]

    def placed_task_count(self) -> int:
        """Number of task ids across all columns."""
        return sum(len(c.task_ids) for c in self.columns.values())

    def with_columns(self, *columns: Column) -> "Board":
        """Return a new board with the given columns replaced."""
        updated = dict(self.columns)
        for column in columns:
            updated[column.id] = column
        return replace(self, columns=updated)

    # ── Invariants ──

    def problems(self) -> List[str]:
        """List every invariant violation (empty when the board is sound)."""
        found: List[str] = []

        if len(set(self.column_order)) != len(self.column_order):
            found.append(f"columnOrder has duplicates: {list(self.column_order)}")
        if set(self.column_order) != set(self.columns):
            found.append(
                f"columnOrder {sorted(self.column_order)} does not match "
                f"columns {sorted(self.columns)}"
            )

        for key, column in self.columns.items():
            if column.id != key:
                found.append(f"Column keyed {key} carries id {column.id}")

        for key, task in self.tasks.items():
            if task.id != key:
                found.append(f"Task keyed {key} carries id {task.id}")
            if not task.content.strip():
                found.append(f"Task {key} has empty content")

        seen: Dict[str, str] = {}
        for column_id, column in self.columns.items():
            for task_id in column.task_ids:
                if task_id not in self.tasks:
                    found.append(f"Column {column_id} references missing task {task_id}")
                if task_id in seen:
                    found.append(
                        f"Task {task_id} appears in both {seen[task_id]} and {column_id}"
                    )
                seen[task_id] = column_id

        return found

    def is_valid(self) -> bool:
        return not self.problems()

    # ── Serialization ──

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tasks": {tid: t.to_dict() for tid, t in self.tasks.items()},
            "columns": {cid: c.to_dict() for cid, c in self.columns.items()},
            "columnOrder": list(self.column_order),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Board":
        """
        Deserialize and validate a persisted snapshot.

        Raises DeserializationError if the shape is wrong or the board
        breaks an invariant.
        """
        if not isinstance(data, dict):
            raise DeserializationError("Board snapshot must be an object")
        raw_tasks = data.get("tasks", {})
        raw_columns = data.get("columns")
        raw_order = data.get("columnOrder")
        if not isinstance(raw_tasks, dict):
            raise DeserializationError("Board 'tasks' must be an object")
        if not isinstance(raw_columns, dict):
            raise DeserializationError("Board 'columns' must be an object")
        if not isinstance(raw_order, list) or not all(isinstance(c, str) for c in raw_order):
            raise DeserializationError("Board 'columnOrder' must be a list of strings")

        board = cls(
            tasks={key: Task.from_dict(value) for key, value in raw_tasks.items()},
            columns={key: Column.from_dict(value) for key, value in raw_columns.items()},
            column_order=tuple(raw_order),
        )
        problems = board.problems()
        if problems:
            raise DeserializationError("; ".join(problems))
        return board


def default_board(columns: Optional[Iterable[Tuple[str, str]]] = None) -> Board:
    """Build the empty seed board from (id, title) pairs."""
    pairs = list(columns) if columns is not None else list(DEFAULT_COLUMNS)
    return Board(
        tasks={},
        columns={cid: Column(id=cid, title=title) for cid, title in pairs},
        column_order=tuple(cid for cid, _ in pairs),
    )
