"""
Reorder engine: turns a finished drag gesture into the next board.

A gesture is described by a ReorderResult. Moving a column splices
`column_order`; moving a task splices one column's task ids (same
column) or two (cross-column). Task records are never touched; status
is implied by column membership only.

Splices use remove-then-insert semantics: the destination index is
applied to the sequence after the item has been taken out.
"""
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from .errors import BoardReferenceError
from .schema import Board

logger = logging.getLogger(__name__)


class ReorderKind(Enum):
    """What the gesture moved."""
    COLUMN = "COLUMN"
    TASK = "TASK"

    @classmethod
    def from_str(cls, value: str) -> "ReorderKind":
        try:
            return cls[value.upper()]
        except (KeyError, AttributeError):
            return cls.TASK


@dataclass(frozen=True)
class Location:
    """A droppable area (column id, or the column strip) and an index in it."""
    droppable_id: str
    index: int


@dataclass(frozen=True)
class ReorderResult:
    """
    The end of a drag gesture.

    `destination` is None when the gesture was cancelled or dropped
    outside any droppable area. A result without a source is ignored.
    """
    item_id: str
    kind: ReorderKind
    source: Optional[Location]
    destination: Optional[Location] = None

    @property
    def is_noop(self) -> bool:
        return (
            self.source is None
            or self.destination is None
            or self.destination == self.source
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReorderResult":
        """
        Build from a drag-end payload:
        {"draggableId", "type", "source": {"droppableId", "index"}, "destination": {...} | None}
        """
        def _loc(raw: Optional[Dict[str, Any]]) -> Optional[Location]:
            if not raw:
                return None
            return Location(droppable_id=str(raw["droppableId"]), index=int(raw["index"]))

        return cls(
            item_id=str(data["draggableId"]),
            kind=ReorderKind.from_str(data.get("type", "TASK")),
            source=_loc(data.get("source")),
            destination=_loc(data.get("destination")),
        )


def _take(seq: Sequence[str], index: int, item_id: str) -> Optional[List[str]]:
    """
    Remove item_id from seq, preferring the given index.

    Falls back to a lookup by value when the index is stale; returns
    None when item_id is not in seq at all.
    """
    items = list(seq)
    if 0 <= index < len(items) and items[index] == item_id:
        del items[index]
    elif item_id in items:
        items.remove(item_id)
    else:
        return None
    return items


def _put(items: List[str], index: int, item_id: str) -> List[str]:
    """Insert item_id at index, clamped to [0, len(items)]."""
    items.insert(max(0, min(index, len(items))), item_id)
    return items


def reorder(board: Board, result: ReorderResult) -> Board:
    """Apply a drag result. Returns `board` itself when nothing moves."""
    if result.is_noop:
        return board
    if result.kind is ReorderKind.COLUMN:
        return _reorder_columns(board, result)
    return _move_task(board, result)


def _reorder_columns(board: Board, result: ReorderResult) -> Board:
    order = _take(board.column_order, result.source.index, result.item_id)
    if order is None:
        logger.debug(f"Ignoring column reorder: {result.item_id} not in columnOrder")
        return board
    order = tuple(_put(order, result.destination.index, result.item_id))
    if order == board.column_order:
        return board
    return replace(board, column_order=order)


def _move_task(board: Board, result: ReorderResult) -> Board:
    source, destination = result.source, result.destination
    try:
        start = board.column(source.droppable_id)
        finish = board.column(destination.droppable_id)
    except BoardReferenceError as e:
        logger.debug(f"Ignoring task move: {e}")
        return board

    start_ids = _take(start.task_ids, source.index, result.item_id)
    if start_ids is None:
        logger.debug(f"Ignoring task move: {result.item_id} not in {start.id}")
        return board

    if start.id == finish.id:
        moved = tuple(_put(start_ids, destination.index, result.item_id))
        if moved == start.task_ids:
            return board
        return board.with_columns(start.with_task_ids(moved))

    finish_ids = _put(list(finish.task_ids), destination.index, result.item_id)
    return board.with_columns(
        start.with_task_ids(start_ids),
        finish.with_task_ids(finish_ids),
    )
