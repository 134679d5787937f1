"""
Board session: the single live board a host application works against.

The session owns the current board value and a version counter. Each
operation runs the matching pure function; if a new board comes back,
it replaces the current one wholesale, the version goes up, and the
snapshot is handed to persistence.
"""
import logging
from datetime import datetime
from typing import Callable, List, Optional, Union

from . import mutations
from .analytics import BoardStats, board_stats, overdue_task_ids
from .config import Config
from .reorder import ReorderResult, reorder
from .schema import Board, Priority, Theme, new_id, utc_now
from .store import BoardPersistence
from .views import filter_board

logger = logging.getLogger(__name__)


class BoardSession:
    """Holds the current board and routes every change through persistence."""

    def __init__(
        self,
        persistence: BoardPersistence,
        config: Optional[Config] = None,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = new_id,
    ):
        self.persistence = persistence
        self.config = config or persistence.config
        self.clock = clock
        self.id_factory = id_factory
        self.board: Board = persistence.load_board()
        self.theme: Theme = persistence.load_theme()
        self.version = 0

    def _accept(self, new_board: Board) -> bool:
        if new_board is self.board:
            return False
        self.board = new_board
        self.version += 1
        self.persistence.schedule_save(new_board)
        return True

    # ── Mutations ──

    def add_task(
        self,
        content: str,
        priority: Union[Priority, str, None],
        due_date: Optional[datetime] = None,
    ) -> bool:
        """Add a task. ValidationError propagates so the caller can re-prompt."""
        return self._accept(mutations.add_task(
            self.board, content, priority, due_date, id_factory=self.id_factory,
        ))

    def delete_task(self, task_id: str, column_id: str) -> bool:
        return self._accept(mutations.delete_task(self.board, task_id, column_id))

    def edit_task_content(self, task_id: str, new_content: str) -> bool:
        return self._accept(mutations.edit_task_content(self.board, task_id, new_content))

    def reorder(self, result: ReorderResult) -> bool:
        return self._accept(reorder(self.board, result))

    # ── Derived views ──

    def filtered(self, search_term: str) -> Board:
        return filter_board(self.board, search_term)

    def stats(self) -> BoardStats:
        return board_stats(self.board, self.config.terminal_column)

    def overdue(self) -> List[str]:
        return overdue_task_ids(self.board, self.clock())

    # ── Theme ──

    def toggle_theme(self) -> Theme:
        self.theme = self.theme.toggled()
        self.persistence.save_theme(self.theme)
        return self.theme

    def close(self) -> None:
        self.persistence.close()
