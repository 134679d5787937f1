# TaskFlow board core: ordered task board state, reordering and persistence
#
# Components:
#   schema.py     - Data model (Task, Column, Board, Priority, Theme)
#   mutations.py  - Add / delete / edit task
#   reorder.py    - Drag-end reorder engine (columns and tasks)
#   views.py      - Search projection
#   analytics.py  - Totals, completion, priority breakdown, overdue
#   store.py      - Key-value backends and board persistence
#   session.py    - Host-held, versioned current board
#   config.py     - YAML configuration
#   errors.py     - Error taxonomy

from .errors import (
    BoardError,
    BoardReferenceError,
    ConfigError,
    DeserializationError,
    StorageError,
    ValidationError,
)
from .schema import Board, Column, Priority, Task, Theme, default_board, new_id, utc_now
from .mutations import add_task, delete_task, edit_task_content
from .reorder import Location, ReorderKind, ReorderResult, reorder
from .views import BoardProjection, filter_board
from .analytics import BoardStats, board_stats, is_overdue, overdue_task_ids
from .config import Config, setup_logging
from .store import BoardPersistence, KeyValueStore, MemoryKeyValueStore, SqliteKeyValueStore
from .session import BoardSession

__version__ = "0.1.0"
