"""
Board persistence: key-value store backends and the board adapter.

The adapter serializes whole board snapshots under one key and the theme
preference under another. Writes are best-effort: a failing store is
logged and the in-memory board carries on untouched.
"""
import json
import logging
import sqlite3
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional

from .config import Config
from .errors import DeserializationError, StorageError
from .schema import Board, Theme, default_board
from .views import BoardProjection

logger = logging.getLogger(__name__)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Key-value backends
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class KeyValueStore:
    """String key to string value storage. Backends raise StorageError."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError


class MemoryKeyValueStore(KeyValueStore):
    """Dict-backed store for tests and ephemeral sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


def _connect(db_path: str) -> sqlite3.Connection:
    """Open a connection in WAL mode."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode = WAL")
    return conn


class SqliteKeyValueStore(KeyValueStore):
    """SQLite-backed store using a single system_state table."""

    def __init__(self, db_path: str):
        """Initialize store and create the table if needed."""
        self.db_path = db_path
        try:
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
            self._init_schema()
        except (OSError, sqlite3.Error) as e:
            raise StorageError(f"Cannot open store at {db_path}: {e}") from e

    def _init_schema(self):
        with _connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS system_state (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.commit()

    def get(self, key: str) -> Optional[str]:
        try:
            with _connect(self.db_path) as conn:
                row = conn.execute(
                    "SELECT value FROM system_state WHERE key = ? LIMIT 1",
                    (key,),
                ).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Error reading {key}: {e}") from e
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        now = datetime.now(timezone.utc).isoformat()
        try:
            with _connect(self.db_path) as conn:
                conn.execute("""
                    INSERT INTO system_state (key, value, updated_at)
                    VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at
                """, (key, value, now))
                conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Error writing {key}: {e}") from e


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Board adapter
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def serialize_board(board: Board) -> str:
    return json.dumps(board.to_dict())


def deserialize_board(payload: str) -> Board:
    """Parse a stored snapshot. Raises DeserializationError."""
    try:
        data = json.loads(payload)
    except (TypeError, ValueError, RecursionError) as e:
        raise DeserializationError(f"Snapshot is not valid JSON: {e}") from e
    return Board.from_dict(data)


class BoardPersistence:
    """
    Loads and saves board snapshots through a KeyValueStore.

    With a positive `debounce_seconds`, schedule_save() coalesces bursts
    of changes and writes only the latest snapshot once things go quiet.
    """

    def __init__(self, store: KeyValueStore, config: Optional[Config] = None):
        self.store = store
        self.config = config or Config()
        self.config.validate()
        self._pending: Optional[Board] = None
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()
        # Held across take-and-write so snapshots land in order
        self._write_lock = threading.Lock()

    def seed_board(self) -> Board:
        return default_board(self.config.column_pairs())

    def load_board(self) -> Board:
        """Read the stored board, or seed a fresh one if absent or invalid."""
        key = self.config.board_key
        try:
            payload = self.store.get(key)
        except StorageError as e:
            logger.warning(f"Cannot read board, starting from seed: {e}")
            return self.seed_board()

        if payload is None:
            logger.info(f"No stored board under '{key}', seeding default columns")
            return self.seed_board()

        try:
            board = deserialize_board(payload)
        except DeserializationError as e:
            logger.warning(f"Discarding stored board under '{key}': {e}")
            return self.seed_board()
        logger.info(f"Loaded board: {len(board.tasks)} tasks, {len(board.columns)} columns")
        return board

    def save_board(self, board: Board) -> bool:
        """Write a snapshot now. Returns True if it was written."""
        if isinstance(board, BoardProjection):
            logger.warning("Refusing to persist a filtered projection")
            return False
        if not board.column_order:
            return False
        problems = board.problems()
        if problems:
            logger.error(f"Refusing to persist an inconsistent board: {'; '.join(problems)}")
            return False
        try:
            self.store.set(self.config.board_key, serialize_board(board))
            return True
        except StorageError as e:
            logger.warning(f"Board not saved, continuing in memory: {e}")
            return False

    def schedule_save(self, board: Board) -> None:
        """Write-through with optional debounce."""
        delay = self.config.debounce_seconds
        if delay <= 0:
            with self._write_lock:
                self.save_board(board)
            return
        with self._lock:
            self._pending = board
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(delay, self.flush)
            self._timer.daemon = True
            self._timer.start()

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    def flush(self) -> bool:
        """Write the pending snapshot, if any."""
        with self._write_lock:
            with self._lock:
                board, self._pending = self._pending, None
                if self._timer is not None:
                    self._timer.cancel()
                    self._timer = None
            if board is None:
                return False
            return self.save_board(board)

    def close(self) -> None:
        """Write anything still pending and stop the timer."""
        self.flush()

    # ── Theme preference ──

    def load_theme(self) -> Theme:
        default = Theme.from_str(self.config.default_theme)
        try:
            value = self.store.get(self.config.theme_key)
        except StorageError as e:
            logger.warning(f"Cannot read theme: {e}")
            return default
        return Theme.from_str(value, default)

    def save_theme(self, theme: Theme) -> bool:
        try:
            self.store.set(self.config.theme_key, theme.value)
            return True
        except StorageError as e:
            logger.warning(f"Theme not saved: {e}")
            return False
