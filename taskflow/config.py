# TaskFlow — configuration
# Override storage paths, keys and board layout via config.yaml.

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .errors import ConfigError

CONFIG_PATH = Path(__file__).parent.parent / "config.yaml"
CONFIG_ENV = "TASKFLOW_CONFIG"


def _default_columns() -> List[Dict[str, str]]:
    return [
        {"id": "column-1", "title": "To Do"},
        {"id": "column-2", "title": "In Progress"},
        {"id": "column-3", "title": "Done"},
    ]


@dataclass
class Config:
    """Runtime configuration for the board core."""

    # Storage
    db_path: str = "~/.local/share/taskflow/board.db"
    board_key: str = "kanbanBoard"
    theme_key: str = "theme"
    default_theme: str = "dark"

    # Board layout: ordered columns, one of them counts as "completed"
    columns: List[Dict[str, str]] = field(default_factory=_default_columns)
    terminal_column: str = "column-3"

    # Behavior
    debounce_seconds: float = 0.0  # 0 = write on every accepted change
    log_level: str = "INFO"

    def resolve_paths(self):
        """Expand ~ in storage paths."""
        self.db_path = str(Path(self.db_path).expanduser())

    def column_pairs(self) -> List[tuple]:
        """Configured columns as (id, title) pairs, in board order."""
        return [(c["id"], c.get("title", c["id"])) for c in self.columns]

    def validate(self) -> None:
        """
        Check the board layout is usable.

        Raises ConfigError on empty or duplicate column ids, a terminal
        column that is not configured, an unknown theme or a negative
        debounce.
        """
        if not self.columns:
            raise ConfigError("At least one column must be configured")
        ids = []
        for entry in self.columns:
            if not isinstance(entry, dict) or not entry.get("id"):
                raise ConfigError(f"Column entry needs an 'id': {entry!r}")
            ids.append(str(entry["id"]))
        if len(set(ids)) != len(ids):
            raise ConfigError(f"Duplicate column ids in config: {ids}")
        if self.terminal_column not in ids:
            raise ConfigError(
                f"terminal_column '{self.terminal_column}' is not a configured column. "
                f"Available: {ids}"
            )
        if self.default_theme not in ("light", "dark"):
            raise ConfigError(f"default_theme must be 'light' or 'dark', got {self.default_theme!r}")
        if self.debounce_seconds < 0:
            raise ConfigError("debounce_seconds cannot be negative")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Build a config from a mapping, ignoring unknown keys."""
        cfg = cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})
        cfg.resolve_paths()
        cfg.validate()
        return cfg

    @classmethod
    def load(cls, path: Optional[str] = None) -> "Config":
        """Load config from YAML file, falling back to defaults."""
        if path:
            cfg_path = Path(path)
        elif os.environ.get(CONFIG_ENV):
            cfg_path = Path(os.environ[CONFIG_ENV])
        else:
            cfg_path = CONFIG_PATH

        data: Dict[str, Any] = {}
        if cfg_path.exists():
            try:
                with open(cfg_path, "r") as f:
                    data = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                raise ConfigError(f"Cannot read config {cfg_path}: {e}") from e
            if not isinstance(data, dict):
                raise ConfigError(f"Config {cfg_path} must be a mapping")
        return cls.from_dict(data)


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging for a host application."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [taskflow] %(levelname)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
