"""Tests for YAML configuration loading."""
import pytest

from taskflow.config import Config
from taskflow.errors import ConfigError


def test_defaults_when_file_missing(tmp_path):
    cfg = Config.load(str(tmp_path / "absent.yaml"))
    assert cfg.board_key == "kanbanBoard"
    assert cfg.theme_key == "theme"
    assert cfg.terminal_column == "column-3"
    assert [cid for cid, _ in cfg.column_pairs()] == ["column-1", "column-2", "column-3"]
    assert "~" not in cfg.db_path


def test_load_from_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "db_path: " + str(tmp_path / "b.db") + "\n"
        "columns:\n"
        "  - id: backlog\n"
        "    title: Backlog\n"
        "  - id: shipped\n"
        "    title: Shipped\n"
        "terminal_column: shipped\n"
        "debounce_seconds: 0.5\n"
        "unknown_key: ignored\n"
    )
    cfg = Config.load(str(path))
    assert cfg.column_pairs() == [("backlog", "Backlog"), ("shipped", "Shipped")]
    assert cfg.terminal_column == "shipped"
    assert cfg.debounce_seconds == 0.5
    assert not hasattr(cfg, "unknown_key")


def test_env_var_selects_config(tmp_path, monkeypatch):
    path = tmp_path / "env.yaml"
    path.write_text("board_key: otherBoard\n")
    monkeypatch.setenv("TASKFLOW_CONFIG", str(path))
    assert Config.load().board_key == "otherBoard"


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert Config.load(str(path)).default_theme == "dark"


@pytest.mark.parametrize("data", [
    {"columns": []},
    {"columns": [{"id": "a"}, {"id": "a"}], "terminal_column": "a"},
    {"columns": [{"title": "No id"}]},
    {"terminal_column": "column-9"},
    {"default_theme": "sepia"},
    {"debounce_seconds": -1},
])
def test_invalid_config_raises(data):
    with pytest.raises(ConfigError):
        Config.from_dict(data)


def test_non_mapping_file_raises(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n")
    with pytest.raises(ConfigError):
        Config.load(str(path))


def test_broken_yaml_raises(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("columns: [unclosed\n")
    with pytest.raises(ConfigError):
        Config.load(str(path))


def test_persistence_validates_config_passed_in():
    from taskflow.store import BoardPersistence, MemoryKeyValueStore

    with pytest.raises(ConfigError):
        BoardPersistence(MemoryKeyValueStore(), Config(terminal_column="nope"))
