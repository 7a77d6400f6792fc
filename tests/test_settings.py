import json

import pytest

from labyrinth import db
from labyrinth.maze import MazeConfigError
from labyrinth.models import GameConfig
from labyrinth.settings import MAZE_DEFAULTS_KEY, resolve_maze_config


@pytest.fixture(autouse=True)
def _no_db_defaults(_push_app_context):
    GameConfig.query.filter_by(key=MAZE_DEFAULTS_KEY).delete()
    db.session.commit()
    yield
    GameConfig.query.filter_by(key=MAZE_DEFAULTS_KEY).delete()
    db.session.commit()


def test_dataclass_defaults_when_nothing_is_set():
    cfg = resolve_maze_config()
    assert (cfg.width, cfg.height, cfg.cell_size) == (20, 20, 2.0)
    assert cfg.shift_interval == 60.0 and cfg.shift_chance == 0.2
    assert cfg.enable_shifting is True and cfg.pattern is None


def test_environment_layer(monkeypatch):
    monkeypatch.setenv("MAZE_WIDTH", "30")
    monkeypatch.setenv("MAZE_SHIFT_INTERVAL", "12.5")
    monkeypatch.setenv("MAZE_PATTERN", " Geometric ")
    monkeypatch.setenv("MAZE_ENABLE_SHIFTING", "no")
    cfg = resolve_maze_config()
    assert cfg.width == 30
    assert cfg.shift_interval == 12.5
    assert cfg.pattern == "geometric"
    assert cfg.enable_shifting is False


def test_malformed_values_are_skipped_key_by_key(monkeypatch):
    monkeypatch.setenv("MAZE_WIDTH", "wide")
    monkeypatch.setenv("MAZE_HEIGHT", "25")
    monkeypatch.setenv("MAZE_ENABLE_SHIFTING", "maybe")
    cfg = resolve_maze_config()
    assert cfg.width == 20
    assert cfg.height == 25
    assert cfg.enable_shifting is True


def test_precedence_env_app_db_override(monkeypatch, test_app):
    monkeypatch.setenv("MAZE_WIDTH", "30")
    monkeypatch.setenv("MAZE_HEIGHT", "31")
    monkeypatch.setitem(test_app.config, "MAZE_WIDTH", 40)
    assert resolve_maze_config().width == 40
    assert resolve_maze_config().height == 31

    GameConfig.set(MAZE_DEFAULTS_KEY, json.dumps({"width": 50, "shift_chance": 0.5}))
    cfg = resolve_maze_config()
    assert cfg.width == 50
    assert cfg.height == 31
    assert cfg.shift_chance == 0.5

    assert resolve_maze_config({"width": 60, "height": None}).width == 60
    assert resolve_maze_config({"width": 60, "height": None}).height == 31


def test_broken_db_json_is_ignored():
    GameConfig.set(MAZE_DEFAULTS_KEY, "{not json")
    assert resolve_maze_config().width == 20
    GameConfig.set(MAZE_DEFAULTS_KEY, json.dumps([1, 2, 3]))
    assert resolve_maze_config().width == 20


def test_explicit_bad_override_raises():
    with pytest.raises(MazeConfigError):
        resolve_maze_config({"shift_chance": 2.0})


def test_out_of_range_layer_values_are_ignored(monkeypatch):
    monkeypatch.setenv("MAZE_WIDTH", "-4")
    monkeypatch.setenv("MAZE_PATTERN", "spiral")
    monkeypatch.setenv("MAZE_HEIGHT", "25")
    GameConfig.set(MAZE_DEFAULTS_KEY, json.dumps({"shift_chance": 3, "cell_size": 4}))
    cfg = resolve_maze_config()
    assert cfg.width == 20 and cfg.pattern is None
    assert cfg.height == 25
    assert cfg.shift_chance == 0.2 and cfg.cell_size == 4.0
