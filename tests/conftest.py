import os
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# In-memory database must be chosen before the app module is imported
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("LABYRINTH_LOG_LEVEL", "warn")

from labyrinth import create_app, db, socketio  # noqa: E402
from labyrinth.services import rooms  # noqa: E402


@pytest.fixture(scope="session")
def test_app():
    app = create_app()
    app.config.update({"TESTING": True})
    return app


@pytest.fixture(autouse=True)
def _push_app_context(test_app):
    ctx = test_app.app_context()
    ctx.push()
    try:
        yield
    finally:
        db.session.rollback()
        ctx.pop()


@pytest.fixture(autouse=True)
def _clean_rooms():
    rooms.reset_rooms()
    yield
    rooms.reset_rooms()


@pytest.fixture(autouse=True)
def _clean_maze_env(monkeypatch):
    for key in (
        "MAZE_WIDTH",
        "MAZE_HEIGHT",
        "MAZE_CELL_SIZE",
        "MAZE_SHIFT_INTERVAL",
        "MAZE_SHIFT_CHANCE",
        "MAZE_PATTERN",
        "MAZE_ENABLE_SHIFTING",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture()
def client(test_app):
    return test_app.test_client()


@pytest.fixture()
def socket_client(test_app):
    # Flask-SocketIO provides a test client we can use against the global socketio instance
    test_client = socketio.test_client(test_app, flask_test_client=test_app.test_client())
    yield test_client
    if test_client.is_connected():
        test_client.disconnect()
