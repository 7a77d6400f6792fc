"""
project: Labyrinth
module: __init__.py

Flask application and core extensions setup.

This module wires together the Flask app, SQLAlchemy and Flask-SocketIO.
Configuration is sourced from environment variables with reasonable defaults
for development. A local `instance/` directory is used for SQLite, the log file
and other runtime data.
"""

import logging
import os
import uuid
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_socketio import SocketIO
from flask_sqlalchemy import SQLAlchemy

# Load .env if present so `SECRET_KEY`, `DATABASE_URL`, `MAZE_*` etc. can be
# supplied without exporting shell variables during development.
load_dotenv()

app = Flask(__name__, instance_relative_config=True)

try:
    os.makedirs(app.instance_path, exist_ok=True)
except OSError:
    # Read-only checkouts still work with an explicit DATABASE_URL
    pass

secret_key = os.getenv("SECRET_KEY", "dev-secret-change-me")
database_url = os.getenv("DATABASE_URL")

# During pytest runs, isolate to a separate database file
if not database_url:
    is_pytest = bool(os.getenv("PYTEST_CURRENT_TEST"))
    db_filename = "labyrinth_test.db" if is_pytest else "labyrinth.db"
    db_path = Path(app.instance_path) / db_filename
    database_url = f"sqlite:///{db_path.as_posix()}"

app.config.update(
    SECRET_KEY=secret_key,
    SQLALCHEMY_DATABASE_URI=database_url,
    SQLALCHEMY_TRACK_MODIFICATIONS=False,
)

engine_opts = {}
if database_url.startswith("sqlite:///"):
    engine_opts["connect_args"] = {
        "timeout": 10,  # busy timeout (seconds) for sqlite
        "check_same_thread": False,  # the tick loop and socket handlers share the engine
    }
db = SQLAlchemy(app, session_options={"expire_on_commit": False}, engine_options=engine_opts)

# Let Flask-SocketIO select best async_mode based on installed deps (eventlet/gevent/threading)
socketio = SocketIO(
    app,
    async_mode=os.getenv("SOCKETIO_ASYNC_MODE") or None,
    cors_allowed_origins=os.getenv("CORS_ALLOWED_ORIGINS", "*"),
    engineio_logger=bool(os.getenv("ENGINEIO_LOGGER", "0") == "1"),
    ping_interval=20,
    ping_timeout=10,
)

# Models must be registered on the metadata before create_all
from labyrinth import models as _models  # noqa: F401,E402

# Register HTTP blueprints
from labyrinth.routes.maze_api import bp_maze  # noqa: E402

app.register_blueprint(bp_maze)

# Import websocket handlers so their event decorators register with Socket.IO (side-effect)
from labyrinth.websockets import game as _ws_game  # noqa: F401,E402


def create_app():
    """Return the Flask app instance with the schema created."""
    with app.app_context():
        db.create_all()
    return app


@app.errorhandler(500)
def internal_error(e):
    error_id = uuid.uuid4().hex[:8]
    logging.exception("Unhandled exception (id=%s)", error_id)
    return jsonify({"error": "internal server error", "error_id": error_id}), 500
