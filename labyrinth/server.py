"""
project: Labyrinth
module: server.py

Server bootstrap.

Creates the schema, configures logging, starts the maze tick loop and then
hands control to the Socket.IO server.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler

from labyrinth import app, db, socketio
from labyrinth.logging_utils import log
from labyrinth.services.rooms import TICK_RATE, start_tick_loop


def start_server(host="0.0.0.0", port=5000, debug: bool = False):  # pragma: no cover (integration / runtime only)
    """Start the Socket.IO server and the authoritative maze tick loop.

    When debug=True, Flask's debugger and reloader provide verbose tracebacks.
    """
    with app.app_context():
        db.create_all()
        _configure_logging()
    start_tick_loop(socketio)
    try:
        log.info(event="server_start", host=host, port=port, async_mode=socketio.async_mode, tick_rate=TICK_RATE)
        # Let Flask-SocketIO choose appropriate server (eventlet/gevent/werkzeug)
        socketio.run(app, host=host, port=port, debug=debug)
    except KeyboardInterrupt:
        print("\n[INFO] Server stopped by user (Ctrl+C)")
        sys.exit(0)


def _configure_logging():
    """Configure logging to both console and a rotating file in instance/.

    The file path will be instance/labyrinth.log. Retains a few backups to avoid growth.
    """
    log_dir = app.instance_path
    try:
        os.makedirs(log_dir, exist_ok=True)
    except OSError:
        pass
    log_path = os.path.join(log_dir, "labyrinth.log")

    root = logging.getLogger()
    root.setLevel(logging.INFO)
    fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    file_handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=3)
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(fmt)

    console = logging.StreamHandler()
    console.setLevel(logging.INFO)
    console.setFormatter(fmt)

    # Avoid duplicate handlers if reconfigured
    for h in list(root.handlers):
        root.removeHandler(h)

    root.addHandler(file_handler)
    root.addHandler(console)
    return log_path
