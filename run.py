"""Labyrinth CLI entry point.

Provides subcommands for running the Socket.IO maze server, printing a
generated maze to the terminal, and reading/writing persisted GameConfig
values. Accepts configuration via flags and environment variables, with
optional .env loading.

Run `python run.py --help` for details.
"""

import argparse
import json
import os
import signal
import sys
from pathlib import Path
from textwrap import dedent

from dotenv import load_dotenv


def _load_version() -> str:
    try:
        return (Path(__file__).resolve().parent / "VERSION").read_text(encoding="utf-8").strip()
    except OSError:
        return "0.0.0"


__version__ = _load_version()


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    Labyrinth Shifting Maze Server

    Run the real-time Flask-SocketIO server that owns the authoritative maze
    for every room, or generate a maze offline. Configuration can be provided
    via CLI flags or environment variables. If both are present, CLI flags
    take precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          HOST                  Bind address for the web server (default: 0.0.0.0)
          PORT                  Port for the web server (default: 5000)
          DATABASE_URL          SQLAlchemy database URI (default: sqlite:///instance/labyrinth.db)
          MAZE_WIDTH            Default maze width in cells (default: 20)
          MAZE_HEIGHT           Default maze height in cells (default: 20)
          MAZE_SHIFT_INTERVAL   Seconds between wall shifts (default: 60)
          LABYRINTH_LOG_LEVEL   debug|info|warn|error (default: info)

        Examples:
          # Run the server on the default host and port
          python run.py server

          # Print a seeded 30x15 concentric maze
          python run.py generate --seed 42 --width 30 --height 15 --pattern concentric

          # Persist room defaults picked up by every new room
          python run.py config-set maze_defaults '{"width": 30, "height": 30}'
        """
    )

    parser = argparse.ArgumentParser(
        prog="Labyrinth",
        description=dedent(description),
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )

    parser.add_argument(
        "--env-file",
        dest="env_file",
        help="Path to a .env file to load before processing flags",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Labyrinth Maze Server {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    # server subcommand
    server_parser = subparsers.add_parser(
        "server",
        help="Run the Socket.IO web server",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Run the real-time Flask/Socket.IO server and maze tick loop",
    )
    server_parser.add_argument(
        "--host",
        default=None,
        help="Host interface to bind (default: env HOST or 0.0.0.0)",
    )
    server_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to listen on (default: env PORT or 5000)",
    )
    server_parser.add_argument(
        "--db",
        dest="db_uri",
        default=None,
        help="Database URI (default: env DATABASE_URL or sqlite:///instance/labyrinth.db)",
    )
    server_parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable Flask debug mode with verbose error pages",
    )
    server_parser.set_defaults(command="server")

    # generate subcommand
    gen_parser = subparsers.add_parser(
        "generate",
        help="Generate a maze and print it as ASCII (# wall, . path, E exit)",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    gen_parser.add_argument("--seed", type=int, default=None, help="RNG seed (default: random)")
    gen_parser.add_argument("--width", type=int, default=None, help="Width in cells")
    gen_parser.add_argument("--height", type=int, default=None, help="Height in cells")
    gen_parser.add_argument(
        "--pattern",
        default=None,
        help="spanning_tree | geometric | concentric | symmetric (default: random)",
    )
    gen_parser.add_argument("--json", action="store_true", help="Print the wire JSON instead of ASCII")
    gen_parser.set_defaults(command="generate")

    # config-get
    cfg_get_parser = subparsers.add_parser(
        "config-get",
        help="Print a GameConfig value by key",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    cfg_get_parser.add_argument("key", help="Config key")
    cfg_get_parser.set_defaults(command="config-get")

    # config-set
    cfg_set_parser = subparsers.add_parser(
        "config-set",
        help="Set a GameConfig key to a value (raw string)",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    cfg_set_parser.add_argument("key", help="Config key")
    cfg_set_parser.add_argument("value", help="Raw value (quote JSON externally)")
    cfg_set_parser.set_defaults(command="config-set")

    # If no subcommand provided, default to server
    if len(argv) == 0:
        argv = ["server"]

    args = parser.parse_args(argv)
    if args.command is None:
        args.command = "server"
    return args


def _generate(args) -> int:
    from labyrinth.maze import Maze, MazeConfigError

    try:
        maze = Maze(seed=args.seed, width=args.width, height=args.height, pattern=args.pattern)
    except MazeConfigError as exc:
        print(f"[ERROR] {exc}")
        return 2
    data = maze.generate()
    if args.json:
        print(json.dumps(data))
    else:
        print(f"seed={maze.seed} pattern={maze.pattern.value} exit={maze.exit_position}")
        print(maze.to_ascii())
    return 0


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        # Load default .env if present (no error if missing)
        load_dotenv()

    mode = (getattr(args, "command", None) or "server").lower()

    if mode == "generate":
        return _generate(args)

    # Make DATABASE_URL available to the Flask app BEFORE importing it
    db_uri_cli = getattr(args, "db_uri", None)
    if db_uri_cli:
        os.environ["DATABASE_URL"] = db_uri_cli

    if mode == "config-get":
        from labyrinth import create_app
        from labyrinth.models import GameConfig

        app = create_app()
        with app.app_context():
            val = GameConfig.get(args.key)
            if val is None:
                print("[NOT FOUND]")
                return 1
            print(val)
            return 0
    elif mode == "config-set":
        from labyrinth import create_app
        from labyrinth.models import GameConfig

        app = create_app()
        with app.app_context():
            GameConfig.set(args.key, args.value)
            print("[OK]")
            return 0

    host = getattr(args, "host", None) or os.getenv("HOST", "0.0.0.0")
    port = int(getattr(args, "port", None) or os.getenv("PORT", "5000"))
    db_banner = db_uri_cli or os.getenv("DATABASE_URL") or "auto (instance/labyrinth.db)"

    def handle_sigint(sig, frame):
        print("\n[INFO] Shutting down server...")
        sys.exit(0)

    signal.signal(signal.SIGINT, handle_sigint)

    # Import server entrypoints only after environment is ready
    from labyrinth import server

    divider = "=" * 40
    lines = [
        divider,
        "  Labyrinth Maze Server Bootup",
        divider,
        f"  {'Mode:':12} {mode.upper()}",
        f"  {'Host:':12} {host}",
        f"  {'Port:':12} {port}",
        f"  {'Database:':12} {db_banner}",
        f"  {'Version:':12} {__version__}",
        divider,
        "",
    ]
    print("\n".join(lines))
    server.log.info(event="startup", mode=mode, host=host, port=port, db=db_banner)
    server.start_server(host=host, port=port, debug=bool(getattr(args, "debug", False)))
    return 0


def cli():
    sys.exit(main(sys.argv[1:]))


if __name__ == "__main__":
    cli()
