"""Delve CLI entry point.

Provides subcommands for running the Socket.IO world server, rendering a
window of chunks as ASCII, and checking a seed's structural invariants.
Accepts configuration via flags and environment variables, with optional
.env loading.

Run `python run.py --help` for details.
"""

import argparse
import json
import os
import signal
import sys
from textwrap import dedent

from colorama import Fore, Style
from colorama import init as _color_init
from dotenv import load_dotenv

_color_init()

# Disable colors if output is not a real terminal (e.g., during pytest capture)
_COLOR_ENABLED = sys.stdout.isatty()

__version__ = "0.1.0"


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    Delve World Server

    Stream an infinite, seeded dungeon over Flask-SocketIO, or inspect a
    seed offline. CLI flags take precedence over environment variables.
    """

    epilog = dedent(
        """
        Environment variables:
          HOST                  Bind address for the web server (default: 0.0.0.0)
          PORT                  Port for the web server (default: 5000)
          WORLD_SEED            World seed (int or phrase; random if unset)
          WORLD_CHUNK_SIZE      Chunk side length in tiles (default: 32)
          WORLD_VIEW_DISTANCE   Chunks kept loaded around the viewer (default: 1)
          DELVE_LOG_LEVEL       debug | info | warn | error (default: info)

        Examples:
          # Run the server on the default host and port
          python run.py server

          # Print the 3x3 window around chunk (2, -1) of a named world
          python run.py render --seed "deep halls" --cx 2 --cy -1

          # Check structural invariants for a few seeds
          python run.py check --seed 1 --seed 42 --seed 1337
        """
    )

    parser = argparse.ArgumentParser(
        prog="Delve",
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
        version=f"Delve World Server {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    server_parser = subparsers.add_parser(
        "server",
        help="Run the Socket.IO web server",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Run the real-time Flask/Socket.IO world server",
    )
    server_parser.add_argument("--host", default=None, help="Host interface to bind (default: env HOST or 0.0.0.0)")
    server_parser.add_argument("--port", type=int, default=None, help="Port to listen on (default: env PORT or 5000)")
    server_parser.add_argument("--seed", default=None, help="World seed (default: env WORLD_SEED or random)")
    server_parser.add_argument("--debug", action="store_true", help="Enable Flask debug mode with verbose error pages")
    server_parser.set_defaults(command="server")

    render_parser = subparsers.add_parser(
        "render",
        help="Print a window of chunks as ASCII",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Generate the window around a chunk and print it ('#' wall, '.' floor, ',' corridor).",
    )
    render_parser.add_argument("--seed", required=True, help="World seed (int or phrase)")
    render_parser.add_argument("--cx", type=int, default=0, help="Center chunk x (default: 0)")
    render_parser.add_argument("--cy", type=int, default=0, help="Center chunk y (default: 0)")
    render_parser.add_argument("--radius", type=int, default=1, help="View distance in chunks (default: 1)")
    render_parser.add_argument("--chunk-size", dest="chunk_size", type=int, default=32, help="Chunk side (default: 32)")
    render_parser.set_defaults(command="render")

    check_parser = subparsers.add_parser(
        "check",
        help="Check structural invariants for one or more seeds",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Walk each seed's world and report connectivity and seam issues as JSON.",
    )
    check_parser.add_argument("--seed", action="append", dest="seeds", required=True, help="World seed (repeatable)")
    check_parser.set_defaults(command="check")

    # If no subcommand provided, default to server
    if len(argv) == 0:
        argv = ["server"]

    return parser.parse_args(argv)


def render_window(seed, cx: int, cy: int, radius: int = 1, chunk_size: int = 32) -> str:
    """ASCII of the (2r+1)^2 chunk window around (cx, cy), chunks joined edge to edge."""
    from delve.world import ChunkManager, WorldConfig, coerce_seed
    from delve.world.tiles import tile_char

    manager = ChunkManager(WorldConfig(chunk_size=chunk_size, view_distance=radius, seed=coerce_seed(seed)))
    manager.update_window(cx, cy)
    n = chunk_size
    x0, y0 = (cx - radius) * n, (cy - radius) * n
    span = (2 * radius + 1) * n
    lines = []
    for ty in range(y0, y0 + span):
        lines.append("".join(tile_char(manager.tile_at(tx, ty)) for tx in range(x0, x0 + span)))
    return "\n".join(lines)


def _colorize(ascii_map: str) -> str:
    if not _COLOR_ENABLED:
        return ascii_map
    colors = {"#": Fore.BLUE, ".": Fore.WHITE, ",": Fore.YELLOW}
    return "\n".join(
        "".join(f"{colors.get(ch, '')}{ch}{Style.RESET_ALL}" if ch in colors else ch for ch in line)
        for line in ascii_map.splitlines()
    )


def check_seeds(seeds) -> dict:
    from delve.world import coerce_seed
    from delve.world.analysis import survey_seed

    results = [survey_seed(coerce_seed(s)) for s in seeds]
    return {"results": results, "ok": all(r["ok"] for r in results)}


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        # Load default .env if present (no error if missing)
        load_dotenv()

    mode = (getattr(args, "command", None) or "server").lower()

    if mode == "render":
        print(_colorize(render_window(args.seed, args.cx, args.cy, args.radius, args.chunk_size)))
        return 0
    if mode == "check":
        report = check_seeds(args.seeds)
        print(json.dumps(report, indent=2))
        return 0 if report["ok"] else 1

    host = getattr(args, "host", None) or os.getenv("HOST", "0.0.0.0")
    port = int(getattr(args, "port", None) or os.getenv("PORT", "5000"))
    if getattr(args, "seed", None):
        # Must be in place before the Flask app reads its config
        os.environ["WORLD_SEED"] = str(args.seed)

    def handle_sigint(sig, frame):
        print("\n[INFO] Shutting down server...")
        sys.exit(0)

    signal.signal(signal.SIGINT, handle_sigint)

    # Import server entrypoints only after environment is ready
    from delve.logging_utils import log
    from delve.server import start_server

    title = (
        f"{Fore.CYAN}{Style.BRIGHT}Delve World Server Bootup{Style.RESET_ALL}"
        if _COLOR_ENABLED
        else "Delve World Server Bootup"
    )

    def label(text: str) -> str:
        return f"{Fore.YELLOW}{text}{Style.RESET_ALL}" if _COLOR_ENABLED else text

    def value(val: str | int) -> str:
        return f"{Fore.GREEN}{val}{Style.RESET_ALL}" if _COLOR_ENABLED else str(val)

    divider = (Fore.MAGENTA + "=" * 40 + Style.RESET_ALL) if _COLOR_ENABLED else "=" * 40
    lines = [
        divider,
        f"  {title}",
        divider,
        f"  {label('Mode:'):12} {value(mode.upper())}",
        f"  {label('Host:'):12} {value(host)}",
        f"  {label('Port:'):12} {value(port)}",
        f"  {label('Seed:'):12} {value(os.getenv('WORLD_SEED') or 'random')}",
        f"  {label('WebSockets:'):12} {value('enabled')}",
        divider,
        "",
    ]
    print("\n".join(lines))
    log.info(event="startup", mode=mode, host=host, port=port)

    start_server(host=host, port=port, debug=getattr(args, "debug", False))
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
