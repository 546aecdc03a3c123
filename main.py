"""AdventureBot launcher. Plays an adventure in the terminal or starts the skill server."""

import argparse
import logging
import os
import subprocess
import sys
from pathlib import Path

from dotenv import load_dotenv

ROOT = Path(__file__).parent
load_dotenv(ROOT / ".env")

HOST = os.getenv("HOST", "0.0.0.0")
BACKEND_PORT = os.getenv("BACKEND_PORT", "13013")


def play(args: argparse.Namespace) -> int:
    from adventurebot.console import ConsoleRenderer, run_console
    from adventurebot.loader import LoaderError, load_from

    if not args.adventure_file.is_file():
        print("ERROR: cannot find file.")
        return 1
    try:
        graph = load_from(args.adventure_file)
    except (LoaderError, OSError) as e:
        print("ERROR: unable to load file")
        print(e)
        return 1

    run_console(graph, renderer=ConsoleRenderer(typing=not args.no_typing))
    return 0


def serve(args: argparse.Namespace) -> int:
    env = os.environ.copy()
    if args.data_dir:
        env["DATA_DIR"] = str(args.data_dir.resolve())
    if args.adventure_file:
        env["ADVENTURE_FILE"] = str(args.adventure_file.resolve())

    print(f"Starting skill server on http://localhost:{BACKEND_PORT} ...")
    cmd = [sys.executable, "-m", "uvicorn", "backend.app:app", "--host", HOST, "--port", BACKEND_PORT]
    if args.reload:
        cmd.append("--reload")
    try:
        return subprocess.call(cmd, cwd=ROOT, env=env)
    except KeyboardInterrupt:
        print("\nShutting down...")
        return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="AdventureBot")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    play_parser = sub.add_parser("play", help="Play an adventure file in the terminal")
    play_parser.add_argument("adventure_file", type=Path, help="Path to a .json/.yaml/.yml adventure")
    play_parser.add_argument("--no-typing", action="store_true",
                             help="Print text at once instead of typing it out")
    play_parser.set_defaults(func=play)

    serve_parser = sub.add_parser("serve", help="Run the voice-skill HTTP backend")
    serve_parser.add_argument("--data-dir", type=Path, default=None,
                              help="Data storage directory (default: ./data)")
    serve_parser.add_argument("--adventure-file", type=Path, default=None,
                              help="Adventure definition served to players")
    serve_parser.add_argument("--reload", action="store_true", help="Restart on code changes")
    serve_parser.set_defaults(func=serve)

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
