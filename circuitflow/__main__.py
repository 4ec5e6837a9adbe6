"""
CircuitFlow — entry point.

Usage:
    python -m circuitflow serve                  # start web server on :8000
    python -m circuitflow serve --port 3000
    python -m circuitflow drc board.json         # print DRC result as JSON
    python -m circuitflow gcode board.json       # GRBL G-code to stdout
    python -m circuitflow svg board.json         # SVG to stdout
"""

import json
import logging
import sys
from pathlib import Path

USAGE = "Usage: python -m circuitflow serve [--port PORT] [--host HOST] | drc|gcode|svg FILE"


def _load(path: str):
    from circuitflow.board import ProjectFormatError, parse_board

    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        return parse_board(data)
    except (OSError, json.JSONDecodeError, ProjectFormatError) as e:
        print(f"Cannot load {path}: {e}", file=sys.stderr)
        sys.exit(1)


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    args = sys.argv[1:]
    cmd = args[0] if args else "serve"

    if cmd == "serve":
        port = 8000
        host = "127.0.0.1"
        for i, a in enumerate(args):
            if a == "--port" and i + 1 < len(args):
                port = int(args[i + 1])
            elif a == "--host" and i + 1 < len(args):
                host = args[i + 1]

        from circuitflow.web.server import main as serve
        serve(host=host, port=port)
    elif cmd in ("drc", "gcode", "svg") and len(args) == 2:
        board = _load(args[1])
        if cmd == "drc":
            from circuitflow.drc import run_drc

            result = run_drc(board)
            print(json.dumps(result.to_dict(), indent=2))
            sys.exit(0 if result.ok else 2)
        elif cmd == "gcode":
            from circuitflow.export import export_grbl

            print("\n".join(export_grbl(board)))
        else:
            from circuitflow.export import export_svg

            print(export_svg(board))
    else:
        print(f"Unknown command: {' '.join(args)}")
        print(USAGE)
        sys.exit(1)


if __name__ == "__main__":
    main()
