"""Command-line front end: search once and print the labelled table."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Iterable, Optional

from config import CFG
from models import Dimensions, Position
from render import format_table
from solver.orchestrator import solve_tour
from solver.path_search import ENGINES
from tour_request import TourRequest, parse_moves


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Search for a tour that visits every cell of a grid exactly once.",
    )
    parser.add_argument("--cols", type=int, default=CFG.COLS, help="Board width in cells.")
    parser.add_argument("--rows", type=int, default=CFG.ROWS, help="Board height in cells.")
    parser.add_argument("--start-x", type=int, default=CFG.START_X, help="Starting column.")
    parser.add_argument("--start-y", type=int, default=CFG.START_Y, help="Starting row.")
    parser.add_argument(
        "--moves",
        default=CFG.MOVES,
        help='Move set: "knight" or offsets such as "1,2;2,1;-1,2".',
    )
    parser.add_argument(
        "--no-check",
        dest="prune",
        action="store_false",
        default=CFG.ENABLE_CHECK,
        help="Disable the dead-end check (plain backtracking).",
    )
    parser.add_argument("--engine", choices=ENGINES, default=CFG.ENGINE)
    parser.add_argument(
        "--node-limit",
        type=int,
        default=CFG.NODE_LIMIT,
        help="Give up after this many search steps (0 for no limit).",
    )
    parser.add_argument(
        "--max-seconds",
        type=float,
        default=CFG.TIME_LIMIT,
        help="Give up after this many seconds (0 for no limit).",
    )
    parser.add_argument(
        "--isolate",
        action="store_true",
        default=CFG.ISOLATE,
        help="Run the search in a child process.",
    )
    parser.add_argument(
        "--no-isolate",
        dest="isolate",
        action="store_false",
        default=CFG.ISOLATE,
        help="Run the search in this process even when PT_ISOLATE is set.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log search details to stderr.")
    return parser


def main(argv: Optional[Iterable[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if args.cols < 0 or args.rows < 0:
        print(f"Board dimensions must be non-negative, got {args.cols} × {args.rows}.", file=sys.stderr)
        return 2
    try:
        moves = parse_moves(args.moves)
    except ValueError as e:
        print(f"Bad move set: {e}", file=sys.stderr)
        return 2

    request = TourRequest(
        Dimensions(args.cols, args.rows),
        Position(args.start_x, args.start_y),
        moves,
    )
    result = solve_tour(
        request,
        prune=args.prune,
        engine=args.engine,
        node_limit=args.node_limit,
        max_seconds=args.max_seconds,
        isolate=args.isolate,
    )

    if result["ok"]:
        if result["table"]:
            print(format_table(result["table"]))
    else:
        print(result["strategy"])
    print(f"Calculation completed after {result['iterations']} iterations.")
    return 0 if result["ok"] else 1


if __name__ == "__main__":  # pragma: no cover - manual entry point
    sys.exit(main())
