# Orchestrator: one configured tour attempt, wired to progress + logging
from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional, Sequence, Tuple

from config import CFG
from models import (
    DimsLike,
    Offset,
    PosLike,
    Table,
    as_dimensions,
    as_position,
    blank_table,
)
from progress import (
    set_attempt, set_board, set_elapsed, set_engine, set_message,
    set_search_tick, set_start, set_status,
)
from solver.isolate import run_search_isolated
from solver.path_search import SearchTick, find_path
from tour_request import TourRequest

logger = logging.getLogger(__name__)

_REASON_TEXT = {
    "found": "Tour found.",
    "no_path": "No path found.",
    "node_limit": "Stopped before solution (node limit).",
    "time_limit": "Stopped before solution (timebox).",
}


# ---------- helpers ----------

def _progress_hook(every: int):
    """Forward every ``every``-th engine call to the shared progress state."""

    every = max(1, int(every))

    def _on_call(tick: SearchTick) -> None:
        if tick.calls % every:
            return
        set_search_tick(tick.calls, tick.depth, tick.estimate * 100.0)

    return _on_call


def _positive_or_none(value: Any) -> Optional[float]:
    try:
        f = float(value)
    except (TypeError, ValueError):
        return None
    return f if f > 0 else None


def reason_text(stats: Dict[str, Any]) -> str:
    reason = str(stats.get("reason") or "")
    return _REASON_TEXT.get(reason, reason or "No solution (unspecified).")


def run_attempt(
    dims: DimsLike,
    moves: Sequence[Offset],
    start: PosLike,
    *,
    prune: bool = True,
    engine: str = "auto",
    node_limit: Optional[int] = None,
    max_seconds: Optional[float] = None,
    progress_every: Optional[int] = None,
) -> Tuple[bool, Table, Dict[str, Any]]:
    """Run :func:`find_path` with throttled progress reporting attached."""

    every = CFG.PROGRESS_EVERY if progress_every is None else progress_every
    hook = _progress_hook(every) if every and every > 0 else None
    stats: Dict[str, Any] = {}
    ok, table = find_path(
        dims,
        moves,
        start,
        prune=prune,
        engine=engine,
        node_limit=node_limit,
        max_seconds=max_seconds,
        on_call=hook,
        stats=stats,
    )
    return ok, table, stats


# ---------- public entrypoint ----------

def solve_tour(
    request: TourRequest,
    *,
    prune: Optional[bool] = None,
    engine: Optional[str] = None,
    node_limit: Optional[int] = None,
    max_seconds: Optional[float] = None,
    isolate: Optional[bool] = None,
) -> Dict[str, Any]:
    """
    Returns a result dict: ok, table, W, H, start, moves, iterations,
    pruned, max_depth, engine, elapsed, reason, strategy.
    Unset options fall back to CFG.
    """
    t0 = time.time()

    dims = as_dimensions(request.dims)
    start = as_position(request.start)
    prune = CFG.ENABLE_CHECK if prune is None else bool(prune)
    engine = engine or CFG.ENGINE
    limit = _positive_or_none(CFG.NODE_LIMIT if node_limit is None else node_limit)
    node_limit = int(limit) if limit is not None else None
    max_seconds = _positive_or_none(CFG.TIME_LIMIT if max_seconds is None else max_seconds)
    isolate = CFG.ISOLATE if isolate is None else bool(isolate)

    set_status("Solving")
    set_board(dims.width, dims.height)
    set_start(start.x, start.y)
    set_engine(engine)
    set_attempt(request.label)

    logger.info(
        "solving %s (moves=%d, prune=%s, engine=%s, node_limit=%s, max_seconds=%s, isolate=%s)",
        request.label, len(request.moves), prune, engine, node_limit, max_seconds, isolate,
    )

    crash_note: Optional[str] = None
    options = dict(prune=prune, engine=engine, node_limit=node_limit)
    if isolate:
        ok, table, stats, crash_note = run_search_isolated(
            dims.width, dims.height, (start.x, start.y), request.moves, max_seconds, **options
        )
    else:
        ok, table, stats = run_attempt(
            dims, request.moves, start, max_seconds=max_seconds, **options
        )

    if not ok and len(table) != dims.height:
        table = blank_table(dims)

    elapsed = time.time() - t0
    iterations = int(stats.get("calls") or 0)
    set_search_tick(iterations, stats.get("max_depth") or 0)
    if stats.get("engine"):
        set_engine(stats["engine"])
    set_elapsed(elapsed)

    text = reason_text(stats)
    if crash_note:
        text = f"{text} [{crash_note}]"
    set_message(text)

    logger.info("%s: %s after %d iterations in %.2fs", request.label, text, iterations, elapsed)

    return {
        "ok": bool(ok),
        "table": table,
        "W": dims.width,
        "H": dims.height,
        "start": (start.x, start.y),
        "moves": tuple(request.moves),
        "iterations": iterations,
        "pruned": int(stats.get("pruned") or 0),
        "max_depth": int(stats.get("max_depth") or 0),
        "engine": stats.get("engine") or engine,
        "elapsed": elapsed,
        "reason": stats.get("reason") or "no_path",
        "strategy": text,
    }
