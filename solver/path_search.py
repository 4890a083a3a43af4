# solver/path_search.py
from __future__ import annotations

import logging
import sys
import time
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Sequence, Tuple

from models import (
    Dimensions,
    DimsLike,
    MoveSet,
    Offset,
    PosLike,
    Position,
    Table,
    as_dimensions,
    as_move_set,
    as_position,
    blank_table,
)
from solver.board import is_available, is_dead_end

logger = logging.getLogger(__name__)

ENGINES = ("auto", "recursive", "iterative")

# Frames the recursive engine may use beyond one per committed move.
_RECURSION_HEADROOM = 100
# Levels of the branch stack that feed the progress estimate.
_ESTIMATE_DEPTH = 6
# The wall clock is only read once every this many engine calls.
_DEADLINE_STRIDE = 1024

_clock = time.monotonic


class SearchTick(NamedTuple):
    calls: int       # engine calls so far, this one included
    depth: int       # moves committed when the call was made
    estimate: float  # 0..1, see estimate_progress()


OnCall = Callable[[SearchTick], None]


def estimate_progress(branch: Sequence[int], fanout: int, depth_cap: int = _ESTIMATE_DEPTH) -> float:
    """Approximate the explored share of the search tree.

    Treats the tree as uniformly ``fanout``-ary and reads the offset index
    being explored at each of the first ``depth_cap`` levels as digits of a
    fraction.  It is cosmetic: pruning and the board edge make the real tree
    very lopsided.
    """

    if fanout <= 0:
        return 0.0
    frac = 0.0
    scale = 1.0
    for idx in branch[:depth_cap]:
        scale /= fanout
        frac += idx * scale
    return min(1.0, frac)


def _resolve_engine(engine: Optional[str], cells: int, moves_completed: int) -> str:
    name = (engine or "auto").strip().lower()
    if name not in ENGINES:
        raise ValueError(f"unknown search engine {engine!r}; expected one of {', '.join(ENGINES)}")
    if name != "auto":
        return name
    needed = max(0, cells - moves_completed) + _RECURSION_HEADROOM
    return "recursive" if needed < sys.getrecursionlimit() else "iterative"


class _SearchRun:
    """State of one in-flight search attempt over a caller-owned table."""

    def __init__(
        self,
        table: Table,
        dims: Dimensions,
        move_set: MoveSet,
        *,
        prune: bool,
        on_call: Optional[OnCall],
        node_limit: Optional[int],
        max_seconds: Optional[float],
    ) -> None:
        self.table = table
        self.dims = dims
        self.move_set = move_set
        self.total = dims.cells
        self.prune = bool(prune)
        self.on_call = on_call
        self.node_limit = int(node_limit) if node_limit and node_limit > 0 else None
        self.deadline = _clock() + float(max_seconds) if max_seconds and max_seconds > 0 else None
        self.calls = 0
        self.pruned = 0
        self.max_depth = 0
        self.limit_hit = False
        self.timed_out = False
        # Offset index under exploration at each committed level.
        self.branch: List[int] = []

    @property
    def aborted(self) -> bool:
        return self.limit_hit or self.timed_out

    # ------------------------------------------------------------------
    # Shared steps
    # ------------------------------------------------------------------
    def _count(self, depth: int) -> None:
        self.calls += 1
        if self.on_call is None:
            return
        tick = SearchTick(self.calls, depth, estimate_progress(self.branch, len(self.move_set)))
        try:
            self.on_call(tick)
        except Exception:
            logger.warning("search progress hook raised; detaching it", exc_info=True)
            self.on_call = None

    def _exhausted(self) -> bool:
        if self.aborted:
            return True
        if self.node_limit is not None and self.calls > self.node_limit:
            self.limit_hit = True
            return True
        if (
            self.deadline is not None
            and self.calls % _DEADLINE_STRIDE == 1
            and _clock() >= self.deadline
        ):
            self.timed_out = True
            return True
        return False

    def _commit(self, pos: Position, moves: int) -> bool:
        """Mark ``pos`` as move ``moves``; undo and return False if that strands a cell."""

        table = self.table
        table[pos.y][pos.x] = moves
        if moves > self.max_depth:
            self.max_depth = moves

        # With a single cell left it is the final move target, not a stranded cell.
        if self.prune and moves < self.total - 1:
            for dx, dy in self.move_set:
                nxt = Position(pos.x + dx, pos.y + dy)
                if is_available(table, self.dims, nxt) and is_dead_end(
                    table, self.dims, self.move_set, nxt
                ):
                    table[pos.y][pos.x] = 0
                    self.pruned += 1
                    return False
        return True

    # ------------------------------------------------------------------
    # Engines
    # ------------------------------------------------------------------
    def recursive(self, pos: Position, moves: int) -> bool:
        self._count(moves)
        if moves >= self.total:
            return True
        if self._exhausted():
            return False
        if not is_available(self.table, self.dims, pos):
            return False

        moves += 1
        if not self._commit(pos, moves):
            return False

        for idx, offset in enumerate(self.move_set):
            self.branch.append(idx)
            found = self.recursive(pos.step(offset), moves)
            self.branch.pop()
            if found:
                return True
            if self.aborted:
                break

        self.table[pos.y][pos.x] = 0
        return False

    def iterative(self, start: Position, base: int) -> bool:
        """Explicit-stack twin of :meth:`recursive`.

        Frames are ``[x, y, next_offset_index]``; exploration order, undo
        points and call counts match the recursive engine exactly.
        """

        table = self.table
        move_set = self.move_set
        fanout = len(move_set)
        stack: List[List[int]] = []
        candidate = start

        while True:
            moves = base + len(stack)
            self._count(moves)
            if moves >= self.total:
                return True
            if not self._exhausted() and is_available(table, self.dims, candidate):
                if self._commit(candidate, moves + 1):
                    stack.append([candidate.x, candidate.y, 0])

            # Pick the next candidate, backing up through exhausted frames.
            while stack:
                frame = stack[-1]
                if not self.aborted and frame[2] < fanout:
                    idx = frame[2]
                    frame[2] += 1
                    if len(self.branch) < len(stack):
                        self.branch.append(idx)
                    else:
                        self.branch[-1] = idx
                    dx, dy = move_set[idx]
                    candidate = Position(frame[0] + dx, frame[1] + dy)
                    break
                del self.branch[len(stack) - 1:]
                stack.pop()
                table[frame[1]][frame[0]] = 0
            else:
                return False

    def summary(self, found: bool, engine: str) -> Dict[str, Any]:
        if found:
            reason = "found"
        elif self.timed_out:
            reason = "time_limit"
        elif self.limit_hit:
            reason = "node_limit"
        else:
            reason = "no_path"
        return {
            "engine": engine,
            "prune": self.prune,
            "calls": self.calls,
            "pruned": self.pruned,
            "max_depth": self.max_depth,
            "node_limit": self.node_limit,
            "limit_hit": self.limit_hit,
            "timed_out": self.timed_out,
            "reason": reason,
        }


def search(
    table: Table,
    dims: DimsLike,
    move_set: Sequence[Offset],
    pos: PosLike,
    moves_completed: int = 0,
    *,
    prune: bool = True,
    on_call: Optional[OnCall] = None,
    node_limit: Optional[int] = None,
    max_seconds: Optional[float] = None,
    engine: str = "auto",
    stats: Optional[Dict[str, Any]] = None,
) -> bool:
    """Try to extend the partial tour in ``table`` starting at ``pos``.

    ``moves_completed`` must equal the number of nonzero cells in ``table``.
    On success the table holds the full tour labelling; on failure every
    cell this call committed is reset to zero, including when a node or
    time budget cut the search short.  ``stats``, when given, is updated
    with counters for diagnostics.
    """

    dims = as_dimensions(dims)
    moves = as_move_set(move_set)
    start = as_position(pos)
    engine_name = _resolve_engine(engine, dims.cells, moves_completed)

    run = _SearchRun(
        table,
        dims,
        moves,
        prune=prune,
        on_call=on_call,
        node_limit=node_limit,
        max_seconds=max_seconds,
    )
    if engine_name == "recursive":
        found = run.recursive(start, moves_completed)
    else:
        found = run.iterative(start, moves_completed)

    if stats is not None:
        stats.update(run.summary(found, engine_name))
    return found


def find_path(
    dims: DimsLike,
    move_set: Sequence[Offset],
    start_pos: PosLike,
    **options: Any,
) -> Tuple[bool, Table]:
    """Search for a full tour of ``dims`` from ``start_pos``.

    Returns ``(found, table)``.  A found table labels every cell 1..N in
    visiting order; otherwise it is all zero.  Keyword options are passed
    through to :func:`search`.
    """

    dims = as_dimensions(dims)
    moves = as_move_set(move_set)
    start = as_position(start_pos)
    table = blank_table(dims)

    stats = options.pop("stats", None)
    run_stats: Dict[str, Any] = {}
    found = search(table, dims, moves, start, 0, stats=run_stats, **options)
    logger.debug(
        "find_path %dx%d from (%d,%d): %s after %d calls (%d pruned, engine=%s)",
        dims.width,
        dims.height,
        start.x,
        start.y,
        run_stats.get("reason"),
        run_stats.get("calls", 0),
        run_stats.get("pruned", 0),
        run_stats.get("engine"),
    )
    if stats is not None:
        stats.update(run_stats)
    return found, table


__all__ = [
    "ENGINES",
    "SearchTick",
    "estimate_progress",
    "find_path",
    "is_available",
    "is_dead_end",
    "search",
]
