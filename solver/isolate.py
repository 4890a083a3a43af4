# solver/isolate.py
import multiprocessing as mp
import queue
import time
from typing import Any, Dict, List, Optional, Tuple
import traceback

# Worker must be top-level (picklable on Windows spawn)
def _solve_worker(q, W: int, H: int, start: Tuple[int, int], moves, options: Dict[str, Any]):
    try:
        from solver.orchestrator import run_attempt  # import inside child
        ok, table, stats = run_attempt((W, H), moves, start, **options)
        q.put(("ok", ok, table, stats))
    except MemoryError:
        q.put(("err", False, [], {"reason": "Child ran out of memory"}))
    except Exception as e:
        q.put(("exc", False, [], {"reason": f"{e}\n{traceback.format_exc()}"}))

def run_search_isolated(
    W: int,
    H: int,
    start: Tuple[int, int],
    moves,
    max_seconds: Optional[float] = None,
    **options: Any,
) -> Tuple[bool, List[List[int]], Dict[str, Any], Optional[str]]:
    """
    Returns (ok, table, stats, crash_note).
    crash_note is non-empty only if the child crashed/was killed/timed out.
    The child enforces ``max_seconds`` itself; the parent only kills it once
    a grace period on top of that has passed.
    """
    limit = float(max_seconds) if max_seconds and max_seconds > 0 else None
    ctx = mp.get_context("spawn")  # safest on Windows
    q = ctx.Queue()
    p = ctx.Process(
        target=_solve_worker,
        args=(q, W, H, tuple(start), tuple(moves), dict(options, max_seconds=limit)),
    )
    p.daemon = True
    p.start()

    # Allow a small buffer beyond the search budget for teardown
    deadline = time.time() + limit + 5.0 if limit is not None else None
    result = None
    # Drain the queue before joining; a large table blocks the child's feeder thread.
    while result is None:
        try:
            result = q.get(timeout=0.25)
        except queue.Empty:
            if not p.is_alive():
                try:
                    result = q.get(timeout=0.5)
                except queue.Empty:
                    break
            elif deadline is not None and time.time() >= deadline:
                break

    if result is None:
        if p.is_alive():
            p.terminate()
            p.join(2.0)
            return False, [], {"reason": "time_limit"}, "killed: timeout"
        p.join(2.0)
        # Non-zero exit code means native crash or hard error
        if p.exitcode not in (0, None):
            return False, [], {"reason": f"child exit {p.exitcode}"}, "child crashed"
        return False, [], {"reason": "no result from child process"}, "no-result"

    p.join(2.0)
    tag, ok, table, stats = result
    if tag == "ok":
        return ok, table, stats, None
    return False, [], stats, None
