from __future__ import annotations

import json
import logging
import os
import time
import threading
from pathlib import Path
from typing import Any, Dict, Optional

# ------------------------------
# Thread-safe global progress state
# ------------------------------

PROGRESS_LOCK = threading.Lock()


def _state_file_path() -> Path:
    configured = os.environ.get("PROGRESS_STATE_FILE")
    if configured:
        return Path(configured)
    return Path(__file__).resolve().parent / "logs" / "progress_state.json"


STATE_FILE = _state_file_path()
STATE_FILE_TMP = STATE_FILE.with_name(STATE_FILE.name + ".tmp")
_LAST_STATE_MTIME: float = 0.0


def _init_logger() -> logging.Logger:
    logger = logging.getLogger("solver.attempt_log")
    if logger.handlers:
        return logger

    log_path = Path(__file__).resolve().parent / "logs" / "solver_attempts.log"
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_path, encoding="utf-8")
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
        logger.propagate = False
    except Exception:
        # No log file, no attempt log; the search carries on regardless.
        logger.handlers.clear()
    return logger


ATTEMPT_LOGGER = _init_logger()


def _log_enabled() -> bool:
    return bool(ATTEMPT_LOGGER.handlers)


def _fmt_seconds(seconds: Optional[float]) -> Optional[str]:
    if seconds is None:
        return None
    try:
        return f"{float(seconds):.2f}s"
    except Exception:
        return None


def _emit_log(event: str, **fields: Any) -> None:
    if not _log_enabled():
        return
    extras = [
        f"{key}={value}"
        for key, value in fields.items()
        if value is not None and value != ""
    ]
    try:
        if extras:
            ATTEMPT_LOGGER.info("%s | %s", event, " ".join(extras))
        else:
            ATTEMPT_LOGGER.info("%s", event)
    except Exception:
        # Logging failures must never bubble back to callers.
        pass


LOG_STATE: Dict[str, Any] = {
    "run_start": None,
    "attempt": "",
    "attempt_start": None,
}


def _persist_locked() -> None:
    global _LAST_STATE_MTIME
    try:
        STATE_FILE.parent.mkdir(parents=True, exist_ok=True)
        with STATE_FILE_TMP.open("w", encoding="utf-8") as fh:
            json.dump(PROGRESS, fh, ensure_ascii=False, separators=(",", ":"))
        STATE_FILE_TMP.replace(STATE_FILE)
        try:
            _LAST_STATE_MTIME = STATE_FILE.stat().st_mtime
        except OSError:
            _LAST_STATE_MTIME = time.time()
    except Exception:
        # Persistence must never break solver progress updates.
        pass


def _load_persisted_locked(force: bool = False) -> None:
    global _LAST_STATE_MTIME
    try:
        stat = STATE_FILE.stat()
    except OSError:
        return
    if not force and stat.st_mtime <= _LAST_STATE_MTIME:
        return
    try:
        with STATE_FILE.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except Exception:
        return
    if not isinstance(data, dict):
        return
    for key in PROGRESS.keys():
        if key in data:
            PROGRESS[key] = data[key]
    _LAST_STATE_MTIME = stat.st_mtime


def _finalize_attempt_locked(now: Optional[float] = None, *, reason: Optional[str] = None) -> None:
    attempt = LOG_STATE.get("attempt")
    if not attempt:
        return
    if now is None:
        now = _now()
    start = LOG_STATE.get("attempt_start")
    duration = None
    if isinstance(start, (int, float)):
        duration = max(0.0, float(now) - float(start))
    _emit_log(
        "Attempt finished",
        attempt=attempt,
        iterations=PROGRESS.get("iterations"),
        best_depth=PROGRESS.get("best_depth"),
        duration=_fmt_seconds(duration),
        reason=reason,
    )
    LOG_STATE["attempt"] = ""
    LOG_STATE["attempt_start"] = None


def _log_attempt_transition_locked(new_attempt: str) -> None:
    prev_attempt = LOG_STATE.get("attempt") or ""
    if new_attempt == prev_attempt:
        return
    now = _now()
    if prev_attempt:
        _finalize_attempt_locked(now, reason="switch")
    LOG_STATE["attempt"] = new_attempt
    if new_attempt:
        LOG_STATE["attempt_start"] = now
        _emit_log(
            "Attempt started",
            attempt=new_attempt,
            engine=PROGRESS.get("engine") or "",
        )
    else:
        LOG_STATE["attempt_start"] = None

# Single source of truth for the progress modal
PROGRESS: Dict[str, Any] = {
    "status": "Idle",          # Idle | Solving | Solved | Error
    "board": "",               # e.g. "10 × 10"
    "start": "",               # e.g. "(0, 0)"
    "engine": "",              # recursive | iterative
    "percent": 0.0,            # 0..100 float, cosmetic estimate
    "iterations": 0,           # engine calls so far
    "depth": 0,                # moves committed at the latest update
    "best_depth": 0,           # deepest partial tour seen
    "elapsed_start": None,     # t0 (float) when solving started
    "elapsed": 0.0,            # seconds snapshot
    "message": "",             # optional note
    "done": False,             # run completed
    "ok": None,                # success flag if known
    "result_url": "",          # optional navigation target
    "run_id": 0,               # monotonically increasing identifier
}

# ------------------------------
# Helpers
# ------------------------------

def _now() -> float:
    return time.time()

def _fmt_elapsed(seconds: float) -> str:
    seconds = max(0.0, float(seconds))
    if seconds < 60:
        return f"{int(seconds)}s"
    m, s = divmod(int(seconds), 60)
    if m < 60:
        return f"{m}m {s}s"
    h, m = divmod(m, 60)
    return f"{h}h {m}m"

def reset() -> None:
    with PROGRESS_LOCK:
        now = _now()
        _finalize_attempt_locked(now, reason="reset")
        try:
            current_run_id = int(PROGRESS.get("run_id", 0))
        except Exception:
            current_run_id = 0
        PROGRESS.update({
            "status": "Idle",
            "board": "",
            "start": "",
            "engine": "",
            "percent": 0.0,
            "iterations": 0,
            "depth": 0,
            "best_depth": 0,
            "elapsed_start": None,
            "elapsed": 0.0,
            "message": "",
            "done": False,
            "ok": None,
            "result_url": "",
            "run_id": current_run_id + 1,
        })
        LOG_STATE.update({
            "attempt": "",
            "attempt_start": None,
            "run_start": None,
        })
        _emit_log("Progress reset")
        _persist_locked()

def start_timer() -> None:
    with PROGRESS_LOCK:
        now = _now()
        PROGRESS["elapsed_start"] = now
        PROGRESS["elapsed"] = 0.0
        LOG_STATE["run_start"] = now
        _emit_log("Run timer started")
        _persist_locked()

def _touch_elapsed_locked() -> None:
    t0 = PROGRESS.get("elapsed_start")
    if t0 is not None:
        PROGRESS["elapsed"] = _now() - float(t0)

# ------------------------------
# Setters (tolerant)
# ------------------------------

def set_status(v: Any) -> None:
    with PROGRESS_LOCK:
        PROGRESS["status"] = str(v)
        _persist_locked()

def set_board(w: Any, h: Any) -> None:
    try:
        s = f"{int(w)} × {int(h)}"
    except Exception:
        s = ""
    with PROGRESS_LOCK:
        PROGRESS["board"] = s
        _persist_locked()

def set_start(x: Any, y: Any) -> None:
    try:
        s = f"({int(x)}, {int(y)})"
    except Exception:
        s = ""
    with PROGRESS_LOCK:
        PROGRESS["start"] = s
        _persist_locked()

def set_engine(v: Any) -> None:
    with PROGRESS_LOCK:
        PROGRESS["engine"] = "" if v is None else str(v)
        _persist_locked()

def set_attempt(v: Any) -> None:
    with PROGRESS_LOCK:
        _log_attempt_transition_locked("" if v is None else str(v))

def set_search_tick(iterations: Any, depth: Any, pct: Any = None) -> None:
    """Record one throttled engine tick in a single persisted update."""

    try:
        calls = max(0, int(iterations))
        level = max(0, int(depth))
    except Exception:
        return
    with PROGRESS_LOCK:
        PROGRESS["iterations"] = calls
        PROGRESS["depth"] = level
        try:
            best = int(PROGRESS.get("best_depth") or 0)
        except Exception:
            best = 0
        PROGRESS["best_depth"] = max(best, level)
        if pct is not None:
            try:
                PROGRESS["percent"] = max(0.0, min(100.0, float(pct)))
            except Exception:
                pass
        _touch_elapsed_locked()
        _persist_locked()

def set_elapsed(seconds: Any) -> None:
    try:
        f = float(seconds)
    except Exception:
        f = 0.0
    with PROGRESS_LOCK:
        PROGRESS["elapsed"] = max(0.0, f)
        _persist_locked()

def set_message(msg: Any) -> None:
    with PROGRESS_LOCK:
        PROGRESS["message"] = "" if msg is None else str(msg)
        _persist_locked()

def set_result_url(url: Any) -> None:
    with PROGRESS_LOCK:
        PROGRESS["result_url"] = "" if url is None else str(url)
        _persist_locked()

def set_done(ok: Any = None, *, reason: Any = None, message: Any = None) -> None:
    """Mark the run complete.

    ``ok`` picks the final status (``"Solved"`` or ``"Error"``); without it
    an idle status is promoted to ``"Solved"`` and anything else is left as
    is.  ``message`` (or ``reason``) is surfaced via the ``message`` field.
    """

    final_status: Optional[str] = None
    ok_flag: Optional[bool] = None
    if ok is not None:
        ok_flag = bool(ok)
        final_status = "Solved" if ok_flag else "Error"

    final_message = message if message is not None else reason

    with PROGRESS_LOCK:
        _touch_elapsed_locked()
        now = _now()
        if final_status is not None:
            PROGRESS["status"] = final_status
        elif PROGRESS.get("status") in ("", "Idle", None):
            PROGRESS["status"] = "Solved"
            ok_flag = True
        PROGRESS["percent"] = 100.0
        if final_message is not None:
            PROGRESS["message"] = str(final_message)
        PROGRESS["done"] = True
        if ok_flag is not None:
            PROGRESS["ok"] = ok_flag
        _finalize_attempt_locked(now, reason="run_complete")
        run_start = LOG_STATE.get("run_start")
        if isinstance(run_start, (int, float)):
            total = max(0.0, now - float(run_start))
        else:
            total = None
        LOG_STATE["run_start"] = None
        _emit_log(
            "Run finished",
            status=PROGRESS.get("status"),
            ok=PROGRESS.get("ok"),
            duration=_fmt_seconds(total),
            iterations=PROGRESS.get("iterations"),
            best_depth=PROGRESS.get("best_depth"),
            message=PROGRESS.get("message"),
        )
        _persist_locked()

# ------------------------------
# Snapshots for the UI
# ------------------------------

def snapshot() -> Dict[str, Any]:
    with PROGRESS_LOCK:
        _load_persisted_locked()
        _touch_elapsed_locked()
        return {
            "status": PROGRESS["status"],
            "board": PROGRESS["board"],
            "start": PROGRESS["start"],
            "engine": PROGRESS["engine"],
            "percent": PROGRESS["percent"],
            "iterations": PROGRESS["iterations"],
            "depth": PROGRESS["depth"],
            "best_depth": PROGRESS["best_depth"],
            "elapsed": PROGRESS["elapsed"],
            "elapsed_str": _fmt_elapsed(PROGRESS["elapsed"]),
            "message": PROGRESS["message"],
            "done": PROGRESS["done"],
            "ok": PROGRESS["ok"],
            "result_url": PROGRESS["result_url"],
            "run_id": PROGRESS["run_id"],
        }

def as_json() -> Dict[str, Any]:
    # Alias used by /progress3
    return snapshot()


with PROGRESS_LOCK:
    _load_persisted_locked(force=True)
