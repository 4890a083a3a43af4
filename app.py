# app.py: tour finder front end; progress no-cache
from __future__ import annotations
import os
import time
from typing import Any, Dict, Optional, Tuple

from flask import Flask, request, render_template, send_from_directory, jsonify, url_for

from solver.orchestrator import solve_tour
from solver.path_search import ENGINES
from tour_request import parse_tour_request, fmt_moves
from config import CFG
from io_files import write_table, write_layout_view_html
from render import render_result

from progress import (
    reset as progress_reset,
    as_json as progress_json,
    start_timer as progress_start,
    set_status, set_done, set_result_url,
)

BASE_DIR = os.path.dirname(os.path.abspath(__file__))


def _resolve_output_paths(configured: str, fallback: str) -> Tuple[str, str, str]:
    name = (configured or "").strip() or fallback
    if os.path.isabs(name):
        full_path = name
    else:
        full_path = os.path.abspath(os.path.join(BASE_DIR, name))
    directory = os.path.dirname(full_path) or BASE_DIR
    filename = os.path.basename(full_path) or fallback
    return full_path, directory, filename


def _output_locations() -> Tuple[str, str, str, str]:
    _, table_dir, table_name = _resolve_output_paths(CFG.TABLE_OUT, "table.txt")
    _, layout_dir, layout_name = _resolve_output_paths(CFG.LAYOUT_HTML, "layout_view.html")
    return table_dir, table_name, layout_dir, layout_name


LAST_RESULT: Dict[str, Any] = {
    "ok": False,
    "strategy": "No search run yet.",
    "W": 0,
    "H": 0,
    "start": "",
    "moves": "",
    "iterations": 0,
    "pruned": 0,
    "engine": "",
    "elapsed_str": "0s",
    "svg": "",
    "legend": "",
    "table_filename": "",
    "layout_filename": "",
}

app = Flask(__name__, static_folder=None, template_folder="templates")


@app.after_request
def _no_cache_progress(resp):
    if request.path == "/progress3":
        resp.headers["Cache-Control"] = "no-store, max-age=0"
        resp.headers["Pragma"] = "no-cache"
        resp.headers["Expires"] = "0"
    return resp


@app.route("/")
def index():
    return render_template(
        "tour_form.html",
        cols=CFG.COLS,
        rows=CFG.ROWS,
        start_x=CFG.START_X,
        start_y=CFG.START_Y,
        moves=CFG.MOVES,
        engines=ENGINES,
        engine=CFG.ENGINE,
        prune=CFG.ENABLE_CHECK,
    )


@app.route("/result/latest")
def result_latest():
    return render_template("result.html", **LAST_RESULT)


@app.route("/styles.css")
def styles_css():
    return send_from_directory(BASE_DIR, "styles.css")


def _fmt_elapsed(seconds: float) -> str:
    if seconds < 1:
        return "0s"
    m, s = divmod(int(seconds), 60)
    if m == 0:
        return f"{s}s"
    h, m = divmod(m, 60)
    if h == 0:
        return f"{m}m {s}s"
    return f"{h}h {m}m {s}s"


def _merge_like_mapping() -> Dict[str, Any]:
    merged: Dict[str, Any] = {}
    payload = request.get_json(silent=True)
    if isinstance(payload, dict):
        merged.update(payload)

    for k, v in request.form.to_dict(flat=False).items():
        merged.setdefault(k, v)

    for k, v in request.args.to_dict(flat=False).items():
        merged.setdefault(k, v)

    return merged


def _scalar(like: Dict[str, Any], key: str) -> Any:
    val = like.get(key)
    if isinstance(val, (list, tuple)):
        return val[0] if val else None
    return val


def _flag(like: Dict[str, Any], key: str, default: bool) -> bool:
    val = _scalar(like, key)
    if val is None:
        return default
    if isinstance(val, bool):
        return val
    return str(val).strip().lower() not in ("0", "false", "off", "no", "")


def _number(like: Dict[str, Any], key: str) -> Optional[float]:
    val = _scalar(like, key)
    if val is None or str(val).strip() == "":
        return None
    try:
        return float(val)
    except (TypeError, ValueError):
        return None


def _finalize_solver_progress(ok_flag: bool, strategy_text: str) -> None:
    """Mark the run finished; ``set_done`` picks "Solved" or "Error" from the flag."""

    set_done(ok_flag, reason=strategy_text)


def _publish(result: Dict[str, Any]) -> str:
    LAST_RESULT.update(result)
    set_result_url(url_for("result_latest"))
    return render_template("result.html", **LAST_RESULT)


@app.route("/solve", methods=["POST"])
def solve():
    progress_reset()
    progress_start()
    set_status("Solving")

    t0 = time.time()
    table_dir, table_name, layout_dir, layout_name = _output_locations()

    like = _merge_like_mapping()
    tour, err = parse_tour_request(like)
    if err or tour is None:
        reason = f"Bad request: {err or 'nothing parsed from request'}"
        _finalize_solver_progress(False, reason)
        return _publish({
            "ok": False,
            "strategy": reason,
            "W": 0, "H": 0,
            "start": "",
            "moves": "",
            "iterations": 0,
            "pruned": 0,
            "engine": "",
            "elapsed_str": _fmt_elapsed(time.time() - t0),
            "svg": "",
            "legend": "",
            "table_filename": "",
            "layout_filename": "",
        })

    engine = _scalar(like, "engine")
    if engine not in ENGINES:
        engine = None
    node_limit = _number(like, "node_limit")

    try:
        result = solve_tour(
            tour,
            prune=_flag(like, "prune", CFG.ENABLE_CHECK),
            engine=engine,
            node_limit=int(node_limit) if node_limit is not None else None,
            max_seconds=_number(like, "max_seconds"),
        )
    except Exception as e:
        reason = f"solver exception: {type(e).__name__}: {e}"
        app.logger.exception("tour search failed for %s", tour.label)
        _finalize_solver_progress(False, reason)
        return _publish({
            "ok": False,
            "strategy": reason,
            "W": tour.dims.width, "H": tour.dims.height,
            "start": f"({tour.start.x}, {tour.start.y})",
            "moves": fmt_moves(tour.moves),
            "iterations": 0,
            "pruned": 0,
            "engine": "",
            "elapsed_str": _fmt_elapsed(time.time() - t0),
            "svg": "",
            "legend": "",
            "table_filename": "",
            "layout_filename": "",
        })

    ok_flag = result["ok"]
    _finalize_solver_progress(ok_flag, result["strategy"])

    svg_markup, legend_html = render_result(result["table"])
    table_path = write_table(result["table"], ok_flag, result["iterations"], BASE_DIR)
    layout_path = write_layout_view_html(svg_markup, legend_html, BASE_DIR, title=tour.label)

    return _publish({
        "ok": ok_flag,
        "strategy": result["strategy"],
        "W": result["W"],
        "H": result["H"],
        "start": f"({tour.start.x}, {tour.start.y})",
        "moves": fmt_moves(tour.moves),
        "iterations": result["iterations"],
        "pruned": result["pruned"],
        "engine": result["engine"],
        "elapsed_str": _fmt_elapsed(time.time() - t0),
        "svg": svg_markup,
        "legend": legend_html,
        "table_filename": os.path.basename(table_path) or table_name,
        "layout_filename": os.path.basename(layout_path) or layout_name,
    })


@app.route("/download/table")
def download_table():
    table_dir, table_name, _, _ = _output_locations()
    return send_from_directory(table_dir, table_name, as_attachment=True)


@app.route("/download/html")
def download_html():
    _, _, layout_dir, layout_name = _output_locations()
    return send_from_directory(layout_dir, layout_name, as_attachment=True)


@app.route("/progress3")
def progress3():
    return jsonify(progress_json())


if __name__ == "__main__":
    app.run(debug=False)
