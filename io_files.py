"""Helpers for writing solver outputs to disk."""

from __future__ import annotations

import os

from config import CFG
from models import Table
from render import format_table


def _resolve_output_path(base_dir: str, configured_name: str, fallback: str) -> str:
    """Return the absolute path where an output artifact should be written."""

    name = (configured_name or "").strip() or fallback
    if os.path.isabs(name):
        return name
    return os.path.join(base_dir, name)


def write_table(table: Table, ok: bool, iterations: int, base_dir: str) -> str:
    """Write the labelled tour table (or the failure note) to the configured text file."""

    path = _resolve_output_path(base_dir, CFG.TABLE_OUT, "table.txt")
    os.makedirs(os.path.dirname(path), exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        if not ok:
            f.write("No path found.\n")
        elif table:
            f.write(format_table(table) + "\n")
        f.write(f"Calculation completed after {int(iterations)} iterations.\n")
    return path


def write_layout_view_html(svg: str, legend_html: str, base_dir: str, *, title: str = "Tour View") -> str:
    """Write the rendered SVG/legend preview to the configured HTML file."""

    path = _resolve_output_path(base_dir, CFG.LAYOUT_HTML, "layout_view.html")
    os.makedirs(os.path.dirname(path), exist_ok=True)

    with open(path, "w", encoding="utf-8") as vf:
        vf.write(
            f"""<!doctype html>
<html><head><meta charset='utf-8'><title>{title}</title>
<link rel='stylesheet' href='/styles.css'></head>
<body class='container'>
<h1>{title}</h1>
<section class='card'><div class='gridwrap'>{svg}</div></section>
<section class='card'><h3>Legend</h3><ul>{legend_html}</ul></section>
</body></html>"""
        )
    return path


__all__ = ["write_table", "write_layout_view_html"]
