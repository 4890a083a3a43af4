from typing import List, Tuple
from models import Table

CELL_PX = 48

def _color(label: int, total: int) -> str:
    # Pale for early moves, dark for late ones.
    t = (label - 1) / max(1, total - 1)
    r = int(235 - 150 * t)
    g = int(240 - 110 * t)
    b = int(250 - 60 * t)
    return f"rgb({r},{g},{b})"

def format_table(table: Table, width: int = 5) -> str:
    return "\n".join("".join(f"{v:{width}d}" for v in row) for row in table)

def tour_path(table: Table) -> List[Tuple[int, int]]:
    """Return the visited cells as (x, y) pairs ordered by move label."""
    cells = [(v, x, y) for y, row in enumerate(table) for x, v in enumerate(row) if v > 0]
    cells.sort()
    return [(x, y) for _, x, y in cells]

def render_result(table: Table):
    Hc = len(table)
    Wc = len(table[0]) if Hc else 0
    total = Wc * Hc
    svg_w = Wc * CELL_PX + 2
    svg_h = Hc * CELL_PX + 2

    cells = []
    for y, row in enumerate(table):
        for x, v in enumerate(row):
            px = 1 + x * CELL_PX
            py = 1 + y * CELL_PX
            fill = _color(v, total) if v > 0 else "white"
            cells.append(
                f'<rect x="{px}" y="{py}" width="{CELL_PX}" height="{CELL_PX}" fill="{fill}" stroke="black" stroke-width="1"/>'
            )
            if v > 0:
                cells.append(
                    f'<text x="{px + CELL_PX // 2}" y="{py + CELL_PX // 2 + 4}" font-size="12" '
                    f'text-anchor="middle" fill="black">{v}</text>'
                )

    path = tour_path(table)
    line = ""
    if len(path) > 1:
        points = " ".join(
            f"{1 + x * CELL_PX + CELL_PX // 2},{1 + y * CELL_PX + CELL_PX // 2}" for x, y in path
        )
        line = f'<polyline points="{points}" fill="none" stroke="crimson" stroke-width="2" stroke-opacity="0.6"/>'

    grid = f'<rect x="1" y="1" width="{svg_w-2}" height="{svg_h-2}" fill="none" stroke="black" stroke-width="2"/>'
    svg = (
        f'<svg class="layout-svg" xmlns="http://www.w3.org/2000/svg" '
        f'width="{svg_w}" height="{svg_h}" '
        f'viewBox="0 0 {svg_w} {svg_h}" preserveAspectRatio="xMinYMin meet">'
        f'{"".join(cells)}{line}{grid}</svg>'
    )

    legend = ""
    if path:
        first, last = path[0], path[-1]
        legend = (
            f"<li><span class='swatch' style='background:{_color(1, total)}'></span>start ({first[0]}, {first[1]})</li>"
            f"<li><span class='swatch' style='background:{_color(len(path), total)}'></span>"
            f"end ({last[0]}, {last[1]}) after {len(path)} cells</li>"
        )
    return svg, legend
