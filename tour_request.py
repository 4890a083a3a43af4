# tour_request.py: tolerant request / move-set parsing
from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Tuple

from config import CFG
from models import KNIGHT_MOVES, Dimensions, MoveSet, Position, as_move_set

_INT = r"[-+]?\d+"
# Matches "1,2", "(1, 2)", "1 2", "[-1,-2]" inside a longer move list.
_PAIR_RE = re.compile(rf"(?P<dx>{_INT})\s*[,\s]\s*(?P<dy>{_INT})")
_SEPARATORS_RE = re.compile(r"[;|\n]+|\)\s*,?\s*\(")

MOVE_PRESETS = {
    "knight": KNIGHT_MOVES,
}


@dataclass(frozen=True)
class TourRequest:
    dims: Dimensions
    start: Position
    moves: MoveSet

    @property
    def label(self) -> str:
        return f"{self.dims.width} × {self.dims.height} from ({self.start.x}, {self.start.y})"


def parse_moves(raw: Any) -> MoveSet:
    """Turn a move-set description into an ordered tuple of offsets.

    Accepts a preset name (``"knight"``), text such as ``"1,2;2,1"`` or
    ``"(1,2) (2,1)"``, or an iterable of pairs.  Blank input means the knight
    moves.  Raises ``ValueError`` on anything it cannot read.
    """

    if raw is None:
        return KNIGHT_MOVES
    if isinstance(raw, (list, tuple)) and len(raw) == 1 and isinstance(raw[0], str):
        raw = raw[0]
    if not isinstance(raw, str):
        return as_move_set(raw)

    text = raw.strip()
    if not text:
        return KNIGHT_MOVES
    preset = MOVE_PRESETS.get(text.lower())
    if preset is not None:
        return preset

    moves: List[Tuple[int, int]] = []
    for chunk in _SEPARATORS_RE.split(text):
        chunk = chunk.strip().strip("()[]").strip()
        if not chunk:
            continue
        m = _PAIR_RE.fullmatch(chunk)
        if not m:
            raise ValueError(f"cannot read move {chunk!r} in {raw!r}")
        moves.append((int(m.group("dx")), int(m.group("dy"))))
    if not moves:
        raise ValueError(f"no moves found in {raw!r}")
    return tuple(moves)


def _first(container: Any, *keys: str) -> Any:
    for key in keys:
        if not isinstance(container, dict) or key not in container:
            continue
        val = container[key]
        if isinstance(val, (list, tuple)):
            if not val:
                continue
            # ``moves`` may legitimately be a list of pairs
            if key in ("moves", "move_set") and not isinstance(val[0], str):
                return val
            val = val[0]
        if val is None or (isinstance(val, str) and not val.strip()):
            continue
        return val
    return None


def _to_int(x: Any, name: str) -> int:
    if isinstance(x, bool):
        raise ValueError(f"{name} must be an integer")
    try:
        f = float(str(x).strip())
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be an integer, got {x!r}") from None
    if not f.is_integer():
        raise ValueError(f"{name} must be an integer, got {x!r}")
    return int(f)


def parse_tour_request(form_like: Any) -> Tuple[Optional[TourRequest], Optional[str]]:
    """
    Return (request, error_message_or_None).
    Missing fields fall back to the configured defaults; see config.py.
    """

    data = form_like if isinstance(form_like, dict) else {}

    def _pick(default: Any, *keys: str) -> Any:
        val = _first(data, *keys)
        return default if val is None else val

    try:
        width = _to_int(_pick(CFG.COLS, "cols", "width", "W", "w"), "width")
        height = _to_int(_pick(CFG.ROWS, "rows", "height", "H", "h"), "height")
        start_x = _to_int(_pick(CFG.START_X, "start_x", "x"), "start x")
        start_y = _to_int(_pick(CFG.START_Y, "start_y", "y"), "start y")
        moves = parse_moves(_pick(CFG.MOVES, "moves", "move_set"))
    except ValueError as e:
        return None, str(e)

    if width < 0 or height < 0:
        return None, f"board dimensions must be non-negative, got {width} × {height}"
    if width * height > CFG.MAX_CELLS:
        return None, f"board of {width * height} cells exceeds the {CFG.MAX_CELLS}-cell limit"
    if max(width, height) > CFG.MAX_CELLS:
        return None, f"board side of {max(width, height)} cells exceeds the {CFG.MAX_CELLS}-cell limit"

    return TourRequest(Dimensions(width, height), Position(start_x, start_y), moves), None


def fmt_moves(moves: Iterable[Tuple[int, int]]) -> str:
    return "; ".join(f"{dx},{dy}" for dx, dy in moves)


__all__ = ["MOVE_PRESETS", "TourRequest", "fmt_moves", "parse_moves", "parse_tour_request"]
