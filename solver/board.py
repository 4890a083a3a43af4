# solver/board.py
from __future__ import annotations

from typing import Sequence

from models import Dimensions, Offset, Position, Table


def is_available(table: Table, dims: Dimensions, pos: Position) -> bool:
    """Return ``True`` when ``pos`` lies on the board and has not been visited."""

    if pos.x < 0 or pos.x >= dims.width or pos.y < 0 or pos.y >= dims.height:
        return False
    return table[pos.y][pos.x] == 0


def is_dead_end(
    table: Table,
    dims: Dimensions,
    move_set: Sequence[Offset],
    pos: Position,
) -> bool:
    """Return ``True`` when no move out of ``pos`` lands on an available cell.

    Only one ply is inspected, against the table as it currently stands; a
    cell that still has an exit now may be boxed in later, and that case is
    left to ordinary backtracking.
    """

    for dx, dy in move_set:
        if is_available(table, dims, Position(pos.x + dx, pos.y + dy)):
            return False
    return True


__all__ = ["is_available", "is_dead_end"]
