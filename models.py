from dataclasses import dataclass
from typing import List, Sequence, Tuple, Union

Offset = Tuple[int, int]
MoveSet = Tuple[Offset, ...]
Table = List[List[int]]

# Default legal moves: the standard knight, in exploration order.
KNIGHT_MOVES: MoveSet = (
    (1, 2),
    (2, 1),
    (-1, 2),
    (-2, 1),
    (1, -2),
    (2, -1),
    (-1, -2),
    (-2, -1),
)


@dataclass(frozen=True)
class Dimensions:
    width: int
    height: int

    @property
    def cells(self) -> int:
        return self.width * self.height


@dataclass(frozen=True)
class Position:
    x: int
    y: int

    def step(self, offset: Offset) -> "Position":
        return Position(self.x + offset[0], self.y + offset[1])


DimsLike = Union[Dimensions, Tuple[int, int]]
PosLike = Union[Position, Tuple[int, int]]


def as_dimensions(dims: DimsLike) -> Dimensions:
    """Coerce ``dims`` to :class:`Dimensions`, rejecting negative sizes."""

    if isinstance(dims, Dimensions):
        width, height = dims.width, dims.height
    else:
        width, height = dims
    if isinstance(width, bool) or isinstance(height, bool):
        raise ValueError(f"board dimensions must be integers, got {dims!r}")
    if int(width) != width or int(height) != height:
        raise ValueError(f"board dimensions must be integers, got {dims!r}")
    width, height = int(width), int(height)
    if width < 0 or height < 0:
        raise ValueError(f"board dimensions must be non-negative, got {width}×{height}")
    return Dimensions(width, height)


def as_position(pos: PosLike) -> Position:
    if isinstance(pos, Position):
        return pos
    x, y = pos
    return Position(int(x), int(y))


def as_move_set(moves: Sequence[Sequence[int]]) -> MoveSet:
    out: List[Offset] = []
    for item in moves:
        try:
            dx, dy = item
        except (TypeError, ValueError):
            raise ValueError(f"move offsets must be (dx, dy) pairs, got {item!r}") from None
        out.append((int(dx), int(dy)))
    return tuple(out)


def blank_table(dims: Dimensions) -> Table:
    return [[0] * dims.width for _ in range(dims.height)]

