from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, NamedTuple, Optional, Tuple, Union
import json
import numbers

from .errors import InvalidSizeError, OutOfBoundsError


class Direction(Enum):
    TOP = 'top'
    RIGHT = 'right'
    BOTTOM = 'bottom'
    LEFT = 'left'

    @property
    def delta(self) -> Tuple[int, int]:
        return _DELTAS[self]

    @property
    def opposite(self) -> 'Direction':
        return _OPPOSITES[self]

    @classmethod
    def parse(cls, value: Union['Direction', str]) -> 'Direction':
        if isinstance(value, Direction):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise ValueError(f"not a direction: {value!r}")


# y grows downwards, so TOP is -1 on the y axis
_DELTAS = {
    Direction.TOP: (0, -1),
    Direction.RIGHT: (1, 0),
    Direction.BOTTOM: (0, 1),
    Direction.LEFT: (-1, 0),
}
_OPPOSITES = {
    Direction.TOP: Direction.BOTTOM,
    Direction.RIGHT: Direction.LEFT,
    Direction.BOTTOM: Direction.TOP,
    Direction.LEFT: Direction.RIGHT,
}


class Coordinate(NamedTuple):
    x: int
    y: int

    def serialize(self) -> str:
        return json.dumps([self.x, self.y])

    @classmethod
    def parse(cls, text: str) -> 'Coordinate':
        raw = text.strip().strip('[]()')
        parts = [p.strip() for p in raw.split(',')]
        if len(parts) != 2:
            raise ValueError(f"expected 'x,y', got {text!r}")
        return cls(int(parts[0]), int(parts[1]))

    @classmethod
    def of(cls, value) -> 'Coordinate':
        if isinstance(value, Coordinate):
            return value
        if isinstance(value, str):
            return cls.parse(value)
        x, y = value
        return cls(int(x), int(y))

    def offset(self, direction: Direction) -> 'Coordinate':
        dx, dy = direction.delta
        return Coordinate(self.x + dx, self.y + dy)

    def in_bounds(self, width: int, height: int) -> bool:
        return 0 <= self.x < width and 0 <= self.y < height


@dataclass
class Cell:
    coord: Coordinate
    open: Dict[Direction, bool] = field(default_factory=lambda: {d: False for d in Direction})
    order: Optional[int] = None

    def open_directions(self) -> List[Direction]:
        return [d for d in Direction if self.open[d]]

    def close_all(self) -> None:
        for d in Direction:
            self.open[d] = False
        self.order = None


class Neighbor(NamedTuple):
    coord: Coordinate
    direction: Direction
    opposite: Direction


def _is_size(n) -> bool:
    return isinstance(n, numbers.Integral) and not isinstance(n, bool) and n > 0


class Grid:
    """Rectangular grid of cells with mutually consistent wall state.

    Cells are allocated once and mutated in place; ``reset`` closes every
    wall instead of recreating them.
    """

    def __init__(self, width: int, height: int):
        if not _is_size(width) or not _is_size(height):
            raise InvalidSizeError(width, height)
        self.width = int(width)
        self.height = int(height)
        self._cells: Dict[Coordinate, Cell] = {}
        for y in range(self.height):
            for x in range(self.width):
                c = Coordinate(x, y)
                self._cells[c] = Cell(c)

    @classmethod
    def create(cls, width: int, height: int) -> 'Grid':
        return cls(width, height)

    @property
    def cell_count(self) -> int:
        return self.width * self.height

    def in_bounds(self, coord) -> bool:
        x, y = coord
        return 0 <= x < self.width and 0 <= y < self.height

    def _check(self, coord) -> Coordinate:
        c = Coordinate.of(coord)
        if not c.in_bounds(self.width, self.height):
            raise OutOfBoundsError(c, self.width, self.height)
        return c

    def cell_at(self, coord) -> Cell:
        return self._cells[self._check(coord)]

    def cells(self) -> Iterator[Cell]:
        # row-major, insertion order of the mapping
        return iter(self._cells.values())

    def reset(self) -> None:
        for cell in self._cells.values():
            cell.close_all()

    def neighbors(self, coord) -> List[Neighbor]:
        c = Coordinate.of(coord)
        res = []
        for d in Direction:
            n = c.offset(d)
            if n.in_bounds(self.width, self.height):
                res.append(Neighbor(n, d, d.opposite))
        return res

    def open_wall(self, a, direction: Direction) -> Coordinate:
        a = self._check(a)
        b = a.offset(direction)
        if not b.in_bounds(self.width, self.height):
            raise OutOfBoundsError(b, self.width, self.height)
        self._cells[a].open[direction] = True
        self._cells[b].open[direction.opposite] = True
        return b

    def is_open(self, coord, direction: Direction) -> bool:
        return self.cell_at(coord).open[direction]

    def can_move(self, position, direction) -> bool:
        try:
            d = Direction.parse(direction)
        except ValueError:
            return False
        pos = Coordinate.of(position)
        if not self.in_bounds(pos) or not self.in_bounds(pos.offset(d)):
            return False
        return self._cells[pos].open[d]

    def open_wall_count(self) -> int:
        # each passage is counted once, from its left/top cell
        n = 0
        for cell in self._cells.values():
            if cell.open[Direction.RIGHT] and self.in_bounds(cell.coord.offset(Direction.RIGHT)):
                n += 1
            if cell.open[Direction.BOTTOM] and self.in_bounds(cell.coord.offset(Direction.BOTTOM)):
                n += 1
        return n

    def to_rows(self) -> List[List[List[str]]]:
        return [[[d.value for d in self._cells[Coordinate(x, y)].open_directions()] for x in range(self.width)]
                for y in range(self.height)]
