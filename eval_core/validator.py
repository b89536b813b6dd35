from typing import Any, Dict, List, Optional, Tuple

from common.grid import Coordinate, Direction, Grid


def check_wall_consistency(grid: Grid) -> List[Tuple[Coordinate, Direction]]:
    bad = []
    for cell in grid.cells():
        for n in grid.neighbors(cell.coord):
            other = grid.cell_at(n.coord)
            if cell.open[n.direction] != other.open[n.opposite]:
                bad.append((cell.coord, n.direction))
    return bad


def _find(parent: Dict[Coordinate, Coordinate], c: Coordinate) -> Coordinate:
    while parent[c] != c:
        parent[c] = parent[parent[c]]
        c = parent[c]
    return c


def is_perfect(grid: Grid) -> bool:
    """True when the open passages form a spanning tree (connected, no cycles)."""
    if grid.open_wall_count() != grid.cell_count - 1:
        return False
    parent = {cell.coord: cell.coord for cell in grid.cells()}
    for cell in grid.cells():
        for d in (Direction.RIGHT, Direction.BOTTOM):
            n = cell.coord.offset(d)
            if not cell.open[d] or not grid.in_bounds(n):
                continue
            ra, rb = _find(parent, cell.coord), _find(parent, n)
            if ra == rb:
                return False
            parent[ra] = rb
    return True


class Validator:
    def __init__(self, grid: Grid, start, target, shortest_path: Optional[List] = None):
        self.grid = grid
        self.start = Coordinate.of(start)
        self.target = Coordinate.of(target)
        self.shortest_path = [Coordinate.of(p) for p in (shortest_path or [])]

    def validate(self, path: List) -> Dict[str, Any]:
        err = self._check_validity(path)
        if err:
            return {'ok': False, 'error': err}
        optimal = bool(self.shortest_path) and len(path) == len(self.shortest_path)
        return {'ok': True, 'optimal': optimal, 'length': len(path) - 1}

    def _check_validity(self, path: List) -> Optional[str]:
        if not path:
            return 'empty_path'
        path = [Coordinate.of(p) for p in path]
        if path[0] != self.start:
            return 'wrong_start'
        if path[-1] != self.target:
            return 'wrong_goal'
        # consecutive steps must be 4-neighbours joined by an open wall
        for a, b in zip(path, path[1:]):
            step = (b.x - a.x, b.y - a.y)
            d = next((d for d in Direction if d.delta == step), None)
            if d is None or not self.grid.in_bounds(a) or not self.grid.in_bounds(b):
                return 'illegal_move'
            if not self.grid.is_open(a, d):
                return 'wall_collision'
        return None
