import pytest

from common.errors import OutOfBoundsError, UnreachableTargetError
from common.grid import Coordinate, Direction, Grid
from eval_core.solver import BFSSolver, shortest_path
from eval_core.validator import Validator
from maze_gen.events import CellDiscovered, EventLog, PathFound, PathUnreachable
from maze_gen.generator import BacktrackingGenerator


def _maze(w, h, seed, start=(0, 0)) -> Grid:
    grid = Grid.create(w, h)
    BacktrackingGenerator(grid, start, seed=seed).run()
    return grid


def _open_everything(grid: Grid) -> Grid:
    for cell in list(grid.cells()):
        for d in (Direction.RIGHT, Direction.BOTTOM):
            if grid.in_bounds(cell.coord.offset(d)):
                grid.open_wall(cell.coord, d)
    return grid


def _exhaustive_distance(grid: Grid, start, target):
    # every simple path, keep the shortest
    start, target = Coordinate.of(start), Coordinate.of(target)
    best = None
    stack = [(start, (start,))]
    while stack:
        c, path = stack.pop()
        if c == target:
            if best is None or len(path) - 1 < best:
                best = len(path) - 1
            continue
        for d in grid.cell_at(c).open_directions():
            n = c.offset(d)
            if n not in path:
                stack.append((n, path + (n,)))
    return best


def _assert_walkable(grid: Grid, path, start, target):
    assert path[0] == start
    assert path[-1] == target
    for a, b in zip(path, path[1:]):
        d = next(d for d in Direction if a.offset(d) == b)
        assert grid.is_open(a, d)
        assert grid.is_open(b, d.opposite)


def test_two_by_two_seed_42():
    grid = _maze(2, 2, 42)
    assert grid.open_wall_count() == 3
    res = BFSSolver(grid, (0, 0), (1, 1)).solve()
    assert res.ok
    assert res.error is None
    assert len(res.path) == 3
    assert res.length == 2
    _assert_walkable(grid, res.path, (0, 0), (1, 1))


def test_single_cell():
    grid = _maze(1, 1, 0)
    res = BFSSolver(grid, (0, 0), (0, 0)).solve()
    assert res.ok
    assert res.path == [Coordinate(0, 0)]
    assert res.length == 0


def test_start_equals_target():
    grid = _maze(4, 4, 5)
    assert shortest_path(grid, (2, 2), (2, 2)) == [(2, 2)]


@pytest.mark.parametrize('seed', range(15))
def test_matches_exhaustive_search_on_small_mazes(seed):
    grid = _maze(3, 3, seed)
    for target in [(2, 2), (1, 1), (0, 2), (2, 0)]:
        res = BFSSolver(grid, (0, 0), target).solve()
        assert res.ok
        assert res.length == _exhaustive_distance(grid, (0, 0), target)
        _assert_walkable(grid, res.path, (0, 0), target)


def test_shortest_path_on_grid_with_cycles():
    grid = _open_everything(Grid(3, 3))
    cells = [c.coord for c in grid.cells()]
    for s in cells:
        for t in cells:
            res = BFSSolver(grid, s, t).solve()
            manhattan = abs(s.x - t.x) + abs(s.y - t.y)
            assert res.length == manhattan == _exhaustive_distance(grid, s, t)
            _assert_walkable(grid, res.path, s, t)


def test_ties_follow_direction_order():
    grid = _open_everything(Grid(2, 2))
    assert shortest_path(grid, (0, 0), (1, 1)) == [(0, 0), (1, 0), (1, 1)]
    assert shortest_path(grid, (1, 1), (0, 0)) == [(1, 1), (1, 0), (0, 0)]


def test_path_round_trip_on_larger_maze():
    grid = _maze(15, 10, 99)
    res = BFSSolver(grid, (0, 0), (14, 9)).solve()
    _assert_walkable(grid, res.path, (0, 0), (14, 9))
    assert Validator(grid, (0, 0), (14, 9), res.path).validate(res.path) == {
        'ok': True, 'optimal': True, 'length': res.length}
    # the path is unique in a perfect maze
    assert len(set(res.path)) == len(res.path)


def test_resolve_from_a_midway_position():
    grid = _maze(8, 8, 21)
    full = shortest_path(grid, (0, 0), (7, 7))
    mid = full[len(full) // 2]
    assert shortest_path(grid, mid, (7, 7)) == full[len(full) // 2:]


def test_unreachable_target_is_reported():
    grid = Grid(3, 3)
    grid.open_wall((0, 0), Direction.RIGHT)
    grid.open_wall((1, 0), Direction.RIGHT)
    grid.open_wall((0, 0), Direction.BOTTOM)
    grid.open_wall((1, 0), Direction.BOTTOM)
    log = EventLog()
    res = BFSSolver(grid, (0, 0), (2, 2), listener=log).solve()
    assert not res.ok
    assert res.path == []
    assert isinstance(res.error, UnreachableTargetError)
    assert res.visited_count == 5
    assert log.events[-1] == PathUnreachable(Coordinate(0, 0), Coordinate(2, 2))
    with pytest.raises(UnreachableTargetError):
        res.raise_for_error()


def test_fully_closed_grid_terminates():
    res = BFSSolver(Grid(10, 10), (0, 0), (9, 9)).solve()
    assert not res.ok
    assert res.visited_count == 1


def test_solver_does_not_mutate_grid():
    grid = _maze(6, 6, 4)
    rows = grid.to_rows()
    orders = [c.order for c in grid.cells()]
    BFSSolver(grid, (0, 0), (5, 5)).solve()
    assert grid.to_rows() == rows
    assert [c.order for c in grid.cells()] == orders


def test_events():
    grid = _maze(5, 5, 8)
    log = EventLog()
    res = BFSSolver(grid, (0, 0), (4, 4), listener=log).solve()
    assert log.events[0] == CellDiscovered(Coordinate(0, 0))
    assert log.events[-1] == PathFound(tuple(res.path))
    discovered = [e.coord for e in log.of_kind('cell-discovered')]
    assert len(discovered) == len(set(discovered)) == res.visited_count


def test_step_wise_matches_solve():
    grid = _maze(7, 5, 13)
    solver = BFSSolver(grid, (0, 0), (6, 4))
    steps = 0
    while solver.step():
        steps += 1
    assert solver.done
    assert not solver.step()
    assert solver.result.path == BFSSolver(grid, (0, 0), (6, 4)).solve().path
    assert steps > 0


@pytest.mark.parametrize('start,target', [((5, 0), (0, 0)), ((0, 0), (0, 5)), ((-1, 0), (0, 0))])
def test_out_of_bounds_endpoints(start, target):
    with pytest.raises(OutOfBoundsError):
        BFSSolver(Grid(5, 5), start, target)
