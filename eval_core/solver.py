from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, List, Optional, Set
import logging

from common.errors import UnreachableTargetError
from common.grid import Coordinate, Direction, Grid
from maze_gen.events import CellDiscovered, Emitter, Listener, PathFound, PathUnreachable

logger = logging.getLogger(__name__)


@dataclass
class SolveResult:
    ok: bool
    start: Coordinate
    target: Coordinate
    path: List[Coordinate] = field(default_factory=list)
    visited_count: int = 0
    error: Optional[UnreachableTargetError] = None

    @property
    def length(self) -> int:
        # edges, not cells
        return max(0, len(self.path) - 1)

    def raise_for_error(self) -> 'SolveResult':
        if self.error is not None:
            raise self.error
        return self


class BFSSolver:
    """Breadth-first search over open passages of a generated Grid.

    The grid is only read. Visited state and predecessor links live on the
    solver instance, so several solvers can run over the same grid.
    """

    def __init__(self, grid: Grid, start, target, listener: Optional[Listener] = None):
        self.grid = grid
        self.start = grid.cell_at(start).coord
        self.target = grid.cell_at(target).coord
        self.emitter = Emitter(listener)
        self.queue: Deque[Coordinate] = deque([self.start])
        self.visited: Set[Coordinate] = {self.start}
        self.predecessor: Dict[Coordinate, Coordinate] = {}
        self._result: Optional[SolveResult] = None
        self._started = False

    @property
    def result(self) -> Optional[SolveResult]:
        return self._result

    @property
    def done(self) -> bool:
        return self._result is not None

    def step(self) -> bool:
        """Dequeue one cell. Returns False once the search has finished."""
        if self._result is not None:
            return False
        if not self._started:
            self._started = True
            self.emitter.emit(CellDiscovered(self.start))
        if not self.queue:
            self._finish_unreachable()
            return False
        c = self.queue.popleft()
        if c == self.target:
            self._finish_found()
            return False
        cell = self.grid.cell_at(c)
        for d in Direction:
            if not cell.open[d]:
                continue
            n = c.offset(d)
            if not self.grid.in_bounds(n) or n in self.visited:
                continue
            self.visited.add(n)
            self.predecessor[n] = c
            self.queue.append(n)
            self.emitter.emit(CellDiscovered(n))
        return True

    def solve(self) -> SolveResult:
        logger.debug("solving %s -> %s", self.start, self.target)
        while self.step():
            pass
        return self._result

    def _reconstruct(self) -> List[Coordinate]:
        path = [self.target]
        cur = self.target
        while cur != self.start:
            cur = self.predecessor[cur]
            path.append(cur)
        path.reverse()
        return path

    def _finish_found(self) -> None:
        path = self._reconstruct()
        self._result = SolveResult(ok=True, start=self.start, target=self.target, path=path,
                                   visited_count=len(self.visited))
        logger.debug("path found: %d steps, %d cells visited", len(path) - 1, len(self.visited))
        self.emitter.emit(PathFound(tuple(path)))

    def _finish_unreachable(self) -> None:
        err = UnreachableTargetError(self.start, self.target)
        self._result = SolveResult(ok=False, start=self.start, target=self.target,
                                   visited_count=len(self.visited), error=err)
        logger.warning("%s", err)
        self.emitter.emit(PathUnreachable(self.start, self.target))


def shortest_path(grid: Grid, start, target) -> List[Coordinate]:
    return BFSSolver(grid, start, target).solve().path
