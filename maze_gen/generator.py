from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Set, Tuple
import logging
import numpy as np

from common.grid import Coordinate, Grid
from eval_core.solver import BFSSolver
from .events import Backtrack, CellVisited, Emitter, Listener, WallOpened

logger = logging.getLogger(__name__)

Coord = Tuple[int, int]


@dataclass
class MazeConfig:
    width: int
    height: int
    start: Coord = (0, 0)
    target: Optional[Coord] = None  # defaults to the bottom-right corner
    seed: Optional[int] = None

    def __post_init__(self):
        self.start = Coordinate.of(self.start)
        if self.target is None:
            self.target = Coordinate(self.width - 1, self.height - 1)
        else:
            self.target = Coordinate.of(self.target)


@dataclass
class GenerationResult:
    visited_count: int
    walls_opened: int
    steps: int
    events: List[object] = field(default_factory=list)


class BacktrackingGenerator:
    """Randomized iterative backtracking over a Grid.

    Each call to ``step`` peeks the stack, marks the current cell visited the
    first time it is seen, then either backtracks or carves into one uniformly
    chosen unvisited neighbour. The run ends once every cell has been
    visited, which leaves a spanning tree of open passages.
    """

    def __init__(self, grid: Grid, start: Coord = (0, 0), rng: Optional[np.random.Generator] = None,
                 seed: Optional[int] = None, listener: Optional[Listener] = None):
        self.grid = grid
        self.start = Coordinate.of(start)
        # raises OutOfBoundsError for a start outside the grid
        grid.cell_at(self.start)
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.emitter = Emitter(listener)
        self.reset()

    def reset(self) -> None:
        self.grid.reset()
        self.stack: List[Coordinate] = [self.start]
        self.visited: Set[Coordinate] = set()
        self.walls_opened = 0
        self.steps = 0

    @property
    def visited_count(self) -> int:
        return len(self.visited)

    @property
    def done(self) -> bool:
        return len(self.visited) >= self.grid.cell_count

    def step(self) -> List[object]:
        events: List[object] = []
        if self.done:
            return events
        self.steps += 1
        current = self.stack[-1]
        if current not in self.visited:
            order = len(self.visited)
            self.visited.add(current)
            self.grid.cell_at(current).order = order
            self.emitter.emit(CellVisited(current, order), events)

        candidates = [n for n in self.grid.neighbors(current) if n.coord not in self.visited]
        if not candidates:
            self.stack.pop()
            self.emitter.emit(Backtrack(current), events)
            return events

        nxt = candidates[int(self.rng.integers(0, len(candidates)))]
        self.stack.append(nxt.coord)
        self.grid.open_wall(current, nxt.direction)
        self.walls_opened += 1
        self.emitter.emit(WallOpened(current, nxt.coord, nxt.direction), events)
        return events

    def iter_steps(self) -> Iterator[List[object]]:
        while not self.done:
            yield self.step()

    def run(self) -> GenerationResult:
        logger.debug("generating %dx%d maze from %s", self.grid.width, self.grid.height, self.start)
        events: List[object] = []
        for evs in self.iter_steps():
            events.extend(evs)
        logger.debug("generation finished: %d cells, %d walls opened, %d steps",
                     self.visited_count, self.walls_opened, self.steps)
        return GenerationResult(visited_count=self.visited_count, walls_opened=self.walls_opened,
                                steps=self.steps, events=events)


class MazeGenerator:
    def __init__(self, cfg: MazeConfig, listener: Optional[Listener] = None):
        self.cfg = cfg
        self.grid = Grid.create(cfg.width, cfg.height)
        self.grid.cell_at(cfg.target)
        self.rng = np.random.default_rng(cfg.seed)
        self.core = BacktrackingGenerator(self.grid, cfg.start, rng=self.rng, listener=listener)
        self.solution = None

    def generate(self) -> Dict:
        self.core.reset()
        gen = self.core.run()
        res = self.solution = BFSSolver(self.grid, self.cfg.start, self.cfg.target).solve()
        return {
            'width': self.cfg.width,
            'height': self.cfg.height,
            'seed': self.cfg.seed,
            'start': list(self.cfg.start),
            'target': list(self.cfg.target),
            'walls_opened': gen.walls_opened,
            'shortest_path': [list(p) for p in res.path],
            'grid': self.grid.to_rows(),
        }
