from typing import Callable, List, Optional
import logging
import numpy as np

from common.grid import Coordinate, Direction, Grid
from eval_core.solver import BFSSolver, SolveResult
from .events import Emitter, InvalidMove, Listener, PlayerMoved
from .generator import BacktrackingGenerator, MazeConfig

logger = logging.getLogger(__name__)


class MazeSession:
    """Player-facing maze: regenerate, move around, and auto-solve.

    Work can be done at once (``reset()``, ``solve()``) or paced by the caller
    with ``step_wise=True`` followed by repeated ``advance()`` calls.
    """

    def __init__(self, cfg: MazeConfig, listener: Optional[Listener] = None,
                 on_solved: Optional[Callable[[], None]] = None):
        self.cfg = cfg
        self.grid = Grid.create(cfg.width, cfg.height)
        self.grid.cell_at(cfg.target)
        self.rng = np.random.default_rng(cfg.seed)
        self.listener = listener
        self.emitter = Emitter(listener)
        self.on_solved = on_solved
        self.generator = BacktrackingGenerator(self.grid, cfg.start, rng=self.rng, listener=listener)
        self.position: Coordinate = cfg.start
        self.resetting = False
        self.solving = False
        self.solved = False
        self.last_result: Optional[SolveResult] = None
        self._solver: Optional[BFSSolver] = None
        self._walk: List[Coordinate] = []

    @property
    def busy(self) -> bool:
        return self.resetting or self.solving

    def reset(self, step_wise: bool = False) -> bool:
        if self.busy:
            return False
        self.resetting = True
        self.solved = False
        self.last_result = None
        self.position = self.cfg.start
        self.generator.reset()
        if not step_wise:
            self.generator.run()
            self._finish_reset()
        return True

    def _finish_reset(self) -> None:
        self.resetting = False
        self._set_position(self.cfg.start)

    def move(self, direction) -> bool:
        if self.busy or self.solved:
            return False
        if not self.grid.can_move(self.position, direction):
            self.emitter.emit(InvalidMove(self.position, direction))
            return False
        self._set_position(self.position.offset(Direction.parse(direction)))
        return True

    def _set_position(self, position: Coordinate) -> None:
        self.position = position
        self.emitter.emit(PlayerMoved(position))
        if not self.solved and position == self.cfg.target:
            self.solved = True
            if not self.solving and self.on_solved is not None:
                self.on_solved()

    def solve(self, step_wise: bool = False) -> Optional[SolveResult]:
        """Search from the player's current position, then walk the path.

        Returns None when the session is busy, or when ``step_wise`` is set;
        in that case the result is available in ``last_result`` once
        ``advance()`` has consumed the search.
        """
        if self.busy:
            return None
        self.solving = True
        self._solver = BFSSolver(self.grid, self.position, self.cfg.target, listener=self.listener)
        if step_wise:
            return None
        result = self._solver.solve()
        self._begin_walk(result)
        while self._walk:
            self._walk_step()
        self.solving = False
        return result

    def _begin_walk(self, result: SolveResult) -> None:
        self.last_result = result
        self._solver = None
        if not result.ok:
            logger.info("no path from %s to %s", result.start, result.target)
            self._walk = []
            return
        self._walk = list(result.path[1:])

    def _walk_step(self) -> None:
        self._set_position(self._walk.pop(0))

    def advance(self) -> bool:
        """Run one unit of pending work. Returns False when nothing is left."""
        if self.resetting:
            self.generator.step()
            if self.generator.done:
                self._finish_reset()
                return False
            return True
        if not self.solving:
            return False
        if self._solver is not None:
            if not self._solver.step():
                self._begin_walk(self._solver.result)
        elif self._walk:
            self._walk_step()
        if self._solver is None and not self._walk:
            self.solving = False
            return False
        return True

