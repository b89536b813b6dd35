from typing import Dict, List

from common.grid import Grid


class MazeMetrics:
    def __init__(self, grid: Grid):
        self.grid = grid

    def summary(self, path: List) -> Dict:
        degrees = [len(cell.open_directions()) for cell in self.grid.cells()]
        cells = self.grid.cell_count
        return {
            'cells': cells,
            'passages': self.grid.open_wall_count(),
            # a 1x1 maze has a single cell with no exits; it is not a dead end
            'dead_ends': sum(1 for d in degrees if d == 1),
            'junctions': sum(1 for d in degrees if d >= 3),
            'path_length': max(0, len(path) - 1),
            'path_coverage': round(len(path) / cells, 4),
        }
