from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from common.grid import Coordinate, Direction


@dataclass(frozen=True)
class CellVisited:
    coord: Coordinate
    order: int
    kind: str = field(default='cell-visited', init=False)


@dataclass(frozen=True)
class WallOpened:
    source: Coordinate
    target: Coordinate
    direction: Direction
    kind: str = field(default='wall-opened', init=False)


@dataclass(frozen=True)
class Backtrack:
    coord: Coordinate
    kind: str = field(default='backtrack', init=False)


@dataclass(frozen=True)
class CellDiscovered:
    coord: Coordinate
    kind: str = field(default='cell-discovered', init=False)


@dataclass(frozen=True)
class PathFound:
    path: Tuple[Coordinate, ...]
    kind: str = field(default='path-found', init=False)


@dataclass(frozen=True)
class PathUnreachable:
    start: Coordinate
    target: Coordinate
    kind: str = field(default='path-unreachable', init=False)


@dataclass(frozen=True)
class InvalidMove:
    position: Coordinate
    direction: object
    kind: str = field(default='invalid-move', init=False)


@dataclass(frozen=True)
class PlayerMoved:
    position: Coordinate
    kind: str = field(default='player-moved', init=False)


Listener = Callable[[object], None]


class EventLog:
    """Listener that records every event it receives, in order."""

    def __init__(self):
        self.events: List[object] = []

    def __call__(self, event) -> None:
        self.events.append(event)

    def of_kind(self, kind: str) -> List[object]:
        return [e for e in self.events if e.kind == kind]

    def clear(self) -> None:
        self.events.clear()


class Emitter:
    def __init__(self, listener: Optional[Listener] = None):
        self.listener = listener

    def emit(self, event, sink: Optional[List[object]] = None):
        if sink is not None:
            sink.append(event)
        if self.listener is not None:
            self.listener(event)
        return event
