class MazeError(Exception):
    pass


class InvalidSizeError(MazeError, ValueError):
    def __init__(self, width, height):
        super().__init__(f"invalid maze size {width}x{height}: both dimensions must be positive integers")
        self.width = width
        self.height = height


class OutOfBoundsError(MazeError, IndexError):
    def __init__(self, coord, width: int, height: int):
        super().__init__(f"coordinate {coord} outside {width}x{height} grid")
        self.coord = coord
        self.width = width
        self.height = height


class UnreachableTargetError(MazeError):
    def __init__(self, start, target):
        super().__init__(f"target {target} is not reachable from {start}")
        self.start = start
        self.target = target


class ConfigError(MazeError):
    pass
