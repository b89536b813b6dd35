from pathlib import Path
from typing import Dict, Optional
import os
import yaml

from .errors import ConfigError
from .grid import Coordinate

ENV_KEYS = {
    'MAZE_WIDTH': 'width',
    'MAZE_HEIGHT': 'height',
    'MAZE_SEED': 'seed',
    'MAZE_START': 'start',
    'MAZE_TARGET': 'target',
    'LOG_LEVEL': 'log_level',
}


def _read_yaml(path: Path) -> Dict:
    try:
        data = yaml.safe_load(path.read_text(encoding='utf-8')) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"cannot parse {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping")
    return data


def load_config(path: Optional[str] = None) -> Dict:
    base = Path(path) if path else Path('config/config.yaml')
    local = base.with_name('local.yaml')
    cfg: Dict = {}
    if base.exists():
        cfg.update(_read_yaml(base))
    elif path:
        raise ConfigError(f"config file not found: {path}")
    if local.exists():
        cfg.update(_read_yaml(local))
    # Pull overrides from environment
    for env, key in ENV_KEYS.items():
        if os.getenv(env) is not None:
            cfg[key] = os.getenv(env)
    return cfg


def _as_int(cfg: Dict, key: str) -> Optional[int]:
    v = cfg.get(key)
    if v is None or v == '':
        return None
    try:
        return int(v)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{key} must be an integer, got {v!r}") from e


def _as_coord(cfg: Dict, key: str):
    v = cfg.get(key)
    if v is None or v == '':
        return None
    try:
        return Coordinate.of(v)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{key} must be a coordinate 'x,y', got {v!r}") from e


def maze_config_from(cfg: Dict):
    from maze_gen.generator import MazeConfig

    width = _as_int(cfg, 'width')
    height = _as_int(cfg, 'height')
    if width is None or height is None:
        raise ConfigError('width and height are required')
    start = _as_coord(cfg, 'start') or (0, 0)
    return MazeConfig(width=width, height=height, start=start,
                      target=_as_coord(cfg, 'target'), seed=_as_int(cfg, 'seed'))
