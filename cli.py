import argparse
import json
import logging
import sys
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Dict, List, Optional
from tqdm import tqdm

from common.config_loader import load_config, maze_config_from
from common.errors import ConfigError, MazeError
from eval_core.metrics import MazeMetrics
from eval_core.validator import Validator, check_wall_consistency, is_perfect
from maze_gen.generator import MazeConfig, MazeGenerator

logger = logging.getLogger('maze_engine')


def parse_size(size: str):
    try:
        w, h = map(int, size.lower().split('x'))
    except ValueError as e:
        raise ConfigError(f"size must look like WIDTHxHEIGHT, got {size!r}") from e
    return w, h


def parse_log_level(name) -> int:
    level = logging.getLevelName(str(name).upper())
    if not isinstance(level, int):
        raise ConfigError(f"unknown log level {name!r}")
    return level


def run_single(width: int, height: int, seed: Optional[int], start, target=None) -> Dict:
    cfg = MazeConfig(width=width, height=height, start=start, target=target, seed=seed)
    gen = MazeGenerator(cfg)
    maze = gen.generate()
    result = gen.solution
    checks = Validator(gen.grid, cfg.start, cfg.target, result.path).validate(result.path)
    perfect = is_perfect(gen.grid)
    consistent = not check_wall_consistency(gen.grid)
    return {
        'size': f"{width}x{height}",
        'seed': seed,
        'start': maze['start'],
        'target': maze['target'],
        'walls_opened': maze['walls_opened'],
        'ok': bool(result.ok and checks['ok'] and perfect and consistent),
        'perfect': perfect,
        'consistent': consistent,
        'error': str(result.error) if result.error else checks.get('error'),
        'metrics': MazeMetrics(gen.grid).summary(result.path),
        'path': [list(p) for p in result.path],
    }


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description='Generate and solve perfect mazes.')
    ap.add_argument('--config', default=None, help='YAML config file (default: config/config.yaml)')
    ap.add_argument('--size', default=None, help='comma separated WIDTHxHEIGHT list, e.g. 10x10,20x5')
    ap.add_argument('--count', type=int, default=1, help='mazes per size')
    ap.add_argument('--seed', type=int, default=None)
    ap.add_argument('--start', default=None, help="start cell 'x,y'")
    ap.add_argument('--target', default=None, help="target cell 'x,y'")
    ap.add_argument('--workers', type=int, default=4)
    ap.add_argument('--outdir', default=None, help='write summary.json here')
    ap.add_argument('--log-level', default=None)
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        cfg = load_config(args.config)
        for key in ('seed', 'start', 'target'):
            if getattr(args, key) is not None:
                cfg[key] = getattr(args, key)
        if args.size is not None:
            sizes = [parse_size(s.strip()) for s in args.size.split(',') if s.strip()]
            if not sizes:
                raise ConfigError(f"no maze size in {args.size!r}")
            cfg['width'], cfg['height'] = sizes[0]
        base = maze_config_from(cfg)
        if args.size is None:
            sizes = [(base.width, base.height)]
        level = parse_log_level(args.log_level or cfg.get('log_level') or 'WARNING')
    except MazeError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    logging.basicConfig(level=level, format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    # an explicit target applies to every size; otherwise each maze uses its own corner
    target = base.target if cfg.get('target') not in (None, '') else None
    # unseeded runs draw fresh entropy for every maze
    jobs = [(w, h, None if base.seed is None else base.seed + i)
            for w, h in sizes for i in range(max(1, args.count))]
    results = [None] * len(jobs)
    with ThreadPoolExecutor(max_workers=max(1, args.workers)) as ex:
        futs = {ex.submit(run_single, w, h, s, base.start, target): k for k, (w, h, s) in enumerate(jobs)}
        for f in tqdm(as_completed(futs), total=len(futs), disable=len(futs) < 2):
            k = futs[f]
            w, h, s = jobs[k]
            try:
                results[k] = f.result()
            except MazeError as e:
                logger.error("maze %dx%d seed=%s failed: %s", w, h, s, e)
                results[k] = {'size': f"{w}x{h}", 'seed': s, 'ok': False, 'error': str(e)}

    if args.outdir:
        outdir = Path(args.outdir)
        outdir.mkdir(parents=True, exist_ok=True)
        (outdir / 'summary.json').write_text(json.dumps(results, ensure_ascii=False, indent=2), encoding='utf-8')
    print(json.dumps([{k: v for k, v in r.items() if k != 'path'} for r in results], ensure_ascii=False))
    return 0 if all(r.get('ok') for r in results) else 1


if __name__ == '__main__':
    sys.exit(main())
