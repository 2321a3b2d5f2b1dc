import argparse
import logging
import os
import sys
import time
from pathlib import Path

# Ensure repository root is on sys.path so `from almond...` works when running
# this script directly (e.g. `python scripts/make_image.py`).
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from almond.config import PlotConfig, load_config
from almond.render import METHODS, iteration_grid, colorize, save_image, plot_iterations
from almond.utils import parse_complex


def build_parser():
    parser = argparse.ArgumentParser(description="Render an escape-time divergence map to PNG")
    parser.add_argument("--config", type=str, default=None,
                        help="YAML file with center_x, center_y, radius, size, max_iterations")
    parser.add_argument("--center", type=str, default=None,
                        help="complex center, e.g. --center=-1-0.3j (use = when it starts with -)")
    parser.add_argument("--center_x", type=float, default=None)
    parser.add_argument("--center_y", type=float, default=None)
    parser.add_argument("--radius", type=float, default=None)
    parser.add_argument("--size", type=int, default=None)
    parser.add_argument("--max_iter", type=int, default=None)
    parser.add_argument("--method", type=str, default="vectorized", choices=METHODS)
    parser.add_argument("--workers", type=int, default=None,
                        help="pool size for --method parallel (default: all cores)")
    parser.add_argument("--outfile", type=str, default="almond-bread.png")
    parser.add_argument("--preview", type=str, default=None,
                        help="optional path for a matplotlib figure of raw counts")
    parser.add_argument("--verbose", action="store_true")
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(levelname)s %(name)s: %(message)s")

    cfg = load_config(args.config) if args.config else PlotConfig()
    center_x, center_y = args.center_x, args.center_y
    if args.center:
        if center_x is not None or center_y is not None:
            parser.error("--center cannot be combined with --center_x/--center_y")
        center = parse_complex(args.center)
        center_x, center_y = center.real, center.imag
    cfg = cfg.with_overrides(
        center_x=center_x,
        center_y=center_y,
        radius=args.radius,
        size=args.size,
        max_iterations=args.max_iter,
    )

    print(f"[run] center=({cfg.center_x}, {cfg.center_y}), radius={cfg.radius}, "
          f"size={cfg.size}, N={cfg.max_iterations}, method={args.method}")

    start = time.time()
    iters = iteration_grid(cfg, method=args.method, workers=args.workers)
    out_path = save_image(colorize(iters, cfg.max_iterations), args.outfile)
    print(f"[run] saved {out_path}")

    if args.preview:
        print(f"[run] preview -> {plot_iterations(iters, cfg, args.preview)}")

    print(f"[run] Time: {int((time.time() - start) * 1000)}ms")
    return 0


if __name__ == "__main__":
    sys.exit(main())
