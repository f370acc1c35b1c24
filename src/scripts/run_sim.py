#!/usr/bin/env python3
"""
Percolation Simulation Runner

Solves the percolation problem on a 2D grid. Fluid flows from the top side
to the bottom side; the grid percolates once a continuous path of opened
cells joins the two. Cells are opened one at a time at random and the fill
status of every cell is refreshed after each opening.

In the PPM frames a closed cell is black, an opened cell grey, and cells
filled with fluid are white.
"""

import argparse
import sys
from pathlib import Path

from percolation_sim import Grid, PercolationError, SimulationConfig, run_simulation, utils
from percolation_sim.export import export_grid


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run a 2D site percolation simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--res",
        type=int,
        default=None,
        help="Cells in each direction of a square grid (default: 12)",
    )
    parser.add_argument("--rows", type=int, default=None, help="Override row count")
    parser.add_argument("--cols", type=int, default=None, help="Override column count")
    parser.add_argument(
        "--console",
        action="store_true",
        help="Write cell data to the console after every iteration",
    )
    parser.add_argument(
        "--image",
        action="store_true",
        help="Write cell data to a PPM image after every iteration",
    )
    parser.add_argument(
        "--parallel",
        action="store_true",
        help="Refresh the fill status on multiple threads",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducibility (default: OS entropy)",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="JSON or TOML parameter file; command-line flags take precedence",
    )
    parser.add_argument(
        "--out-dir",
        type=str,
        default="saves",
        help="Folder for PPM frames (default: 'saves')",
    )
    parser.add_argument(
        "--min-image-size",
        type=int,
        default=300,
        help="Minimal image size in pixels; small grids are upscaled (default: 300)",
    )
    parser.add_argument(
        "--stop-on-percolation",
        action="store_true",
        help="Stop at the first iteration where the grid percolates",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Print every opened cell",
    )
    return parser


def resolve_config(args: argparse.Namespace) -> SimulationConfig:
    params = utils.load_params(args.config) if args.config else {}
    if args.res is not None:
        params["rows"] = args.res
        params["cols"] = args.res
    if args.rows is not None:
        params["rows"] = args.rows
    if args.cols is not None:
        params["cols"] = args.cols
    if args.seed is not None:
        params["seed"] = args.seed
    if args.parallel:
        params["parallel_refresh"] = True
    if args.stop_on_percolation:
        params["stop_on_percolation"] = True
    if args.verbose:
        params["verbose"] = True
    return SimulationConfig.from_dict(params)


def main(argv=None):
    args = build_parser().parse_args(argv)
    config = resolve_config(args)

    print("Start!")
    timer = utils.Stopwatch()

    out_dir = Path(args.out_dir)
    if args.image:
        out_dir.mkdir(parents=True, exist_ok=True)

    separator = "-" * 36

    def report(it, solver):
        print(it.format())
        if args.console:
            print(solver.grid.render(), end="")
        print(separator)
        if args.image:
            export_grid(
                solver.grid,
                out_dir / f"{it.iteration:06d}.ppm",
                min_image_size=args.min_image_size,
            )

    print(f"Grid: {config.rows}x{config.cols}, seed={config.seed}")
    try:
        if args.console:
            print("Initial state of the cells:")
            print(Grid(config.rows, config.cols).render(), end="")
            print(separator)
        result = run_simulation(config, on_iteration=report)
    except PercolationError as e:
        print(f"Error: {e}")
        return 1

    print("Ok!")
    if result.percolates:
        print(f"   Percolated at iteration: {result.percolation_iteration}")
    else:
        print("   Grid does not percolate")
    print(f"   Iterations: {result.iterations}")
    print(f"Elapsed time = {timer.elapsed():.3f} [s]")

    return 0


if __name__ == "__main__":
    sys.exit(main())
