# src/scripts/plot_grid.py
import argparse
import os

import matplotlib

matplotlib.use("Agg")

import matplotlib.colors as mcolors
import matplotlib.pyplot as plt

from percolation_sim import CellStatus, SimulationConfig, SimulationResult, run_simulation

# closed, opened, filled
STATUS_COLORS = ["#3a3a3a", "#b4b4b4", "#ffffff"]


def format_title(result: SimulationResult) -> str:
    meta = result.meta or {}
    seed = meta.get("seed")
    seed_str = str(seed) if seed is not None else "?"
    parts = [f"{result.rows}x{result.cols}", f"seed={seed_str}"]
    if result.percolates:
        parts.append(f"percolates at {result.percolation_iteration}")
    else:
        parts.append("no percolation")
    return ", ".join(parts)


def render(result: SimulationResult, output=None, title=None, dpi=150):
    """Draw the final cell statuses of a run, one pixel block per cell."""
    cmap = mcolors.ListedColormap(STATUS_COLORS)
    norm = mcolors.BoundaryNorm([-0.5, 0.5, 1.5, 2.5], cmap.N)

    fig, ax = plt.subplots(figsize=(6, 6))
    ax.imshow(result.as_array(), interpolation="nearest", cmap=cmap, norm=norm)
    ax.set_aspect("equal")
    ax.axis("off")
    if title:
        ax.set_title(title, pad=10)

    if output:
        os.makedirs(os.path.dirname(output) if os.path.dirname(output) else ".", exist_ok=True)
        fig.savefig(output, dpi=dpi, bbox_inches="tight", pad_inches=0.1)
        print(f"Saved figure to {output}")

    plt.close(fig)
    return fig


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Run a percolation simulation and plot the final grid"
    )
    parser.add_argument("--res", type=int, default=64, help="Cells per side (default: 64)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument(
        "--stop-on-percolation",
        action="store_true",
        help="Plot the grid at the first percolating iteration",
    )
    parser.add_argument(
        "--out",
        default=None,
        help="Output image path (default: results/percolation_<res>_S<seed>.png)",
    )
    parser.add_argument("--dpi", type=int, default=150, help="DPI for output file")
    args = parser.parse_args(argv)

    config = SimulationConfig(
        rows=args.res,
        cols=args.res,
        seed=args.seed,
        stop_on_percolation=args.stop_on_percolation,
    )
    result = run_simulation(config)

    filled = int((result.cells == CellStatus.OPENED_AND_FILLED).sum())
    print(f"Opened {result.opened_history[-1]} cells, {filled} filled")

    out = args.out or os.path.join("results", f"percolation_{args.res}_S{args.seed}.png")
    render(result, output=out, title=format_title(result), dpi=args.dpi)
    return 0


if __name__ == "__main__":
    main()
