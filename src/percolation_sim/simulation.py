from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Callable, Dict, List, Optional

import numpy as np

from . import utils
from .errors import NoClosedCellsRemainingError
from .grid import Grid
from .solver import PercolationSolver


@dataclass
class SimulationConfig:
    """Grid size and loop settings for one percolation run."""
    rows: int = 12
    cols: int = 12
    parallel_refresh: bool = False
    restrict_to_closed: bool = True
    max_iterations: Optional[int] = None
    stop_on_percolation: bool = False
    seed: Optional[int] = None
    verbose: bool = False

    @classmethod
    def from_dict(cls, params: Dict[str, Any] | None) -> "SimulationConfig":
        params = params or {}
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in params.items() if k in known})


@dataclass
class IterationReport:
    iteration: int
    row: int
    col: int
    opened: int
    porosity: int
    percolates: bool

    def format(self) -> str:
        status = "Percolates!" if self.percolates else "Does not percolate"
        return (
            f"Iteration: {self.iteration} , Opened cells = {self.opened} , "
            f"Porosity = {self.porosity} %, {status}"
        )


@dataclass
class SimulationResult:
    """Final grid state plus per-iteration history of a run."""

    cells: np.ndarray
    rows: int
    cols: int
    opened_history: List[int] = field(default_factory=list)
    percolation_iteration: Optional[int] = None
    meta: Dict[str, Any] = field(default_factory=dict)

    @property
    def percolates(self) -> bool:
        return self.percolation_iteration is not None

    @property
    def iterations(self) -> int:
        return len(self.opened_history)

    def as_array(self) -> np.ndarray:
        return self.cells.reshape(self.rows, self.cols)


IterationCallback = Callable[[IterationReport, PercolationSolver], None]


def make_solver(config: SimulationConfig) -> PercolationSolver:
    grid = Grid(config.rows, config.cols)
    return PercolationSolver(
        grid,
        parallel_refresh=config.parallel_refresh,
        rng=utils.make_rng(config.seed),
        verbose=config.verbose,
    )


def run_simulation(
    config: SimulationConfig | None = None,
    on_iteration: Optional[IterationCallback] = None,
) -> SimulationResult:
    """
    Open random cells one at a time until the iteration budget is spent.

    Each iteration opens a cell, refreshes the fill status of the whole
    grid and records whether the grid percolates. The loop ends early when
    no closed cell is left to open, or at the first percolation if
    `stop_on_percolation` is set.
    """
    config = config or SimulationConfig()
    solver = make_solver(config)
    grid = solver.grid
    max_iterations = config.max_iterations
    if max_iterations is None:
        max_iterations = grid.cell_count

    history: List[int] = []
    percolation_iteration: Optional[int] = None

    for iteration in range(max_iterations):
        try:
            row, col = solver.open_random_cell(config.restrict_to_closed)
        except NoClosedCellsRemainingError:
            break
        solver.refresh_fill_status()

        opened = solver.opened_count()
        percolates = solver.percolates_fully()
        history.append(opened)
        if percolates and percolation_iteration is None:
            percolation_iteration = iteration

        if on_iteration is not None:
            report = IterationReport(
                iteration=iteration,
                row=row,
                col=col,
                opened=opened,
                porosity=100 * opened // grid.cell_count,
                percolates=percolates,
            )
            on_iteration(report, solver)

        if percolates and config.stop_on_percolation:
            break

    meta = {
        "model": "site",
        "rows": config.rows,
        "cols": config.cols,
        "seed": config.seed,
        "components": solver.connectivity.component_count,
    }
    return SimulationResult(
        cells=grid.data.copy(),
        rows=grid.rows,
        cols=grid.cols,
        opened_history=history,
        percolation_iteration=percolation_iteration,
        meta=meta,
    )


def run_model(config: dict | None = None) -> SimulationResult:
    """Dictionary-driven wrapper around `run_simulation`."""
    return run_simulation(SimulationConfig.from_dict(config))


__all__ = [
    "SimulationConfig",
    "IterationReport",
    "SimulationResult",
    "make_solver",
    "run_simulation",
    "run_model",
]
