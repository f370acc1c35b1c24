"""
Percolation Simulation Library - 2D site percolation with union-find

This package provides:
- Grid: flat row-major store of cell statuses
- DynamicConnectivity: weighted quick-union with path compression
- PercolationSolver: opens cells and answers fill/percolation queries
- run_simulation: the open -> refresh -> query loop
"""

from .errors import (
    IndexOutOfRangeError,
    InvalidDimensionError,
    InvalidSizeError,
    NoClosedCellsRemainingError,
    PercolationError,
)
from .grid import CellStatus, Grid
from .union_find import DynamicConnectivity
from .solver import PercolationSolver
from .simulation import (
    IterationReport,
    SimulationConfig,
    SimulationResult,
    run_model,
    run_simulation,
)
from . import export, utils

__all__ = [
    # Core
    "CellStatus",
    "Grid",
    "DynamicConnectivity",
    "PercolationSolver",
    # Simulation loop
    "SimulationConfig",
    "SimulationResult",
    "IterationReport",
    "run_simulation",
    "run_model",
    # Errors
    "PercolationError",
    "InvalidDimensionError",
    "InvalidSizeError",
    "IndexOutOfRangeError",
    "NoClosedCellsRemainingError",
    # Utilities
    "export",
    "utils",
]
