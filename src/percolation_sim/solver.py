"""
Percolation solver for a 2D grid of closed/opened cells.

Fluid enters through the top side and leaves through the bottom side. Two
virtual nodes, one above the top row and one below the bottom row, are
appended to the connectivity structure so that "does the grid percolate"
becomes a single `connected(top, bottom)` query.
"""

from __future__ import annotations

from typing import Optional, Tuple

import numpy as np
from numba import njit, prange

from .errors import NoClosedCellsRemainingError
from .grid import CellStatus, Grid, is_closed, is_opened
from .union_find import DynamicConnectivity, _find, _root

CLOSED = int(CellStatus.CLOSED)
OPENED = int(CellStatus.OPENED)
OPENED_AND_FILLED = int(CellStatus.OPENED_AND_FILLED)

# up, down, left, right
NEIGHBOURS = ((-1, 0), (1, 0), (0, -1), (0, 1))


###############################################################################
# Fill refresh kernels
###############################################################################


@njit(cache=True)
def _refresh_serial(cells: np.ndarray, parent: np.ndarray, top: int) -> None:
    root_top = _find(parent, top)
    for i in range(cells.shape[0]):
        if cells[i] > CLOSED:
            if _find(parent, i) == root_top:
                cells[i] = OPENED_AND_FILLED
            else:
                cells[i] = OPENED


@njit(parallel=True, cache=True)
def _refresh_parallel(cells: np.ndarray, parent: np.ndarray, top: int) -> None:
    """
    Same result as `_refresh_serial`, fanned out over cells.
    Uses the non-compressing root walk: `parent` must not be written here.
    """
    root_top = _root(parent, top)
    for i in prange(cells.shape[0]):
        if cells[i] > CLOSED:
            if _root(parent, np.int64(i)) == root_top:
                cells[i] = OPENED_AND_FILLED
            else:
                cells[i] = OPENED


###############################################################################
# Solver
###############################################################################


class PercolationSolver:
    """
    Opens cells of a `Grid` and tracks which of them are reachable from the top.

    The solver is the only writer of both the grid and the connectivity
    structure. Callers drive it in phases: open a cell, refresh the fill
    status, then query.
    """

    def __init__(
        self,
        grid: Grid,
        parallel_refresh: bool = False,
        rng: Optional[np.random.Generator] = None,
        verbose: bool = False,
    ) -> None:
        self.grid = grid
        total = grid.cell_count
        self.top_sentinel = total
        self.bottom_sentinel = total + 1
        self.connectivity = DynamicConnectivity(total + 2)
        self.parallel_refresh = parallel_refresh
        self.rng = rng if rng is not None else np.random.default_rng()
        self.verbose = verbose

    # ---------------------------------------------------------------- opening
    def is_open(self, row: int, col: int) -> bool:
        return self.grid[row, col] > CellStatus.CLOSED

    def open_cell(self, row: int, col: int) -> bool:
        """
        Opens the cell at (row, col) and wires it to its open neighbours.

        Opening an already opened cell is a no-op. Returns True if the
        cell was closed before the call.
        """
        current = self.grid.to_flat_index(row, col)
        if self.grid[current] > CellStatus.CLOSED:
            return False

        self.grid[current] = CellStatus.OPENED

        if row == 0:
            self.connectivity.union(current, self.top_sentinel)
        if row == self.grid.rows - 1:
            self.connectivity.union(current, self.bottom_sentinel)

        for d_row, d_col in NEIGHBOURS:
            n_row, n_col = row + d_row, col + d_col
            if not self.grid.contains(n_row, n_col):
                continue
            neighbour = self.grid.to_flat_index(n_row, n_col)
            if self.grid[neighbour] > CellStatus.CLOSED:
                self.connectivity.union(current, neighbour)
        return True

    def open_random_cell(self, restrict_to_closed: bool = True) -> Tuple[int, int]:
        """
        Opens a randomly chosen cell and returns its (row, col).

        With `restrict_to_closed` the choice is uniform over closed cells;
        otherwise it is uniform over the whole grid and may pick a cell
        that is already open.
        """
        if restrict_to_closed:
            closed = self.grid.indices_where(is_closed)
            if closed.size == 0:
                raise NoClosedCellsRemainingError(
                    f"All {self.grid.cell_count} cells are already opened"
                )
            flat = int(closed[self.rng.integers(closed.size)])
            row, col = self.grid.to_row_col(flat)
        else:
            row = int(self.rng.integers(self.grid.rows))
            col = int(self.rng.integers(self.grid.cols))

        if self.verbose:
            print(f"Open a cell [{row}, {col}]")

        self.open_cell(row, col)
        return row, col

    # ---------------------------------------------------------------- queries
    def is_percolating_at_cell(self, flat_index: int) -> bool:
        """True if fluid from the top side reaches this cell."""
        # sentinel indices are not cells
        self.grid.to_row_col(flat_index)
        return self.connectivity.connected(self.top_sentinel, flat_index)

    def is_percolating_at(self, row: int, col: int) -> bool:
        return self.is_percolating_at_cell(self.grid.to_flat_index(row, col))

    def percolates_fully(self) -> bool:
        """True once an open path joins the top side to the bottom side."""
        return self.connectivity.connected(self.top_sentinel, self.bottom_sentinel)

    def opened_count(self) -> int:
        return self.grid.count_where(is_opened)

    def porosity(self) -> int:
        """Opened cells as an integer percentage of the grid."""
        return 100 * self.opened_count() // self.grid.cell_count

    # ---------------------------------------------------------------- refresh
    def refresh_fill_status(self) -> None:
        """
        Marks every opened cell as filled or not from the current connectivity.

        Only grid statuses change; the union-find structure is left as is
        (apart from path compression in the serial kernel).
        """
        cells = self.grid.buffer
        parent = self.connectivity.parent_array
        if self.parallel_refresh:
            _refresh_parallel(cells, parent, self.top_sentinel)
        else:
            _refresh_serial(cells, parent, self.top_sentinel)


__all__ = ["PercolationSolver", "NEIGHBOURS"]
