"""
Unit tests for the percolation solver.
"""

import numpy as np
import pytest

from percolation_sim import (
    CellStatus,
    Grid,
    IndexOutOfRangeError,
    NoClosedCellsRemainingError,
    PercolationSolver,
)
from percolation_sim.grid import is_opened


def make_solver(rows, cols, seed=0, parallel=False):
    return PercolationSolver(
        Grid(rows, cols), parallel_refresh=parallel, rng=np.random.default_rng(seed)
    )


def test_sentinels_and_connectivity_size():
    solver = make_solver(3, 4)
    assert solver.top_sentinel == 12
    assert solver.bottom_sentinel == 13
    assert len(solver.connectivity) == 14
    assert solver.connectivity.component_count == 14
    assert not solver.percolates_fully()


def test_single_cell_grid_percolates_after_one_opening():
    solver = make_solver(1, 1)
    assert solver.open_cell(0, 0)
    assert solver.percolates_fully()


def test_single_row_grid_percolates_per_cell():
    solver = make_solver(1, 3)
    solver.open_cell(0, 2)
    assert solver.percolates_fully()
    assert solver.is_percolating_at(0, 2)
    assert not solver.is_percolating_at(0, 0)


def test_middle_column_percolates():
    solver = make_solver(3, 3)
    for row in range(3):
        solver.open_cell(row, 1)
    assert solver.percolates_fully()


def test_gap_in_column_does_not_percolate():
    solver = make_solver(3, 3)
    solver.open_cell(0, 1)
    solver.open_cell(2, 1)
    assert not solver.percolates_fully()
    assert solver.is_percolating_at(0, 1)
    assert not solver.is_percolating_at(2, 1)


def test_open_cell_is_idempotent():
    solver = make_solver(3, 3)
    assert solver.open_cell(1, 1) is True
    state = solver.grid.data.copy()
    components = solver.connectivity.component_count

    assert solver.open_cell(1, 1) is False
    np.testing.assert_array_equal(solver.grid.data, state)
    assert solver.connectivity.component_count == components
    assert solver.is_open(1, 1)


def test_open_cell_out_of_range():
    solver = make_solver(2, 2)
    with pytest.raises(IndexOutOfRangeError):
        solver.open_cell(2, 0)
    with pytest.raises(IndexOutOfRangeError):
        solver.open_cell(0, -1)


def test_open_cell_unions_open_neighbours():
    solver = make_solver(3, 3)
    solver.open_cell(1, 0)
    solver.open_cell(1, 2)
    assert not solver.connectivity.connected(3, 5)
    solver.open_cell(1, 1)
    assert solver.connectivity.connected(3, 5)

    solver.open_cell(0, 0)
    assert solver.connectivity.connected(0, 3)
    assert not solver.percolates_fully()
    solver.open_cell(2, 2)
    assert solver.percolates_fully()


def test_diagonal_cells_are_not_neighbours():
    solver = make_solver(3, 3)
    solver.open_cell(0, 0)
    solver.open_cell(1, 1)
    solver.open_cell(2, 2)
    assert not solver.connectivity.connected(0, 4)
    assert not solver.percolates_fully()


def test_refresh_fill_status():
    solver = make_solver(3, 3)
    solver.open_cell(0, 0)
    solver.open_cell(1, 0)
    solver.open_cell(2, 2)
    solver.refresh_fill_status()

    grid = solver.grid
    assert grid[0, 0] == CellStatus.OPENED_AND_FILLED
    assert grid[1, 0] == CellStatus.OPENED_AND_FILLED
    assert grid[2, 2] == CellStatus.OPENED
    assert grid[1, 1] == CellStatus.CLOSED

    # refreshing again without openings changes nothing
    before = grid.data.copy()
    solver.refresh_fill_status()
    np.testing.assert_array_equal(grid.data, before)


def test_refresh_does_not_change_connectivity():
    solver = make_solver(4, 4)
    for row, col in [(0, 0), (1, 0), (1, 1), (3, 3), (2, 3)]:
        solver.open_cell(row, col)
    components = solver.connectivity.component_count
    solver.refresh_fill_status()
    assert solver.connectivity.component_count == components


def test_filled_cell_is_open_after_refresh():
    solver = make_solver(2, 2)
    solver.open_cell(0, 1)
    solver.refresh_fill_status()
    assert solver.is_open(0, 1)
    assert solver.open_cell(0, 1) is False


@pytest.mark.parametrize("seed", [0, 1, 2])
def test_parallel_refresh_matches_serial(seed):
    serial = make_solver(12, 9, seed=seed)
    parallel = make_solver(12, 9, seed=seed, parallel=True)
    for _ in range(60):
        a = serial.open_random_cell()
        b = parallel.open_random_cell()
        assert a == b
        serial.refresh_fill_status()
        parallel.refresh_fill_status()
        np.testing.assert_array_equal(serial.grid.data, parallel.grid.data)
        assert serial.percolates_fully() == parallel.percolates_fully()


def test_batched_refresh_equals_incremental_refresh():
    incremental = make_solver(8, 8, seed=5)
    batched = make_solver(8, 8, seed=5)
    for _ in range(40):
        incremental.open_random_cell()
        incremental.refresh_fill_status()
        batched.open_random_cell()
    batched.refresh_fill_status()
    np.testing.assert_array_equal(incremental.grid.data, batched.grid.data)


def test_open_random_cell_restricted_opens_new_cells():
    solver = make_solver(4, 5, seed=3)
    opened = set()
    for i in range(20):
        row, col = solver.open_random_cell(restrict_to_closed=True)
        assert (row, col) not in opened
        opened.add((row, col))
        assert solver.opened_count() == i + 1
    assert solver.percolates_fully()

    with pytest.raises(NoClosedCellsRemainingError):
        solver.open_random_cell(restrict_to_closed=True)


def test_open_random_cell_unrestricted_can_repeat():
    solver = make_solver(2, 2, seed=11)
    picks = [solver.open_random_cell(restrict_to_closed=False) for _ in range(30)]
    for row, col in picks:
        assert solver.grid.contains(row, col)
    assert len(set(picks)) < len(picks)
    assert solver.opened_count() == len(set(picks))


def test_seeded_rng_is_reproducible():
    a = make_solver(6, 6, seed=42)
    b = make_solver(6, 6, seed=42)
    assert [a.open_random_cell() for _ in range(20)] == [
        b.open_random_cell() for _ in range(20)
    ]


def test_percolation_is_monotonic():
    solver = make_solver(10, 10, seed=9)
    seen = False
    while solver.grid.count_where(lambda v: v == CellStatus.CLOSED):
        solver.open_random_cell()
        now = solver.percolates_fully()
        if seen:
            assert now
        seen = seen or now
    assert seen
    assert solver.opened_count() == 100
    assert solver.porosity() == 100


def test_porosity_is_integer_percentage():
    solver = make_solver(3, 3)
    solver.open_cell(0, 0)
    solver.open_cell(0, 1)
    assert solver.opened_count() == solver.grid.count_where(is_opened) == 2
    assert solver.porosity() == 22


def test_verbose_prints_opened_cell(capsys):
    solver = PercolationSolver(Grid(1, 1), rng=np.random.default_rng(0), verbose=True)
    solver.open_random_cell()
    assert "Open a cell [0, 0]" in capsys.readouterr().out


def test_parallel_refresh_marks_filled_cells():
    solver = make_solver(3, 3, parallel=True)
    solver.open_cell(0, 1)
    solver.open_cell(2, 2)
    solver.refresh_fill_status()
    assert solver.grid[0, 1] == CellStatus.OPENED_AND_FILLED
    assert solver.grid[2, 2] == CellStatus.OPENED
    assert solver.grid[1, 1] == CellStatus.CLOSED


@pytest.mark.parametrize("idx", [9, 10, -1, 0.5])
def test_is_percolating_at_cell_rejects_non_cells(idx):
    """Sentinel indices and invalid values are not grid cells."""
    solver = make_solver(3, 3)
    solver.open_cell(0, 0)
    with pytest.raises(IndexOutOfRangeError):
        solver.is_percolating_at_cell(idx)
    assert solver.is_percolating_at_cell(0)
