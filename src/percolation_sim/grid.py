from __future__ import annotations

from enum import IntEnum
from typing import Callable, Tuple

import numpy as np

from .errors import IndexOutOfRangeError, InvalidDimensionError
from .utils import to_index


class CellStatus(IntEnum):
    """Cell state, ordered by increasing openness."""

    CLOSED = 0
    OPENED = 1
    OPENED_AND_FILLED = 2


# One glyph per status, printed twice per cell so cells look square in a terminal.
GLYPHS = ("░", "▒", "█")

Predicate = Callable[[CellStatus], bool]


class Grid:
    """
    A flat, row-major array of cell statuses that behaves like a 2D grid.

    The grid knows nothing about connectivity: it stores one `CellStatus`
    per cell and converts between flat indices and (row, col) pairs.
    Every conversion is bounds-checked; negative indices are rejected
    rather than wrapped around.
    """

    def __init__(self, rows: int, cols: int) -> None:
        if int(rows) != rows or int(cols) != cols or rows <= 0 or cols <= 0:
            raise InvalidDimensionError(
                f"Grid resolution should be positive, got rows={rows}, cols={cols}"
            )
        self._rows = int(rows)
        self._cols = int(cols)
        self._cells = np.full(self._rows * self._cols, int(CellStatus.CLOSED), dtype=np.int8)

    # ------------------------------------------------------------------ shape
    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def cell_count(self) -> int:
        return self._rows * self._cols

    @property
    def data(self) -> np.ndarray:
        """Read-only flat view of the cell statuses."""
        view = self._cells.view()
        view.flags.writeable = False
        return view

    @property
    def buffer(self) -> np.ndarray:
        """Writable flat status array, for kernels that update cells in bulk."""
        return self._cells

    def as_array(self) -> np.ndarray:
        """Read-only (rows, cols) view of the cell statuses."""
        return self.data.reshape(self._rows, self._cols)

    # --------------------------------------------------------------- indexing
    def contains(self, row: int, col: int) -> bool:
        try:
            row, col = to_index(row), to_index(col)
        except IndexOutOfRangeError:
            return False
        return 0 <= row < self._rows and 0 <= col < self._cols

    def to_flat_index(self, row: int, col: int) -> int:
        if not self.contains(row, col):
            raise IndexOutOfRangeError(
                f"Cell ({row}, {col}) out of range for a {self._rows}x{self._cols} grid"
            )
        return to_index(row) * self._cols + to_index(col)

    def to_row_col(self, flat_index: int) -> Tuple[int, int]:
        row, col = divmod(self._check_flat(flat_index), self._cols)
        return row, col

    def horizontal_slice(self, row: int) -> np.ndarray:
        """Flat indices of every cell in `row`, left to right."""
        start = self.to_flat_index(row, 0)
        return np.arange(start, start + self._cols, dtype=np.int64)

    def _check_flat(self, flat_index: int) -> int:
        flat_index = to_index(flat_index)
        if not 0 <= flat_index < self.cell_count:
            raise IndexOutOfRangeError(
                f"Index {flat_index} out of range for {self.cell_count} cells"
            )
        return flat_index

    def _resolve(self, key) -> int:
        if isinstance(key, tuple):
            if len(key) != 2:
                raise TypeError(f"Expected (row, col), got {key!r}")
            return self.to_flat_index(*key)
        return self._check_flat(key)

    def __getitem__(self, key) -> CellStatus:
        return CellStatus(int(self._cells[self._resolve(key)]))

    def __setitem__(self, key, value) -> None:
        self._cells[self._resolve(key)] = int(CellStatus(value))

    def __len__(self) -> int:
        return self.cell_count

    # ---------------------------------------------------------------- queries
    def _mask(self, predicate: Predicate) -> np.ndarray:
        # one predicate call per status
        mask = np.zeros(self._cells.shape, dtype=bool)
        for status in CellStatus:
            if predicate(status):
                mask |= self._cells == status
        return mask

    def count_where(self, predicate: Predicate) -> int:
        """Number of cells whose status satisfies `predicate(status)`."""
        return int(np.count_nonzero(self._mask(predicate)))

    def indices_where(self, predicate: Predicate) -> np.ndarray:
        """Flat indices (ascending) of cells whose status satisfies `predicate(status)`."""
        return np.flatnonzero(self._mask(predicate))

    # -------------------------------------------------------------- rendering
    def render(self) -> str:
        lines = []
        for row in self._cells.reshape(self._rows, self._cols):
            lines.append("".join(GLYPHS[value] * 2 for value in row))
        return "\n".join(lines) + "\n"

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"Grid(rows={self._rows}, cols={self._cols})"


def is_closed(status: CellStatus) -> bool:
    return status == CellStatus.CLOSED


def is_opened(status: CellStatus) -> bool:
    """Opened, filled or not."""
    return status > CellStatus.CLOSED


def is_filled(status: CellStatus) -> bool:
    return status == CellStatus.OPENED_AND_FILLED


__all__ = ["CellStatus", "Grid", "is_closed", "is_opened", "is_filled", "GLYPHS"]
