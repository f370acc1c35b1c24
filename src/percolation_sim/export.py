"""
Grey-scale image export of grid cell data.

Cells are written as an ASCII PPM (P3) image. Each cell value is mapped
linearly from [min_value, max_value] onto [0, 255] and drawn as an
`upscale x upscale` block of pixels so small grids stay visible.
"""

from __future__ import annotations

import os
from pathlib import Path

import numpy as np

from .grid import CellStatus, Grid

MAX_COLOR_VALUE = 255


def upscale_factor(resolution: int, min_image_size: int = 300) -> int:
    """Pixels per cell needed to reach `min_image_size` pixels."""
    if resolution < min_image_size:
        return max(1, min_image_size // resolution)
    return 1


def to_grey_levels(cells: np.ndarray, min_value: int, max_value: int) -> np.ndarray:
    if max_value <= min_value:
        raise ValueError(f"max_value ({max_value}) must exceed min_value ({min_value})")
    values = np.asarray(cells, dtype=np.int64)
    return MAX_COLOR_VALUE * (values - min_value) // (max_value - min_value)


def write_ppm(
    path: str | os.PathLike[str],
    cells,
    rows: int,
    cols: int,
    min_value: int,
    max_value: int,
    upscale: int = 1,
) -> None:
    """Write flat, row-major cell data to `path` as a grey P3 image."""
    cells = np.asarray(cells)
    if cells.size != rows * cols:
        raise ValueError(f"Expected {rows * cols} cells, got {cells.size}")
    if upscale < 1:
        raise ValueError(f"upscale must be at least 1, got {upscale}")

    grey = to_grey_levels(cells.reshape(rows, cols), min_value, max_value)
    grey = np.repeat(np.repeat(grey, upscale, axis=0), upscale, axis=1)
    height, width = grey.shape

    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with open(out, "w") as fh:
        fh.write("P3\n")
        fh.write(f"{width} {height}\n")
        fh.write(f"{MAX_COLOR_VALUE}\n")
        for pixel_row in grey:
            fh.write("".join(f"{c} {c} {c} " for c in pixel_row))
            fh.write("\n")


def export_grid(
    grid: Grid, path: str | os.PathLike[str], min_image_size: int = 300
) -> None:
    """Closed cells are black, filled cells white, open cells in between."""
    write_ppm(
        path,
        grid.data,
        grid.rows,
        grid.cols,
        int(CellStatus.CLOSED),
        int(CellStatus.OPENED_AND_FILLED),
        upscale=upscale_factor(max(grid.rows, grid.cols), min_image_size),
    )


__all__ = ["upscale_factor", "to_grey_levels", "write_ppm", "export_grid"]
