"""Exceptions raised by the percolation core."""

from __future__ import annotations


class PercolationError(Exception):
    """Base class for all percolation_sim errors."""


class InvalidDimensionError(PercolationError, ValueError):
    """Grid created with a non-positive number of rows or columns."""


class InvalidSizeError(PercolationError, ValueError):
    """Disjoint-set created with a non-positive number of elements."""


class IndexOutOfRangeError(PercolationError, IndexError):
    """A cell or element index fell outside the valid range."""


class NoClosedCellsRemainingError(PercolationError, RuntimeError):
    """Random opening requested on a grid that is already fully open."""


__all__ = [
    "PercolationError",
    "InvalidDimensionError",
    "InvalidSizeError",
    "IndexOutOfRangeError",
    "NoClosedCellsRemainingError",
]
