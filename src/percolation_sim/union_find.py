"""
Weighted quick-union with path compression.

This module implements the dynamic-connectivity engine used by the
percolation solver. Elements are the integers 0..n-1, fixed at
construction; no insertion or removal happens afterwards.

Key Algorithmic Features:
1.  **Weighted Union:** The root of the smaller tree is always attached under
    the root of the larger one, so tree height stays O(log n).
2.  **Path Halving:** While walking up to the root, every visited node is
    re-pointed at its grandparent, flattening the tree as a side effect of
    ordinary queries.
3.  **Flat Arrays:** `parent` and `size` are plain int64 arrays (one slot per
    element, no node objects) so the hot loops compile with `@numba.njit`.

Together the two heuristics give near-constant amortized cost per operation,
which matters because the solver issues up to four unions per opened cell.
"""

from __future__ import annotations

import numpy as np
from numba import njit

from .errors import IndexOutOfRangeError, InvalidSizeError
from .utils import to_index

###############################################################################
# Kernels
###############################################################################


@njit(cache=True)
def _find(parent: np.ndarray, i: int) -> int:
    """
    Returns the root of `i`, halving the path on the way up.
    Mutates `parent`: never call this from a parallel loop.
    """
    while parent[i] != i:
        parent[i] = parent[parent[i]]
        i = parent[i]
    return i


@njit(cache=True)
def _root(parent: np.ndarray, i: int) -> int:
    """Returns the root of `i` without touching `parent`."""
    # prange hands out unsigned indices; walk a signed copy
    node = np.int64(i)
    while parent[node] != node:
        node = parent[node]
    return node


@njit(cache=True)
def _union(parent: np.ndarray, size: np.ndarray, p: int, q: int) -> bool:
    """
    Merges the sets containing `p` and `q`.
    Returns False if they already share a root, True if two sets were merged.
    On equal sizes the q-side root goes under the p-side root.
    """
    root_p = _find(parent, p)
    root_q = _find(parent, q)
    if root_p == root_q:
        return False

    if size[root_p] < size[root_q]:
        parent[root_p] = root_q
        size[root_q] += size[root_p]
    else:
        parent[root_q] = root_p
        size[root_p] += size[root_q]
    return True


@njit(cache=True)
def _connected(parent: np.ndarray, p: int, q: int) -> bool:
    return _find(parent, p) == _find(parent, q)


###############################################################################
# Public structure
###############################################################################


class DynamicConnectivity:
    """
    Disjoint-set over `n` elements.

    `component_count` starts at `n` and drops by exactly one for every
    union that merges two distinct sets.
    """

    def __init__(self, n: int) -> None:
        if int(n) != n or n <= 0:
            raise InvalidSizeError(f"Number of elements should be positive, got {n}")
        self._n = int(n)
        self._parent = np.arange(self._n, dtype=np.int64)
        self._size = np.ones(self._n, dtype=np.int64)
        self._components = self._n

    def _check(self, i: int) -> int:
        i = to_index(i)
        if not 0 <= i < self._n:
            raise IndexOutOfRangeError(
                f"Element {i} out of range for {self._n} elements"
            )
        return i

    # ------------------------------------------------------------------ public
    def find(self, i: int) -> int:
        """Root of the set containing `i`."""
        return int(_find(self._parent, self._check(i)))

    def union(self, p: int, q: int) -> bool:
        """
        Connects `p` and `q`.

        Returns True if two components were merged, False if the elements
        were already connected (including `p == q`).
        """
        merged = _union(self._parent, self._size, self._check(p), self._check(q))
        if merged:
            self._components -= 1
        return bool(merged)

    def connected(self, p: int, q: int) -> bool:
        return bool(_connected(self._parent, self._check(p), self._check(q)))

    @property
    def component_count(self) -> int:
        return self._components

    def component_size(self, i: int) -> int:
        """Number of elements in the set containing `i`."""
        return int(self._size[self.find(i)])

    def __len__(self) -> int:
        return self._n

    # ------------------------------------------------------------- inspection
    @property
    def parents(self) -> np.ndarray:
        """Copy of the parent array."""
        return self._parent.copy()

    @property
    def sizes(self) -> np.ndarray:
        """Copy of the subtree sizes (only meaningful at roots)."""
        return self._size.copy()

    @property
    def parent_array(self) -> np.ndarray:
        """The live parent array, for kernels that batch read-only queries."""
        return self._parent

    def __repr__(self) -> str:
        return f"DynamicConnectivity(n={self._n}, components={self._components})"


__all__ = ["DynamicConnectivity"]
