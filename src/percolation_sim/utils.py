# src/percolation_sim/utils.py
from __future__ import annotations

import json
import operator
import os
import time
from pathlib import Path
from typing import Any, Dict, Optional

import numpy as np

from .errors import IndexOutOfRangeError

try:  # Python 3.11+
    import tomllib
except ModuleNotFoundError:  # pragma: no cover
    tomllib = None  # type: ignore


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Random source for the solver; `None` seeds from OS entropy."""
    return np.random.default_rng(seed)


def to_index(value) -> int:
    """
    `value` as a plain int index.
    Floats and other non-integers raise instead of being truncated.
    """
    try:
        return operator.index(value)
    except TypeError:
        raise IndexOutOfRangeError(f"Index {value!r} is not an integer") from None


class Stopwatch:
    """Wall-clock timer started on construction."""

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self._start = time.perf_counter()

    def elapsed(self) -> float:
        """Seconds since construction or the last reset."""
        return time.perf_counter() - self._start


def load_params(path: str | os.PathLike[str]) -> Dict[str, Any]:
    """
    Load simulation parameters from JSON or TOML.
    """
    path = str(path)
    with open(path, "rb") as fh:
        data = fh.read()
    suffix = Path(path).suffix.lower()
    if suffix in {".json", ""}:
        return json.loads(data.decode("utf-8"))
    if suffix in {".toml", ".tml"}:
        if tomllib is None:
            raise RuntimeError("tomllib is unavailable; cannot parse TOML files")
        return tomllib.loads(data.decode("utf-8"))
    raise ValueError(f"Unsupported parameter file format: {suffix}")
