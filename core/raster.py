"""Fold a flat sample sequence into a row-per-window raster.

Rows hold consecutive windows in time order. When the signal length is not
a multiple of the window, the final row is left-aligned and the cells after
the last real sample are zero. Data is never wrapped into the tail and never
cropped, so the grid stays rectangular and every cell belongs to its own
window.
"""
from __future__ import annotations

import math
import numbers

import numpy as np
from numpy.typing import ArrayLike

from shared.errors import InvalidWindow
from shared.models import DurationEntry, Raster, Signal

# Relative tolerance when converting a duration to a whole number of samples.
_WINDOW_TOLERANCE = 1e-9


def _check_window(samples_per_window) -> int:
    if isinstance(samples_per_window, bool):
        raise InvalidWindow("samples_per_window must be an integer, got a bool")
    if isinstance(samples_per_window, numbers.Integral):
        cols = int(samples_per_window)
    elif isinstance(samples_per_window, numbers.Real) and float(samples_per_window).is_integer():
        cols = int(samples_per_window)
    else:
        raise InvalidWindow(f"samples_per_window must be a whole number, got {samples_per_window!r}")
    if cols < 1:
        raise InvalidWindow(f"samples_per_window must be at least 1, got {cols}")
    return cols


def build(samples: ArrayLike, samples_per_window: int) -> Raster:
    """
    Arrange ``samples`` into ``ceil(len / samples_per_window)`` rows.

    Parameters
    ----------
    samples:
        1-D array-like of (already clipped) samples.
    samples_per_window:
        Number of samples per row; must be a positive whole number.

    Returns
    -------
    Raster
        Grid of shape ``(rows, samples_per_window)`` with a zero-padded final row.
    """
    cols = _check_window(samples_per_window)
    arr = np.asarray(samples, dtype=np.float64)
    if arr.ndim != 1:
        raise ValueError(f"samples must be 1-D, got shape {arr.shape}")

    n = arr.shape[0]
    rows = -(-n // cols)
    grid = np.zeros((rows, cols), dtype=np.float64)
    if rows == 0:
        return Raster(grid=grid, rows=0, cols=cols, samples_in_last_row=0)

    full = (rows - 1) * cols
    grid[: rows - 1, :] = arr[:full].reshape(rows - 1, cols)
    samples_in_last_row = n - full
    grid[rows - 1, :samples_in_last_row] = arr[full:]
    return Raster(grid=grid, rows=rows, cols=cols, samples_in_last_row=samples_in_last_row)


def samples_per_window(entry: DurationEntry, signal: Signal) -> int:
    """Number of samples of ``signal`` covered by one window of ``entry``."""
    exact = entry.duration_seconds * signal.samples_per_record / signal.record_duration_seconds
    cols = round(exact)
    if cols < 1 or not math.isclose(exact, cols, rel_tol=_WINDOW_TOLERANCE):
        raise InvalidWindow(
            f"{entry.duration_seconds:g}s at {signal.samples_per_second:g} Hz is {exact:g} samples, "
            "not a positive whole number"
        )
    return int(cols)


__all__ = ["build", "samples_per_window"]
