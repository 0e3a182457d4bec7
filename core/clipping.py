"""Percentile-based clipping applied before a signal is rasterised.

Bounding outliers to a percentile range keeps a few extreme samples from
washing out the contrast of the whole heatmap.
"""
from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike

from shared.errors import InvalidRange
from shared.models import ClipRange, validate_percentiles


def _to_1d_array(samples: ArrayLike) -> np.ndarray:
    arr = np.asarray(samples, dtype=np.float64)
    if arr.ndim != 1:
        raise ValueError(f"samples must be 1-D, got shape {arr.shape}")
    return arr


def compute_range(samples: ArrayLike, percentile_low: float, percentile_high: float) -> ClipRange:
    """
    Compute the clip bounds for a sample sequence.

    Parameters
    ----------
    samples:
        1-D array-like of samples.
    percentile_low, percentile_high:
        Percentiles in ``[0, 100]`` with ``percentile_low < percentile_high``.

    Returns
    -------
    ClipRange
        Linear-interpolation percentiles of the full sequence. A very narrow
        distribution yields a degenerate range (``low == high``).
    """
    validate_percentiles(percentile_low, percentile_high)
    arr = _to_1d_array(samples)
    if arr.size == 0:
        raise InvalidRange("cannot compute a clip range from an empty signal")
    low, high = np.percentile(arr, [float(percentile_low), float(percentile_high)], method="linear")
    # Interpolation rounding can leave low a hair above high on flat data.
    low, high = float(low), float(high)
    if low > high:
        low = high
    return ClipRange(low=low, high=high)


def clip(samples: ArrayLike, clip_range: ClipRange) -> np.ndarray:
    """Return a new array with every value bounded to ``[clip_range.low, clip_range.high]``."""
    arr = _to_1d_array(samples)
    return np.clip(arr, clip_range.low, clip_range.high)


__all__ = ["clip", "compute_range"]
