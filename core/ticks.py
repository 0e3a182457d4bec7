"""Axis ticks for a heatmap raster.

Positions use 1-based cell addressing: column 1 is the first sample of a
window and row 1 is the first window of the recording.
"""
from __future__ import annotations

import math
from typing import Sequence, Tuple

import numpy as np

from shared.errors import InvalidDurationEntry
from shared.models import DurationEntry, Raster, TickSet

SECONDS_PER_HOUR = 3600.0
_EPS = 1e-9


def format_tick(value: float) -> str:
    """Format a tick value as a plain number ("0", "0.25", "10")."""
    return f"{float(value):g}"


def x_ticks(entry: DurationEntry, cols: int) -> Tuple[Tuple[float, ...], Tuple[str, ...]]:
    """Evenly spaced positions across ``[1, cols]``, one per tick value of ``entry``."""
    values: Sequence[float] = entry.tick_values
    n = len(values)
    if n < 2:
        raise InvalidDurationEntry(f"duration entry {entry.index} needs at least 2 tick values")
    if cols < 1:
        raise ValueError("cols must be positive")
    positions = np.linspace(0.0, float(cols), n)
    positions[0] = 1.0
    return tuple(float(p) for p in positions), tuple(format_tick(v) for v in values)


def y_ticks(duration_seconds: float, rows: int) -> Tuple[Tuple[float, ...], Tuple[str, ...]]:
    """Hourly ticks down the rows: positions ``1, 1 + r, 1 + 2r, ...`` with ``r`` rows per hour."""
    if duration_seconds <= 0:
        raise ValueError("duration_seconds must be positive")
    rows_per_hour = SECONDS_PER_HOUR / float(duration_seconds)
    if rows < 1:
        return (1.0,), ("0",)
    count = int(math.floor((rows - 1) / rows_per_hour + _EPS)) + 1
    positions = tuple(min(1.0 + k * rows_per_hour, float(rows)) for k in range(count))
    labels = tuple(str(k) for k in range(count))
    return positions, labels


def tick_set(entry: DurationEntry, raster: Raster) -> TickSet:
    x_pos, x_lab = x_ticks(entry, raster.cols)
    y_pos, y_lab = y_ticks(entry.duration_seconds, raster.rows)
    return TickSet(x_positions=x_pos, x_labels=x_lab, y_positions=y_pos, y_labels=y_lab)


__all__ = ["format_tick", "tick_set", "x_ticks", "y_ticks"]
