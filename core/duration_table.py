"""Selectable heatmap window durations and their x-axis ticks.

Entries are addressed by a 1-based index. The tick values are hand-picked
per entry and are expressed in the entry's own axis unit; they are not
derived from the duration.
"""
from __future__ import annotations

import numbers
from typing import Sequence, Tuple

from shared.errors import IndexOutOfRange, InvalidDurationEntry
from shared.models import AxisUnit, DurationEntry

_SEC = AxisUnit.SECONDS
_MIN = AxisUnit.MINUTES
_HR = AxisUnit.HOURS

# (duration seconds, tick values, unit)
_TABLE_ROWS: Tuple[Tuple[float, Tuple[float, ...], AxisUnit], ...] = (
    (1, (0, 0.25, 0.5, 0.75, 1), _SEC),
    (2, (0, 0.5, 1, 1.5, 2), _SEC),
    (5, (0, 1, 2, 3, 4, 5), _SEC),
    (10, (0, 2, 4, 6, 8, 10), _SEC),
    (15, (0, 3, 6, 9, 12, 15), _SEC),
    (20, (0, 5, 10, 15, 20), _SEC),
    (30, (0, 10, 20, 30), _SEC),
    (60, (0, 15, 30, 45, 60), _SEC),
    (2 * 60, (0, 0.5, 1, 1.5, 2), _MIN),
    (3 * 60, (0, 1, 2, 3), _MIN),
    (5 * 60, (0, 1, 2, 3, 4, 5), _MIN),
    (10 * 60, (0, 2, 4, 6, 8, 10), _MIN),
    (15 * 60, (0, 3, 6, 9, 12, 15), _MIN),
    (20 * 60, (0, 5, 10, 15, 20), _MIN),
    (30 * 60, (0, 10, 20, 30), _MIN),
    (40 * 60, (0, 10, 20, 40), _MIN),
    (45 * 60, (0, 15, 30, 45), _MIN),
    (60 * 60, (0, 15, 30, 45, 60), _MIN),
    (2 * 3600, (0, 0.5, 1, 1.5, 2), _HR),
    (3 * 3600, (0, 1, 2, 3), _HR),
    (4 * 3600, (0, 1, 2, 3, 4), _HR),
    (6 * 3600, (0, 2, 4, 6), _HR),
    (8 * 3600, (0, 2, 4, 6, 8), _HR),
    (12 * 3600, (0, 3, 6, 9, 12), _HR),
    (12 * 3600, (0, 6, 12, 18, 24), _HR),
)

TABLE_SIZE = 25
DEFAULT_DURATION_INDEX = 7  # 30 seconds


def validate_table(table: Sequence[DurationEntry]) -> None:
    """Check size, index contiguity, duration ordering and tick counts."""
    if len(table) != TABLE_SIZE:
        raise InvalidDurationEntry(f"duration table must have {TABLE_SIZE} entries, got {len(table)}")
    previous = 0.0
    for position, entry in enumerate(table, start=1):
        if entry.index != position:
            raise InvalidDurationEntry(f"entry at position {position} has index {entry.index}")
        if entry.duration_seconds < previous:
            raise InvalidDurationEntry(
                f"entry {entry.index} duration {entry.duration_seconds}s is shorter than its predecessor"
            )
        if len(entry.tick_values) < 2:
            raise InvalidDurationEntry(f"entry {entry.index} has fewer than 2 tick values")
        previous = entry.duration_seconds


DURATION_TABLE: Tuple[DurationEntry, ...] = tuple(
    DurationEntry(index=i, duration_seconds=float(seconds), tick_values=ticks, axis_unit=unit)
    for i, (seconds, ticks, unit) in enumerate(_TABLE_ROWS, start=1)
)
validate_table(DURATION_TABLE)


def lookup(index: int) -> DurationEntry:
    """Return the entry for a 1-based index in ``[1, 25]``."""
    if isinstance(index, bool) or not isinstance(index, numbers.Integral):
        raise IndexOutOfRange(f"duration index must be an integer, got {index!r}")
    if not 1 <= index <= len(DURATION_TABLE):
        raise IndexOutOfRange(f"duration index {index} outside [1, {len(DURATION_TABLE)}]")
    return DURATION_TABLE[int(index) - 1]


def durations() -> Tuple[float, ...]:
    """Window durations in seconds, in table order."""
    return tuple(entry.duration_seconds for entry in DURATION_TABLE)


__all__ = [
    "DEFAULT_DURATION_INDEX",
    "DURATION_TABLE",
    "TABLE_SIZE",
    "durations",
    "lookup",
    "validate_table",
]
