from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property
from typing import Dict, Iterable, Optional, Tuple

import numpy as np

from .errors import InvalidDurationEntry, InvalidRange, LabelNotFound

logger = logging.getLogger(__name__)


def _freeze_array(array: np.ndarray, *, ndim: int | None = None, dtype=np.float64) -> np.ndarray:
    """Return a read-only, C-contiguous copy of `array`, validating dimensions."""
    arr = np.array(array, dtype=dtype, copy=True, order="C")
    if ndim is not None and arr.ndim != ndim:
        raise ValueError(f"array must be {ndim}D, got {arr.ndim}D")
    arr.setflags(write=False)
    return arr


def validate_percentiles(percentile_low: float, percentile_high: float) -> None:
    """Raise InvalidRange unless 0 <= low < high <= 100 (all finite)."""
    try:
        low = float(percentile_low)
        high = float(percentile_high)
    except (TypeError, ValueError):
        raise InvalidRange(
            f"percentiles must be numbers, got {percentile_low!r} and {percentile_high!r}"
        ) from None
    if not (math.isfinite(low) and math.isfinite(high)):
        raise InvalidRange("percentiles must be finite")
    if not (0.0 <= low <= 100.0 and 0.0 <= high <= 100.0):
        raise InvalidRange(f"percentiles must lie within [0, 100], got ({low}, {high})")
    if low >= high:
        raise InvalidRange(f"percentile_low ({low}) must be below percentile_high ({high})")


def build_label_index(labels: Iterable[str]) -> Dict[str, int]:
    """Map each signal label to its position; the first occurrence of a duplicate wins."""
    index: Dict[str, int] = {}
    for position, label in enumerate(labels):
        if label in index:
            logger.warning(
                "Duplicate signal label %r at position %d; keeping position %d",
                label,
                position,
                index[label],
            )
            continue
        index[label] = position
    return index


# ----------------------------
# Recording metadata / signals
# ----------------------------

@dataclass(frozen=True)
class RecordingHeader:
    """Recording-level header fields supplied by the loader."""

    record_count: int
    record_duration_seconds: float
    signal_count: int = 0
    patient_id: str = ""
    start_date: str = ""
    start_time: str = ""

    def __post_init__(self) -> None:
        if self.record_count < 0:
            raise ValueError("record_count must be non-negative")
        if not math.isfinite(self.record_duration_seconds) or self.record_duration_seconds <= 0:
            raise ValueError("record_duration_seconds must be positive")
        if self.signal_count < 0:
            raise ValueError("signal_count must be non-negative")

    @property
    def duration_seconds(self) -> float:
        return self.record_count * self.record_duration_seconds


@dataclass(frozen=True)
class SignalHeader:
    """Per-signal header fields supplied by the loader."""

    label: str
    samples_per_record: int
    physical_dimension: str = ""
    physical_min: float = -1.0
    physical_max: float = 1.0
    digital_min: int = -32768
    digital_max: int = 32767
    transducer: str = ""
    prefiltering: str = ""

    def __post_init__(self) -> None:
        if self.samples_per_record <= 0:
            raise ValueError("samples_per_record must be positive")


@dataclass(frozen=True)
class Signal:
    """One decoded channel of one recording. Immutable once loaded."""

    label: str
    samples: np.ndarray = field(repr=False)
    samples_per_record: int
    record_duration_seconds: float

    def __post_init__(self) -> None:
        if self.samples_per_record <= 0:
            raise ValueError("samples_per_record must be positive")
        if not math.isfinite(self.record_duration_seconds) or self.record_duration_seconds <= 0:
            raise ValueError("record_duration_seconds must be positive")
        object.__setattr__(self, "samples", _freeze_array(self.samples, ndim=1))

    @property
    def samples_per_second(self) -> float:
        return self.samples_per_record / self.record_duration_seconds

    @property
    def n_samples(self) -> int:
        return int(self.samples.shape[0])

    @property
    def duration_seconds(self) -> float:
        return self.n_samples / self.samples_per_second


@dataclass(frozen=True)
class Recording:
    """Header plus decoded signals, in file order."""

    header: RecordingHeader
    signal_headers: Tuple[SignalHeader, ...]
    signals: Tuple[Signal, ...]
    source: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "signal_headers", tuple(self.signal_headers))
        object.__setattr__(self, "signals", tuple(self.signals))
        if len(self.signal_headers) != len(self.signals):
            raise ValueError("signal_headers and signals must have the same length")

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(sig.label for sig in self.signals)

    @cached_property
    def label_index(self) -> Dict[str, int]:
        return build_label_index(self.labels)

    def index_of(self, label: str) -> int:
        try:
            return self.label_index[label]
        except KeyError:
            raise LabelNotFound(label, self.labels) from None

    def signal(self, label: str) -> Signal:
        return self.signals[self.index_of(label)]


# ----------------------------
# Duration table
# ----------------------------

class AxisUnit(str, Enum):
    SECONDS = "seconds"
    MINUTES = "minutes"
    HOURS = "hours"

    @property
    def axis_label(self) -> str:
        return _AXIS_LABELS[self]


_AXIS_LABELS = {
    AxisUnit.SECONDS: "Time (sec.)",
    AxisUnit.MINUTES: "Time (min.)",
    AxisUnit.HOURS: "Time (hr.)",
}


@dataclass(frozen=True)
class DurationEntry:
    """One selectable window duration and the x-axis ticks drawn for it."""

    index: int
    duration_seconds: float
    tick_values: Tuple[float, ...]
    axis_unit: AxisUnit

    def __post_init__(self) -> None:
        object.__setattr__(self, "tick_values", tuple(self.tick_values))
        object.__setattr__(self, "axis_unit", AxisUnit(self.axis_unit))
        if len(self.tick_values) < 2:
            raise InvalidDurationEntry(
                f"duration entry {self.index} needs at least 2 tick values, got {len(self.tick_values)}"
            )
        if self.duration_seconds <= 0:
            raise InvalidDurationEntry(f"duration entry {self.index} must have a positive duration")

    @property
    def axis_label(self) -> str:
        return self.axis_unit.axis_label


# ----------------------------
# Transform outputs
# ----------------------------

@dataclass(frozen=True)
class ClipRange:
    low: float
    high: float

    def __post_init__(self) -> None:
        if math.isnan(self.low) or math.isnan(self.high):
            raise InvalidRange("clip range bounds must not be NaN")
        if self.low > self.high:
            raise InvalidRange(f"clip range low ({self.low}) exceeds high ({self.high})")

    @property
    def is_degenerate(self) -> bool:
        return self.low == self.high


@dataclass(frozen=True)
class Raster:
    """Row-per-window grid; cells past the last real sample are zero."""

    grid: np.ndarray = field(repr=False)
    rows: int
    cols: int
    samples_in_last_row: int

    def __post_init__(self) -> None:
        if self.cols < 1:
            raise ValueError("cols must be positive")
        if self.rows < 0:
            raise ValueError("rows must be non-negative")
        grid = _freeze_array(self.grid, ndim=2)
        if grid.shape != (self.rows, self.cols):
            raise ValueError(f"grid shape {grid.shape} does not match ({self.rows}, {self.cols})")
        if self.rows == 0:
            if self.samples_in_last_row != 0:
                raise ValueError("an empty raster has no samples in its last row")
        elif not 1 <= self.samples_in_last_row <= self.cols:
            raise ValueError("samples_in_last_row must be within [1, cols]")
        object.__setattr__(self, "grid", grid)

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.rows, self.cols)

    @property
    def n_samples(self) -> int:
        if self.rows == 0:
            return 0
        return (self.rows - 1) * self.cols + self.samples_in_last_row

    @property
    def padding(self) -> int:
        if self.rows == 0:
            return 0
        return self.cols - self.samples_in_last_row

    def samples(self) -> np.ndarray:
        """Flatten back to the original sample order, dropping the padding."""
        return self.grid.reshape(-1)[: self.n_samples].copy()


@dataclass(frozen=True)
class TickSet:
    x_positions: Tuple[float, ...]
    x_labels: Tuple[str, ...]
    y_positions: Tuple[float, ...]
    y_labels: Tuple[str, ...]

    def __post_init__(self) -> None:
        for name in ("x_positions", "x_labels", "y_positions", "y_labels"):
            object.__setattr__(self, name, tuple(getattr(self, name)))
        if len(self.x_positions) != len(self.x_labels):
            raise ValueError("x_positions and x_labels must have the same length")
        if len(self.y_positions) != len(self.y_labels):
            raise ValueError("y_positions and y_labels must have the same length")

    @property
    def x_ticks(self) -> list[tuple[float, str]]:
        return list(zip(self.x_positions, self.x_labels))

    @property
    def y_ticks(self) -> list[tuple[float, str]]:
        return list(zip(self.y_positions, self.y_labels))


@dataclass(frozen=True)
class HeatmapBundle:
    """Everything a renderer needs to draw one signal."""

    label: str
    title: str
    raster: Raster
    ticks: TickSet
    axis_unit_label: str
    gray_levels: int
    clip_range: ClipRange
    entry: DurationEntry
    y_axis_label: str = "Time(Hours)"

    def __post_init__(self) -> None:
        if self.gray_levels < 2:
            raise ValueError("gray_levels must be at least 2")


@dataclass(frozen=True)
class PanelBundle:
    """Heatmaps for several signals sharing one title."""

    title: str
    heatmaps: Tuple[HeatmapBundle, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "heatmaps", tuple(self.heatmaps))
        if not self.heatmaps:
            raise ValueError("a panel needs at least one heatmap")

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(h.label for h in self.heatmaps)


__all__ = [
    "AxisUnit",
    "ClipRange",
    "DurationEntry",
    "HeatmapBundle",
    "PanelBundle",
    "Raster",
    "Recording",
    "RecordingHeader",
    "Signal",
    "SignalHeader",
    "TickSet",
    "build_label_index",
    "validate_percentiles",
]
