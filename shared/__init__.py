"""
Shared data structures available to the transform core, the loader and the GUI.
"""

from .app_settings import HeatmapSettings, HeatmapSettingsStore
from .errors import (
    EdfFormatError,
    HeatmapError,
    IndexOutOfRange,
    InvalidDurationEntry,
    InvalidRange,
    InvalidWindow,
    LabelNotFound,
)
from .models import (
    AxisUnit,
    ClipRange,
    DurationEntry,
    HeatmapBundle,
    PanelBundle,
    Raster,
    Recording,
    RecordingHeader,
    Signal,
    SignalHeader,
    TickSet,
)

__all__ = [
    "AxisUnit",
    "ClipRange",
    "DurationEntry",
    "EdfFormatError",
    "HeatmapBundle",
    "HeatmapError",
    "HeatmapSettings",
    "HeatmapSettingsStore",
    "IndexOutOfRange",
    "InvalidDurationEntry",
    "InvalidRange",
    "InvalidWindow",
    "LabelNotFound",
    "PanelBundle",
    "Raster",
    "Recording",
    "RecordingHeader",
    "Signal",
    "SignalHeader",
    "TickSet",
]
