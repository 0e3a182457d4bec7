"""Core signal-to-raster transform and per-recording orchestration."""

from .clipping import clip, compute_range
from .duration_table import DEFAULT_DURATION_INDEX, DURATION_TABLE, durations, lookup, validate_table
from .heatmap_view import (
    HeatmapRenderer,
    MultiRasterLayout,
    RasterView,
    build_heatmap,
    resolve_signals,
)
from .raster import build, samples_per_window
from .ticks import tick_set, x_ticks, y_ticks
from shared.models import ClipRange, DurationEntry, HeatmapBundle, PanelBundle, Raster, TickSet

__all__ = [
    "ClipRange",
    "DurationEntry",
    "HeatmapBundle",
    "PanelBundle",
    "Raster",
    "TickSet",
    "DEFAULT_DURATION_INDEX",
    "DURATION_TABLE",
    "durations",
    "lookup",
    "validate_table",
    "compute_range",
    "clip",
    "build",
    "samples_per_window",
    "x_ticks",
    "y_ticks",
    "tick_set",
    "HeatmapRenderer",
    "RasterView",
    "MultiRasterLayout",
    "build_heatmap",
    "resolve_signals",
]
