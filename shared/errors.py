"""Exception types raised by the heatmap transform and its collaborators.

Every error is a precondition failure: it is raised before any output is
produced and callers are expected to fix their inputs rather than retry.
Each type also derives from the matching builtin so generic handlers
(``except ValueError``) keep working.
"""
from __future__ import annotations


class HeatmapError(Exception):
    """Base class for all heatmap errors."""


class InvalidRange(HeatmapError, ValueError):
    """Percentile bounds are malformed or a clip range has ``low > high``."""


class InvalidWindow(HeatmapError, ValueError):
    """Samples-per-window is not a positive integer."""


class IndexOutOfRange(HeatmapError, IndexError):
    """Duration index outside the table."""


class InvalidDurationEntry(HeatmapError, ValueError):
    """The duration table itself is malformed (programming error)."""


class LabelNotFound(HeatmapError, KeyError):
    """A requested signal label does not exist in the recording."""

    def __init__(self, label: str, available: tuple[str, ...] = ()) -> None:
        self.label = label
        self.available = tuple(available)
        super().__init__(label)

    def __str__(self) -> str:
        if self.available:
            return f"signal {self.label!r} not found; available: {', '.join(self.available)}"
        return f"signal {self.label!r} not found"


class EdfFormatError(HeatmapError, ValueError):
    """The recording file is not a readable EDF file."""


__all__ = [
    "HeatmapError",
    "InvalidRange",
    "InvalidWindow",
    "IndexOutOfRange",
    "InvalidDurationEntry",
    "LabelNotFound",
    "EdfFormatError",
]
