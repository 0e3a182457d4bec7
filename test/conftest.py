from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
ROOT_STR = str(ROOT)
if ROOT_STR not in sys.path:
    sys.path.insert(0, ROOT_STR)

from shared.app_settings import HeatmapSettings  # noqa: E402
from test.fixtures.signal_generators import make_ramp, make_recording  # noqa: E402


class RecordingRenderer:
    """Renderer double that records every bundle handed to it."""

    def __init__(self) -> None:
        self.heatmaps = []
        self.panels = []

    def render_heatmap(self, bundle):
        self.heatmaps.append(bundle)
        return ("heatmap", bundle.label)

    def render_panel(self, panel):
        self.panels.append(panel)
        return ("panel", panel.title)


@pytest.fixture
def renderer() -> RecordingRenderer:
    return RecordingRenderer()


@pytest.fixture
def one_second_settings() -> HeatmapSettings:
    """1 s windows, so a 10 Hz signal rasterises into 10 columns."""
    return HeatmapSettings(duration_index=1)


@pytest.fixture
def three_channel_recording():
    """Three 10 Hz channels of 25 samples each (2.5 s)."""
    return make_recording(
        {
            "EEG Fpz-Cz": make_ramp(25),
            "EOG horizontal": make_ramp(25, start=100.0),
            "EMG submental": -make_ramp(25),
        }
    )
