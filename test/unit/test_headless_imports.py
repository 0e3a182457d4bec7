"""Verify core/shared/recording modules are importable without PySide6.

The transform and the loader must run in scripts and tests with no Qt installed.
"""
from __future__ import annotations

import sys

import numpy as np
import pytest


def _forget(monkeypatch, *prefixes: str) -> None:
    for name in [k for k in sys.modules if k.split(".")[0] in prefixes]:
        monkeypatch.delitem(sys.modules, name, raising=False)


@pytest.fixture
def no_qt(monkeypatch):
    _forget(monkeypatch, "core", "shared", "recording")
    monkeypatch.setitem(sys.modules, "PySide6", None)
    monkeypatch.setitem(sys.modules, "PySide6.QtCore", None)
    monkeypatch.setitem(sys.modules, "PySide6.QtWidgets", None)
    monkeypatch.setitem(sys.modules, "pyqtgraph", None)


class TestHeadlessImports:
    """Test that non-GUI packages can be imported without PySide6."""

    def test_core_headless_import(self, no_qt):
        from core import MultiRasterLayout, RasterView, build, compute_range

        assert RasterView is not None
        assert MultiRasterLayout is not None
        assert build is not None
        assert compute_range is not None

    def test_settings_store_works_headless(self, no_qt):
        from shared.app_settings import HeatmapSettingsStore

        store = HeatmapSettingsStore()
        assert store.get().duration_index == 7
        assert store.update(duration_index=8).duration_index == 8

    def test_loader_headless_import(self, no_qt):
        from recording.edf_loader import load_edf

        assert load_edf is not None

    def test_transform_runs_headless(self, no_qt):
        from core.heatmap_view import build_heatmap
        from shared.app_settings import HeatmapSettings
        from shared.models import Signal

        signal = Signal(label="EEG", samples=np.arange(25.0), samples_per_record=10, record_duration_seconds=1.0)
        bundle = build_heatmap(signal, HeatmapSettings(duration_index=1))
        assert bundle.raster.shape == (3, 10)
