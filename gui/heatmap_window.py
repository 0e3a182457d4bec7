"""Top-level windows for single heatmaps and multi-signal panels."""
from __future__ import annotations

import logging
from typing import List, Optional

import pyqtgraph as pg
from PySide6 import QtCore, QtWidgets

from shared.app_settings import HeatmapSettings
from shared.models import HeatmapBundle, PanelBundle

from .heatmap_plot import HeatmapPlot

logger = logging.getLogger(__name__)


class HeatmapWindow(pg.GraphicsLayoutWidget):
    """One figure for one signal."""

    def __init__(
        self,
        bundle: HeatmapBundle,
        settings: Optional[HeatmapSettings] = None,
        parent: Optional[QtWidgets.QWidget] = None,
    ) -> None:
        super().__init__(parent)
        settings = settings or HeatmapSettings()
        self.setBackground("w")
        self.setWindowTitle(bundle.title)
        plot_item = self.addPlot(row=0, col=0)
        self.plot = HeatmapPlot(plot_item, bundle, show_colorbar=settings.show_colorbar)
        if settings.window_size is not None:
            self.resize(*settings.window_size)


class HeatmapPanelWindow(QtWidgets.QWidget):
    """Title row above one pane per signal; hour ticks only on the first pane."""

    def __init__(
        self,
        panel: PanelBundle,
        settings: Optional[HeatmapSettings] = None,
        parent: Optional[QtWidgets.QWidget] = None,
    ) -> None:
        super().__init__(parent)
        settings = settings or HeatmapSettings()
        self._panel = panel
        self.setWindowTitle(panel.title or "Heatmap panel")
        self.setStyleSheet("background: white;")

        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(4, 4, 4, 4)
        layout.setSpacing(4)

        title = QtWidgets.QLabel(panel.title)
        title.setAlignment(QtCore.Qt.AlignCenter)
        title.setStyleSheet(f"font-weight: bold; font-size: {int(settings.title_font_size)}pt; color: black;")
        title.setVisible(bool(panel.title))
        layout.addWidget(title)

        self._graphics = pg.GraphicsLayoutWidget()
        self._graphics.setBackground("w")
        layout.addWidget(self._graphics, stretch=1)

        self.plots: List[HeatmapPlot] = []
        for col, bundle in enumerate(panel.heatmaps):
            plot_item = self._graphics.addPlot(row=0, col=col)
            self.plots.append(
                HeatmapPlot(
                    plot_item,
                    bundle,
                    show_colorbar=settings.show_colorbar,
                    show_y_axis=(col == 0),
                    font_size=settings.panel_font_size,
                )
            )

        if settings.window_size is not None:
            self.resize(*settings.window_size)

    @property
    def panel(self) -> PanelBundle:
        return self._panel


class QtHeatmapRenderer:
    """HeatmapRenderer that opens one window per heatmap or per panel."""

    def __init__(self, settings: Optional[HeatmapSettings] = None, *, show: bool = True) -> None:
        self._settings = settings or HeatmapSettings()
        self._show = show
        self._windows: List[QtWidgets.QWidget] = []

    @property
    def windows(self) -> List[QtWidgets.QWidget]:
        return list(self._windows)

    def render_heatmap(self, bundle: HeatmapBundle) -> HeatmapWindow:
        window = HeatmapWindow(bundle, self._settings)
        return self._register(window)

    def render_panel(self, panel: PanelBundle) -> HeatmapPanelWindow:
        window = HeatmapPanelWindow(panel, self._settings)
        return self._register(window)

    def _register(self, window: QtWidgets.QWidget) -> QtWidgets.QWidget:
        if self._show:
            window.show()
        self._windows.append(window)
        logger.debug("Opened heatmap window %r", window.windowTitle())
        return window

    def close_all(self) -> None:
        for window in self._windows:
            window.close()
        self._windows.clear()


__all__ = ["HeatmapPanelWindow", "HeatmapWindow", "QtHeatmapRenderer"]
