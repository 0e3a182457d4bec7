from __future__ import annotations

from typing import Optional

import numpy as np
import pyqtgraph as pg
from PySide6 import QtCore, QtGui

from shared.models import HeatmapBundle


def bone_lut(levels: int) -> np.ndarray:
    """
    Grey-blue lookup table with ``levels`` entries, as (levels, 3) uint8.

    Blends a linear grey ramp (7/8) with a reversed black-red-yellow-white
    ramp (1/8), which gives the cool grey tint used for sleep heatmaps.
    """
    m = int(levels)
    if m < 2:
        raise ValueError("levels must be at least 2")
    n = (3 * m) // 8
    hot = np.zeros((m, 3), dtype=np.float64)
    if n > 0:
        ramp = np.arange(1, n + 1, dtype=np.float64) / n
        hot[:n, 0] = ramp
        hot[n:, 0] = 1.0
        hot[n : 2 * n, 1] = ramp
        hot[2 * n :, 1] = 1.0
    else:
        hot[:, 0] = 1.0
        hot[:, 1] = 1.0
    tail = m - 2 * n
    hot[2 * n :, 2] = np.arange(1, tail + 1, dtype=np.float64) / tail
    gray = np.linspace(0.0, 1.0, m)[:, np.newaxis]
    bone = (7.0 * gray + hot[:, ::-1]) / 8.0
    return np.clip(np.round(bone * 255.0), 0, 255).astype(np.uint8)


def bone_colormap(levels: int) -> pg.ColorMap:
    lut = bone_lut(levels)
    return pg.ColorMap(np.linspace(0.0, 1.0, lut.shape[0]), lut)


class HeatmapPlot:
    """
    Draws one HeatmapBundle into a PlotItem.

    Cells are centred on 1-based integer coordinates so tick positions from
    the bundle line up with columns and rows. Row 1 is at the top.
    """

    def __init__(
        self,
        plot_item: pg.PlotItem,
        bundle: HeatmapBundle,
        *,
        show_colorbar: bool = False,
        show_y_axis: bool = True,
        font_size: int = 10,
    ) -> None:
        self._plot_item = plot_item
        self._bundle = bundle
        self._colorbar: Optional[pg.ColorBarItem] = None

        self._image = pg.ImageItem(axisOrder="row-major")
        self._plot_item.addItem(self._image)
        self._plot_item.invertY(True)
        self._plot_item.setMouseEnabled(x=False, y=False)
        self._plot_item.hideButtons()

        self._apply_image(show_colorbar)
        self._apply_axes(show_y_axis, font_size)

    @property
    def bundle(self) -> HeatmapBundle:
        return self._bundle

    @property
    def image_item(self) -> pg.ImageItem:
        return self._image

    def _apply_image(self, show_colorbar: bool) -> None:
        raster = self._bundle.raster
        clip_range = self._bundle.clip_range
        low, high = clip_range.low, clip_range.high
        if high <= low:
            high = low + 1.0

        cmap = bone_colormap(self._bundle.gray_levels)
        self._image.setImage(raster.grid, autoLevels=False, levels=(low, high))
        self._image.setLookupTable(cmap.getLookupTable(nPts=self._bundle.gray_levels))
        self._image.setRect(QtCore.QRectF(0.5, 0.5, float(raster.cols), float(max(raster.rows, 1))))

        if show_colorbar:
            self._colorbar = pg.ColorBarItem(values=(low, high), colorMap=cmap, interactive=False)
            self._colorbar.setImageItem(self._image, insert_in=self._plot_item)

    def _apply_axes(self, show_y_axis: bool, font_size: int) -> None:
        raster = self._bundle.raster
        ticks = self._bundle.ticks
        font = QtGui.QFont()
        font.setPointSize(font_size)
        font.setBold(True)

        self._plot_item.setTitle(self._bundle.title, bold=True)

        bottom = self._plot_item.getAxis("bottom")
        bottom.setTicks([ticks.x_ticks])
        bottom.setStyle(tickFont=font)
        self._plot_item.setLabel("bottom", self._bundle.axis_unit_label)

        left = self._plot_item.getAxis("left")
        if show_y_axis:
            left.setTicks([ticks.y_ticks])
            left.setStyle(tickFont=font)
            self._plot_item.setLabel("left", self._bundle.y_axis_label)
        else:
            left.setTicks([[]])

        self._plot_item.setXRange(0.5, raster.cols + 0.5, padding=0.0)
        self._plot_item.setYRange(0.5, max(raster.rows, 1) + 0.5, padding=0.0)


__all__ = ["HeatmapPlot", "bone_colormap", "bone_lut"]
