__all__ = [
    "HeatmapPanelWindow",
    "HeatmapPlot",
    "HeatmapWindow",
    "QtHeatmapRenderer",
    "export_views",
    "export_widget",
]

from .export import export_views, export_widget
from .heatmap_plot import HeatmapPlot
from .heatmap_window import HeatmapPanelWindow, HeatmapWindow, QtHeatmapRenderer
