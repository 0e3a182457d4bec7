import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

import pyqtgraph as pg
from PySide6.QtWidgets import QApplication

from core.heatmap_view import MultiRasterLayout, RasterView
from gui.export import export_views
from gui.heatmap_window import QtHeatmapRenderer
from gui.qsettings_adapter import create_gui_settings_store
from recording.edf_loader import load_edf
from shared.app_settings import HeatmapSettingsStore, JsonFilePersistence
from shared.errors import HeatmapError

logger = logging.getLogger(__name__)

# Rasters are (rows, cols) arrays; draw them without transposing.
pg.setConfigOptions(imageAxisOrder="row-major", antialias=False)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Review EDF signals as row-per-window heatmaps.")
    parser.add_argument("edf", type=Path, help="EDF recording to display")
    parser.add_argument("--signals", nargs="+", metavar="LABEL", help="signal labels to plot (default: all)")
    parser.add_argument("--duration-index", type=int, help="window duration table index, 1-25 (7 = 30 s)")
    parser.add_argument("--percentile", type=float, nargs=2, metavar=("LOW", "HIGH"), help="clip percentiles")
    parser.add_argument("--gray-levels", type=int, help="number of grey levels in the colormap")
    parser.add_argument("--panel", action="store_true", help="draw all signals side by side in one window")
    parser.add_argument("--title", help="panel title")
    parser.add_argument("--subject-id", help="prefix for single-heatmap titles")
    parser.add_argument(
        "--colorbar", action=argparse.BooleanOptionalAction, default=None, help="show a colour bar next to each heatmap"
    )
    parser.add_argument("--export", type=Path, metavar="DIR", help="save each window as PNG into DIR")
    parser.add_argument("--no-show", action="store_true", help="exit after exporting instead of showing windows")
    parser.add_argument("--settings", type=Path, metavar="FILE", help="JSON settings file to load and update")
    parser.add_argument("--log-level", default="INFO", help="logging level (default: INFO)")
    return parser


def _settings_overrides(args: argparse.Namespace) -> dict:
    overrides = {}
    if args.duration_index is not None:
        overrides["duration_index"] = args.duration_index
    if args.percentile is not None:
        overrides["percentile_range"] = tuple(args.percentile)
    if args.gray_levels is not None:
        overrides["gray_levels"] = args.gray_levels
    if args.title is not None:
        overrides["panel_title"] = args.title
    if args.subject_id is not None:
        overrides["subject_id"] = args.subject_id
    if args.colorbar is not None:
        overrides["show_colorbar"] = args.colorbar
    return overrides


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.settings is not None:
        store = HeatmapSettingsStore(persistence=JsonFilePersistence(args.settings))
    else:
        store = create_gui_settings_store()
    overrides = _settings_overrides(args)

    app = QApplication.instance() or QApplication(sys.argv[:1])
    app.setApplicationName("EdfHeatmap")

    renderer: Optional[QtHeatmapRenderer] = None
    try:
        settings = store.update(**overrides) if overrides else store.get()
        recording = load_edf(args.edf, labels=args.signals)
        renderer = QtHeatmapRenderer(settings, show=not args.no_show)
        view_cls = MultiRasterLayout if args.panel else RasterView
        windows = view_cls(recording, args.signals, settings, renderer).render()
        if args.export is not None:
            export_views(windows, args.export, stem=args.edf.stem)
    except (HeatmapError, ValueError, IndexError, OSError) as exc:
        logger.error("Cannot display %s: %s", args.edf, exc)
        if renderer is not None:
            renderer.close_all()
        return 2

    if args.no_show:
        return 0
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
