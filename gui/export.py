"""Save rendered heatmap windows as PNG images."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List

from PySide6 import QtWidgets

logger = logging.getLogger(__name__)


def export_widget(widget: QtWidgets.QWidget, path: Path | str) -> Path:
    """Grab ``widget`` as rendered and write it to ``path``."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    pixmap = widget.grab()
    if not pixmap.save(str(path)):
        raise OSError(f"failed to write image {path}")
    logger.info("Exported %s", path)
    return path


def export_views(widgets: Iterable[QtWidgets.QWidget], directory: Path | str, stem: str = "heatmap") -> List[Path]:
    """Write one ``<stem>_NN.png`` per widget into ``directory``, numbered from 01."""
    directory = Path(directory)
    return [
        export_widget(widget, directory / f"{stem}_{number:02d}.png")
        for number, widget in enumerate(widgets, start=1)
    ]


__all__ = ["export_views", "export_widget"]
