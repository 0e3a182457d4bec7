from __future__ import annotations

import logging
from typing import Any, Iterator, List, Optional, Protocol, Sequence

from shared.app_settings import HeatmapSettings
from shared.models import HeatmapBundle, PanelBundle, Recording, Signal

from .clipping import clip, compute_range
from .duration_table import lookup
from .raster import build, samples_per_window
from .ticks import tick_set

logger = logging.getLogger(__name__)

MAX_SIGNALS_PER_PANEL = 10


class HeatmapRenderer(Protocol):
    """Collaborator that draws bundles (see gui.heatmap_window.QtHeatmapRenderer)."""

    def render_heatmap(self, bundle: HeatmapBundle) -> Any: ...

    def render_panel(self, panel: PanelBundle) -> Any: ...


def heatmap_title(label: str, subject_id: str = "") -> str:
    if subject_id:
        return f"{subject_id} - {label}"
    return label


def build_heatmap(
    signal: Signal,
    settings: Optional[HeatmapSettings] = None,
    *,
    subject_id: Optional[str] = None,
) -> HeatmapBundle:
    """Run the full transform for one signal: duration entry, clip range, raster, ticks."""
    settings = settings or HeatmapSettings()
    entry = lookup(settings.duration_index)
    low, high = settings.percentile_range
    clip_range = compute_range(signal.samples, low, high)
    clipped = clip(signal.samples, clip_range)
    raster = build(clipped, samples_per_window(entry, signal))
    ticks = tick_set(entry, raster)
    if subject_id is None:
        subject_id = settings.subject_id
    return HeatmapBundle(
        label=signal.label,
        title=heatmap_title(signal.label, subject_id),
        raster=raster,
        ticks=ticks,
        axis_unit_label=entry.axis_label,
        gray_levels=settings.gray_levels,
        clip_range=clip_range,
        entry=entry,
    )


def resolve_signals(recording: Recording, labels: Optional[Sequence[str]] = None) -> List[Signal]:
    """Signals for ``labels`` in the requested order; all signals when ``labels`` is empty."""
    if not labels:
        return list(recording.signals)
    return [recording.signal(label) for label in labels]


class RasterView:
    """One heatmap per selected signal of a recording."""

    def __init__(
        self,
        recording: Recording,
        labels: Optional[Sequence[str]] = None,
        settings: Optional[HeatmapSettings] = None,
        renderer: Optional[HeatmapRenderer] = None,
    ) -> None:
        self._recording = recording
        self._settings = settings or HeatmapSettings()
        self._settings.validate()
        self._signals = resolve_signals(recording, labels)
        self._renderer = renderer

    @property
    def recording(self) -> Recording:
        return self._recording

    @property
    def settings(self) -> HeatmapSettings:
        return self._settings

    @property
    def labels(self) -> List[str]:
        return [sig.label for sig in self._signals]

    def bundles(self) -> Iterator[HeatmapBundle]:
        for sig in self._signals:
            bundle = build_heatmap(sig, self._settings)
            logger.debug(
                "Built heatmap %s: %d x %d, clip [%g, %g]",
                bundle.label,
                bundle.raster.rows,
                bundle.raster.cols,
                bundle.clip_range.low,
                bundle.clip_range.high,
            )
            yield bundle

    def render(self) -> List[Any]:
        if self._renderer is None:
            raise RuntimeError("no renderer configured")
        results = [self._renderer.render_heatmap(bundle) for bundle in self.bundles()]
        logger.info("Rendered %d heatmap(s)", len(results))
        return results


class MultiRasterLayout(RasterView):
    """Heatmaps for several signals side by side under one title."""

    def __init__(
        self,
        recording: Recording,
        labels: Optional[Sequence[str]] = None,
        settings: Optional[HeatmapSettings] = None,
        renderer: Optional[HeatmapRenderer] = None,
        *,
        title: Optional[str] = None,
    ) -> None:
        super().__init__(recording, labels, settings, renderer)
        if len(self._signals) > MAX_SIGNALS_PER_PANEL:
            raise ValueError(
                f"a panel holds at most {MAX_SIGNALS_PER_PANEL} signals, got {len(self._signals)}"
            )
        self._title = self._settings.panel_title if title is None else title

    @property
    def title(self) -> str:
        return self._title

    def build_panel(self) -> PanelBundle:
        # Panel panes are titled by label only.
        heatmaps = [build_heatmap(sig, self._settings, subject_id="") for sig in self._signals]
        return PanelBundle(title=self._title, heatmaps=tuple(heatmaps))

    def render(self) -> List[Any]:
        if self._renderer is None:
            raise RuntimeError("no renderer configured")
        panel = self.build_panel()
        result = self._renderer.render_panel(panel)
        logger.info("Rendered panel %r with %d signal(s)", panel.title, len(panel.heatmaps))
        return [result]


__all__ = [
    "HeatmapRenderer",
    "MAX_SIGNALS_PER_PANEL",
    "MultiRasterLayout",
    "RasterView",
    "build_heatmap",
    "heatmap_title",
    "resolve_signals",
]
