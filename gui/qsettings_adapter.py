"""Persist HeatmapSettings through Qt's QSettings.

Values are written under a ``heatmap/`` group as plain strings or scalars,
and ``settings_from_dict`` converts them back on load. Keeping the Qt import
here leaves ``shared.app_settings`` usable without PySide6.
"""
from __future__ import annotations

from typing import Any, Optional

from PySide6.QtCore import QSettings

from shared.app_settings import HeatmapSettings, HeatmapSettingsStore

GROUP = "heatmap"
NONE_MARKER = "none"


def _encode(value: Any) -> Any:
    if value is None:
        # Absent keys load as field defaults, so None gets its own marker.
        return NONE_MARKER
    if isinstance(value, (list, tuple)):
        return " ".join(str(v) for v in value)
    return value


class QSettingsPersistence:
    """Heatmap settings stored in a QSettings instance (native store by default)."""

    def __init__(
        self,
        qsettings: Optional[QSettings] = None,
        *,
        organization: str = "EdfHeatmap",
        application: str = "EdfHeatmap",
    ) -> None:
        self._qsettings = qsettings if qsettings is not None else QSettings(organization, application)

    def load(self) -> dict:
        data = {}
        self._qsettings.beginGroup(GROUP)
        try:
            for name in HeatmapSettings.__dataclass_fields__:
                if self._qsettings.contains(name):
                    data[name] = self._qsettings.value(name)
        finally:
            self._qsettings.endGroup()
        return data

    def save(self, data: dict) -> None:
        self._qsettings.beginGroup(GROUP)
        try:
            for key, value in data.items():
                self._qsettings.setValue(key, _encode(value))
        finally:
            self._qsettings.endGroup()
        self._qsettings.sync()
        if self._qsettings.status() != QSettings.Status.NoError:
            raise OSError(f"could not write settings to {self._qsettings.fileName()}")


def create_gui_settings_store() -> HeatmapSettingsStore:
    return HeatmapSettingsStore(persistence=QSettingsPersistence())


__all__ = ["NONE_MARKER", "QSettingsPersistence", "create_gui_settings_store"]
