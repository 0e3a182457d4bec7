from __future__ import annotations

import json
import logging
import threading
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Protocol, Tuple

from .models import validate_percentiles

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HeatmapSettings:
    """Options read by every heatmap transform call. Never mutated in place."""

    percentile_range: Tuple[float, float] = (10.0, 90.0)
    duration_index: int = 7
    gray_levels: int = 32
    show_colorbar: bool = False
    subject_id: str = ""
    panel_title: str = ""
    panel_font_size: int = 8
    title_font_size: int = 20
    window_size: Optional[Tuple[int, int]] = (360, 855)

    def __post_init__(self) -> None:
        object.__setattr__(self, "percentile_range", tuple(self.percentile_range))
        if self.window_size is not None:
            object.__setattr__(self, "window_size", tuple(self.window_size))

    def validate(self) -> None:
        # Local import: core imports this module.
        from core.duration_table import lookup

        if len(self.percentile_range) != 2:
            raise ValueError("percentile_range must hold exactly two values")
        validate_percentiles(*self.percentile_range)
        lookup(self.duration_index)
        if isinstance(self.gray_levels, bool) or int(self.gray_levels) != self.gray_levels or self.gray_levels < 2:
            raise ValueError("gray_levels must be an integer of at least 2")
        if self.panel_font_size <= 0 or self.title_font_size <= 0:
            raise ValueError("font sizes must be positive")
        if self.window_size is not None:
            if len(self.window_size) != 2 or min(self.window_size) <= 0:
                raise ValueError("window_size must be a (width, height) pair of positive values")

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["percentile_range"] = list(self.percentile_range)
        data["window_size"] = None if self.window_size is None else list(self.window_size)
        return data


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def _as_pair(cast: Callable[[Any], Any]) -> Callable[[Any], Tuple[Any, Any]]:
    def convert(value: Any) -> Tuple[Any, Any]:
        if isinstance(value, str):
            value = [part for part in value.replace(",", " ").split() if part]
        items = tuple(cast(v) for v in value)
        if len(items) != 2:
            raise ValueError("expected two values")
        return items

    return convert


def _optional(convert: Callable[[Any], Any]) -> Callable[[Any], Any]:
    def wrapper(value: Any) -> Any:
        if value is None or value == "" or value == "none":
            return None
        return convert(value)

    return wrapper


_FIELD_CONVERTERS: Dict[str, Callable[[Any], Any]] = {
    "percentile_range": _as_pair(float),
    "duration_index": int,
    "gray_levels": int,
    "show_colorbar": _as_bool,
    "subject_id": str,
    "panel_title": str,
    "panel_font_size": int,
    "title_font_size": int,
    "window_size": _optional(_as_pair(int)),
}


def settings_from_dict(data: Dict[str, Any]) -> HeatmapSettings:
    """Build settings from loosely typed data; bad or unknown fields fall back to defaults."""
    values: Dict[str, Any] = {}
    for f in fields(HeatmapSettings):
        if f.name not in data:
            continue
        try:
            values[f.name] = _FIELD_CONVERTERS[f.name](data[f.name])
        except (TypeError, ValueError, OverflowError) as exc:
            logger.debug("Ignoring stored value for %s: %s", f.name, exc)
    unknown = set(data) - {f.name for f in fields(HeatmapSettings)}
    if unknown:
        logger.debug("Ignoring unknown settings keys: %s", ", ".join(sorted(unknown)))
    return HeatmapSettings(**values)


class SettingsPersistence(Protocol):
    """Backend that loads and saves settings as a plain dict."""

    def load(self) -> dict: ...

    def save(self, data: dict) -> None: ...


class InMemoryPersistence:
    """Non-persistent backend used for headless runs and tests."""

    def __init__(self, initial: Optional[dict] = None) -> None:
        self._data: dict = dict(initial or {})

    def load(self) -> dict:
        return dict(self._data)

    def save(self, data: dict) -> None:
        self._data = dict(data)


class JsonFilePersistence:
    """Stores settings in a JSON file (created on first save)."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> dict:
        if not self._path.exists():
            return {}
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Failed to read settings file %s: %s", self._path, exc)
            return {}
        if not isinstance(payload, dict):
            logger.warning("Settings file %s does not contain an object; ignoring", self._path)
            return {}
        return payload

    def save(self, data: dict) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")


class HeatmapSettingsStore:
    """Thread-safe settings store with pluggable persistence and change subscribers."""

    def __init__(
        self,
        initial: Optional[HeatmapSettings] = None,
        *,
        persistence: Optional[SettingsPersistence] = None,
    ) -> None:
        self._lock = threading.Lock()
        self._subscribers: Dict[int, Callable[[HeatmapSettings], None]] = {}
        self._next_token = 0
        self._persistence: SettingsPersistence = persistence or InMemoryPersistence()
        if initial is None:
            initial = self._load_settings()
        initial.validate()
        self._settings = initial

    def _load_settings(self) -> HeatmapSettings:
        try:
            data = self._persistence.load()
        except Exception as exc:
            logger.debug("Settings persistence load failed: %s", exc)
            data = {}
        loaded = settings_from_dict(data)
        try:
            loaded.validate()
        except (ValueError, IndexError) as exc:
            logger.warning("Stored heatmap settings are invalid (%s); using defaults", exc)
            return HeatmapSettings()
        return loaded

    def get(self) -> HeatmapSettings:
        with self._lock:
            return self._settings

    def update(self, **kwargs) -> HeatmapSettings:
        with self._lock:
            new_settings = replace(self._settings, **kwargs)
            new_settings.validate()
            self._persistence.save(new_settings.to_dict())
            self._settings = new_settings
            callbacks = list(self._subscribers.values())
        for callback in callbacks:
            try:
                callback(new_settings)
            except Exception as exc:
                logger.debug("Heatmap settings subscriber callback failed: %s", exc)
                continue
        return new_settings

    def subscribe(self, callback: Callable[[HeatmapSettings], None], *, replay: bool = True) -> Callable[[], None]:
        with self._lock:
            token = self._next_token
            self._next_token += 1
            self._subscribers[token] = callback
            snapshot = self._settings
        if replay:
            callback(snapshot)

        def unsubscribe() -> None:
            with self._lock:
                self._subscribers.pop(token, None)

        return unsubscribe


__all__ = [
    "HeatmapSettings",
    "HeatmapSettingsStore",
    "InMemoryPersistence",
    "JsonFilePersistence",
    "SettingsPersistence",
    "settings_from_dict",
]
