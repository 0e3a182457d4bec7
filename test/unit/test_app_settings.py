"""Unit tests for heatmap settings, persistence backends and the settings store."""
from __future__ import annotations

import json

import pytest

from shared.app_settings import (
    HeatmapSettings,
    HeatmapSettingsStore,
    InMemoryPersistence,
    JsonFilePersistence,
    settings_from_dict,
)
from shared.errors import IndexOutOfRange, InvalidRange


class TestHeatmapSettings:
    def test_defaults(self):
        settings = HeatmapSettings()
        assert settings.percentile_range == (10.0, 90.0)
        assert settings.duration_index == 7
        assert settings.gray_levels == 32
        assert settings.show_colorbar is False
        settings.validate()

    def test_lists_normalised_to_tuples(self):
        settings = HeatmapSettings(percentile_range=[5, 95], window_size=[100, 200])
        assert settings.percentile_range == (5, 95)
        assert settings.window_size == (100, 200)

    @pytest.mark.parametrize(
        "kwargs, error",
        [
            ({"percentile_range": (90.0, 10.0)}, InvalidRange),
            ({"percentile_range": (1.0, 2.0, 3.0)}, ValueError),
            ({"duration_index": 0}, IndexOutOfRange),
            ({"gray_levels": 1}, ValueError),
            ({"panel_font_size": 0}, ValueError),
            ({"window_size": (0, 10)}, ValueError),
        ],
    )
    def test_validate_rejects(self, kwargs, error):
        with pytest.raises(error):
            HeatmapSettings(**kwargs).validate()

    def test_to_dict_is_json_friendly(self):
        data = HeatmapSettings(subject_id="S1").to_dict()
        assert data["percentile_range"] == [10.0, 90.0]
        assert data["window_size"] == [360, 855]
        assert json.loads(json.dumps(data)) == data


class TestSettingsFromDict:
    def test_string_values_converted(self):
        settings = settings_from_dict(
            {"percentile_range": "5 95", "duration_index": "8", "show_colorbar": "true", "window_size": "none"}
        )
        assert settings.percentile_range == (5.0, 95.0)
        assert settings.duration_index == 8
        assert settings.show_colorbar is True
        assert settings.window_size is None

    def test_bad_and_unknown_values_fall_back(self):
        settings = settings_from_dict({"gray_levels": "many", "plot_refresh_hz": 40})
        assert settings.gray_levels == 32


class TestPersistence:
    def test_json_round_trip(self, tmp_path):
        backend = JsonFilePersistence(tmp_path / "cfg" / "heatmap.json")
        assert backend.load() == {}
        backend.save({"duration_index": 9})
        assert backend.load() == {"duration_index": 9}

    def test_json_corrupt_file_ignored(self, tmp_path):
        path = tmp_path / "heatmap.json"
        path.write_text("{not json", encoding="utf-8")
        assert JsonFilePersistence(path).load() == {}

    def test_json_non_object_ignored(self, tmp_path):
        path = tmp_path / "heatmap.json"
        path.write_text("[1, 2]", encoding="utf-8")
        assert JsonFilePersistence(path).load() == {}


class TestHeatmapSettingsStore:
    def test_update_persists(self):
        backend = InMemoryPersistence()
        store = HeatmapSettingsStore(persistence=backend)
        store.update(duration_index=12, percentile_range=(5.0, 95.0))
        assert store.get().duration_index == 12
        assert backend.load()["duration_index"] == 12
        assert backend.load()["percentile_range"] == [5.0, 95.0]

    def test_loads_from_backend(self):
        store = HeatmapSettingsStore(persistence=InMemoryPersistence({"gray_levels": 64}))
        assert store.get().gray_levels == 64

    def test_invalid_stored_settings_fall_back_to_defaults(self):
        store = HeatmapSettingsStore(persistence=InMemoryPersistence({"duration_index": 40}))
        assert store.get() == HeatmapSettings()

    def test_invalid_update_leaves_store_unchanged(self):
        backend = InMemoryPersistence()
        store = HeatmapSettingsStore(persistence=backend)
        with pytest.raises(IndexOutOfRange):
            store.update(duration_index=26)
        assert store.get().duration_index == 7
        assert backend.load() == {}

    def test_failed_save_leaves_store_unchanged(self):
        class ReadOnlyPersistence(InMemoryPersistence):
            def save(self, data):
                raise OSError("read-only settings file")

        store = HeatmapSettingsStore(persistence=ReadOnlyPersistence())
        seen = []
        store.subscribe(seen.append, replay=False)
        with pytest.raises(OSError):
            store.update(gray_levels=16)
        assert store.get().gray_levels == HeatmapSettings().gray_levels
        assert seen == []

    def test_subscribers_notified(self):
        store = HeatmapSettingsStore()
        seen = []
        unsubscribe = store.subscribe(seen.append)
        assert seen == [HeatmapSettings()]
        store.update(gray_levels=16)
        assert seen[-1].gray_levels == 16
        unsubscribe()
        store.update(gray_levels=8)
        assert len(seen) == 2

    def test_subscribe_without_replay(self):
        store = HeatmapSettingsStore()
        seen = []
        store.subscribe(seen.append, replay=False)
        assert seen == []

    def test_failing_subscriber_does_not_block_update(self):
        store = HeatmapSettingsStore()

        def broken(_settings):
            raise RuntimeError("boom")

        store.subscribe(broken, replay=False)
        assert store.update(gray_levels=4).gray_levels == 4

    def test_json_store_survives_restart(self, tmp_path):
        path = tmp_path / "heatmap.json"
        HeatmapSettingsStore(persistence=JsonFilePersistence(path)).update(subject_id="SC4001")
        reopened = HeatmapSettingsStore(persistence=JsonFilePersistence(path))
        assert reopened.get().subject_id == "SC4001"
