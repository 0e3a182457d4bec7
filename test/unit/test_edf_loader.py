"""
Unit tests for the EDF reader.

These tests verify:
1. Header fields and per-signal samples-per-record are read
2. Digital samples come back in physical units
3. Signals with different samples-per-record keep their own rates
4. Annotation channels are skipped and label selection is honoured
5. Malformed, truncated or empty files are rejected as EdfFormatError
"""
from __future__ import annotations

import numpy as np
import pytest

from recording.edf_loader import ANNOTATION_LABEL, load_edf, read_header
from shared.errors import EdfFormatError, LabelNotFound
from test.fixtures.edf_writer import EdfChannel, write_edf


def _two_rate_channels(records: int = 3) -> list[EdfChannel]:
    eeg = np.arange(records * 4, dtype=np.int16)
    resp = (np.arange(records * 2, dtype=np.int16) + 1000)
    return [
        EdfChannel("EEG Fpz-Cz", eeg, 4, physical_min=-32768, physical_max=32767),
        EdfChannel("Resp oro-nasal", resp, 2, physical_min=-32768, physical_max=32767),
    ]


@pytest.fixture
def edf_path(tmp_path):
    return write_edf(tmp_path / "night.edf", _two_rate_channels(), record_duration=2.0)


class TestReadHeader:
    def test_fixed_header_fields(self, edf_path):
        layout = read_header(edf_path)
        assert layout.header.record_count == 3
        assert layout.header.record_duration_seconds == 2.0
        assert layout.header.signal_count == 2
        assert layout.header.start_date == "01.01.24"
        assert layout.header.start_time == "22.00.00"

    def test_signal_headers(self, edf_path):
        layout = read_header(edf_path)
        assert [sh.label for sh in layout.signal_headers] == ["EEG Fpz-Cz", "Resp oro-nasal"]
        assert layout.samples_per_record == (4, 2)
        assert layout.channels == (0, 1)
        assert layout.signal_headers[0].physical_dimension == "uV"

    def test_annotation_channel_not_listed(self, tmp_path):
        channels = _two_rate_channels()
        channels.insert(0, EdfChannel(ANNOTATION_LABEL, np.zeros(3 * 6, dtype=np.int16), 6))
        layout = read_header(write_edf(tmp_path / "annotated.edf", channels))
        assert layout.labels == ("EEG Fpz-Cz", "Resp oro-nasal")


class TestLoadEdf:
    def test_signals_deinterleaved(self, edf_path):
        recording = load_edf(edf_path)
        eeg = recording.signal("EEG Fpz-Cz")
        resp = recording.signal("Resp oro-nasal")
        np.testing.assert_allclose(eeg.samples, np.arange(12))
        np.testing.assert_allclose(resp.samples, np.arange(6) + 1000)
        assert eeg.samples_per_second == 2.0
        assert resp.samples_per_second == 1.0
        assert recording.source == str(edf_path)

    def test_physical_scaling(self, tmp_path):
        digital = np.array([-2048, 0, 2047, 2047], dtype=np.int16)
        channel = EdfChannel(
            "EEG", digital, 4, physical_min=-100.0, physical_max=100.0, digital_min=-2048, digital_max=2047
        )
        recording = load_edf(write_edf(tmp_path / "scaled.edf", [channel]))
        samples = recording.signal("EEG").samples
        assert samples[0] == pytest.approx(-100.0)
        assert samples[2] == pytest.approx(100.0)
        assert samples[1] == pytest.approx(2048 * 200.0 / 4095 - 100.0)

    def test_label_selection_and_order(self, edf_path):
        recording = load_edf(edf_path, labels=["Resp oro-nasal", "EEG Fpz-Cz"])
        assert recording.labels == ("Resp oro-nasal", "EEG Fpz-Cz")
        assert [sh.label for sh in recording.signal_headers] == ["Resp oro-nasal", "EEG Fpz-Cz"]

    def test_unknown_label(self, edf_path):
        with pytest.raises(LabelNotFound) as excinfo:
            load_edf(edf_path, labels=["ECG"])
        assert "EEG Fpz-Cz" in str(excinfo.value)

    def test_annotation_channel_skipped(self, tmp_path):
        channels = _two_rate_channels()
        channels.append(EdfChannel(ANNOTATION_LABEL, np.zeros(3 * 6, dtype=np.int16), 6))
        recording = load_edf(write_edf(tmp_path / "annotated.edf", channels))
        assert recording.labels == ("EEG Fpz-Cz", "Resp oro-nasal")
        np.testing.assert_allclose(recording.signal("Resp oro-nasal").samples, np.arange(6) + 1000)

    def test_annotation_label_cannot_be_selected(self, tmp_path):
        channels = _two_rate_channels()
        channels.append(EdfChannel(ANNOTATION_LABEL, np.zeros(3 * 6, dtype=np.int16), 6))
        path = write_edf(tmp_path / "annotated.edf", channels)
        with pytest.raises(LabelNotFound):
            load_edf(path, labels=[ANNOTATION_LABEL])


class TestMalformedFiles:
    def test_bad_version(self, tmp_path):
        path = write_edf(tmp_path / "bad.edf", _two_rate_channels(), version="1")
        with pytest.raises(EdfFormatError):
            load_edf(path)

    def test_truncated_data(self, tmp_path):
        path = write_edf(tmp_path / "short.edf", _two_rate_channels(), truncate_bytes=4)
        with pytest.raises(EdfFormatError):
            load_edf(path)

    def test_truncated_header(self, tmp_path):
        path = tmp_path / "stub.edf"
        path.write_bytes(b"0       " + b" " * 40)
        with pytest.raises(EdfFormatError):
            read_header(path)

    def test_zero_record_duration(self, tmp_path):
        path = write_edf(tmp_path / "zero.edf", _two_rate_channels(), record_duration=0.0)
        with pytest.raises(EdfFormatError):
            load_edf(path)

    def test_format_error_is_value_error(self, tmp_path):
        path = write_edf(tmp_path / "bad.edf", _two_rate_channels(), version="x")
        with pytest.raises(ValueError):
            read_header(path)

    def test_no_data_records(self, tmp_path):
        channels = [EdfChannel("EEG Fpz-Cz", np.zeros(0, dtype=np.int16), 4)]
        path = write_edf(tmp_path / "empty.edf", channels)
        with pytest.raises(EdfFormatError):
            load_edf(path)

    @pytest.mark.parametrize("count", ["1.5", "abc"])
    def test_non_integral_record_count(self, tmp_path, count):
        path = write_edf(tmp_path / "odd.edf", _two_rate_channels(), header_record_count=count)
        with pytest.raises(EdfFormatError):
            read_header(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_edf(tmp_path / "absent.edf")
