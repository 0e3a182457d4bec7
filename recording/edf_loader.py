# recording/edf_loader.py
"""EDF reader producing the Recording model consumed by the heatmap core.

Files are opened with ``pyedflib.EdfReader``, which keeps every signal at
its own sampling rate. Each signal keeps its own ``samples_per_record`` so
the raster width can be computed per signal.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Tuple

import pyedflib

from shared.errors import EdfFormatError, LabelNotFound
from shared.models import Recording, RecordingHeader, Signal, SignalHeader, build_label_index

logger = logging.getLogger(__name__)

ANNOTATION_LABEL = "EDF Annotations"


@dataclass(frozen=True)
class EdfLayout:
    """Recording header plus the decodable signals and their reader channel numbers."""

    header: RecordingHeader
    signal_headers: Tuple[SignalHeader, ...]
    channels: Tuple[int, ...]

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(sh.label for sh in self.signal_headers)

    @property
    def samples_per_record(self) -> Tuple[int, ...]:
        return tuple(sh.samples_per_record for sh in self.signal_headers)


@contextmanager
def _open_reader(path: Path) -> Iterator[pyedflib.EdfReader]:
    if not path.is_file():
        raise FileNotFoundError(f"EDF file not found: {path}")
    try:
        reader = pyedflib.EdfReader(str(path))
    except OSError as exc:
        raise EdfFormatError(f"{path.name} is not a readable EDF file: {exc}") from exc
    try:
        yield reader
    finally:
        reader.close()


def _read_layout(reader: pyedflib.EdfReader, name: str) -> EdfLayout:
    record_count = int(reader.datarecords_in_file)
    record_duration = float(reader.datarecord_duration)
    if record_duration <= 0:
        raise EdfFormatError(f"{name}: record duration must be positive, got {record_duration:g}")
    if record_count < 1:
        raise EdfFormatError(f"{name}: file contains no data records")

    labels = reader.getSignalLabels()
    totals = reader.getNSamples()
    infos = reader.getSignalHeaders()

    signal_headers: List[SignalHeader] = []
    channels: List[int] = []
    for channel, (label, total, info) in enumerate(zip(labels, totals, infos)):
        if label == ANNOTATION_LABEL:
            logger.debug("Skipping annotation channel %d in %s", channel, name)
            continue
        samples_per_record, remainder = divmod(int(total), record_count)
        if remainder or samples_per_record < 1:
            raise EdfFormatError(
                f"{name}: signal {label!r} has {int(total)} samples over {record_count} records"
            )
        signal_headers.append(
            SignalHeader(
                label=label,
                samples_per_record=samples_per_record,
                physical_dimension=info.get("dimension", ""),
                physical_min=float(info["physical_min"]),
                physical_max=float(info["physical_max"]),
                digital_min=int(info["digital_min"]),
                digital_max=int(info["digital_max"]),
                transducer=info.get("transducer", ""),
                prefiltering=info.get("prefilter", ""),
            )
        )
        channels.append(channel)

    start = reader.getStartdatetime()
    header = RecordingHeader(
        record_count=record_count,
        record_duration_seconds=record_duration,
        signal_count=len(labels),
        patient_id=reader.getPatientCode(),
        start_date=start.strftime("%d.%m.%y"),
        start_time=start.strftime("%H.%M.%S"),
    )
    return EdfLayout(header=header, signal_headers=tuple(signal_headers), channels=tuple(channels))


def read_header(path: Path | str) -> EdfLayout:
    """Read only the headers of an EDF file."""
    path = Path(path)
    with _open_reader(path) as reader:
        return _read_layout(reader, path.name)


def load_edf(path: Path | str, labels: Optional[Sequence[str]] = None) -> Recording:
    """
    Load an EDF file into a Recording.

    Args:
        path: EDF file path.
        labels: Optional signal labels to decode, in the order wanted. All
            non-annotation signals are decoded when omitted.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        EdfFormatError: If the file is malformed, truncated or has no records.
        LabelNotFound: If a requested label is absent.
    """
    path = Path(path)
    with _open_reader(path) as reader:
        layout = _read_layout(reader, path.name)
        if labels:
            index = build_label_index(layout.labels)
            selected = []
            for label in labels:
                if label not in index:
                    raise LabelNotFound(label, layout.labels)
                selected.append(index[label])
        else:
            selected = list(range(len(layout.signal_headers)))

        signal_headers: List[SignalHeader] = []
        signals: List[Signal] = []
        for position in selected:
            sh = layout.signal_headers[position]
            samples = reader.readSignal(layout.channels[position])
            signal_headers.append(sh)
            signals.append(
                Signal(
                    label=sh.label,
                    samples=samples,
                    samples_per_record=sh.samples_per_record,
                    record_duration_seconds=layout.header.record_duration_seconds,
                )
            )
            logger.debug("Decoded %s: %d samples at %g Hz", sh.label, samples.size, signals[-1].samples_per_second)

    logger.info(
        "Loaded EDF file: %s (%d signals, %d records of %gs)",
        path.name,
        len(signals),
        layout.header.record_count,
        layout.header.record_duration_seconds,
    )
    return Recording(
        header=layout.header,
        signal_headers=tuple(signal_headers),
        signals=tuple(signals),
        source=str(path),
    )


__all__ = ["ANNOTATION_LABEL", "EdfLayout", "load_edf", "read_header"]
