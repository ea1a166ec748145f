"""
Synchronization of FIT samples with a video timeline.

The first record fixes the time origin.  A positive offset means the video was
started after the recording: the origin moves forward by ``offset`` ms and the
records before it are dropped.  A negative offset means the recording was
started after the video: a placeholder covers ``[0, abs(offset))`` and every
record is shifted forward by ``abs(offset)``.

With smoothing ``N > 0``, ``N`` evenly spaced samples are synthesized between
each pair of consecutive surviving records:

    step = (current - previous) // (N + 1)
    previous + step, previous + 2 * step, ..., previous + N * step, current

Only fields present in both endpoints survive in the synthesized samples.

Every emitted sample, real or synthesized, feeds the altitude accumulator in
emission order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from fitconvert.config import defaults
from fitconvert.fields import FieldKind
from fitconvert.sample import SampleRecord

logger = logging.getLogger(__name__)


@dataclass
class AltitudeAccumulator:
    """Running ascent/descent totals in raw altitude units.

    Both counters start at the raw value of 0 m so the displayed value never
    goes negative while the ride stays above its starting point.
    """

    ascent: int = defaults.ACCUMULATOR_SEED
    descent: int = defaults.ACCUMULATOR_SEED
    previous: int | None = None

    def update(self, altitude: int) -> None:
        if self.previous is None:
            self.previous = altitude
            return
        delta = altitude - self.previous
        if delta > 0:
            self.ascent += delta
        else:
            self.descent += delta
        self.previous = altitude

    @property
    def display_meters(self) -> int:
        return self.ascent // 5 - 500


@dataclass
class SyncedSample:
    timestamp_ms: int  # milliseconds on the video timeline
    record: SampleRecord
    ascent: int
    descent: int


@dataclass
class Placeholder:
    start_ms: int
    end_ms: int
    text: str = defaults.PLACEHOLDER_TEXT


@dataclass
class SyncResult:
    placeholder: Placeholder | None = None
    samples: list[SyncedSample] = field(default_factory=list)


def to_milliseconds(record: SampleRecord) -> SampleRecord:
    """Return a copy of *record* with its timestamp converted from s to ms."""
    rescaled = record.copy()
    rescaled.set(FieldKind.TIMESTAMP, (record.get(FieldKind.TIMESTAMP) or 0) * 1000)
    return rescaled


def interpolate(previous: SampleRecord, current: SampleRecord, count: int) -> list[SampleRecord]:
    """Synthesize *count* samples strictly between *previous* and *current*."""
    if count <= 0:
        return []
    step = (current - previous) // (count + 1)
    samples = []
    value = previous
    for _ in range(count):
        value = value + step
        samples.append(value)
    return samples


def synchronize(
    records: Sequence[SampleRecord],
    offset_ms: int = 0,
    smoothing: int = 0,
) -> SyncResult:
    """Place *records* on the video timeline.

    Parameters
    ----------
    records:
        Ingested records in file order, timestamps in seconds.
    offset_ms:
        Signed video offset in milliseconds.
    smoothing:
        Number of synthesized samples between consecutive records (0-9).
    """
    if not 0 <= smoothing <= defaults.MAX_SMOOTHING:
        raise ValueError(f"smoothing must be within 0..{defaults.MAX_SMOOTHING}, got {smoothing}")

    result = SyncResult()
    if not records:
        return result

    timeline = [to_milliseconds(r) for r in records]

    origin = timeline[0].get(FieldKind.TIMESTAMP) or 0
    video_shift = 0
    if offset_ms > 0:
        origin += offset_ms
    elif offset_ms < 0:
        video_shift = abs(offset_ms)
        result.placeholder = Placeholder(start_ms=0, end_ms=video_shift)

    accumulator = AltitudeAccumulator()
    previous: SampleRecord | None = None
    dropped = 0

    for record in timeline:
        timestamp = record.get(FieldKind.TIMESTAMP) or 0
        if offset_ms > 0 and timestamp < origin:
            dropped += 1
            continue

        batch = interpolate(previous, record, smoothing) if previous is not None else []
        batch.append(record)
        previous = record

        for sample in batch:
            altitude = sample.get(FieldKind.ALTITUDE)
            if altitude is not None:
                accumulator.update(altitude)
            sample_ts = sample.get(FieldKind.TIMESTAMP) or 0
            result.samples.append(
                SyncedSample(
                    timestamp_ms=(sample_ts - origin) + video_shift,
                    record=sample,
                    ascent=accumulator.ascent,
                    descent=accumulator.descent,
                )
            )

    if dropped:
        logger.info("Offset %d ms: dropped %d records before video start", offset_ms, dropped)
    logger.debug(
        "Synchronized %d records into %d samples (smoothing=%d)",
        len(records) - dropped,
        len(result.samples),
        smoothing,
    )
    return result
