"""
FIT record ingestion: turns a decoded FIT message stream into sample records.

The binary container is decoded by ``fitparse``.  The rest of the converter
never sees ``fitparse`` objects: :func:`iter_messages` exposes the decoder as a
pull-based stream of :class:`DecodedMessage` values carrying raw fixed-point
field values, and translates every decoder failure into a
:class:`~fitconvert.errors.DecodeError` subclass.

#### Record fields

| FIT field | Kind | Base type | Raw unit |
|-----------|------|-----------|----------|
| `timestamp` | TIMESTAMP | uint32 | s since 1989-12-31 00:00 UTC |
| `distance` | DISTANCE | uint32 | cm |
| `heart_rate` | HEART_RATE | uint8 | bpm |
| `cadence` | CADENCE | uint8 | rpm |
| `power` | POWER | uint16 | W |
| `altitude` / `enhanced_altitude` | ALTITUDE | uint16 / uint32 | (m + 500) * 5 |
| `speed` / `enhanced_speed` | SPEED | uint16 / uint32 | mm/s |
| `temperature` | TEMPERATURE | sint8 | °C |
| `position_lat`, `position_long` | LATITUDE, LONGITUDE | sint32 | semicircles |

Enhanced fields, when valid, always replace the base field.  Speed and
distance packed in `compressed_speed_distance` reach this module through
the base `speed` and `distance` fields.  Latitude and longitude are only
kept as a pair.
"""

from __future__ import annotations

import io
import logging
import struct
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Iterator

import fitparse
from fitparse.utils import FitEOFError, FitHeaderError, FitParseError

from fitconvert.errors import (
    MalformedFileError,
    NotFitFileError,
    UnexpectedEndOfFileError,
    UnsupportedProtocolError,
)
from fitconvert.fields import FieldKind, name_of
from fitconvert.fit_file import read_source
from fitconvert.sample import RunSummary, SampleRecord

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# FIT invalid-value conventions
# ---------------------------------------------------------------------------
FIT_UINT8_INVALID = 0xFF
FIT_SINT8_INVALID = 0x7F
FIT_UINT16_INVALID = 0xFFFF
FIT_UINT32_INVALID = 0xFFFFFFFF
FIT_SINT32_INVALID = 0x7FFFFFFF

FIT_MESG_RECORD = "record"

FIT_HEADER_MIN_SIZE = 12
FIT_PROTOCOL_MAJOR_MAX = 2

# (FIT field name, kind, invalid sentinel)
_SCALAR_FIELDS: tuple[tuple[str, FieldKind, int], ...] = (
    ("distance", FieldKind.DISTANCE, FIT_UINT32_INVALID),
    ("heart_rate", FieldKind.HEART_RATE, FIT_UINT8_INVALID),
    ("cadence", FieldKind.CADENCE, FIT_UINT8_INVALID),
    ("power", FieldKind.POWER, FIT_UINT16_INVALID),
    ("altitude", FieldKind.ALTITUDE, FIT_UINT16_INVALID),
    ("speed", FieldKind.SPEED, FIT_UINT16_INVALID),
    ("temperature", FieldKind.TEMPERATURE, FIT_SINT8_INVALID),
)

_ENHANCED_FIELDS: tuple[tuple[str, FieldKind, int], ...] = (
    ("enhanced_altitude", FieldKind.ALTITUDE, FIT_UINT32_INVALID),
    ("enhanced_speed", FieldKind.SPEED, FIT_UINT32_INVALID),
)

# Fields that may be expanded from components (enhanced_* from altitude and
# speed, speed and distance from compressed_speed_distance). fitparse only
# hands out the scaled value for those: (scale, offset) restores the raw encoding.
_COMPONENT_SCALING: dict[str, tuple[int, int]] = {
    "enhanced_altitude": (5, 500),
    "enhanced_speed": (1000, 0),
    "altitude": (5, 500),
    "speed": (1000, 0),
    "distance": (100, 0),
}

_ENHANCED_NAMES = frozenset(("enhanced_altitude", "enhanced_speed"))


@dataclass
class DecodedMessage:
    """One message pulled from the decoder."""

    kind: str
    fields: dict[str, Any] = field(default_factory=dict)


@dataclass
class IngestResult:
    records: list[SampleRecord]
    summary: RunSummary


# ---------------------------------------------------------------------------
# Decoder boundary
# ---------------------------------------------------------------------------


def check_fit_header(data: bytes) -> None:
    """Reject inputs that are not a complete FIT container of a known protocol."""
    if len(data) < FIT_HEADER_MIN_SIZE or data[8:12] != b".FIT":
        raise NotFitFileError()

    header_size, protocol_version, _profile, data_size = struct.unpack("<BBHI", data[:8])
    if header_size < FIT_HEADER_MIN_SIZE:
        raise NotFitFileError()
    if protocol_version >> 4 > FIT_PROTOCOL_MAJOR_MAX:
        raise UnsupportedProtocolError(
            f"protocol version not supported: {protocol_version >> 4}.{protocol_version & 0x0F}"
        )
    # data records are followed by a 2-byte CRC
    if len(data) < header_size + data_size + 2:
        raise UnexpectedEndOfFileError()


def _raw_fields(message: Any) -> dict[str, Any]:
    fields: dict[str, Any] = {}
    for field_data in message.fields:
        name = field_data.name
        raw_value = field_data.raw_value
        expanded = name in _ENHANCED_NAMES or not isinstance(raw_value, int)
        if name in _COMPONENT_SCALING and expanded:
            if field_data.value is None:
                continue
            scale, offset = _COMPONENT_SCALING[name]
            fields[name] = int(round((field_data.value + offset) * scale))
        else:
            fields[name] = raw_value
    return fields


def iter_messages(data: bytes) -> Iterator[DecodedMessage]:
    """Decode *data* and yield every data message with its raw field values."""
    try:
        fit_file = fitparse.FitFile(io.BytesIO(data))
        for message in fit_file.get_messages():
            yield DecodedMessage(kind=message.name, fields=_raw_fields(message))
    except FitEOFError as exc:
        raise UnexpectedEndOfFileError() from exc
    except FitHeaderError as exc:
        raise NotFitFileError() from exc
    except (FitParseError, struct.error) as exc:
        raise MalformedFileError(f"error decoding file: {exc}") from exc


# ---------------------------------------------------------------------------
# Message to SampleRecord
# ---------------------------------------------------------------------------


def _valid(value: Any, invalid: int) -> bool:
    return isinstance(value, int) and value != invalid


def build_sample(message: DecodedMessage) -> SampleRecord:
    """Build a sample record from one ``record`` message."""
    fields = message.fields
    record = SampleRecord()

    for fit_name, kind, invalid in _SCALAR_FIELDS:
        value = fields.get(fit_name)
        if _valid(value, invalid):
            record.set(kind, value)

    for fit_name, kind, invalid in _ENHANCED_FIELDS:
        value = fields.get(fit_name)
        if _valid(value, invalid):
            record.set(kind, value)

    lat = fields.get("position_lat")
    lon = fields.get("position_long")
    if _valid(lat, FIT_SINT32_INVALID) and _valid(lon, FIT_SINT32_INVALID):
        record.set(FieldKind.LATITUDE, lat)
        record.set(FieldKind.LONGITUDE, lon)

    timestamp = fields.get("timestamp")
    record.set(FieldKind.TIMESTAMP, timestamp if isinstance(timestamp, int) else 0)
    return record


def ingest(messages: Iterable[DecodedMessage]) -> IngestResult:
    """Collect the ``record`` messages of a stream.

    Decoder errors propagate; no partial result is ever returned.
    """
    records: list[SampleRecord] = []
    summary = RunSummary()
    skipped = 0

    for message in messages:
        if message.kind != FIT_MESG_RECORD:
            skipped += 1
            continue
        record = build_sample(message)
        summary.add(record)
        records.append(record)

    logger.debug("Skipped %d non-record messages", skipped)
    return IngestResult(records=records, summary=summary)


def ingest_file(source: str | Path) -> IngestResult:
    data = read_source(source)
    check_fit_header(data)

    result = ingest(iter_messages(data))
    logger.info(
        "Decoded %d records  |  fields: %s",
        len(result.records),
        ", ".join(name_of(kind) for kind in result.summary.kinds()) or "none",
    )
    return result
