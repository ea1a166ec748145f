"""
Shared fixtures: decoded-message factories and a minimal FIT file writer.
"""

import struct

import pytest

from fitconvert.fields import FieldKind
from fitconvert.processing.ingest import DecodedMessage
from fitconvert.sample import SampleRecord

_CRC_TABLE = (
    0x0000, 0xCC01, 0xD801, 0x1400, 0xF001, 0x3C00, 0x2800, 0xE401,
    0xA001, 0x6C00, 0x7800, 0xB401, 0x5000, 0x9C01, 0x8801, 0x4400,
)

# FIT record field -> (field def num, size, base type, struct format, invalid)
RECORD_FIELD_DEFS = {
    "timestamp": (253, 4, 0x86, "I", 0xFFFFFFFF),
    "position_lat": (0, 4, 0x85, "i", 0x7FFFFFFF),
    "position_long": (1, 4, 0x85, "i", 0x7FFFFFFF),
    "altitude": (2, 2, 0x84, "H", 0xFFFF),
    "heart_rate": (3, 1, 0x02, "B", 0xFF),
    "cadence": (4, 1, 0x02, "B", 0xFF),
    "distance": (5, 4, 0x86, "I", 0xFFFFFFFF),
    "speed": (6, 2, 0x84, "H", 0xFFFF),
    "power": (7, 2, 0x84, "H", 0xFFFF),
    "compressed_speed_distance": (8, 3, 0x0D, "3s", b"\xff\xff\xff"),
    "temperature": (13, 1, 0x01, "b", 0x7F),
}

FIT_MESG_NUM_RECORD = 20
FIT_MESG_NUM_EVENT = 21

# Arbitrary FIT timestamp (seconds since 1989-12-31), well past the
# 0x10000000 threshold under which FIT treats values as relative.
BASE_TIMESTAMP = 1_000_000_000


def fit_crc(data: bytes, crc: int = 0) -> int:
    for byte in data:
        tmp = _CRC_TABLE[crc & 0xF]
        crc = (crc >> 4) & 0x0FFF
        crc = crc ^ tmp ^ _CRC_TABLE[byte & 0xF]
        tmp = _CRC_TABLE[crc & 0xF]
        crc = (crc >> 4) & 0x0FFF
        crc = crc ^ tmp ^ _CRC_TABLE[(byte >> 4) & 0xF]
    return crc


def build_fit_file(
    rows: list[dict],
    field_names: list[str],
    protocol_version: int = 0x20,
    with_event: bool = False,
) -> bytes:
    """Write *rows* as FIT ``record`` messages sharing one definition.

    Fields missing from a row are written with their invalid sentinel.
    """
    body = bytearray()

    if with_event:
        # local message 1: event { timestamp, event(enum), event_type(enum) }
        body += struct.pack("<BBBHB", 0x41, 0, 0, FIT_MESG_NUM_EVENT, 3)
        body += struct.pack("<BBB", 253, 4, 0x86)
        body += struct.pack("<BBB", 0, 1, 0x00)
        body += struct.pack("<BBB", 1, 1, 0x00)
        body += struct.pack("<BIBB", 0x01, BASE_TIMESTAMP, 0, 0)

    body += struct.pack("<BBBHB", 0x40, 0, 0, FIT_MESG_NUM_RECORD, len(field_names))
    for name in field_names:
        num, size, base_type, _, _ = RECORD_FIELD_DEFS[name]
        body += struct.pack("<BBB", num, size, base_type)

    fmt = "<B" + "".join(RECORD_FIELD_DEFS[name][3] for name in field_names)
    for row in rows:
        values = [row.get(name, RECORD_FIELD_DEFS[name][4]) for name in field_names]
        body += struct.pack(fmt, 0x00, *values)

    header = struct.pack("<BBHI4s", 12, protocol_version, 2132, len(body), b".FIT")
    data = header + bytes(body)
    return data + struct.pack("<H", fit_crc(data))


def record_message(**fields) -> DecodedMessage:
    return DecodedMessage(kind="record", fields=fields)


def make_record(**values) -> SampleRecord:
    """Build a record from ``FieldKind`` member names, e.g. ``HEART_RATE=120``."""
    record = SampleRecord()
    for name, value in values.items():
        record.set(FieldKind[name], value)
    return record


@pytest.fixture
def heart_rate_records() -> list[SampleRecord]:
    """Three one-second records carrying only heart rate."""
    return [
        make_record(TIMESTAMP=1, HEART_RATE=100),
        make_record(TIMESTAMP=2, HEART_RATE=110),
        make_record(TIMESTAMP=3, HEART_RATE=120),
    ]


@pytest.fixture
def fit_bytes() -> bytes:
    rows = [
        {"timestamp": BASE_TIMESTAMP, "heart_rate": 100, "distance": 0, "power": 150},
        {"timestamp": BASE_TIMESTAMP + 1, "heart_rate": 110, "distance": 500, "power": 160},
        {"timestamp": BASE_TIMESTAMP + 2, "heart_rate": 120, "distance": 1000},
    ]
    return build_fit_file(rows, ["timestamp", "heart_rate", "distance", "power"])


@pytest.fixture
def fit_path(tmp_path, fit_bytes):
    path = tmp_path / "ride.fit"
    path.write_bytes(fit_bytes)
    return path
