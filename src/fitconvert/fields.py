"""Registry of the telemetry fields understood by the converter.

Every field kind owns a fixed ordinal, used as the slot index inside a
:class:`~fitconvert.sample.SampleRecord`, and the presence bit
``1 << ordinal``.  Ordinals never change: JSON headers, record keys and SRT
fragments are all emitted in ordinal order.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterator


class FieldKind(IntEnum):
    SPEED = 0
    DISTANCE = 1
    HEART_RATE = 2
    ALTITUDE = 3
    POWER = 4
    CADENCE = 5
    TEMPERATURE = 6
    TIMESTAMP = 7
    LATITUDE = 8
    LONGITUDE = 9

    @property
    def bit(self) -> int:
        return 1 << int(self)


@dataclass(frozen=True)
class FieldInfo:
    name: str
    unit: str


# ---------------------------------------------------------------------------
# Names and units of the raw (fixed-point) values
# ---------------------------------------------------------------------------

_REGISTRY: dict[FieldKind, FieldInfo] = {
    FieldKind.SPEED: FieldInfo("speed", "mm/s"),
    FieldKind.DISTANCE: FieldInfo("distance", "cm"),
    FieldKind.HEART_RATE: FieldInfo("heartrate", "bpm"),
    FieldKind.ALTITUDE: FieldInfo("altitude", "(m+500)*5"),
    FieldKind.POWER: FieldInfo("power", "w"),
    FieldKind.CADENCE: FieldInfo("cadence", "rpm"),
    FieldKind.TEMPERATURE: FieldInfo("temperature", "c"),
    FieldKind.TIMESTAMP: FieldInfo("timestamp", "s"),
    FieldKind.LATITUDE: FieldInfo("latitude", "semicircles"),
    FieldKind.LONGITUDE: FieldInfo("longitude", "semicircles"),
}

FIELD_COUNT = len(FieldKind)


def _info(kind: FieldKind) -> FieldInfo:
    try:
        return _REGISTRY[FieldKind(kind)]
    except (ValueError, KeyError):
        raise ValueError(f"Unknown field kind: {kind!r}") from None


def name_of(kind: FieldKind) -> str:
    return _info(kind).name


def unit_of(kind: FieldKind) -> str:
    return _info(kind).unit


def bit_of(kind: FieldKind) -> int:
    _info(kind)
    return FieldKind(kind).bit


def kinds_in(mask: int) -> Iterator[FieldKind]:
    """Yield the kinds whose presence bit is set in *mask*, in ordinal order."""
    for kind in FieldKind:
        if mask & kind.bit:
            yield kind
