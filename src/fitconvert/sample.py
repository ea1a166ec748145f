"""Sparse per-timestamp telemetry container.

A :class:`SampleRecord` keeps one ``int64`` slot per :class:`FieldKind` and a
presence bitmask.  Values are stored in the field's native fixed-point unit
(distance in cm, speed in mm/s, altitude as ``(m + 500) * 5`` ...).

Arithmetic is only defined over the slots present in both operands and is
used to build interpolation steps between two consecutive samples.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

import numpy as np
import numpy.typing as npt

from fitconvert.fields import FIELD_COUNT, FieldKind, kinds_in, name_of, unit_of

_SLOT_BITS = np.left_shift(1, np.arange(FIELD_COUNT, dtype=np.int64))


def _slots_present(mask: int) -> npt.NDArray[np.bool_]:
    return (mask & _SLOT_BITS) != 0


class SampleRecord:
    __slots__ = ("values", "mask")

    def __init__(
        self,
        values: npt.NDArray[np.int64] | None = None,
        mask: int = 0,
    ) -> None:
        if values is None:
            values = np.zeros(FIELD_COUNT, dtype=np.int64)
        self.values = values
        self.mask = mask

    def set(self, kind: FieldKind, value: int) -> None:
        self.values[kind] = value
        self.mask |= kind.bit

    def get(self, kind: FieldKind) -> int | None:
        if not self.mask & kind.bit:
            return None
        return int(self.values[kind])

    def has(self, kind: FieldKind) -> bool:
        return bool(self.mask & kind.bit)

    def present_kinds(self) -> Iterator[FieldKind]:
        return kinds_in(self.mask)

    def copy(self) -> SampleRecord:
        return SampleRecord(self.values.copy(), self.mask)

    def as_dict(self) -> dict[str, int]:
        """Present values keyed by field name, in registry order."""
        return {name_of(kind): int(self.values[kind]) for kind in self.present_kinds()}

    # -- arithmetic ---------------------------------------------------------

    def __sub__(self, other: SampleRecord) -> SampleRecord:
        return difference(self, other)

    def __add__(self, other: SampleRecord) -> SampleRecord:
        return sum_records(self, other)

    def __floordiv__(self, n: int) -> SampleRecord:
        return scale_down(self, n)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SampleRecord):
            return NotImplemented
        if self.mask != other.mask:
            return False
        present = _slots_present(self.mask)
        return bool(np.array_equal(self.values[present], other.values[present]))

    def __repr__(self) -> str:
        return f"SampleRecord({self.as_dict()!r})"


def _combine(a: SampleRecord, b: SampleRecord, values: npt.NDArray[np.int64]) -> SampleRecord:
    mask = a.mask & b.mask
    return SampleRecord(np.where(_slots_present(mask), values, 0).astype(np.int64), mask)


def difference(a: SampleRecord, b: SampleRecord) -> SampleRecord:
    """``a - b`` over the slots present in both records."""
    return _combine(a, b, a.values - b.values)


def sum_records(a: SampleRecord, b: SampleRecord) -> SampleRecord:
    """``a + b`` over the slots present in both records."""
    return _combine(a, b, a.values + b.values)


def scale_down(a: SampleRecord, n: int) -> SampleRecord:
    """Divide every present slot by *n*, truncating toward zero."""
    if n <= 0:
        raise ValueError(f"Divisor must be a positive integer, got {n}")
    values = a.values
    quotient = np.where(values < 0, -((-values) // n), values // n)
    return SampleRecord(np.where(_slots_present(a.mask), quotient, 0).astype(np.int64), a.mask)


# ---------------------------------------------------------------------------
# Run summary
# ---------------------------------------------------------------------------


@dataclass
class RunSummary:
    """Union of the presence masks of every record in a run."""

    mask: int = 0

    def add(self, record: SampleRecord) -> None:
        self.mask |= record.mask

    def kinds(self) -> list[FieldKind]:
        return list(kinds_in(self.mask))

    def header(self) -> list[tuple[str, str]]:
        return [(name_of(kind), unit_of(kind)) for kind in self.kinds()]
