"""
SRT export: one subtitle block per synchronized sample.

Each block shows the fields present in its sample, in a fixed order and with
fixed widths, so the overlay does not jump around between frames:

| Field | Value | Width | Suffix |
|-------|-------|-------|--------|
| distance | cm / 100000, 2 decimals | 5 | ` km` |
| heart rate | bpm | 5 | ` bmp` |
| cadence | rpm | 5 | ` rpm` |
| power | W | 6 | ` w` |
| altitude | accumulated ascent, m | 5 | ` m` |
| speed | mm/s / 277.77, 1 decimal | 6 | ` km/h` |
| temperature | °C | 4 | ` C` |

Decimal values are truncated, never rounded.
"""

from __future__ import annotations

import logging

from fitconvert.config import defaults
from fitconvert.fields import FieldKind
from fitconvert.fit_data import SubtitleItem
from fitconvert.processing.smoothing import SyncedSample, SyncResult

logger = logging.getLogger(__name__)

CM_PER_KM = 100000.0
MMS_PER_KMH = 277.77


def number_to_string_precision(
    number: int,
    divider: float,
    total_symbols: int,
    dot_limit: int,
) -> str:
    """Render ``number / divider`` truncated to *total_symbols* characters
    and at most *dot_limit* fractional digits.

    >>> number_to_string_precision(123456, 100000.0, 5, 2)
    '1.23'
    >>> number_to_string_precision(5000, 277.77, 5, 1)
    '18.0'
    """
    text = f"{number / divider:f}"[:total_symbols]
    dot = text.find(".")
    if dot != -1 and len(text) - dot > dot_limit + 1:
        text = text[: dot + dot_limit + 1]
    if text.endswith("."):
        text = text[:-1]
    return text


def format_sample(sample: SyncedSample) -> str:
    record = sample.record
    output = ""

    distance = record.get(FieldKind.DISTANCE)
    if distance is not None:
        output += f"{number_to_string_precision(distance, CM_PER_KM, 5, 2):>5} km"

    heart_rate = record.get(FieldKind.HEART_RATE)
    if heart_rate is not None:
        output += f"{heart_rate:>5} bmp"

    cadence = record.get(FieldKind.CADENCE)
    if cadence is not None:
        output += f"{cadence:>5} rpm"

    power = record.get(FieldKind.POWER)
    if power is not None:
        output += f"{power:>6} w"

    if record.has(FieldKind.ALTITUDE):
        output += f"{sample.ascent // 5 - 500:>5} m"

    speed = record.get(FieldKind.SPEED)
    if speed is not None:
        output += f"{number_to_string_precision(speed, MMS_PER_KMH, 5, 1):>6} km/h"

    temperature = record.get(FieldKind.TEMPERATURE)
    if temperature is not None:
        output += f"{temperature:>4} C"

    return output


def build_subtitles(result: SyncResult) -> list[SubtitleItem]:
    """Chain the samples into subtitle items.

    Every item lasts until the next one starts; the last one stays open for
    the default window.
    """
    items: list[SubtitleItem] = []

    if result.placeholder is not None:
        items.append(
            SubtitleItem(
                frame=0,
                start_ms=result.placeholder.start_ms,
                end_ms=result.placeholder.end_ms,
                text=result.placeholder.text,
            )
        )

    for sample in result.samples:
        start = sample.timestamp_ms
        if items:
            items[-1].end_ms = start
        items.append(
            SubtitleItem(
                frame=len(items),
                start_ms=start,
                end_ms=start + defaults.SUBTITLE_OPEN_WINDOW_MS,
                text=format_sample(sample),
            )
        )

    return items


def render_srt(result: SyncResult) -> str:
    items = build_subtitles(result)
    if not items:
        logger.warning("no subtitles generated")
    return "".join(item.to_srt() for item in items)
