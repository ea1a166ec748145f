"""Export data models for the JSON document and the SRT subtitle track."""

from __future__ import annotations

import pydantic

# ---------------------------------------------------------------------------
# JSON export models
# ---------------------------------------------------------------------------


class HeaderEntry(pydantic.BaseModel):
    """A field present somewhere in the run, with the unit of its raw values."""

    data: str
    units: str


class JsonDocument(pydantic.BaseModel):
    header: list[HeaderEntry] = pydantic.Field(default_factory=list)
    records: list[dict[str, int]] = pydantic.Field(default_factory=list)


# ---------------------------------------------------------------------------
# SRT models
# ---------------------------------------------------------------------------


class SrtTime(pydantic.BaseModel):
    hours: int = 0
    minutes: int = 0
    seconds: int = 0
    milliseconds: int = 0

    @classmethod
    def from_milliseconds(cls, total: int) -> SrtTime:
        hours, remainder = divmod(total, 3600000)
        minutes, remainder = divmod(remainder, 60000)
        seconds, milliseconds = divmod(remainder, 1000)
        return cls(hours=hours, minutes=minutes, seconds=seconds, milliseconds=milliseconds)

    def __str__(self) -> str:
        return f"{self.hours:02d}:{self.minutes:02d}:{self.seconds:02d},{self.milliseconds:03d}"


class SubtitleItem(pydantic.BaseModel):
    """One subtitle block; ``end_ms`` is rewritten once the next block exists."""

    frame: int
    start_ms: int
    end_ms: int
    text: str

    def to_srt(self) -> str:
        start = SrtTime.from_milliseconds(self.start_ms)
        end = SrtTime.from_milliseconds(self.end_ms)
        return f"{self.frame}\n{start} --> {end}\n{self.text}\n\n"
