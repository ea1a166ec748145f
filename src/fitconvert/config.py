from enum import StrEnum

import pydantic
import pydantic_settings

STDIN_TAG = "stdin"
STDOUT_TAG = "stdout"


class OutputFormat(StrEnum):
    JSON = "json"
    SRT = "srt"


class FitConvertDefaults(pydantic_settings.BaseSettings):
    model_config = pydantic_settings.SettingsConfigDict(env_prefix="FITCONVERT_")

    # Source is consumed in fixed-size chunks
    CHUNK_SIZE: int = 4096

    # --- Subtitle timing ---
    # Units: milliseconds
    SUBTITLE_OPEN_WINDOW_MS: int = 60000

    PLACEHOLDER_TEXT: str = "< data is not available >"

    # --- Altitude accumulator ---
    # Raw altitude is (m + 500) * 5, so 2500 displays as 0 m
    ACCUMULATOR_SEED: int = 500 * 5

    MAX_SMOOTHING: int = 9


defaults = FitConvertDefaults()


class ConverterConfig(pydantic_settings.BaseSettings):
    """Settings for a single conversion run."""

    model_config = pydantic_settings.SettingsConfigDict(env_prefix="FITCONVERT_")

    INPUT: str
    OUTPUT: str
    FORMAT: OutputFormat = OutputFormat.SRT

    # Units: milliseconds, positive when the video starts after the recording
    OFFSET_MS: int = 0

    # Number of interpolated samples inserted between two records
    SMOOTHING: int = 0

    @pydantic.field_validator("FORMAT", mode="before")
    @classmethod
    def _normalize_format(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @pydantic.field_validator("SMOOTHING")
    @classmethod
    def _check_smoothing(cls, value: int) -> int:
        if value < 0:
            raise ValueError("smoothness can not be negative")
        if value > defaults.MAX_SMOOTHING:
            raise ValueError(f"smoothness can not be more than {defaults.MAX_SMOOTHING}")
        return value
