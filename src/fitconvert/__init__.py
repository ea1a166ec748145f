"""FIT telemetry converter to SRT subtitles or JSON."""

__version__ = "1.0.0"
