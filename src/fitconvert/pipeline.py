"""Conversion pipeline: read the FIT source, render it and write the export."""

from __future__ import annotations

import logging
import time

import pydantic

from fitconvert.config import ConverterConfig, OutputFormat
from fitconvert.errors import ConfigurationError
from fitconvert.export.json_export import render_json
from fitconvert.export.srt_export import render_srt
from fitconvert.fit_file import write_destination
from fitconvert.processing.ingest import IngestResult, ingest_file
from fitconvert.processing.smoothing import synchronize

logger = logging.getLogger(__name__)


def load_config(**values) -> ConverterConfig:
    """Build a :class:`ConverterConfig`, turning validation errors into
    :class:`ConfigurationError`."""
    try:
        return ConverterConfig(**values)
    except pydantic.ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'config'}: {err['msg']}" for err in exc.errors()
        )
        raise ConfigurationError(problems) from exc


def render(config: ConverterConfig, result: IngestResult) -> str:
    if config.FORMAT == OutputFormat.JSON:
        return render_json(result)
    synced = synchronize(result.records, offset_ms=config.OFFSET_MS, smoothing=config.SMOOTHING)
    return render_srt(synced)


def run(config: ConverterConfig) -> None:
    """Run one conversion and log the number of bytes written.

    Any failure raises a :class:`~fitconvert.errors.FitConvertError`; the
    destination is only touched once the whole document is rendered.
    """
    t_total = time.monotonic()

    if config.FORMAT == OutputFormat.JSON and (config.OFFSET_MS != 0 or config.SMOOTHING != 0):
        logger.warning("smoothness or offset valid only for .srt output format")

    result = ingest_file(config.INPUT)
    document = render(config, result)

    saved = write_destination(config.OUTPUT, document)
    logger.info(
        "%s saved to: %s, size: %d  (%.2f s)",
        config.FORMAT.value,
        config.OUTPUT,
        saved,
        time.monotonic() - t_total,
    )
