"""JSON export: run header plus one sparse object per record."""

from __future__ import annotations

import logging

from fitconvert.fit_data import HeaderEntry, JsonDocument
from fitconvert.processing.ingest import IngestResult

logger = logging.getLogger(__name__)


def build_json_document(result: IngestResult) -> JsonDocument:
    header = [HeaderEntry(data=name, units=unit) for name, unit in result.summary.header()]
    records = [record.as_dict() for record in result.records]
    return JsonDocument(header=header, records=records)


def render_json(result: IngestResult) -> str:
    document = build_json_document(result)
    logger.debug("JSON export: %d header fields, %d records", len(document.header), len(document.records))
    return document.model_dump_json()
