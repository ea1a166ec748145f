"""Tests for the JSON and SRT renderers."""

import json

import pytest

from fitconvert.fit_data import SrtTime, SubtitleItem
from fitconvert.export.json_export import build_json_document, render_json
from fitconvert.export.srt_export import (
    build_subtitles,
    format_sample,
    number_to_string_precision,
    render_srt,
)
from fitconvert.processing.ingest import ingest
from fitconvert.processing.smoothing import SyncedSample, synchronize

from conftest import make_record, record_message


def _synced(record, ascent=2500, descent=2500, timestamp_ms=0):
    return SyncedSample(timestamp_ms=timestamp_ms, record=record, ascent=ascent, descent=descent)


class TestNumberToStringPrecision:
    @pytest.mark.parametrize(
        "number, divider, total, dot_limit, expected",
        [
            (123456, 100000.0, 5, 2, "1.23"),
            (150000, 100000.0, 5, 2, "1.50"),
            (199999, 100000.0, 5, 2, "1.99"),
            (0, 100000.0, 5, 2, "0.00"),
            (4212345678, 100000.0, 5, 2, "42123"),
            (5000, 277.77, 5, 1, "18.0"),
            (9999, 277.77, 5, 1, "35.9"),
            (3000000, 277.77, 5, 1, "10800"),
        ],
    )
    def test_truncation(self, number, divider, total, dot_limit, expected):
        assert number_to_string_precision(number, divider, total, dot_limit) == expected

    def test_dangling_dot_is_stripped(self):
        # "1234.000000" cut to five characters leaves "1234."
        assert number_to_string_precision(123400000, 100000.0, 5, 2) == "1234"


class TestSrtTime:
    def test_decomposition(self):
        assert str(SrtTime.from_milliseconds(0)) == "00:00:00,000"
        assert str(SrtTime.from_milliseconds(1000)) == "00:00:01,000"
        assert str(SrtTime.from_milliseconds(3723004)) == "01:02:03,004"

    def test_item_block(self):
        item = SubtitleItem(frame=3, start_ms=61000, end_ms=62500, text="  100 bmp")
        assert item.to_srt() == "3\n00:01:01,000 --> 00:01:02,500\n  100 bmp\n\n"


class TestFormatSample:
    def test_field_order_and_widths(self):
        record = make_record(
            TIMESTAMP=0,
            DISTANCE=123456,
            HEART_RATE=142,
            CADENCE=88,
            POWER=250,
            ALTITUDE=3000,
            SPEED=5000,
            TEMPERATURE=21,
        )
        text = format_sample(_synced(record, ascent=2510))

        assert text == " 1.23 km  142 bmp   88 rpm   250 w    2 m  18.0 km/h  21 C"

    def test_absent_fields_contribute_nothing(self):
        text = format_sample(_synced(make_record(TIMESTAMP=0, POWER=5)))
        assert text == "     5 w"

    def test_altitude_uses_accumulated_ascent(self):
        record = make_record(TIMESTAMP=0, ALTITUDE=9999)
        assert format_sample(_synced(record, ascent=2500)) == "    0 m"
        assert format_sample(_synced(record, ascent=3000)) == "  100 m"


class TestSubtitles:
    def test_heart_rate_scenario(self, heart_rate_records):
        srt = render_srt(synchronize(heart_rate_records))

        assert srt == (
            "0\n00:00:00,000 --> 00:00:01,000\n  100 bmp\n\n"
            "1\n00:00:01,000 --> 00:00:02,000\n  110 bmp\n\n"
            "2\n00:00:02,000 --> 00:01:02,000\n  120 bmp\n\n"
        )

    def test_items_chain(self, heart_rate_records):
        items = build_subtitles(synchronize(heart_rate_records, smoothing=2))

        for current, following in zip(items, items[1:]):
            assert current.end_ms == following.start_ms
        assert items[-1].end_ms == items[-1].start_ms + 60000
        assert [item.frame for item in items] == list(range(len(items)))

    def test_placeholder_is_frame_zero(self, heart_rate_records):
        items = build_subtitles(synchronize(heart_rate_records, offset_ms=-2000))

        assert items[0].frame == 0
        assert items[0].text == "< data is not available >"
        assert (items[0].start_ms, items[0].end_ms) == (0, 2000)
        assert items[1].frame == 1
        assert all(item.start_ms >= 2000 for item in items[1:])

    def test_altitude_display_follows_accumulator(self):
        records = [make_record(TIMESTAMP=t, ALTITUDE=a) for t, a in enumerate([1000, 1010, 1005, 1005])]
        items = build_subtitles(synchronize(records))

        assert [item.text for item in items] == ["    0 m", "    2 m", "    2 m", "    2 m"]

    def test_empty_result(self):
        assert render_srt(synchronize([])) == ""


class TestJsonExport:
    def test_only_present_fields(self):
        result = ingest(
            [
                record_message(timestamp=10, heart_rate=100),
                record_message(timestamp=11, heart_rate=101),
            ]
        )
        document = json.loads(render_json(result))

        assert document["header"] == [
            {"data": "heartrate", "units": "bpm"},
            {"data": "timestamp", "units": "s"},
        ]
        assert document["records"] == [
            {"heartrate": 100, "timestamp": 10},
            {"heartrate": 101, "timestamp": 11},
        ]

    def test_sparse_records(self):
        result = ingest(
            [
                record_message(timestamp=10, power=200),
                record_message(timestamp=11, cadence=90),
            ]
        )
        document = build_json_document(result)

        assert [h.data for h in document.header] == ["power", "cadence", "timestamp"]
        assert document.records[0] == {"power": 200, "timestamp": 10}
        assert document.records[1] == {"cadence": 90, "timestamp": 11}

    def test_keys_follow_registry_order(self):
        result = ingest([record_message(timestamp=1, temperature=-3, speed=1200, distance=5)])
        text = render_json(result)

        assert text.index('"speed"') < text.index('"distance"') < text.index('"temperature"')
        assert json.loads(text)["records"][0]["temperature"] == -3

    def test_empty_run(self):
        assert json.loads(render_json(ingest([]))) == {"header": [], "records": []}
