"""Tests for datetime utilities."""

from datetime import datetime

from vehicle_store.utils.datetime_utils import (
    format_file_timestamp,
    get_current_datetime_local,
    get_current_datetime_local_iso,
    parse_file_timestamp,
)


def test_current_datetime_is_aware() -> None:
    assert get_current_datetime_local().tzinfo is not None
    assert datetime.fromisoformat(get_current_datetime_local_iso()).tzinfo


def test_file_timestamp_round_trip() -> None:
    moment = datetime(2024, 12, 31, 23, 59, 58)

    text = format_file_timestamp(moment)

    assert text == "2024-12-31_235958"
    assert parse_file_timestamp(text) == moment


def test_parse_rejects_other_formats() -> None:
    assert parse_file_timestamp("2024-12-31T23:59:58") is None
