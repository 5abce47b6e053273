from __future__ import annotations

from datetime import timedelta

import pytest

from keys import InvalidKey, ParsedKey, is_valid_key, parse_key


@pytest.mark.parametrize(
    ("raw", "label", "window"),
    [
        ("backup-24h", "backup", timedelta(hours=24)),
        ("heartbeat-90s", "heartbeat", timedelta(seconds=90)),
        ("report-15m", "report", timedelta(minutes=15)),
        ("db-backup-24h", "db-backup", timedelta(hours=24)),
        ("job-1h-2m", "job-1h", timedelta(minutes=2)),
        ("host.example.com_disk-007h", "host.example.com_disk", timedelta(hours=7)),
        ("--1s", "-", timedelta(seconds=1)),
        ("edge-0s", "edge", timedelta(0)),
    ],
)
def test_parse_valid_keys(raw: str, label: str, window: timedelta) -> None:
    assert parse_key(raw) == ParsedKey(label=label, window=window)
    assert is_valid_key(raw)


@pytest.mark.parametrize(
    "raw",
    [
        "",
        "x",
        "backup",
        "backup-24",
        "backup-h",
        "backup24h",
        "-24h",
        "backup-24d",
        "backup-24H",
        "backup-24hx",
        "backup-24h.bak",
        "backup-24h\n",
        " backup-24h",
        "back up-24h",
        "bäckup-24h",
        "backup/daily-24h",
        "backup-٢٤h",
        "backup-1.5h",
    ],
)
def test_parse_rejects_malformed_keys(raw: str) -> None:
    with pytest.raises(InvalidKey):
        parse_key(raw)
    assert not is_valid_key(raw)


def test_window_too_large_is_invalid() -> None:
    with pytest.raises(InvalidKey):
        parse_key("forever-99999999999999999999h")


def test_invalid_key_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        parse_key("nope")


def test_window_with_thousands_of_digits_is_invalid() -> None:
    with pytest.raises(InvalidKey):
        parse_key("job-" + "1" * 4400 + "h")
    assert not is_valid_key("job-" + "1" * 4400 + "h")


def test_leading_zeros_do_not_count_against_digit_limit() -> None:
    assert parse_key("job-" + "0" * 5000 + "1h") == ParsedKey(label="job", window=timedelta(hours=1))
    assert parse_key("job-" + "0" * 5000 + "s").window == timedelta(0)
