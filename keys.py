"""
watchdogd — Check-in keys
A key carries its own freshness window as a trailing `-<digits><unit>` token,
e.g. `nightly-backup-24h` → label `nightly-backup`, window 24 hours.
"""
import re
from dataclasses import dataclass
from datetime import timedelta

KEY_PATTERN = re.compile(r"(?P<label>[A-Za-z0-9._-]+)-(?P<amount>[0-9]+)(?P<unit>[hms])", re.ASCII)

_UNITS = {
    "h": "hours",
    "m": "minutes",
    "s": "seconds",
}


class InvalidKey(ValueError):
    """The key does not end in a `-<digits><unit>` window suffix."""


@dataclass(frozen=True)
class ParsedKey:
    label: str
    window: timedelta


def parse_key(raw: str) -> ParsedKey:
    match = KEY_PATTERN.fullmatch(raw)
    if match is None:
        raise InvalidKey(f"Invalid key: {raw!r}")

    try:
        # int() refuses more than 4300 digits; leading zeros are not significant
        amount = int(match.group("amount").lstrip("0") or "0")
        window = timedelta(**{_UNITS[match.group("unit")]: amount})
    except (OverflowError, ValueError):
        raise InvalidKey(f"Window too large: {raw!r}")

    return ParsedKey(label=match.group("label"), window=window)


def is_valid_key(raw: str) -> bool:
    try:
        parse_key(raw)
    except InvalidKey:
        return False
    return True
