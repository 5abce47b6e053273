"""
watchdogd — Status evaluation
Turns (window, last check-in, now) into a verdict and the plain-text line that
monitoring systems scrape. The line format and verdict keywords are stable.
"""
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Mapping

from keys import InvalidKey, parse_key


class Verdict(str, Enum):
    OKAY = "OKAY"
    ALARM = "ALARM"
    NEVER = "NEVER"


def evaluate(window: timedelta, last_seen: datetime | None, now: datetime) -> Verdict:
    if last_seen is None:
        return Verdict.NEVER
    if now - last_seen > window:
        return Verdict.ALARM
    return Verdict.OKAY


def format_timestamp(value: datetime) -> str:
    """RFC 3339 in UTC, second precision, `Z` suffix."""
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def render_status(key: str, window: timedelta, last_seen: datetime | None, now: datetime) -> str:
    """
    One status line, newline-terminated:
      <key> NEVER ALARM
      <key> <last_seen> <H>h <M>m <S>s <OKAY|ALARM>
    H, M and S are the elapsed time in total hours, total minutes and total
    seconds, each rounded to the nearest integer.
    """
    verdict = evaluate(window, last_seen, now)
    if verdict is Verdict.NEVER:
        return f"{key} NEVER ALARM\n"

    seconds = (now - last_seen).total_seconds()
    return (
        f"{key} {format_timestamp(last_seen)} "
        f"{seconds / 3600:.0f}h {seconds / 60:.0f}m {seconds:.0f}s {verdict.value}\n"
    )


def render_listing(state: Mapping[str, datetime], now: datetime) -> str:
    lines = [f"watchdogd has {len(state)} keys\n"]
    for key in sorted(state):
        try:
            window = parse_key(key).window
        except InvalidKey:
            # Only reachable if a caller restored unvalidated keys; such a key has no window.
            window = timedelta(0)
        lines.append(render_status(key, window, state[key], now))
    return "".join(lines)
