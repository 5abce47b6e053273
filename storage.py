"""
watchdogd — Snapshot persistence
Loads the JSON database once at startup and rewrites it after every check-in.

File layout: one JSON object, key → RFC 3339 UTC timestamp, indented, fully
replaced on each save.
"""
import json
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from uuid import uuid4

from keys import is_valid_key
from registry import Registry


class StorageAbsent(Exception):
    """No database file yet. Expected on first run."""


class PersistenceCorrupt(Exception):
    """The database file exists but its content cannot be decoded."""


class PersistenceIOFault(Exception):
    """The database file cannot be read or written. Fatal."""


# ── Encoding ──────────────────────────────────────────────────────────────────

def encode_timestamp(value: datetime) -> str:
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def decode_timestamp(value: str) -> datetime:
    """Parse an RFC 3339 timestamp. Fractional digits beyond microseconds are truncated."""
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        raise ValueError(f"timestamp without offset: {value!r}")
    return parsed.astimezone(timezone.utc)


def dumps_state(state: dict[str, datetime]) -> str:
    payload = {key: encode_timestamp(ts) for key, ts in state.items()}
    return json.dumps(payload, indent=2, sort_keys=True)


def loads_state(data: str) -> dict[str, datetime]:
    try:
        payload = json.loads(data)
    except ValueError as e:
        raise PersistenceCorrupt(f"invalid JSON: {e}")

    if not isinstance(payload, dict):
        raise PersistenceCorrupt("top-level value is not an object")

    state: dict[str, datetime] = {}
    for key, value in payload.items():
        if not isinstance(value, str):
            raise PersistenceCorrupt(f"timestamp for {key!r} is not a string")
        try:
            state[key] = decode_timestamp(value)
        except ValueError as e:
            raise PersistenceCorrupt(f"bad timestamp for {key!r}: {e}")
    return state


def _discard(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError:
        pass


# ── Store ─────────────────────────────────────────────────────────────────────

class SnapshotStore:
    """JSON file gateway. With no path configured every operation is a no-op."""

    def __init__(self, path: str | os.PathLike | None) -> None:
        self.path = Path(path) if path else None

    @property
    def enabled(self) -> bool:
        return self.path is not None

    def read(self) -> dict[str, datetime]:
        """Strict read: raises StorageAbsent, PersistenceCorrupt or PersistenceIOFault."""
        try:
            data = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise StorageAbsent(str(self.path))
        except UnicodeDecodeError as e:
            raise PersistenceCorrupt(f"not UTF-8: {e}")
        except OSError as e:
            raise PersistenceIOFault(f"error loading watchdogd database: {e}") from e
        return loads_state(data)

    def load(self) -> dict[str, datetime]:
        """Startup load. Missing or corrupt files yield an empty state; I/O faults propagate."""
        if not self.enabled:
            return {}

        try:
            state = self.read()
        except StorageAbsent:
            print("[storage] no watchdogd database file found, starting with an empty database.", flush=True)
            return {}
        except PersistenceCorrupt as e:
            print(
                f"[storage] corrupted watchdogd database file, starting with an empty database. ({e})",
                file=sys.stderr, flush=True,
            )
            return {}

        for key in [k for k in state if not is_valid_key(k)]:
            print(f"[storage] dropping invalid key from database: {key!r}", file=sys.stderr, flush=True)
            del state[key]
        return state

    def save(self, state: dict[str, datetime]) -> None:
        """Atomically replace the file with `state`. Raises PersistenceIOFault on failure."""
        if not self.enabled:
            return

        serialised = dumps_state(state)
        tmp_path = self.path.parent / f".{self.path.name}.{uuid4().hex}.tmp"
        try:
            tmp_path.write_text(serialised, encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as e:
            _discard(tmp_path)
            raise PersistenceIOFault(f"watchdogd saving failed: {e}") from e


# ── Background save ───────────────────────────────────────────────────────────

def persist(registry: Registry, store: SnapshotStore) -> None:
    """
    Save a fresh snapshot of the registry. Runs as a background task after the
    check-in response has been sent. A write failure terminates the process.
    """
    if not store.enabled:
        return
    try:
        store.save(registry.snapshot())
    except PersistenceIOFault as e:
        print(f"[storage] {e}", file=sys.stderr, flush=True)
        os._exit(1)
