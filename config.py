"""
watchdogd — Configuration
All settings are read from environment variables with sensible defaults.
main() lets the -f / -t / -l flags override them.
"""
import base64
import os
import secrets
from dataclasses import dataclass, field

# ── Storage ───────────────────────────────────────────────────────────────────
DATABASE_PATH         = os.getenv("WATCHDOGD_DATABASE_PATH", "")  # Empty = in-memory only

# ── Auth ──────────────────────────────────────────────────────────────────────
AUTH_TOKEN            = os.getenv("WATCHDOGD_AUTH_TOKEN", "")  # Empty = random token at startup
TOKEN_BYTES           = 32

# ── Server ────────────────────────────────────────────────────────────────────
LISTEN_ADDR           = os.getenv("WATCHDOGD_LISTEN", ":8080")

# ── Rate limiting ─────────────────────────────────────────────────────────────
CHECKIN_RATE_LIMIT    = os.getenv("WATCHDOGD_CHECKIN_RATE_LIMIT", "")  # Empty = unlimited, e.g. "120/minute"


def generate_token() -> str:
    """32 random bytes, base32 without padding."""
    return base64.b32encode(secrets.token_bytes(TOKEN_BYTES)).decode().rstrip("=")


def split_listen_addr(addr: str) -> tuple[str, int]:
    """`host:port` → (host, port). An empty host listens on all interfaces."""
    host, sep, port = addr.rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError(f"Invalid listen address: {addr!r}")
    return host.strip("[]") or "0.0.0.0", int(port)


@dataclass(frozen=True)
class Settings:
    database_path: str | None = None
    auth_token: str = ""
    listen_addr: str = ":8080"
    token_generated: bool = field(default=False, compare=False)


def load_settings(
    database_path: str | None = None,
    auth_token: str | None = None,
    listen_addr: str | None = None,
) -> Settings:
    """Build the process settings once. Explicit arguments win over the environment."""
    path  = database_path if database_path is not None else DATABASE_PATH
    token = auth_token if auth_token is not None else AUTH_TOKEN
    generated = not token
    if generated:
        token = generate_token()

    return Settings(
        database_path=path or None,
        auth_token=token,
        listen_addr=listen_addr if listen_addr is not None else LISTEN_ADDR,
        token_generated=generated,
    )
