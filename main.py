"""
watchdogd
=========
A dead man's switch. Jobs check in against a key; monitors poll the key and get
OKAY while check-ins arrive within the window the key itself declares, ALARM
once they stop.

    POST /nightly-backup-24h   (Authorization: Bearer <token>)
    GET  /nightly-backup-24h   → nightly-backup-24h 2024-05-01T03:00:12Z 5h 302m 18133s OKAY

Run:  python main.py -f watchdogd.json -t <token> -l :8080
  or: uvicorn main:create_app --factory   (settings from WATCHDOGD_* env vars)
"""

import argparse
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from config import Settings, load_settings, split_listen_addr
from limiter import limiter
from registry import Registry
from routers import checkins, system
from storage import SnapshotStore


# ── Lifespan ──────────────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: load the database file into the registry. PersistenceIOFault aborts startup.
    store: SnapshotStore = app.state.store
    if store.enabled:
        app.state.registry.restore(store.load())
        print(f"[startup] loaded {len(app.state.registry)} key(s) from {store.path}", flush=True)
    else:
        print("[startup] no filename specified, running an in-memory server.", flush=True)
    yield


# ── App ───────────────────────────────────────────────────────────────────────

def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or load_settings()
    if settings.token_generated:
        print(f"[auth] auth token not specified, using a random token: {settings.auth_token}", flush=True)

    app = FastAPI(
        lifespan=lifespan,
        title="watchdogd",
        description="""
Dead man's switch for cron jobs, backups and batch pipelines.

## Keys

A key ends in its freshness window: `<label>-<number><h|m|s>`, e.g.
`db-backup-24h` or `heartbeat-90s`. Any other key is rejected with 400.

## Endpoints

- `POST /{key}` records a check-in (bearer token or `?token=` required)
- `GET /{key}` returns `OKAY`, `ALARM` or `NEVER ALARM` as one plain-text line
- `GET /` lists every known key
""",
        version="1.0.0",
        license_info={"name": "MIT"},
    )

    app.state.settings = settings
    app.state.registry = Registry()
    app.state.store = SnapshotStore(settings.database_path)

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # ── Routers ───────────────────────────────────────────────────────────────
    # system first: /health must win over /{key}
    app.include_router(system.router)
    app.include_router(checkins.router)
    return app


# ── CLI ───────────────────────────────────────────────────────────────────────

def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="watchdogd", description="Dead man's switch server.")
    parser.add_argument("-f", dest="database_path", default=None, help="path to JSON database file")
    parser.add_argument("-t", dest="auth_token", default=None, help="bearer token for authorization")
    parser.add_argument("-l", dest="listen_addr", default=None, help="listen address (default :8080)")
    args = parser.parse_args(argv)

    settings = load_settings(args.database_path, args.auth_token, args.listen_addr)
    try:
        host, port = split_listen_addr(settings.listen_addr)
    except ValueError as e:
        parser.error(str(e))

    print(f"[startup] running watchdogd on {settings.listen_addr}", flush=True)
    uvicorn.run(create_app(settings), host=host, port=port)


if __name__ == "__main__":
    sys.exit(main())
