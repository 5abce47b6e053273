"""
watchdogd — Check-in routes
  POST /{key}   check in (bearer token or ?token=)
  GET  /{key}   status line for one key
  GET  /        all known keys
"""
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request, Response
from fastapi.responses import PlainTextResponse

from auth import verify_token
from keys import InvalidKey, ParsedKey, parse_key
from limiter import checkin_rate_limit, limiter
from registry import Registry, now_utc
from status import render_listing, render_status
from storage import SnapshotStore, persist

router = APIRouter(tags=["Checkins"])


def get_registry(request: Request) -> Registry:
    return request.app.state.registry


def get_store(request: Request) -> SnapshotStore:
    return request.app.state.store


def _parse_or_400(key: str) -> ParsedKey:
    try:
        return parse_key(key)
    except InvalidKey:
        raise HTTPException(status_code=400, detail="Invalid key")


@router.get("/", response_class=PlainTextResponse, summary="List all keys")
def list_checkins(registry: Registry = Depends(get_registry)):
    """Header line `watchdogd has N keys`, then one status line per key."""
    return PlainTextResponse(render_listing(registry.snapshot(), now_utc()))


@router.post("/{key}", status_code=204, summary="Check in",
             dependencies=[Depends(verify_token)])
@limiter.limit(checkin_rate_limit)
def checkin(
    request: Request,
    key: str,
    background_tasks: BackgroundTasks,
    registry: Registry = Depends(get_registry),
    store: SnapshotStore = Depends(get_store),
):
    """
    Record that `key` is alive now. The database file is rewritten after the
    response is sent; the caller never waits on disk.
    """
    _parse_or_400(key)
    registry.record(key)
    background_tasks.add_task(persist, registry, store)
    return Response(status_code=204)


@router.get("/{key}", response_class=PlainTextResponse, summary="Key status")
def key_status(key: str, registry: Registry = Depends(get_registry)):
    """
    Plain-text status for monitors:
      `<key> <last check-in> <H>h <M>m <S>s OKAY|ALARM`, or `<key> NEVER ALARM`.
    """
    parsed = _parse_or_400(key)
    last_seen = registry.lookup(key)
    return PlainTextResponse(render_status(key, parsed.window, last_seen, now_utc()))
