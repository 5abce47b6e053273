"""
watchdogd — Check-in rate limiter (shared instance)
Off unless WATCHDOGD_CHECKIN_RATE_LIMIT is set. When on, each check-in key has
its own bucket, so jobs sharing a host or NAT never throttle each other.
"""
from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

import config


def checkin_key(request: Request) -> str:
    return request.path_params.get("key") or get_remote_address(request)


def checkin_rate_limit() -> str:
    """Evaluated on every limited check-in."""
    return config.CHECKIN_RATE_LIMIT


limiter = Limiter(key_func=checkin_key, enabled=bool(config.CHECKIN_RATE_LIMIT))
