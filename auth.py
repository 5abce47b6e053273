"""
watchdogd — Auth dependencies
  - extract_token:  bearer header, or ?token= when no header is sent
  - authenticate:   constant-time comparison against the configured secret
  - verify_token:   FastAPI dependency guarding check-ins (reads stay open)
"""
import secrets

from fastapi import Header, HTTPException, Query, Request

BEARER_PREFIX = "Bearer "


class MalformedAuthHeader(Exception):
    """Authorization header present but not of the form `Bearer <token>`."""


class Unauthorized(Exception):
    """Missing or wrong credential."""


def extract_token(authorization: str | None, query_token: str | None) -> str:
    if authorization:
        if not authorization.startswith(BEARER_PREFIX):
            raise MalformedAuthHeader(authorization)
        return authorization[len(BEARER_PREFIX):]
    return query_token or ""


def authenticate(presented: str | None, secret: str) -> None:
    """Raise Unauthorized unless `presented` equals `secret`. Never short-circuits on content."""
    if not secret or not secrets.compare_digest((presented or "").encode(), secret.encode()):
        raise Unauthorized()


async def verify_token(
    request: Request,
    authorization: str = Header(default=""),
    token: str = Query(default=""),
) -> None:
    try:
        authenticate(extract_token(authorization, token), request.app.state.settings.auth_token)
    except MalformedAuthHeader:
        raise HTTPException(status_code=400, detail="Invalid Authorization format")
    except Unauthorized:
        raise HTTPException(status_code=401, detail="Unauthorized")
