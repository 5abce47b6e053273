"""
watchdogd — System routes
  GET /health   liveness check
"""
from fastapi import APIRouter, Request

from models import HealthResponse

router = APIRouter(tags=["System"])


@router.get("/health", response_model=HealthResponse, summary="Health check")
def health_check(request: Request):
    """Returns 200 OK if the server is running. `health` is never a valid check-in key."""
    return HealthResponse(
        status="ok",
        message="watchdogd is running",
        keys=len(request.app.state.registry),
    )
