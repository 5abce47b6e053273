"""
watchdogd — Pydantic models (JSON response shapes)
Status and listing endpoints answer in plain text; only /health uses JSON.
"""
from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    message: str
    keys: int
