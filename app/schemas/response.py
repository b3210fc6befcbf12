"""
app/schemas/response.py

Purpose: Shared response bodies
"""

from pydantic import BaseModel
from typing import Optional, Any


class ErrorResponse(BaseModel):
    """
    Standard error response structure.
    """
    error: str
    code: str
    details: Optional[Any] = None


class StatusResponse(BaseModel):
    """Body of the liveness/readiness probes."""
    status: str
    reason: Optional[str] = None
