"""
Pydantic schemas shared across routers.

These describe the payload inside the response envelope.
"""

from typing import Optional

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Response schema for the health endpoint."""

    status: str
    version: str


class ErrorResponse(BaseModel):
    """Error payload carried in the envelope's ``responseException``."""

    error: str
    detail: Optional[str] = None
