"""
PeerReview Backend — Shared Response Schemas
==============================================

What:  Error envelope and health payload shared by every route module.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Standardized error body for all API errors.

    Example:
        {
            "error": "forbidden",
            "message": "You cannot review your own code",
            "request_id": "1f0c2a9b"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="OK or DEGRADED")
    database: str = Field(description="Connected or Disconnected")
    version: str = Field(description="Application version")
    timestamp: datetime = Field(description="Server time (UTC)")
