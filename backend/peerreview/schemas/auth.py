"""
PeerReview Backend — Account Schemas
======================================

What:  Request and response models for registration, login, and the current
       identity endpoint.
Why:   Bodies are validated before any service runs; a missing or blank
       field is answered with a 400 `validation_error` (see main.py).
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class CredentialsRequest(BaseModel):
    """
    Body of POST /api/auth/register and POST /api/auth/login.

    Required: email, password. The email is stored and compared exactly as
    sent; no case folding is applied.
    """
    email: str = Field(min_length=1, max_length=320, description="Account email")
    password: str = Field(min_length=1, max_length=1024, description="Plain-text password")


class IdentityResponse(BaseModel):
    """Public identity metadata. The password hash is never serialized."""
    id: uuid.UUID = Field(description="Identity UUID")
    email: str = Field(description="Account email")
    created_at: datetime = Field(description="Registration time (UTC)")

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    """Returned by register (201) and login (200)."""
    token: str = Field(description="Bearer token, valid for one hour")
    user: IdentityResponse


class ProtectedResponse(BaseModel):
    """Returned by GET /api/protected."""
    message: str
    user: IdentityResponse
