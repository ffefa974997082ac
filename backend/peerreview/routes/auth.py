"""
PeerReview Backend — Account Route Handlers
=============================================

What:  POST /api/auth/register, POST /api/auth/login, GET /api/protected.
How:   Thin handlers: validate the body (Pydantic), call AuthService, shape
       the response. Errors are raised as application exceptions and turned
       into JSON by the handlers in main.py.
"""

import logging

from fastapi import APIRouter, Depends, status

from peerreview.repositories.base import AuthenticatedIdentity
from peerreview.routes.deps import get_auth_service, require_identity
from peerreview.schemas.auth import (
    AuthResponse,
    CredentialsRequest,
    IdentityResponse,
    ProtectedResponse,
)
from peerreview.schemas.common import ErrorResponse
from peerreview.services.auth_service import AuthResult, AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Auth"])


def _auth_response(result: AuthResult) -> AuthResponse:
    return AuthResponse(
        token=result.token,
        user=IdentityResponse.model_validate(result.identity),
    )


@router.post(
    "/auth/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Email or password missing", "model": ErrorResponse},
        409: {"description": "Email already registered", "model": ErrorResponse},
    },
    summary="Register a new account",
)
async def register(
    body: CredentialsRequest,
    auth: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    result = await auth.register(body.email, body.password)
    return _auth_response(result)


@router.post(
    "/auth/login",
    response_model=AuthResponse,
    responses={
        400: {"description": "Email or password missing", "model": ErrorResponse},
        401: {"description": "Invalid credentials", "model": ErrorResponse},
    },
    summary="Exchange email and password for a bearer token",
)
async def login(
    body: CredentialsRequest,
    auth: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    result = await auth.login(body.email, body.password)
    return _auth_response(result)


@router.get(
    "/protected",
    response_model=ProtectedResponse,
    responses={401: {"description": "Missing, invalid or expired token", "model": ErrorResponse}},
    summary="Echo the authenticated identity",
)
async def read_current_identity(
    identity: AuthenticatedIdentity = Depends(require_identity),
) -> ProtectedResponse:
    return ProtectedResponse(
        message="You have accessed a protected route",
        user=IdentityResponse.model_validate(identity),
    )
