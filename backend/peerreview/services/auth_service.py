"""
PeerReview Backend — Account Service
======================================

What:  Registration and login.
How:   Validates input, talks to the credential store, hashes or verifies the
       password, and issues a bearer token for the resulting identity.
Who:   Called by the /api/auth route handlers.

Login never reveals whether an email is registered: both an unknown email
and a wrong password raise the same UnauthorizedError, and the unknown-email
path still spends one dummy hash verification.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from peerreview.exceptions import ConflictError, UnauthorizedError, ValidationError
from peerreview.repositories.base import AuthenticatedIdentity, CredentialStore
from peerreview.services.password_hasher import PasswordHasher
from peerreview.services.token_service import TokenService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthResult:
    token: str
    identity: AuthenticatedIdentity


def _require_credentials(email: Optional[str], password: Optional[str]) -> None:
    if not email or not email.strip() or not password or not password.strip():
        raise ValidationError(message="Email and password are required")


class AuthService:

    def __init__(
        self,
        credentials: CredentialStore,
        hasher: PasswordHasher,
        tokens: TokenService,
    ):
        self.credentials = credentials
        self.hasher = hasher
        self.tokens = tokens

    async def register(self, email: Optional[str], password: Optional[str]) -> AuthResult:
        """
        Create an identity and log it in.

        Raises:
            ValidationError: email or password missing/blank
            ConflictError: email already registered
            RepositoryError: credential store failure
        """
        _require_credentials(email, password)

        if await self.credentials.find_by_email(email) is not None:
            raise ConflictError(message="Email already registered", context={"field": "email"})

        identity = await self.credentials.create(email, self.hasher.hash(password))
        logger.info("Registered identity %s", identity.id)

        return AuthResult(token=self.tokens.issue(identity.id), identity=identity.public())

    async def login(self, email: Optional[str], password: Optional[str]) -> AuthResult:
        """
        Exchange an email/password pair for a bearer token.

        Raises:
            ValidationError: email or password missing/blank
            UnauthorizedError: unknown email or wrong password (same message)
            RepositoryError: credential store failure
        """
        _require_credentials(email, password)

        identity = await self.credentials.find_by_email(email)
        if identity is None:
            self.hasher.dummy_verify()
            raise UnauthorizedError(message="Invalid credentials")

        if not self.hasher.verify(password, identity.password_hash):
            raise UnauthorizedError(message="Invalid credentials")

        return AuthResult(token=self.tokens.issue(identity.id), identity=identity.public())
