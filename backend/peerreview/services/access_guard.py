"""
PeerReview Backend — Access Guard
===================================

What:  Turns the Authorization header of a request into an authenticated
       identity, or rejects the request.
Who:   Invoked by the `require_identity` route dependency before any
       protected handler body runs.

Resolution steps:
    1. Header present and starts with "Bearer "   else NoCredentialError
    2. TokenService.verify(token)                 Malformed/ExpiredTokenError
    3. CredentialStore.find_by_id(subject)        else UnknownIdentityError
    4. Return the identity without its password hash

Every failure is a 401 and happens before the handler, so a rejected
request never reaches a repository write.
"""

import logging
from typing import Optional

from peerreview.exceptions import NoCredentialError, UnknownIdentityError
from peerreview.repositories.base import AuthenticatedIdentity, CredentialStore
from peerreview.services.token_service import TokenService

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def extract_bearer_token(authorization: Optional[str]) -> str:
    """Token part of an `Authorization: Bearer <token>` header value."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise NoCredentialError()
    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise NoCredentialError()
    return token


class AccessGuard:

    def __init__(self, tokens: TokenService, credentials: CredentialStore):
        self.tokens = tokens
        self.credentials = credentials

    async def authenticate(self, authorization: Optional[str]) -> AuthenticatedIdentity:
        """
        Raises:
            NoCredentialError: header absent or not a Bearer credential
            MalformedTokenError: token unparseable or badly signed
            ExpiredTokenError: token past its expiry
            UnknownIdentityError: token subject no longer exists
        """
        token = extract_bearer_token(authorization)
        identity_id = self.tokens.verify(token)

        identity = await self.credentials.find_by_id(identity_id)
        if identity is None:
            logger.warning("Valid token for unknown identity %s", identity_id)
            raise UnknownIdentityError(identity_id=str(identity_id))

        return identity.public()
