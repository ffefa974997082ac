"""
PeerReview Backend — Token Service
====================================

What:  Issues and verifies signed, time-limited bearer tokens.
Why:   Stateless sessions: a token proves an identity without a session
       table, and its fixed lifetime bounds how long a leaked token works.
How:   HMAC-signed JWTs (python-jose) carrying three claims:
           sub: identity UUID as a string
           iat: issue time, integer seconds since the epoch
           exp: iat + token_ttl_seconds
       Verification checks the signature with the configured key and
       algorithm only, then compares `exp` against the injected clock.

Failure Taxonomy:
    MalformedTokenError: not a JWT, wrong key/algorithm, tampered payload,
                         missing or mistyped claims
    ExpiredTokenError:   signature valid, but now >= exp

    Expiry is checked here rather than by jose's built-in `exp` check, which
    still accepts a token at the exact expiry second.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from jose import JWTError, jwt

from peerreview.config import settings
from peerreview.exceptions import ExpiredTokenError, MalformedTokenError

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """
    Signs and checks access tokens. Performs no I/O.

    Args:
        secret: HMAC key shared by issue and verify
        algorithm: One of HS256/HS384/HS512
        ttl_seconds: Absolute lifetime from issuance
        clock: Returns the current aware UTC datetime (tests pin it)
    """

    def __init__(
        self,
        secret: str = settings.jwt_secret,
        algorithm: str = settings.jwt_algorithm,
        ttl_seconds: int = settings.token_ttl_seconds,
        clock: Optional[Clock] = None,
    ):
        self._secret = secret
        self._algorithm = algorithm
        self._ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock or utc_now

    def issue(self, identity_id: uuid.UUID) -> str:
        issued_at = self._clock()
        expires_at = issued_at + self._ttl
        claims = {
            "sub": str(identity_id),
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> uuid.UUID:
        """
        Return the identity id a token was issued for.

        Raises:
            MalformedTokenError: token unparseable, signature invalid, or
                claims missing/mistyped
            ExpiredTokenError: current time is at or past `exp`
        """
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"verify_exp": False},
            )
        except JWTError as e:
            logger.debug("Token rejected: %s", str(e))
            raise MalformedTokenError(context={"reason": type(e).__name__}) from e

        expires_at = claims.get("exp")
        subject = claims.get("sub")
        if not isinstance(expires_at, int) or isinstance(expires_at, bool):
            raise MalformedTokenError(context={"reason": "missing exp"})
        if not isinstance(subject, str):
            raise MalformedTokenError(context={"reason": "missing sub"})

        try:
            identity_id = uuid.UUID(subject)
        except ValueError as e:
            raise MalformedTokenError(context={"reason": "invalid sub"}) from e

        if self._clock().timestamp() >= expires_at:
            raise ExpiredTokenError(context={"expired_at": expires_at})

        return identity_id
