"""
PeerReview Backend — Password Hashing
=======================================

What:  One-way password hashing and verification.
How:   passlib's CryptContext with the bcrypt scheme. Callers treat the hash
       as opaque; only `verify` can compare a password against it.
"""

from passlib.context import CryptContext

from peerreview.config import settings


class PasswordHasher:
    """
    Thin wrapper over a bcrypt CryptContext.

    `dummy_verify` burns the same time as a real verification so a login for
    an unknown email is not measurably faster than one with a wrong password.
    """

    def __init__(self, rounds: int = settings.bcrypt_rounds):
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        return self._context.verify(password, password_hash)

    def dummy_verify(self) -> None:
        self._context.dummy_verify()
