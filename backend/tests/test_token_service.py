"""
PeerReview Backend — Token Service Unit Tests
===============================================

What we test:
    ✅ A freshly issued token verifies back to the same identity id
    ✅ Expiry is exclusive: valid one second before exp, rejected at exp
    ✅ Wrong key, wrong algorithm, tampering and garbage are all malformed
    ✅ Tokens missing `sub` or `exp` are malformed
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from peerreview.exceptions import ExpiredTokenError, MalformedTokenError, UnauthorizedError
from peerreview.services.token_service import TokenService

SECRET = "unit-test-secret"
ISSUED_AT = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class FrozenClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock():
    return FrozenClock(ISSUED_AT)


@pytest.fixture
def service(clock):
    return TokenService(secret=SECRET, algorithm="HS256", ttl_seconds=3600, clock=clock)


class TestIssueAndVerify:

    def test_round_trip_returns_identity(self, service):
        identity_id = uuid.uuid4()
        assert service.verify(service.issue(identity_id)) == identity_id

    def test_claims_carry_subject_and_one_hour_lifetime(self, service):
        identity_id = uuid.uuid4()
        claims = jwt.get_unverified_claims(service.issue(identity_id))

        assert claims["sub"] == str(identity_id)
        assert claims["iat"] == int(ISSUED_AT.timestamp())
        assert claims["exp"] - claims["iat"] == 3600

    def test_distinct_identities_get_distinct_tokens(self, service):
        assert service.issue(uuid.uuid4()) != service.issue(uuid.uuid4())


class TestExpiry:

    def test_valid_just_before_expiry(self, service, clock):
        identity_id = uuid.uuid4()
        token = service.issue(identity_id)

        clock.now = ISSUED_AT + timedelta(seconds=3599)
        assert service.verify(token) == identity_id

    def test_expired_at_exact_expiry_instant(self, service, clock):
        token = service.issue(uuid.uuid4())

        clock.now = ISSUED_AT + timedelta(seconds=3600)
        with pytest.raises(ExpiredTokenError) as exc_info:
            service.verify(token)
        assert exc_info.value.message == "Token expired"

    def test_expired_long_after(self, service, clock):
        token = service.issue(uuid.uuid4())

        clock.now = ISSUED_AT + timedelta(days=2)
        with pytest.raises(ExpiredTokenError):
            service.verify(token)

    def test_expired_is_an_unauthorized_error(self):
        assert issubclass(ExpiredTokenError, UnauthorizedError)


class TestMalformed:

    def test_garbage_string(self, service):
        with pytest.raises(MalformedTokenError) as exc_info:
            service.verify("not-a-jwt")
        assert exc_info.value.message == "Invalid token"

    def test_signed_with_other_secret(self, service, clock):
        other = TokenService(secret="someone-else", algorithm="HS256", ttl_seconds=3600, clock=clock)
        with pytest.raises(MalformedTokenError):
            service.verify(other.issue(uuid.uuid4()))

    def test_signed_with_other_algorithm(self, service, clock):
        other = TokenService(secret=SECRET, algorithm="HS512", ttl_seconds=3600, clock=clock)
        with pytest.raises(MalformedTokenError):
            service.verify(other.issue(uuid.uuid4()))

    def test_tampered_payload(self, service):
        header, payload, signature = service.issue(uuid.uuid4()).split(".")
        forged_payload = jwt.encode(
            {"sub": str(uuid.uuid4()), "exp": 9999999999}, "x", algorithm="HS256"
        ).split(".")[1]

        with pytest.raises(MalformedTokenError):
            service.verify(".".join([header, forged_payload, signature]))

    def test_missing_subject(self, service):
        token = jwt.encode({"exp": int(ISSUED_AT.timestamp()) + 60}, SECRET, algorithm="HS256")
        with pytest.raises(MalformedTokenError):
            service.verify(token)

    def test_missing_expiry(self, service):
        token = jwt.encode({"sub": str(uuid.uuid4())}, SECRET, algorithm="HS256")
        with pytest.raises(MalformedTokenError):
            service.verify(token)

    def test_subject_not_a_uuid(self, service):
        token = jwt.encode(
            {"sub": "alice", "exp": int(ISSUED_AT.timestamp()) + 60}, SECRET, algorithm="HS256"
        )
        with pytest.raises(MalformedTokenError):
            service.verify(token)
