"""
PeerReview Backend — Route Dependencies
=========================================

What:  FastAPI dependency providers that wire repositories into services and
       gate protected routes behind the access guard.
How:   One `AsyncSession` per request (cached by FastAPI), wrapped by the
       three SQL repositories; each service is built from those repositories.
       Tests swap the repository providers for in-memory ones through
       `app.dependency_overrides`.
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from peerreview.database import get_db_session
from peerreview.repositories.base import (
    AuthenticatedIdentity,
    CredentialStore,
    FeedbackRepository,
    SnippetRepository,
)
from peerreview.repositories.sql import (
    SqlCredentialStore,
    SqlFeedbackRepository,
    SqlSnippetRepository,
)
from peerreview.services.access_guard import AccessGuard
from peerreview.services.auth_service import AuthService
from peerreview.services.feedback_service import FeedbackService
from peerreview.services.password_hasher import PasswordHasher
from peerreview.services.review_service import ReviewAssignmentEngine
from peerreview.services.snippet_service import SnippetService
from peerreview.services.submission_service import SubmissionAggregator
from peerreview.services.token_service import TokenService

# Stateless and configuration-only; safe to share across requests
_token_service = TokenService()
_password_hasher = PasswordHasher()


# ── Repositories ──────────────────────────────────────────────────────────

def get_credential_store(db: AsyncSession = Depends(get_db_session)) -> CredentialStore:
    return SqlCredentialStore(db)


def get_snippet_repository(db: AsyncSession = Depends(get_db_session)) -> SnippetRepository:
    return SqlSnippetRepository(db)


def get_feedback_repository(db: AsyncSession = Depends(get_db_session)) -> FeedbackRepository:
    return SqlFeedbackRepository(db)


# ── Services ──────────────────────────────────────────────────────────────

def get_token_service() -> TokenService:
    return _token_service


def get_password_hasher() -> PasswordHasher:
    return _password_hasher


def get_access_guard(
    tokens: TokenService = Depends(get_token_service),
    credentials: CredentialStore = Depends(get_credential_store),
) -> AccessGuard:
    return AccessGuard(tokens, credentials)


def get_auth_service(
    credentials: CredentialStore = Depends(get_credential_store),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
) -> AuthService:
    return AuthService(credentials, hasher, tokens)


def get_snippet_service(
    snippets: SnippetRepository = Depends(get_snippet_repository),
) -> SnippetService:
    return SnippetService(snippets)


def get_review_engine(
    snippets: SnippetRepository = Depends(get_snippet_repository),
) -> ReviewAssignmentEngine:
    return ReviewAssignmentEngine(snippets)


def get_feedback_service(
    snippets: SnippetRepository = Depends(get_snippet_repository),
    feedback: FeedbackRepository = Depends(get_feedback_repository),
) -> FeedbackService:
    return FeedbackService(snippets, feedback)


def get_submission_aggregator(
    snippets: SnippetRepository = Depends(get_snippet_repository),
    feedback: FeedbackRepository = Depends(get_feedback_repository),
) -> SubmissionAggregator:
    return SubmissionAggregator(snippets, feedback)


# ── Access Guard ──────────────────────────────────────────────────────────

async def require_identity(
    request: Request,
    guard: AccessGuard = Depends(get_access_guard),
) -> AuthenticatedIdentity:
    """
    Resolve the caller or abort with 401 before the handler body runs.

    The resolved identity (no password hash) is also attached to
    `request.state.identity` for middleware and handlers that read it there.
    """
    identity = await guard.authenticate(request.headers.get("Authorization"))
    request.state.identity = identity
    return identity
