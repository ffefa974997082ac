"""
PeerReview Backend — Test Configuration (conftest.py)
=======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all
       tests. Services are exercised against the in-memory repositories;
       the API client swaps those in through FastAPI dependency overrides,
       so no database is needed outside test_sql_repositories.py.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── mock_db_session: Mock AsyncSession for repository error paths
    ├── credentials / snippets / feedback: In-memory repositories
    ├── hasher / tokens: Low-cost bcrypt and a real TokenService
    └── test_client: HTTPX AsyncClient bound to the app
"""

import os

# Override settings for testing BEFORE any peerreview imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret-not-for-production"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from peerreview.repositories.memory import (
    InMemoryCredentialStore,
    InMemoryFeedbackRepository,
    InMemorySnippetRepository,
)
from peerreview.services.password_hasher import PasswordHasher
from peerreview.services.token_service import TokenService

TEST_SECRET = "test-secret-not-for-production"


@pytest.fixture
def mock_db_session():
    """A MagicMock that simulates AsyncSession behavior."""
    session = AsyncMock()
    session.execute = AsyncMock()
    session.scalar = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.refresh = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def credentials():
    return InMemoryCredentialStore()


@pytest.fixture
def snippets():
    return InMemorySnippetRepository()


@pytest.fixture
def feedback(credentials):
    return InMemoryFeedbackRepository(credentials)


@pytest.fixture
def hasher():
    return PasswordHasher(rounds=4)


@pytest.fixture
def tokens():
    return TokenService(secret=TEST_SECRET, algorithm="HS256", ttl_seconds=3600)


@pytest_asyncio.fixture
async def test_client(credentials, snippets, feedback):
    """
    HTTPX AsyncClient routed straight into the FastAPI app.

    The three repository providers are overridden with the in-memory
    fixtures above; every request in one test shares the same stores.
    """
    from peerreview.main import app
    from peerreview.routes import deps

    app.dependency_overrides[deps.get_credential_store] = lambda: credentials
    app.dependency_overrides[deps.get_snippet_repository] = lambda: snippets
    app.dependency_overrides[deps.get_feedback_repository] = lambda: feedback

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
