"""
PeerReview Backend — Repository Interfaces
============================================

What:  Abstract contracts for the three stores the core depends on, plus the
       plain records they exchange with services.
Why:   Services receive repositories at construction and never touch a
       session, so the same rules run against SQLAlchemy in production and
       against the in-memory stores in tests.
How:   Concrete implementations inherit from these ABCs:
       - `peerreview.repositories.sql`    (async SQLAlchemy)
       - `peerreview.repositories.memory` (dict/list backed)

Contract shared by every implementation:
    - Lists are ordered by (created_at, id). Ids are random, so two rows
      created in the same instant come back in id order, not insert order.
    - Lookups return a record or None, never raise for "missing".
    - Each create is one atomic insert; it fully succeeds or fully fails.
    - Storage faults surface as `RepositoryError`; duplicate unique keys as
      `ConflictError`.
"""

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Sequence


# ══════════════════════════════════════════════════════════════════════════
# Records
# ══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class AuthenticatedIdentity:
    """An identity with the password hash stripped; safe to attach to a request."""
    id: uuid.UUID
    email: str
    created_at: datetime


@dataclass(frozen=True)
class IdentityRecord:
    id: uuid.UUID
    email: str
    password_hash: str
    created_at: datetime

    def public(self) -> AuthenticatedIdentity:
        return AuthenticatedIdentity(id=self.id, email=self.email, created_at=self.created_at)


@dataclass(frozen=True)
class SnippetRecord:
    id: uuid.UUID
    owner_id: uuid.UUID
    content: str
    language: str
    created_at: datetime


@dataclass(frozen=True)
class FeedbackRecord:
    """
    A stored feedback entry.

    `reviewer_email` is filled in by batched reads that join the reviewer;
    it is None on the record returned from `create`.
    """
    id: uuid.UUID
    snippet_id: uuid.UUID
    reviewer_id: uuid.UUID
    text: str
    created_at: datetime
    reviewer_email: Optional[str] = None


# ══════════════════════════════════════════════════════════════════════════
# Interfaces
# ══════════════════════════════════════════════════════════════════════════

class CredentialStore(ABC):
    """Persists identities and their password hashes."""

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[IdentityRecord]:
        ...

    @abstractmethod
    async def find_by_id(self, identity_id: uuid.UUID) -> Optional[IdentityRecord]:
        ...

    @abstractmethod
    async def create(self, email: str, password_hash: str) -> IdentityRecord:
        """
        Insert a new identity.

        Raises:
            ConflictError: email already registered (the unique index is the
                final arbiter when two registrations race).
        """
        ...


class SnippetRepository(ABC):
    """Persists code snippets keyed by owner."""

    @abstractmethod
    async def create(self, owner_id: uuid.UUID, content: str, language: str) -> SnippetRecord:
        ...

    @abstractmethod
    async def find_by_id(self, snippet_id: uuid.UUID) -> Optional[SnippetRecord]:
        ...

    @abstractmethod
    async def count_where_owner_not(self, owner_id: uuid.UUID) -> int:
        """Number of snippets not owned by `owner_id`."""
        ...

    @abstractmethod
    async def find_one_where_owner_not(
        self, owner_id: uuid.UUID, offset: int
    ) -> Optional[SnippetRecord]:
        """
        The snippet at position `offset` among those not owned by `owner_id`.

        Positions follow a fixed order (created_at, id) so that a uniform
        offset yields a uniform snippet. Returns None when the offset is past
        the end, e.g. because the set shrank after it was counted.
        """
        ...

    @abstractmethod
    async def find_all_by_owner(self, owner_id: uuid.UUID) -> List[SnippetRecord]:
        """All snippets owned by `owner_id`, ordered by (created_at, id)."""
        ...


class FeedbackRepository(ABC):
    """Persists feedback entries keyed by snippet and reviewer."""

    @abstractmethod
    async def create(
        self, snippet_id: uuid.UUID, reviewer_id: uuid.UUID, text: str
    ) -> FeedbackRecord:
        ...

    @abstractmethod
    async def find_all_by_snippet_ids(
        self, snippet_ids: Sequence[uuid.UUID]
    ) -> List[FeedbackRecord]:
        """
        Every feedback entry whose snippet_id is in `snippet_ids`, with
        `reviewer_email` populated, in (created_at, id) order.

        One query regardless of how many ids are passed.
        """
        ...
