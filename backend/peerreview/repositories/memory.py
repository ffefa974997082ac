"""
PeerReview Backend — In-Memory Repositories
=============================================

What:  Dict/list-backed implementations of the repository interfaces.
Why:   Lets the service and API tests exercise real business rules with no
       database and no I/O.
How:   Reads sort by (created_at, id), the same order the SQL queries use;
       records are frozen so callers cannot mutate stored state.
"""

import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from peerreview.exceptions import ConflictError
from peerreview.repositories.base import (
    CredentialStore,
    FeedbackRecord,
    FeedbackRepository,
    IdentityRecord,
    SnippetRecord,
    SnippetRepository,
)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _creation_order(record):
    return (record.created_at, record.id)


class InMemoryCredentialStore(CredentialStore):

    def __init__(self) -> None:
        self._by_id: Dict[uuid.UUID, IdentityRecord] = {}

    async def find_by_email(self, email: str) -> Optional[IdentityRecord]:
        for record in self._by_id.values():
            if record.email == email:
                return record
        return None

    async def find_by_id(self, identity_id: uuid.UUID) -> Optional[IdentityRecord]:
        return self._by_id.get(identity_id)

    async def create(self, email: str, password_hash: str) -> IdentityRecord:
        if await self.find_by_email(email) is not None:
            raise ConflictError(message="Email already registered", context={"field": "email"})
        record = IdentityRecord(
            id=uuid.uuid4(),
            email=email,
            password_hash=password_hash,
            created_at=_now(),
        )
        self._by_id[record.id] = record
        return record

    def remove(self, identity_id: uuid.UUID) -> None:
        """Drop an identity, e.g. to simulate deletion after a token was issued."""
        self._by_id.pop(identity_id, None)


class InMemorySnippetRepository(SnippetRepository):

    def __init__(self) -> None:
        self._snippets: List[SnippetRecord] = []

    async def create(self, owner_id: uuid.UUID, content: str, language: str) -> SnippetRecord:
        record = SnippetRecord(
            id=uuid.uuid4(),
            owner_id=owner_id,
            content=content,
            language=language,
            created_at=_now(),
        )
        self._snippets.append(record)
        return record

    async def find_by_id(self, snippet_id: uuid.UUID) -> Optional[SnippetRecord]:
        for record in self._snippets:
            if record.id == snippet_id:
                return record
        return None

    async def count_where_owner_not(self, owner_id: uuid.UUID) -> int:
        return len(self._eligible(owner_id))

    async def find_one_where_owner_not(
        self, owner_id: uuid.UUID, offset: int
    ) -> Optional[SnippetRecord]:
        eligible = self._eligible(owner_id)
        if 0 <= offset < len(eligible):
            return eligible[offset]
        return None

    async def find_all_by_owner(self, owner_id: uuid.UUID) -> List[SnippetRecord]:
        owned = [s for s in self._snippets if s.owner_id == owner_id]
        return sorted(owned, key=_creation_order)

    def _eligible(self, owner_id: uuid.UUID) -> List[SnippetRecord]:
        eligible = [s for s in self._snippets if s.owner_id != owner_id]
        return sorted(eligible, key=_creation_order)


class InMemoryFeedbackRepository(FeedbackRepository):
    """Resolves reviewer emails through the credential store it is given."""

    def __init__(self, credentials: InMemoryCredentialStore) -> None:
        self._credentials = credentials
        self._feedback: List[FeedbackRecord] = []

    async def create(
        self, snippet_id: uuid.UUID, reviewer_id: uuid.UUID, text: str
    ) -> FeedbackRecord:
        record = FeedbackRecord(
            id=uuid.uuid4(),
            snippet_id=snippet_id,
            reviewer_id=reviewer_id,
            text=text,
            created_at=_now(),
        )
        self._feedback.append(record)
        return record

    async def find_all_by_snippet_ids(
        self, snippet_ids: Sequence[uuid.UUID]
    ) -> List[FeedbackRecord]:
        wanted = set(snippet_ids)
        results = []
        for record in self._feedback:
            if record.snippet_id not in wanted:
                continue
            reviewer = await self._credentials.find_by_id(record.reviewer_id)
            results.append(
                FeedbackRecord(
                    id=record.id,
                    snippet_id=record.snippet_id,
                    reviewer_id=record.reviewer_id,
                    text=record.text,
                    created_at=record.created_at,
                    reviewer_email=reviewer.email if reviewer else None,
                )
            )
        return sorted(results, key=_creation_order)
