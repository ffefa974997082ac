"""
PeerReview Backend — SQLAlchemy Repositories
==============================================

What:  Async SQLAlchemy implementations of the repository interfaces.
How:   Each repository wraps the request-scoped `AsyncSession` it is built
       with. Inserts commit immediately so every create is a single atomic
       write; reads translate ORM rows into frozen records.
Who:   Built per request by `peerreview.routes.deps`.

Error Handling Strategy:
    IntegrityError on insert → ConflictError (unique email)
    Any other SQLAlchemyError → RepositoryError with the operation name and
    driver error type in `context` (logged, never returned to the client)
"""

import logging
import uuid
from typing import List, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from peerreview.exceptions import ConflictError, RepositoryError
from peerreview.models.feedback import Feedback
from peerreview.models.identity import Identity
from peerreview.models.snippet import Snippet
from peerreview.repositories.base import (
    CredentialStore,
    FeedbackRecord,
    FeedbackRepository,
    IdentityRecord,
    SnippetRecord,
    SnippetRepository,
)

logger = logging.getLogger(__name__)


def _failure(operation: str, exc: Exception) -> RepositoryError:
    logger.error("Repository operation %s failed: %s", operation, str(exc), exc_info=True)
    return RepositoryError(
        context={"operation": operation, "error_type": type(exc).__name__},
    )


def _identity_record(row: Identity) -> IdentityRecord:
    return IdentityRecord(
        id=row.id,
        email=row.email,
        password_hash=row.password_hash,
        created_at=row.created_at,
    )


def _snippet_record(row: Snippet) -> SnippetRecord:
    return SnippetRecord(
        id=row.id,
        owner_id=row.owner_id,
        content=row.content,
        language=row.language,
        created_at=row.created_at,
    )


def _feedback_record(row: Feedback, reviewer_email: Optional[str] = None) -> FeedbackRecord:
    return FeedbackRecord(
        id=row.id,
        snippet_id=row.snippet_id,
        reviewer_id=row.reviewer_id,
        text=row.text,
        created_at=row.created_at,
        reviewer_email=reviewer_email,
    )


class SqlCredentialStore(CredentialStore):
    """Identities stored in the `identities` table."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_email(self, email: str) -> Optional[IdentityRecord]:
        try:
            result = await self.session.execute(
                select(Identity).where(Identity.email == email)
            )
            row = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise _failure("find_identity_by_email", e) from e
        return _identity_record(row) if row else None

    async def find_by_id(self, identity_id: uuid.UUID) -> Optional[IdentityRecord]:
        try:
            result = await self.session.execute(
                select(Identity).where(Identity.id == identity_id)
            )
            row = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise _failure("find_identity_by_id", e) from e
        return _identity_record(row) if row else None

    async def create(self, email: str, password_hash: str) -> IdentityRecord:
        row = Identity(email=email, password_hash=password_hash)
        self.session.add(row)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise ConflictError(
                message="Email already registered",
                context={"field": "email"},
            ) from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise _failure("create_identity", e) from e
        return _identity_record(row)


class SqlSnippetRepository(SnippetRepository):
    """Snippets stored in the `snippets` table."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, owner_id: uuid.UUID, content: str, language: str) -> SnippetRecord:
        row = Snippet(owner_id=owner_id, content=content, language=language)
        self.session.add(row)
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise _failure("create_snippet", e) from e
        return _snippet_record(row)

    async def find_by_id(self, snippet_id: uuid.UUID) -> Optional[SnippetRecord]:
        try:
            result = await self.session.execute(
                select(Snippet).where(Snippet.id == snippet_id)
            )
            row = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise _failure("find_snippet_by_id", e) from e
        return _snippet_record(row) if row else None

    async def count_where_owner_not(self, owner_id: uuid.UUID) -> int:
        try:
            result = await self.session.execute(
                select(func.count(Snippet.id)).where(Snippet.owner_id != owner_id)
            )
            return result.scalar() or 0
        except SQLAlchemyError as e:
            raise _failure("count_snippets_where_owner_not", e) from e

    async def find_one_where_owner_not(
        self, owner_id: uuid.UUID, offset: int
    ) -> Optional[SnippetRecord]:
        # The ORDER BY pins each row to one position, so OFFSET k is the
        # same snippet for every k the caller might draw.
        query = (
            select(Snippet)
            .where(Snippet.owner_id != owner_id)
            .order_by(Snippet.created_at, Snippet.id)
            .offset(offset)
            .limit(1)
        )
        try:
            result = await self.session.execute(query)
            row = result.scalars().first()
        except SQLAlchemyError as e:
            raise _failure("find_snippet_where_owner_not", e) from e
        return _snippet_record(row) if row else None

    async def find_all_by_owner(self, owner_id: uuid.UUID) -> List[SnippetRecord]:
        query = (
            select(Snippet)
            .where(Snippet.owner_id == owner_id)
            .order_by(Snippet.created_at, Snippet.id)
        )
        try:
            result = await self.session.execute(query)
            rows = result.scalars().all()
        except SQLAlchemyError as e:
            raise _failure("find_snippets_by_owner", e) from e
        return [_snippet_record(row) for row in rows]


class SqlFeedbackRepository(FeedbackRepository):
    """Feedback stored in the `feedback` table."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self, snippet_id: uuid.UUID, reviewer_id: uuid.UUID, text: str
    ) -> FeedbackRecord:
        row = Feedback(snippet_id=snippet_id, reviewer_id=reviewer_id, text=text)
        self.session.add(row)
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise _failure("create_feedback", e) from e
        return _feedback_record(row)

    async def find_all_by_snippet_ids(
        self, snippet_ids: Sequence[uuid.UUID]
    ) -> List[FeedbackRecord]:
        if not snippet_ids:
            return []
        query = (
            select(Feedback, Identity.email)
            .outerjoin(Identity, Identity.id == Feedback.reviewer_id)
            .where(Feedback.snippet_id.in_(list(snippet_ids)))
            .order_by(Feedback.created_at, Feedback.id)
        )
        try:
            result = await self.session.execute(query)
            rows = result.all()
        except SQLAlchemyError as e:
            raise _failure("find_feedback_by_snippet_ids", e) from e
        return [_feedback_record(feedback, email) for feedback, email in rows]
