"""
PeerReview Backend — Snippet SQLAlchemy Model
===============================================

What:  ORM model for the `snippets` table (code submitted for review).
Who:   Read and written only through `SqlSnippetRepository`.

Query Patterns:
    - Own submissions: WHERE owner_id = :id ORDER BY created_at, id
      → idx_snippets_owner_id
    - Review pick: COUNT / OFFSET over WHERE owner_id != :id
      ORDER BY created_at, id
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from peerreview.database import Base


class Snippet(Base):
    """
    A code snippet owned by the identity that submitted it.

    Lifecycle:
        Created once by its owner; never updated or deleted by this service.
    """

    __tablename__ = "snippets"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("identities.id"),
        nullable=False,
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    # Free-form tag such as "python" or "javascript"
    language: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("idx_snippets_owner_id", "owner_id"),
    )

    def __repr__(self) -> str:
        return f"<Snippet(id={self.id}, owner_id={self.owner_id}, language='{self.language}')>"
