"""
PeerReview Backend — Feedback SQLAlchemy Model
================================================

What:  ORM model for the `feedback` table (a reviewer's comment on a snippet).
Who:   Read and written only through `SqlFeedbackRepository`.

Invariant:
    reviewer_id never equals the owning snippet's owner_id. The database
    cannot express that across tables, so `FeedbackService` checks it
    before every insert.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Index, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from peerreview.database import Base


class Feedback(Base):
    """Review text left by one identity on another identity's snippet."""

    __tablename__ = "feedback"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    snippet_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("snippets.id"),
        nullable=False,
    )

    reviewer_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("identities.id"),
        nullable=False,
    )

    text: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # Batched lookups filter on snippet_id IN (...)
    __table_args__ = (
        Index("idx_feedback_snippet_id", "snippet_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<Feedback(id={self.id}, snippet_id={self.snippet_id}, "
            f"reviewer_id={self.reviewer_id})>"
        )
