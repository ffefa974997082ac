"""
PeerReview Backend — Identity SQLAlchemy Model
================================================

What:  ORM model for the `identities` table (registered users).
Who:   Read and written only through `SqlCredentialStore`.

Table Design Rationale:
    - UUID primary key: non-sequential, so ids in tokens cannot be enumerated
    - email: unique and compared exactly as stored (no case folding)
    - password_hash: opaque one-way hash; never leaves the credential store
      except for verification during login
    - created_at: UTC with timezone; rows are never updated or deleted here
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from peerreview.database import Base


class Identity(Base):
    """A registered user who can submit snippets and review others'."""

    __tablename__ = "identities"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    email: Mapped[str] = mapped_column(
        String(320),
        nullable=False,
        unique=True,
        index=True,
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<Identity(id={self.id}, email='{self.email}')>"
