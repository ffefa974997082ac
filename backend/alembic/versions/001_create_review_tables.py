"""Create identities, snippets and feedback tables

Revision ID: 001
Revises: None
Create Date: 2026-10-18 00:00:00.000000+00:00

What:  Initial schema: registered identities, submitted snippets, and the
       feedback reviewers leave on them.
How:   Generic UUID columns and TIMESTAMP WITH TIME ZONE; ids and timestamps
       are generated by the application, not by server defaults.

Rollback: downgrade() drops all three tables (destructive).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "identities",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column(
            "email",
            sa.String(320),
            nullable=False,
            comment="Login email, unique, compared exactly as stored",
        ),
        sa.Column(
            "password_hash",
            sa.String(255),
            nullable=False,
            comment="bcrypt hash; the plain password is never stored",
        ),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_identities_email", "identities", ["email"], unique=True)

    op.create_table(
        "snippets",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("owner_id", sa.Uuid(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column(
            "language",
            sa.String(64),
            nullable=False,
            comment="Free-form language tag, defaults to javascript",
        ),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["owner_id"], ["identities.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    # "My submissions" filters on owner; the review pick excludes one owner
    op.create_index("idx_snippets_owner_id", "snippets", ["owner_id"])

    op.create_table(
        "feedback",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("snippet_id", sa.Uuid(), nullable=False),
        sa.Column("reviewer_id", sa.Uuid(), nullable=False),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["snippet_id"], ["snippets.id"]),
        sa.ForeignKeyConstraint(["reviewer_id"], ["identities.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_feedback_snippet_id", "feedback", ["snippet_id"])


def downgrade() -> None:
    op.drop_index("idx_feedback_snippet_id", table_name="feedback")
    op.drop_table("feedback")
    op.drop_index("idx_snippets_owner_id", table_name="snippets")
    op.drop_table("snippets")
    op.drop_index("ix_identities_email", table_name="identities")
    op.drop_table("identities")
