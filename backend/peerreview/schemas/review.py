"""
PeerReview Backend — Snippet & Feedback Schemas
=================================================

What:  Request and response models for snippet submission, review picks,
       feedback, and the submissions view.

Required / optional fields per operation:
    POST /api/code      code (required), language (optional → default tag)
    POST /api/feedback  code_snippet_id (required UUID), feedback_text (required)
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from peerreview.repositories.base import FeedbackRecord, SnippetRecord
from peerreview.services.submission_service import Submission


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class SnippetCreateRequest(BaseModel):
    code: str = Field(min_length=1, description="Source code to be reviewed")
    language: Optional[str] = Field(
        default=None,
        max_length=64,
        description="Free-form language tag; defaults to 'javascript'",
    )


class FeedbackCreateRequest(BaseModel):
    code_snippet_id: uuid.UUID = Field(description="Snippet being reviewed")
    feedback_text: str = Field(min_length=1, description="Review comments")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class SnippetResponse(BaseModel):
    id: uuid.UUID = Field(description="Snippet UUID")
    user_id: uuid.UUID = Field(description="Owner identity UUID")
    code: str = Field(description="Submitted source code")
    language: str = Field(description="Language tag")
    created_at: datetime = Field(description="Submission time (UTC)")

    @classmethod
    def from_record(cls, record: SnippetRecord) -> "SnippetResponse":
        return cls(
            id=record.id,
            user_id=record.owner_id,
            code=record.content,
            language=record.language,
            created_at=record.created_at,
        )


class ReviewCandidateResponse(BaseModel):
    """A snippet handed out for review: its id and content only."""
    id: uuid.UUID = Field(description="Snippet UUID to reference in feedback")
    code: str = Field(description="Source code to review")
    language: str = Field(description="Language tag")

    @classmethod
    def from_record(cls, record: SnippetRecord) -> "ReviewCandidateResponse":
        return cls(id=record.id, code=record.content, language=record.language)


class ReviewerResponse(BaseModel):
    id: uuid.UUID
    email: Optional[str] = None


class FeedbackResponse(BaseModel):
    id: uuid.UUID = Field(description="Feedback UUID")
    code_snippet_id: uuid.UUID = Field(description="Reviewed snippet")
    reviewer: ReviewerResponse
    feedback_text: str
    created_at: datetime

    @classmethod
    def from_record(cls, record: FeedbackRecord) -> "FeedbackResponse":
        return cls(
            id=record.id,
            code_snippet_id=record.snippet_id,
            reviewer=ReviewerResponse(id=record.reviewer_id, email=record.reviewer_email),
            feedback_text=record.text,
            created_at=record.created_at,
        )


class SubmissionResponse(SnippetResponse):
    """One of the caller's snippets with every feedback entry left on it."""
    feedbacks: List[FeedbackResponse] = Field(
        default_factory=list,
        description="Feedback on this snippet; empty when not reviewed yet",
    )

    @classmethod
    def from_submission(cls, submission: Submission) -> "SubmissionResponse":
        snippet = submission.snippet
        return cls(
            id=snippet.id,
            user_id=snippet.owner_id,
            code=snippet.content,
            language=snippet.language,
            created_at=snippet.created_at,
            feedbacks=[FeedbackResponse.from_record(f) for f in submission.feedback],
        )
