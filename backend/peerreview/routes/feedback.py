"""
PeerReview Backend — Feedback Route Handler
=============================================

What:  POST /api/feedback, leave feedback on another user's snippet.
"""

import logging
from dataclasses import replace

from fastapi import APIRouter, Depends, status

from peerreview.repositories.base import AuthenticatedIdentity
from peerreview.routes.deps import get_feedback_service, require_identity
from peerreview.schemas.common import ErrorResponse
from peerreview.schemas.review import FeedbackCreateRequest, FeedbackResponse
from peerreview.services.feedback_service import FeedbackService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Feedback"])


@router.post(
    "/feedback",
    response_model=FeedbackResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Snippet ID or text missing", "model": ErrorResponse},
        401: {"description": "Missing, invalid or expired token", "model": ErrorResponse},
        403: {"description": "Snippet belongs to the caller", "model": ErrorResponse},
        404: {"description": "Snippet does not exist", "model": ErrorResponse},
    },
    summary="Submit feedback on someone else's snippet",
)
async def submit_feedback(
    body: FeedbackCreateRequest,
    identity: AuthenticatedIdentity = Depends(require_identity),
    service: FeedbackService = Depends(get_feedback_service),
) -> FeedbackResponse:
    entry = await service.submit_feedback(identity.id, body.code_snippet_id, body.feedback_text)
    return FeedbackResponse.from_record(replace(entry, reviewer_email=identity.email))
