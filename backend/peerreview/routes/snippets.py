"""
PeerReview Backend — Snippet Route Handlers
=============================================

What:  POST /api/code              submit a snippet
       GET  /api/code/random       get someone else's snippet to review
       GET  /api/code/my-submissions  own snippets with their feedback
All three require a bearer token.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, status

from peerreview.exceptions import NotFoundError
from peerreview.repositories.base import AuthenticatedIdentity
from peerreview.routes.deps import (
    get_review_engine,
    get_snippet_service,
    get_submission_aggregator,
    require_identity,
)
from peerreview.schemas.common import ErrorResponse
from peerreview.schemas.review import (
    ReviewCandidateResponse,
    SnippetCreateRequest,
    SnippetResponse,
    SubmissionResponse,
)
from peerreview.services.review_service import ReviewAssignmentEngine
from peerreview.services.snippet_service import SnippetService
from peerreview.services.submission_service import SubmissionAggregator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/code", tags=["Snippets"])

UNAUTHORIZED = {401: {"description": "Missing, invalid or expired token", "model": ErrorResponse}}


@router.post(
    "",
    response_model=SnippetResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "Code missing", "model": ErrorResponse}, **UNAUTHORIZED},
    summary="Submit a code snippet for peer review",
)
async def submit_snippet(
    body: SnippetCreateRequest,
    identity: AuthenticatedIdentity = Depends(require_identity),
    service: SnippetService = Depends(get_snippet_service),
) -> SnippetResponse:
    snippet = await service.submit_snippet(identity.id, body.code, body.language)
    return SnippetResponse.from_record(snippet)


@router.get(
    "/random",
    response_model=ReviewCandidateResponse,
    responses={404: {"description": "No code available for review", "model": ErrorResponse}, **UNAUTHORIZED},
    summary="Pick a random snippet written by someone else",
)
async def get_random_for_review(
    identity: AuthenticatedIdentity = Depends(require_identity),
    engine: ReviewAssignmentEngine = Depends(get_review_engine),
) -> ReviewCandidateResponse:
    snippet = await engine.pick_for_review(identity.id)
    if snippet is None:
        raise NotFoundError(resource="code snippet", message="No code available for review")
    return ReviewCandidateResponse.from_record(snippet)


@router.get(
    "/my-submissions",
    response_model=List[SubmissionResponse],
    responses=UNAUTHORIZED,
    summary="List own snippets with the feedback they received",
)
async def list_my_submissions(
    identity: AuthenticatedIdentity = Depends(require_identity),
    aggregator: SubmissionAggregator = Depends(get_submission_aggregator),
) -> List[SubmissionResponse]:
    submissions = await aggregator.list_own_with_feedback(identity.id)
    return [SubmissionResponse.from_submission(s) for s in submissions]
