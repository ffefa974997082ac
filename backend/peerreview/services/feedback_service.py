"""
PeerReview Backend — Feedback Submission
==========================================

What:  Records a reviewer's feedback on someone else's snippet.
Who:   Called by POST /api/feedback.

Check order (all before the single insert):
    1. snippet id and text present            else ValidationError  (400)
    2. snippet exists                         else NotFoundError    (404)
    3. reviewer is not the snippet's owner    else ForbiddenError   (403)
"""

import logging
import uuid
from typing import Optional

from peerreview.exceptions import ForbiddenError, NotFoundError, ValidationError
from peerreview.repositories.base import (
    FeedbackRecord,
    FeedbackRepository,
    SnippetRepository,
)

logger = logging.getLogger(__name__)


class FeedbackService:

    def __init__(self, snippets: SnippetRepository, feedback: FeedbackRepository):
        self.snippets = snippets
        self.feedback = feedback

    async def submit_feedback(
        self,
        reviewer_id: uuid.UUID,
        snippet_id: Optional[uuid.UUID],
        text: Optional[str],
    ) -> FeedbackRecord:
        """
        Raises:
            ValidationError: snippet id or text missing/blank
            NotFoundError: no snippet with that id
            ForbiddenError: reviewer owns the snippet
            RepositoryError: store failure
        """
        if snippet_id is None or not text or not text.strip():
            raise ValidationError(message="Code snippet ID and feedback text are required")

        snippet = await self.snippets.find_by_id(snippet_id)
        if snippet is None:
            raise NotFoundError(
                resource="code snippet",
                resource_id=str(snippet_id),
                message="Code snippet not found",
            )

        if snippet.owner_id == reviewer_id:
            logger.warning("Identity %s attempted to review own snippet %s", reviewer_id, snippet_id)
            raise ForbiddenError(message="You cannot review your own code")

        entry = await self.feedback.create(snippet_id, reviewer_id, text)
        logger.info("Feedback %s left on snippet %s by %s", entry.id, snippet_id, reviewer_id)
        return entry
