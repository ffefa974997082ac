"""
PeerReview Backend — Submission Aggregator
============================================

What:  Builds the "my submissions" view: each of a user's snippets paired
       with every feedback entry left on it.
Who:   Called by GET /api/code/my-submissions.

Query plan:
    1. SELECT snippets WHERE owner_id = :owner ORDER BY created_at, id
    2. SELECT feedback (+ reviewer email) WHERE snippet_id IN (:ids)
       → one batched query, skipped when the owner has no snippets
    3. Group in memory by snippet_id

Every snippet appears once, in (created_at, id) order, with a list that is empty
when nobody has reviewed it yet. Feedback keeps the repository's
(created_at, id) order, so repeated calls on unchanged data agree.
"""

import logging
import uuid
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List

from peerreview.repositories.base import (
    FeedbackRecord,
    FeedbackRepository,
    SnippetRecord,
    SnippetRepository,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Submission:
    snippet: SnippetRecord
    feedback: List[FeedbackRecord] = field(default_factory=list)


class SubmissionAggregator:

    def __init__(self, snippets: SnippetRepository, feedback: FeedbackRepository):
        self.snippets = snippets
        self.feedback = feedback

    async def list_own_with_feedback(self, owner_id: uuid.UUID) -> List[Submission]:
        """
        Raises:
            RepositoryError: either fetch failed (nothing is written)
        """
        snippets = await self.snippets.find_all_by_owner(owner_id)
        if not snippets:
            return []

        entries = await self.feedback.find_all_by_snippet_ids([s.id for s in snippets])

        grouped: Dict[uuid.UUID, List[FeedbackRecord]] = defaultdict(list)
        for entry in entries:
            grouped[entry.snippet_id].append(entry)

        logger.debug(
            "Aggregated %d snippets with %d feedback entries for %s",
            len(snippets), len(entries), owner_id,
        )
        return [Submission(snippet=s, feedback=list(grouped.get(s.id, []))) for s in snippets]
