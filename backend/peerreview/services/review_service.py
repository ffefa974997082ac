"""
PeerReview Backend — Review Assignment Engine
===============================================

What:  Hands a requester a random snippet written by someone else.
Who:   Called by GET /api/code/random.

Selection Policy (count, then random offset):
    1. n = number of snippets not owned by the requester
    2. n == 0 → nothing to review (None; the route answers 404)
    3. k = uniform random integer in [0, n)
    4. return the k-th eligible snippet in (created_at, id) order

    Every eligible snippet occupies exactly one position, so each is returned
    with probability 1/n regardless of how the store iterates.

Concurrency:
    The count and the fetch are separate queries. If snippets disappear in
    between, the fetch at offset k can come back empty; the pick is then
    re-run from a fresh count, up to `review_pick_attempts` times, before
    giving up with None. Nothing is written and nothing is remembered
    between calls, so the same snippet may be handed out again.
"""

import logging
import random
import uuid
from typing import Optional

from peerreview.config import settings
from peerreview.repositories.base import SnippetRecord, SnippetRepository

logger = logging.getLogger(__name__)


class ReviewAssignmentEngine:
    """
    Args:
        snippets: Snippet repository to pick from
        rng: Source of randomness; `random.SystemRandom()` unless a test
             supplies a seeded `random.Random`
        attempts: How many count-then-fetch rounds to try
    """

    def __init__(
        self,
        snippets: SnippetRepository,
        rng: Optional[random.Random] = None,
        attempts: int = settings.review_pick_attempts,
    ):
        self.snippets = snippets
        self.rng = rng or random.SystemRandom()
        self.attempts = max(1, attempts)

    async def pick_for_review(self, requester_id: uuid.UUID) -> Optional[SnippetRecord]:
        """
        Return a uniformly chosen snippet not owned by `requester_id`, or None
        when no such snippet exists.

        Raises:
            RepositoryError: snippet store failure
        """
        for attempt in range(1, self.attempts + 1):
            eligible = await self.snippets.count_where_owner_not(requester_id)
            if eligible == 0:
                logger.info("No snippets available for review by %s", requester_id)
                return None

            offset = self.rng.randrange(eligible)
            snippet = await self.snippets.find_one_where_owner_not(requester_id, offset)
            if snippet is not None:
                return snippet

            logger.info(
                "Review pick attempt %d/%d missed offset %d of %d; retrying",
                attempt, self.attempts, offset, eligible,
            )

        return None
