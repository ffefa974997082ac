"""
PeerReview Backend — Snippet Submission and Review Pick Unit Tests
====================================================================

What we test:
    ✅ Submitted snippets keep their owner and default the language
    ✅ Blank code is rejected before anything is stored
    ✅ The review pick never returns the requester's own snippet
    ✅ No eligible snippets → None (not an error)
    ✅ Every eligible snippet is reachable, with roughly equal frequency
    ✅ A pick whose offset vanished is retried, then gives up
"""

import random
import uuid
from collections import Counter
from unittest.mock import AsyncMock

import pytest

from peerreview.exceptions import ValidationError
from peerreview.repositories.base import SnippetRecord
from peerreview.services.review_service import ReviewAssignmentEngine
from peerreview.services.snippet_service import SnippetService

ALICE = uuid.uuid4()
BOB = uuid.uuid4()
CAROL = uuid.uuid4()


class TestSubmitSnippet:

    @pytest.mark.asyncio
    async def test_stores_snippet_for_owner(self, snippets):
        service = SnippetService(snippets, default_language="javascript")

        snippet = await service.submit_snippet(ALICE, "print(1)", "python")

        assert snippet.owner_id == ALICE
        assert snippet.content == "print(1)"
        assert snippet.language == "python"
        assert await snippets.find_by_id(snippet.id) == snippet

    @pytest.mark.asyncio
    @pytest.mark.parametrize("language", [None, "", "   "])
    async def test_language_defaults(self, snippets, language):
        service = SnippetService(snippets, default_language="javascript")

        snippet = await service.submit_snippet(ALICE, "x = 1", language)

        assert snippet.language == "javascript"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("code", [None, "", "  \n\t"])
    async def test_blank_code_rejected(self, snippets, code):
        service = SnippetService(snippets)

        with pytest.raises(ValidationError) as exc_info:
            await service.submit_snippet(ALICE, code)

        assert exc_info.value.message == "Code is required"
        assert await snippets.find_all_by_owner(ALICE) == []


class TestPickForReview:

    @pytest.mark.asyncio
    async def test_empty_store_returns_none(self, snippets):
        engine = ReviewAssignmentEngine(snippets, rng=random.Random(1))
        assert await engine.pick_for_review(ALICE) is None

    @pytest.mark.asyncio
    async def test_sole_contributor_gets_none(self, snippets):
        await snippets.create(ALICE, "a1", "python")
        await snippets.create(ALICE, "a2", "python")

        engine = ReviewAssignmentEngine(snippets, rng=random.Random(1))

        assert await engine.pick_for_review(ALICE) is None

    @pytest.mark.asyncio
    async def test_never_returns_own_snippet(self, snippets):
        for i in range(5):
            await snippets.create(ALICE, f"a{i}", "python")
        bob_snippet = await snippets.create(BOB, "b0", "go")

        engine = ReviewAssignmentEngine(snippets, rng=random.Random(7))

        for _ in range(50):
            picked = await engine.pick_for_review(ALICE)
            assert picked == bob_snippet

    @pytest.mark.asyncio
    async def test_every_eligible_snippet_is_reachable_and_roughly_uniform(self, snippets):
        await snippets.create(ALICE, "mine", "python")
        eligible = [
            await snippets.create(BOB, "b0", "go"),
            await snippets.create(BOB, "b1", "go"),
            await snippets.create(CAROL, "c0", "rust"),
        ]

        engine = ReviewAssignmentEngine(snippets, rng=random.Random(42))
        counts = Counter()
        for _ in range(3000):
            counts[(await engine.pick_for_review(ALICE)).id] += 1

        assert set(counts) == {s.id for s in eligible}
        for snippet in eligible:
            assert 800 < counts[snippet.id] < 1200

    @pytest.mark.asyncio
    async def test_retries_when_offset_disappears(self):
        record = SnippetRecord(
            id=uuid.uuid4(), owner_id=BOB, content="b", language="go", created_at=None,
        )
        repo = AsyncMock()
        repo.count_where_owner_not = AsyncMock(side_effect=[2, 1])
        repo.find_one_where_owner_not = AsyncMock(side_effect=[None, record])

        engine = ReviewAssignmentEngine(repo, rng=random.Random(3), attempts=3)

        assert await engine.pick_for_review(ALICE) == record
        assert repo.count_where_owner_not.await_count == 2

    @pytest.mark.asyncio
    async def test_gives_up_after_configured_attempts(self):
        repo = AsyncMock()
        repo.count_where_owner_not = AsyncMock(return_value=4)
        repo.find_one_where_owner_not = AsyncMock(return_value=None)

        engine = ReviewAssignmentEngine(repo, rng=random.Random(3), attempts=3)

        assert await engine.pick_for_review(ALICE) is None
        assert repo.find_one_where_owner_not.await_count == 3

    @pytest.mark.asyncio
    async def test_offset_stays_within_eligible_count(self):
        repo = AsyncMock()
        repo.count_where_owner_not = AsyncMock(return_value=5)
        repo.find_one_where_owner_not = AsyncMock(return_value=None)

        engine = ReviewAssignmentEngine(repo, rng=random.Random(0), attempts=20)
        await engine.pick_for_review(ALICE)

        offsets = [call.args[1] for call in repo.find_one_where_owner_not.await_args_list]
        assert all(0 <= k < 5 for k in offsets)
