"""
PeerReview Backend — Feedback and Submission Aggregation Unit Tests
=====================================================================

What we test:
    ✅ Feedback on another user's snippet is stored
    ✅ Check order: missing input (400) → unknown snippet (404) → own snippet (403)
    ✅ Rejected feedback is never written
    ✅ "My submissions" lists each owned snippet once with exactly its feedback
    ✅ Reviewer emails are attached; other users' snippets never leak in
"""

import uuid
from datetime import datetime, timezone
from unittest.mock import patch

import pytest
import pytest_asyncio

from peerreview.exceptions import ForbiddenError, NotFoundError, ValidationError
from peerreview.services.feedback_service import FeedbackService
from peerreview.services.submission_service import SubmissionAggregator


@pytest.fixture
def service(snippets, feedback):
    return FeedbackService(snippets, feedback)


@pytest.fixture
def aggregator(snippets, feedback):
    return SubmissionAggregator(snippets, feedback)


@pytest_asyncio.fixture
async def people(credentials):
    alice = await credentials.create("alice@x.com", "hash")
    bob = await credentials.create("bob@x.com", "hash")
    carol = await credentials.create("carol@x.com", "hash")
    return alice, bob, carol


class TestSubmitFeedback:

    @pytest.mark.asyncio
    async def test_feedback_on_other_users_snippet(self, service, snippets, feedback, people):
        alice, bob, _ = people
        snippet = await snippets.create(alice.id, "print(1)", "python")

        entry = await service.submit_feedback(bob.id, snippet.id, "Nice")

        assert entry.snippet_id == snippet.id
        assert entry.reviewer_id == bob.id
        assert entry.text == "Nice"
        stored = await feedback.find_all_by_snippet_ids([snippet.id])
        assert [f.id for f in stored] == [entry.id]

    @pytest.mark.asyncio
    async def test_own_snippet_forbidden(self, service, snippets, feedback, people):
        alice, _, _ = people
        snippet = await snippets.create(alice.id, "print(1)", "python")

        with pytest.raises(ForbiddenError) as exc_info:
            await service.submit_feedback(alice.id, snippet.id, "I love it")

        assert exc_info.value.message == "You cannot review your own code"
        assert await feedback.find_all_by_snippet_ids([snippet.id]) == []

    @pytest.mark.asyncio
    async def test_unknown_snippet_not_found(self, service, people):
        _, bob, _ = people

        with pytest.raises(NotFoundError) as exc_info:
            await service.submit_feedback(bob.id, uuid.uuid4(), "Nice")
        assert exc_info.value.message == "Code snippet not found"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", [None, "", "   "])
    async def test_blank_text_rejected(self, service, snippets, people, text):
        alice, bob, _ = people
        snippet = await snippets.create(alice.id, "print(1)", "python")

        with pytest.raises(ValidationError):
            await service.submit_feedback(bob.id, snippet.id, text)

    @pytest.mark.asyncio
    async def test_missing_snippet_id_rejected_before_lookup(self, service, people):
        _, bob, _ = people
        with pytest.raises(ValidationError) as exc_info:
            await service.submit_feedback(bob.id, None, "Nice")
        assert exc_info.value.message == "Code snippet ID and feedback text are required"

    @pytest.mark.asyncio
    async def test_validation_checked_before_ownership(self, service, snippets, people):
        alice, _, _ = people
        snippet = await snippets.create(alice.id, "print(1)", "python")

        with pytest.raises(ValidationError):
            await service.submit_feedback(alice.id, snippet.id, "")


class TestListOwnWithFeedback:

    @pytest.mark.asyncio
    async def test_no_snippets_gives_empty_list(self, aggregator, people):
        alice, _, _ = people
        assert await aggregator.list_own_with_feedback(alice.id) == []

    @pytest.mark.asyncio
    async def test_groups_feedback_under_its_snippet(self, aggregator, service, snippets, people):
        alice, bob, carol = people
        first = await snippets.create(alice.id, "a1", "python")
        second = await snippets.create(alice.id, "a2", "python")
        unreviewed = await snippets.create(alice.id, "a3", "python")
        await snippets.create(bob.id, "b1", "go")

        f1 = await service.submit_feedback(bob.id, first.id, "bob on a1")
        f2 = await service.submit_feedback(carol.id, first.id, "carol on a1")
        f3 = await service.submit_feedback(bob.id, second.id, "bob on a2")

        submissions = await aggregator.list_own_with_feedback(alice.id)

        by_snippet = {s.snippet.id: [f.id for f in s.feedback] for s in submissions}
        assert len(submissions) == 3
        assert sorted(by_snippet[first.id]) == sorted([f1.id, f2.id])
        assert by_snippet[second.id] == [f3.id]
        assert by_snippet[unreviewed.id] == []

    @pytest.mark.asyncio
    async def test_feedback_carries_reviewer_email(self, aggregator, service, snippets, people):
        alice, bob, _ = people
        snippet = await snippets.create(alice.id, "a1", "python")
        await service.submit_feedback(bob.id, snippet.id, "Nice")

        submissions = await aggregator.list_own_with_feedback(alice.id)

        assert submissions[0].feedback[0].reviewer_email == "bob@x.com"

    @pytest.mark.asyncio
    async def test_other_owners_snippets_excluded(self, aggregator, service, snippets, people):
        alice, bob, _ = people
        await snippets.create(alice.id, "a1", "python")
        bob_snippet = await snippets.create(bob.id, "b1", "go")
        await service.submit_feedback(alice.id, bob_snippet.id, "alice on b1")

        submissions = await aggregator.list_own_with_feedback(alice.id)

        assert len(submissions) == 1
        assert submissions[0].snippet.owner_id == alice.id
        assert submissions[0].feedback == []

    @pytest.mark.asyncio
    async def test_repeated_calls_agree(self, aggregator, service, snippets, people):
        alice, bob, _ = people
        snippet = await snippets.create(alice.id, "a1", "python")
        await service.submit_feedback(bob.id, snippet.id, "one")
        await service.submit_feedback(bob.id, snippet.id, "two")

        first = await aggregator.list_own_with_feedback(alice.id)
        second = await aggregator.list_own_with_feedback(alice.id)

        assert first == second

    @pytest.mark.asyncio
    async def test_same_instant_snippets_ordered_by_id(self, aggregator, snippets, people):
        alice, _, _ = people
        instant = datetime(2026, 1, 1, tzinfo=timezone.utc)
        with patch("peerreview.repositories.memory._now", return_value=instant):
            created = [await snippets.create(alice.id, f"a{i}", "python") for i in range(5)]

        submissions = await aggregator.list_own_with_feedback(alice.id)

        assert [s.snippet.id for s in submissions] == sorted(s.id for s in created)
