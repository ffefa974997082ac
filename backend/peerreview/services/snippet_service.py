"""
PeerReview Backend — Snippet Submission
=========================================

What:  Stores a new code snippet for the authenticated identity.
Who:   Called by POST /api/code.
"""

import logging
import uuid
from typing import Optional

from peerreview.config import settings
from peerreview.exceptions import ValidationError
from peerreview.repositories.base import SnippetRecord, SnippetRepository

logger = logging.getLogger(__name__)


class SnippetService:

    def __init__(
        self,
        snippets: SnippetRepository,
        default_language: str = settings.default_language,
    ):
        self.snippets = snippets
        self.default_language = default_language

    async def submit_snippet(
        self,
        owner_id: uuid.UUID,
        code: Optional[str],
        language: Optional[str] = None,
    ) -> SnippetRecord:
        """
        Raises:
            ValidationError: code missing or blank
            RepositoryError: snippet store failure
        """
        if not code or not code.strip():
            raise ValidationError(message="Code is required", field="code")

        language = language.strip() if language and language.strip() else self.default_language

        snippet = await self.snippets.create(owner_id, code, language)
        logger.info("Snippet %s submitted by %s (%s)", snippet.id, owner_id, language)
        return snippet
