"""
PeerReview Backend — Application Package Initializer
=====================================================

What: Marks the `peerreview` directory as a Python package.
Why:  Enables module imports like `from peerreview.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The backend is layered the same way top to bottom:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns, access guard
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Tokens, review assignment, aggregation
    ├─────────────────────────────────────┤
    │            Repositories             │  ← Credential / snippet / feedback stores
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Services only ever see repository interfaces, so every rule
    (no self-review, uniform selection, feedback grouping) is testable
    against the in-memory repositories without a database.
"""

__version__ = "1.0.0"
