# Repositories package init
"""
PeerReview Backend — Repository Layer
=======================================

What:  Storage collaborators for identities, snippets, and feedback.
Why:   Keeps every SQL statement out of the services so business rules can be
       tested without a database.

Repository Inventory:
    - base.py:   Abstract interfaces and the records they return
    - sql.py:    Async SQLAlchemy implementations (production)
    - memory.py: In-memory implementations (tests and local experiments)
"""
