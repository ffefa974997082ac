# Services package init
"""
PeerReview Backend — Services Layer
=====================================

What:  Business rules sitting between routes (HTTP) and repositories (storage).
How:   Each service receives the repositories it needs at construction and
       never looks up a session or global connection itself.

Service Inventory:
    - PasswordHasher:         bcrypt hashing and verification (passlib)
    - TokenService:           issue / verify signed bearer tokens
    - AccessGuard:            Authorization header → authenticated identity
    - AuthService:            register / login
    - SnippetService:         store a new snippet
    - ReviewAssignmentEngine: uniform random pick among other users' snippets
    - FeedbackService:        ownership-guarded feedback creation
    - SubmissionAggregator:   own snippets joined with their feedback
"""
