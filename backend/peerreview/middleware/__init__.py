# Middleware package init
"""
PeerReview Backend — Middleware Package
=========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID: correlation ID stored in a ContextVar and echoed back
    2. Logging: method, path, status, duration tagged with that ID

Authentication is not middleware: protected routes declare the
`require_identity` dependency, so public routes (register, login, health)
never touch the token machinery.
"""
