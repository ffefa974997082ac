# Routes package init
"""
PeerReview Backend — API Routes Package
=========================================

Route Inventory:
    - auth.py:      POST /api/auth/register, POST /api/auth/login,
                    GET  /api/protected            (protected)
    - snippets.py:  POST /api/code                 (protected)
                    GET  /api/code/random          (protected)
                    GET  /api/code/my-submissions  (protected)
    - feedback.py:  POST /api/feedback             (protected)
    - health.py:    GET  /api/health
    - deps.py:      repository/service wiring and the `require_identity` guard

Routes stay thin: parse the request, call a service, shape the response.
"""
