# Routes package init
"""
Species Catalog Backend — API Routes Package
============================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - species.py:   GET/POST /api/species, GET/PATCH/DELETE /api/species/{id}
    - comments.py:  GET/POST /api/species/{id}/comments
    - profiles.py:  GET /api/profiles/me
    - health.py:    GET /health

Routes are THIN: resolve the session, call one service method, return
its result. Ownership checks, normalization and composition live in
the services.
"""
