# Middleware package init
"""
Species Catalog Backend — Middleware Package
============================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    Starlette runs middleware in reverse order of registration, so main.py
    adds them CORS first and RequestID last.
"""
