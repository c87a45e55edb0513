"""
Species Catalog Backend — Application Package Initializer
=========================================================

What: Marks the `app` directory as a Python package.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The backend follows a layered architecture, with a thin client layer
    on top that plays the role of the browser-side components:

    ┌─────────────────────────────────────┐
    │     Client components (app.client)  │  ← dialogs, forms, toasts
    ├─────────────────────────────────────┤
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← ownership, normalization, composition
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Routes never talk to the database directly, and client components never
    talk to services directly: they go through the HTTP API like a browser.
"""

__version__ = "1.0.0"
