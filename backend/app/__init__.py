"""
Salon Backend — Application Package Initializer
=================================================

What: Marks the `app` directory as a Python package.
Who:  Used by Alembic, pytest, and uvicorn (uvicorn app.main:app).

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Validation, orchestration
    ├─────────────────────────────────────┤
    │  Repository / Media / Email clients │  ← External collaborators
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
