"""
SimHub Backend — Application Package Initializer
================================================

What: Marks the `simhub` directory as a Python package.
Why:  Enables module imports like `from simhub.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    This backend follows a ports-and-adapters layout:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │     Services (Use Cases)            │  ← Validate in, orchestrate, validate out
    ├─────────────────────────────────────┤
    │   Repository Ports + Search Engine  │  ← Backend-agnostic contracts
    ├─────────────────────────────────────┤
    │  Adapters: in-memory | SQLAlchemy   │  ← Interchangeable storage
    └─────────────────────────────────────┘

    Domain entities (simhub.domain) are shared by every layer and depend on none.
    Services only ever see the port classes; which adapter backs them is decided
    once per request in simhub.dependencies.
"""

__version__ = "1.0.0"
