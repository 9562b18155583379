"""
NASA Explorer Backend — Application Package Initializer
=======================================================

What: Marks the `explorer` directory as a Python package.
Who:  Imported by uvicorn (`explorer.main:app`), pytest, and client code.

Architecture Note:
    ┌─────────────────────────────────────┐
    │        Routes (Proxy Endpoints)     │  ← /api/apod, /api/images, /health
    ├─────────────────────────────────────┤
    │        Services (NASA client)       │  ← upstream calls, payload checks
    ├─────────────────────────────────────┤
    │        Schemas (Pydantic)           │  ← APOD + image library shapes
    └─────────────────────────────────────┘

    ┌─────────────────────────────────────┐
    │        Client (controllers)         │  ← search/pagination state machine,
    │                                     │    APOD flow, notification bus
    └─────────────────────────────────────┘

    The backend holds no state beyond configuration; everything it returns
    comes straight from the upstream NASA APIs.
"""

__version__ = "1.0.0"
