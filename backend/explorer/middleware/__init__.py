# Middleware package init
"""
NASA Explorer Backend — Middleware Package
===========================================

Middleware Chain (outermost first):
    Request → [Rate Limit] → [Request ID] → [Logging] → [GZip] → [CORS] → Route

    - Rate Limit rejects before anything else runs (no NASA call, no log noise)
    - Request ID is set before the logging middleware reads it
"""
