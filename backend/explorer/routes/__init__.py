# Routes package init
"""
NASA Explorer Backend — API Routes Package
===========================================

Route Inventory:
    - apod.py:    GET /api/apod     (?date=YYYY-MM-DD or ?count=N)
    - images.py:  GET /api/images   (?query=...&page=N)
    - health.py:  GET /health

Routes stay thin: read query parameters, validate, call NasaClient, return.
"""
