# Services package init
"""
NASA Explorer Backend — Services Layer
=======================================

What:  Upstream access sitting between routes (HTTP) and the NASA APIs.

Service Inventory:
    - NasaClient: APOD and Image Library calls, retries, payload checks
"""
