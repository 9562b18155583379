"""
NASA Explorer Client

Controllers that drive the search and APOD screens, and the ProxyClient they
use to reach the backend:

    SearchController ─┐
                      ├─→ ImageSearchGateway / ApodGateway ─→ ProxyClient ─→ /api/*
    ApodController  ──┘
"""
