# Middleware package init
"""
Notekeeper — Middleware Package
=================================

Middleware Chain (request direction):
    Request → [Request ID] → [Logging] → [Login Rate Limit] → [CORS] → Route Handler

    Request ID runs first so the access log line and any 429 carry the ID.
    The rate limiter only inspects POST /api/login; everything else passes through.
"""
