# Middleware package init
"""
HotOrNot Backend — Middleware Package
=======================================

Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [Rate Limit] → [GZip] → [CORS] → Route Handler

    1. Request ID first: every response, 429s included, carries the ID
    2. Logging: access line with status and duration, rejected requests too
    3. Rate Limit: reject floods before any route work
"""
