# Middleware package init
"""
SimHub Backend — Middleware Package
===================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (request direction):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    Request ID runs first so the access log line and any error response of
    the same request carry the same id.
"""
