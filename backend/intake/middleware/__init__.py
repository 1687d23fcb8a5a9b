"""
Adoption Intake Backend: Middleware Package
==============================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    Request ID runs first so every log line of the request, including the
    access line written by the logging middleware, carries the same ID.
"""
