"""
CanvasBoard — Middleware Package
==================================

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    Request ID runs first so every log line of the request, including the
    access log entry, carries the correlation id.
"""
