"""
LoveStack Backend — Middleware Package
========================================

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    - Request ID runs first so every log line of the request can carry it
    - Logging measures duration around everything downstream

No middleware keeps state between requests.
"""
