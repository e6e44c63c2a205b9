"""
LoveStack Backend — Application Package
=========================================

Layering:

    ┌─────────────────────────────────────┐
    │     Routes + Pages (HTTP layer)     │  ← status codes, body shapes
    ├─────────────────────────────────────┤
    │       Services (business rules)     │  ← aggregation, templating
    ├─────────────────────────────────────┤
    │    Clients (Supabase, Resend, ...)  │  ← provider wire formats
    └─────────────────────────────────────┘

There is no local database: every record lives in the hosted provider and
is fetched per request.
"""

__version__ = "1.0.0"
