# Clients package init
"""
LoveStack Backend — Provider Clients
=====================================

What:  Wrappers around the vendor SDKs for the hosted providers this
       backend talks to.
Why:   One module per provider keeps SDK calls, credentials, and error
       translation in one place.

Client Inventory:
    - supabase.py: `supabase` SDK; PostgREST tables + GoTrue (anon, admin, user tiers)
    - resend.py:   `resend` SDK; transactional email
    - gmail.py:    google-auth + google-api-python-client; users.messages.send

All clients share the same rules:
    - Created once at startup; SDK clients are built lazily on first use
    - No retries; a failed call fails the request that made it
    - Provider-reported errors come back as values (Supabase, Resend) or as
      application exceptions (Gmail); never as a raw SDK exception
"""
