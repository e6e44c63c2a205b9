"""
LoveStack Backend — Services Layer
====================================

Business rules between the routes (HTTP) and the provider clients.

Service Inventory:
    - ProfileService:      profile and client-contact lookups (404 vs 500)
    - StatsService:        dashboard aggregate, admin or user scope
    - DiagnosticsService:  debug inspections over the admin client
    - EmailService:        Resend test and invitation messages
    - ContactService:      contact-form storage + Gmail notification
    - ChatService (ABC):   chat assistant; OpenAIChatService implements it
    - demo_data:           static, deterministic demo fixture

Services are stateless singletons; clients are passed in on every call so
tests can hand them fakes.
"""
