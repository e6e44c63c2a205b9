"""
LoveStack Backend — Routes Package
====================================

Route Inventory:
    - auth.py:           GET  /api/auth/profile, /api/client/profile,
                              /api/user/profile, /api/auth/user-profile
    - client_portal.py:  GET  /api/client/projects, /api/client/projects/{id}
    - invitations.py:    GET|POST /api/invitations, /api/invitations/accept/{token}
    - dashboard.py:      GET  /api/dashboard/stats
    - debug.py:          GET  /api/debug/{check-profiles,list-users,profile-check}
    - demo.py:           GET  /api/demo
    - email.py:          GET  /api/test-simple-email, GET /api/test-email
    - contact.py:        POST /api/contact
    - chat.py:           POST /api/chat
    - health.py:         GET  /health
    - pages.py:          GET  /, /about, /services, /contact, /{client,team}/forgot-password

Routes stay thin: pick the credential tier, call a service, shape the body.
Failures are raised and turned into responses by the handlers in main.py.
"""
