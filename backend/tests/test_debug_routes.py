"""
LoveStack Backend — Debug Route Tests
=======================================

What we test:
    ✅ Response keys and configured lookup targets
    ✅ A missing profile is null, a failing query is 500
    ✅ list-users returns at most five auth users
    ✅ Routes are absent unless ENABLE_DEBUG_ROUTES is set
"""

import pytest
from httpx import ASGITransport, AsyncClient

from app.config import Settings

from conftest import NO_ROW, RejectedCredentials, api_error, no_rows


class TestCheckProfiles:

    @pytest.mark.asyncio
    async def test_reports_configured_accounts(self, test_client, fake_supabase, test_settings):
        fake_supabase.respond("user_profiles", {"id": "a", "role": "admin"}, no_rows(), [{"id": "a"}])

        response = await test_client.get("/api/debug/check-profiles")

        assert response.status_code == 200
        assert response.json() == {
            "adminProfile": {"id": "a", "role": "admin"},
            "teamProfile": None,
            "allProfiles": [{"id": "a"}],
            "adminUserId": test_settings.debug_admin_user_id,
            "teamUserId": test_settings.debug_team_user_id,
        }
        lookups = fake_supabase.queries("user_profiles")
        assert lookups[0].args_of("eq") == [("email", test_settings.debug_admin_email)]
        assert lookups[1].args_of("eq") == [("email", test_settings.debug_team_email)]
        assert lookups[2].args_of("in_") == [
            ("id", [test_settings.debug_admin_user_id, test_settings.debug_team_user_id])
        ]

    @pytest.mark.asyncio
    async def test_query_failure_is_500(self, test_client, fake_supabase):
        fake_supabase.respond("user_profiles", api_error("down"))

        response = await test_client.get("/api/debug/check-profiles")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to check profiles", "details": "down"}


class TestListUsers:

    @pytest.mark.asyncio
    async def test_first_five_auth_users(self, test_client, fake_supabase):
        users = [{"id": f"u{i}"} for i in range(8)]
        fake_supabase.admin_auth.users = users
        fake_supabase.respond("client_companies", [{"id": "c1"}])
        fake_supabase.respond("client_contacts", [])

        response = await test_client.get("/api/debug/list-users")

        assert response.status_code == 200
        assert response.json() == {
            "authUsers": users[:5],
            "companies": [{"id": "c1"}],
            "contacts": [],
        }

    @pytest.mark.asyncio
    async def test_admin_api_failure_is_500(self, test_client, fake_supabase, monkeypatch):
        async def refuse():
            raise RejectedCredentials("not admin", "not_admin", 403)

        monkeypatch.setattr(fake_supabase.admin_auth, "list_users", refuse)

        response = await test_client.get("/api/debug/list-users")

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error", "details": "not admin"}


class TestProfileCheck:

    @pytest.mark.asyncio
    async def test_profile_and_recent_listing(self, test_client, fake_supabase):
        recent = [{"id": "a", "email": "x@example.com"}]
        fake_supabase.respond("user_profiles", NO_ROW, recent)

        response = await test_client.get("/api/debug/profile-check")

        assert response.status_code == 200
        assert response.json() == {"stevenProfile": None, "allProfiles": recent, "hasProfiles": True}
        listing = fake_supabase.queries("user_profiles")[1]
        assert listing.args_of("order") == [("created_at",)]
        assert listing.kwargs_of("order") == [{"desc": True}]
        assert listing.args_of("limit") == [(10,)]

    @pytest.mark.asyncio
    async def test_lookup_failure_is_database_error(self, test_client, fake_supabase):
        fake_supabase.respond("user_profiles", api_error("timeout"))

        response = await test_client.get("/api/debug/profile-check")

        assert response.status_code == 500
        assert response.json() == {"error": "Database error", "details": "timeout"}


def test_debug_routes_are_off_by_default(monkeypatch):
    monkeypatch.delenv("ENABLE_DEBUG_ROUTES", raising=False)

    assert Settings(_env_file=None).enable_debug_routes is False


@pytest.mark.asyncio
async def test_debug_routes_can_be_disabled(container):
    from app.main import create_app

    container.settings = container.settings.model_copy(update={"enable_debug_routes": False})
    app = create_app(container=container)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get("/api/debug/list-users")

    assert response.status_code == 404
    assert response.json() == {"error": "Not Found"}
