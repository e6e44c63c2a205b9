"""
LoveStack Backend — Profile Route Tests
=========================================

What we test:
    ✅ 401 without a session, and no table is queried
    ✅ 200 {profile} for an authenticated user
    ✅ 404 when the profile row does not exist
    ✅ 500 {error, details} when the query itself fails
    ✅ Client contact profile with its embedded company
    ✅ Header profile: client contact pseudo-role, else user profile
    ✅ Unified user profile: userType, own id only, 400 without userId
"""

import pytest

from conftest import SERVICE_KEY, USER_ID, NO_ROW, api_error, no_rows


class TestAuthProfile:

    @pytest.mark.asyncio
    async def test_no_session_is_401(self, test_client, fake_supabase):
        response = await test_client.get("/api/auth/profile")

        assert response.status_code == 401
        assert response.json() == {"error": "Not authenticated"}
        assert fake_supabase.executed == []
        assert fake_supabase.get_user_calls == []

    @pytest.mark.asyncio
    async def test_rejected_session_is_401(self, test_client, fake_supabase):
        response = await test_client.get(
            "/api/auth/profile", headers={"Cookie": "sb-testref-auth-token=forged"}
        )

        assert response.status_code == 401
        assert fake_supabase.get_user_calls == ["forged"]
        assert fake_supabase.executed == []

    @pytest.mark.asyncio
    async def test_returns_profile(self, test_client, fake_supabase, session_cookie):
        profile = {"id": USER_ID, "email": "user@example.com", "role": "admin", "full_name": "Ada"}
        fake_supabase.respond("user_profiles", profile)

        response = await test_client.get("/api/auth/profile", headers=session_cookie)

        assert response.status_code == 200
        assert response.json() == {"profile": profile}
        lookup = fake_supabase.last("user_profiles")
        assert lookup.args_of("eq") == [("id", USER_ID)]
        assert lookup.called("single")
        assert lookup.client.key == SERVICE_KEY

    @pytest.mark.asyncio
    async def test_missing_profile_row_is_404(self, test_client, fake_supabase, session_cookie):
        fake_supabase.respond("user_profiles", no_rows())

        response = await test_client.get("/api/auth/profile", headers=session_cookie)

        assert response.status_code == 404
        assert response.json() == {"error": "Profile not found"}

    @pytest.mark.asyncio
    async def test_query_failure_is_500_with_details(self, test_client, fake_supabase, session_cookie):
        fake_supabase.respond(
            "user_profiles", api_error("canceling statement due to statement timeout", code="57014")
        )

        response = await test_client.get("/api/auth/profile", headers=session_cookie)

        assert response.status_code == 500
        assert response.json() == {
            "error": "Failed to fetch profile",
            "details": "canceling statement due to statement timeout",
        }


class TestClientProfile:

    @pytest.mark.asyncio
    async def test_returns_client_contact(self, test_client, fake_supabase, session_cookie):
        contact = {
            "id": USER_ID,
            "full_name": "Grace",
            "client_companies": {"id": "c1", "company_name": "Acme", "status": "active"},
        }
        fake_supabase.respond("client_contacts", contact)

        response = await test_client.get("/api/client/profile", headers=session_cookie)

        assert response.status_code == 200
        assert response.json() == {"clientContact": contact}
        (columns,) = fake_supabase.last("client_contacts").args_of("select")[0]
        assert "client_companies!client_contacts_client_company_id_fkey" in columns

    @pytest.mark.asyncio
    async def test_no_session_is_401(self, test_client):
        response = await test_client.get("/api/client/profile")
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_missing_contact_is_404(self, test_client, fake_supabase, session_cookie):
        fake_supabase.respond("client_contacts", no_rows())

        response = await test_client.get("/api/client/profile", headers=session_cookie)

        assert response.status_code == 404
        assert response.json() == {"error": "Client contact not found"}


class TestHeaderProfile:

    @pytest.mark.asyncio
    async def test_client_contact_gets_pseudo_role(self, test_client, fake_supabase, session_cookie):
        fake_supabase.respond(
            "client_contacts",
            {"id": USER_ID, "email": "grace@acme.test", "full_name": "Grace", "role": "owner"},
        )

        response = await test_client.get("/api/user/profile", headers=session_cookie)

        assert response.status_code == 200
        profile = response.json()["profile"]
        assert profile["role"] == "client_contact"
        assert profile["is_client_contact"] is True
        assert fake_supabase.queries("user_profiles") == []

    @pytest.mark.asyncio
    async def test_falls_back_to_user_profile(self, test_client, fake_supabase, session_cookie):
        profile = {"id": USER_ID, "email": "ada@example.com", "role": "team_member"}
        fake_supabase.respond("client_contacts", NO_ROW)
        fake_supabase.respond("user_profiles", profile)

        response = await test_client.get("/api/user/profile", headers=session_cookie)

        assert response.status_code == 200
        assert response.json() == {"profile": profile}

    @pytest.mark.asyncio
    async def test_no_row_anywhere_is_404(self, test_client, fake_supabase, session_cookie):
        fake_supabase.respond("client_contacts", NO_ROW)
        fake_supabase.respond("user_profiles", no_rows())

        response = await test_client.get("/api/user/profile", headers=session_cookie)

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_no_session_is_401(self, test_client):
        response = await test_client.get("/api/user/profile")
        assert response.status_code == 401


class TestUnifiedUserProfile:

    @pytest.mark.asyncio
    async def test_client_contact_is_tagged_client(self, test_client, fake_supabase, session_cookie):
        fake_supabase.respond(
            "client_contacts",
            {
                "id": USER_ID,
                "email": "grace@acme.test",
                "full_name": "Grace",
                "role": "owner",
                "client_company_id": "c1",
                "client_companies": [{"id": "c1", "company_name": "Acme", "status": "active"}],
            },
        )

        response = await test_client.get(
            f"/api/auth/user-profile?userId={USER_ID}", headers=session_cookie
        )

        assert response.status_code == 200
        user = response.json()["user"]
        assert user["userType"] == "client"
        assert user["client_company"] == {"id": "c1", "company_name": "Acme", "status": "active"}

    @pytest.mark.asyncio
    async def test_team_member_is_tagged_team(self, test_client, fake_supabase, session_cookie):
        fake_supabase.respond("client_contacts", NO_ROW)
        fake_supabase.respond(
            "user_profiles", {"id": USER_ID, "email": None, "role": "admin", "status": "active"}
        )

        response = await test_client.get(
            f"/api/auth/user-profile?userId={USER_ID}", headers=session_cookie
        )

        user = response.json()["user"]
        assert user["userType"] == "team"
        assert user["email"] == ""
        assert user["role"] == "admin"

    @pytest.mark.asyncio
    async def test_unknown_user_is_404(self, test_client, fake_supabase, session_cookie):
        fake_supabase.respond("client_contacts", NO_ROW)
        fake_supabase.respond("user_profiles", NO_ROW)

        response = await test_client.get(
            f"/api/auth/user-profile?userId={USER_ID}", headers=session_cookie
        )

        assert response.status_code == 404
        assert response.json() == {"error": "User profile not found"}

    @pytest.mark.asyncio
    async def test_missing_user_id_is_400(self, test_client, fake_supabase, session_cookie):
        response = await test_client.get("/api/auth/user-profile", headers=session_cookie)

        assert response.status_code == 400
        assert response.json() == {"error": "User ID is required"}
        assert fake_supabase.executed == []

    @pytest.mark.asyncio
    async def test_other_users_id_is_403(self, test_client, fake_supabase, session_cookie):
        response = await test_client.get(
            "/api/auth/user-profile?userId=someone-else", headers=session_cookie
        )

        assert response.status_code == 403
        assert fake_supabase.executed == []

    @pytest.mark.asyncio
    async def test_lookup_failure_is_500(self, test_client, fake_supabase, session_cookie):
        fake_supabase.respond("client_contacts", api_error("permission denied"))

        response = await test_client.get(
            f"/api/auth/user-profile?userId={USER_ID}", headers=session_cookie
        )

        assert response.status_code == 500
        assert response.json() == {
            "error": "Failed to fetch user profile",
            "details": "permission denied",
        }
