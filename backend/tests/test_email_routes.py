"""
LoveStack Backend — Email Route Tests
=======================================

What we test:
    ✅ Simple test email: 200 on acceptance, exactly one send
    ✅ Provider rejection: 500 {message, error} with Resend's payload, one send
    ✅ Any other failure: 500 "Unexpected error", one attempt
    ✅ Invitation test email renders the template and carries debug info
"""

import pytest
import requests
from resend.exceptions import ResendError

from app.services.email_service import format_expiry, role_display_name

RESEND_REJECTION = {
    "statusCode": 403,
    "name": "validation_error",
    "message": "You can only send testing emails to your own email address.",
}


def rejection(code=403, error_type="validation_error", message=RESEND_REJECTION["message"]):
    return ResendError(code, error_type, message, "Verify a domain first")


class TestSimpleEmail:

    @pytest.mark.asyncio
    async def test_success(self, test_client, resend_send):
        response = await test_client.get("/api/test-simple-email")

        assert response.status_code == 200
        assert response.json() == {
            "message": "Simple email sent successfully",
            "data": {"id": "email_123"},
        }
        resend_send.assert_called_once()
        (params,) = resend_send.call_args.args
        assert params["from"] == "noreply@resend.dev"
        assert params["to"] == ["delivered@resend.dev"]
        assert params["subject"] == "Simple Test Email"
        assert "<h1>Hello World!</h1>" in params["html"]

    @pytest.mark.asyncio
    async def test_sdk_uses_configured_key(self, test_client, resend_send):
        import resend

        await test_client.get("/api/test-simple-email")

        assert resend.api_key == "re_test_123456"

    @pytest.mark.asyncio
    async def test_provider_error_is_500_and_not_retried(self, test_client, resend_send):
        resend_send.side_effect = rejection()

        response = await test_client.get("/api/test-simple-email")

        assert response.status_code == 500
        assert response.json() == {
            "message": "Failed to send simple email",
            "error": RESEND_REJECTION,
        }
        assert resend_send.call_count == 1

    @pytest.mark.asyncio
    async def test_transport_failure_is_unexpected_error(self, test_client, resend_send):
        resend_send.side_effect = requests.ConnectionError("connection refused")

        response = await test_client.get("/api/test-simple-email")

        assert response.status_code == 500
        body = response.json()
        assert body["message"] == "Unexpected error"
        assert "connection refused" in body["error"]
        assert resend_send.call_count == 1

    @pytest.mark.asyncio
    async def test_any_other_exception_is_unexpected_error(self, test_client, resend_send):
        resend_send.side_effect = RuntimeError()

        response = await test_client.get("/api/test-simple-email")

        assert response.status_code == 500
        assert response.json() == {"message": "Unexpected error", "error": "RuntimeError"}


class TestInvitationEmail:

    @pytest.mark.asyncio
    async def test_success_includes_debug_block(self, test_client, resend_send):
        resend_send.return_value = {"id": "email-456"}

        response = await test_client.get("/api/test-email")

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Test invitation email sent successfully to delivered@resend.dev"
        assert body["data"] == {"id": "email-456"}
        assert body["debug"] == {
            "hasResendKey": True,
            "resendKeyPrefix": "re_te",
            "fromEmail": "noreply@resend.dev",
            "appUrl": "http://localhost:3000",
        }

        (params,) = resend_send.call_args.args
        assert params["subject"] == "You're invited to join Monkey LoveStack"
        assert "System Admin" in params["html"]
        assert "http://localhost:3000/accept-invitation/test-token-123" in params["html"]

    @pytest.mark.asyncio
    async def test_provider_error_keeps_debug_block(self, test_client, resend_send):
        resend_send.side_effect = rejection(422, "invalid_from_address", "Invalid `from` field.")

        response = await test_client.get("/api/test-email")

        assert response.status_code == 500
        body = response.json()
        assert body["message"] == "Failed to send test email"
        assert body["error"] == {
            "statusCode": 422,
            "name": "invalid_from_address",
            "message": "Invalid `from` field.",
        }
        assert body["debug"]["hasResendKey"] is True

    @pytest.mark.asyncio
    async def test_missing_api_key_never_calls_provider(self, test_client, container, resend_send):
        container.resend.api_key = ""

        response = await test_client.get("/api/test-email")

        assert response.status_code == 500
        assert response.json()["error"] == "RESEND_API_KEY environment variable is not set"
        assert not resend_send.called


class TestTemplateHelpers:

    def test_role_display_name(self):
        assert role_display_name("team_member") == "Team Member"
        assert role_display_name("admin") == "Admin"

    def test_format_expiry(self):
        from datetime import datetime

        assert format_expiry(datetime(2024, 9, 8, 14, 30)) == "September 8, 2024 at 02:30 PM"
