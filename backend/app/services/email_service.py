"""
LoveStack Backend — Email Service
===================================

What:  Builds the transactional messages the backend sends through Resend.
How:   Bodies are Jinja2 templates under templates/emails/. Each public
       method makes exactly one ResendClient.send() call and hands back the
       EmailResult; deciding the HTTP status is the route's job.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from app.clients.resend import EmailResult, ResendClient
from app.config import Settings
from app.templating import render_email

logger = logging.getLogger(__name__)

SIMPLE_TEST_SUBJECT = "Simple Test Email"
SIMPLE_TEST_HTML = "<h1>Hello World!</h1><p>This is a simple test email from Resend.</p>"

DEFAULT_COMPANY_NAME = "Monkey LoveStack"
INVITATION_TTL = timedelta(days=7)


def role_display_name(role: str) -> str:
    """team_member → Team Member"""
    return role.replace("_", " ").title()


def format_expiry(expires_at: datetime) -> str:
    return f"{expires_at:%B} {expires_at.day}, {expires_at:%Y} at {expires_at:%I:%M %p}"


class EmailService:

    async def send_simple_test(self, resend: ResendClient, config: Settings) -> EmailResult:
        logger.info("Sending simple test email to %s", config.email_test_recipient)
        return await resend.send(
            sender=config.resend_from_email,
            to=config.email_test_recipient,
            subject=SIMPLE_TEST_SUBJECT,
            html=SIMPLE_TEST_HTML,
        )

    async def send_invitation(
        self,
        resend: ResendClient,
        config: Settings,
        *,
        to: str,
        inviter_name: str,
        invitee_name: str,
        role: str,
        accept_url: str,
        expires_at: datetime,
        company_name: str = DEFAULT_COMPANY_NAME,
    ) -> EmailResult:
        """
        Render and send one invitation.

        Raises:
            ValueError: no Resend API key is configured.
        """
        if not resend.has_api_key:
            raise ValueError("RESEND_API_KEY environment variable is not set")

        html = render_email(
            "invitation.html",
            inviter_name=inviter_name,
            invitee_name=invitee_name,
            role_display_name=role_display_name(role),
            company_name=company_name,
            accept_url=accept_url,
            expires_on=format_expiry(expires_at),
        )
        return await resend.send(
            sender=config.resend_from_email,
            to=to,
            subject=f"You're invited to join {company_name}",
            html=html,
        )

    async def send_test_invitation(
        self,
        resend: ResendClient,
        config: Settings,
        now: Optional[datetime] = None,
    ) -> EmailResult:
        now = now or datetime.now(timezone.utc)
        return await self.send_invitation(
            resend,
            config,
            to=config.email_test_recipient,
            inviter_name="System Admin",
            invitee_name="Test Recipient",
            role="admin",
            accept_url=f"{config.app_url.rstrip('/')}/accept-invitation/test-token-123",
            expires_at=now + INVITATION_TTL,
        )

    def debug_info(self, config: Settings) -> Dict[str, Any]:
        """Safe subset of the email configuration; never the whole key."""
        return {
            "hasResendKey": bool(config.resend_api_key),
            "resendKeyPrefix": config.resend_api_key[:5] if config.resend_api_key else None,
            "fromEmail": config.resend_from_email,
            "appUrl": config.app_url,
        }


email_service = EmailService()
