"""
LoveStack Backend — Contact Request Service
=============================================

What:  Handles a contact-form submission in two independent steps:
       1. store the request in `contact_requests`
       2. notify the site owner through Gmail
How:   Each step records its own failure; the submission succeeds when at
       least one step did. Neither step is retried.

Unconfigured providers:
    Supabase missing  → the request is logged and counted as saved
    Gmail missing     → recorded as "Email service not configured"
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from postgrest.types import ReturnMethod

from app.clients.gmail import GmailClient
from app.clients.supabase import SupabaseGateway, run
from app.config import Settings
from app.exceptions import ExternalServiceError
from app.schemas.api import ContactForm
from app.templating import render_email

logger = logging.getLogger(__name__)


@dataclass
class ContactOutcome:
    saved_to_database: bool = False
    email_sent: bool = False
    errors: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.saved_to_database or self.email_sent

    @property
    def summary(self) -> str:
        parts = []
        if self.saved_to_database:
            parts.append("saved to database")
        if self.email_sent:
            parts.append("email notification sent")
        return ", ".join(parts)

    def details(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "emailSent": self.email_sent,
            "savedToDatabase": self.saved_to_database,
        }
        if self.errors:
            body["errors"] = self.errors
        return body


def contact_row(form: ContactForm, now: Optional[datetime] = None) -> Dict[str, Any]:
    now = now or datetime.now(timezone.utc)
    return {
        "name": form.name,
        "email": form.email,
        "company": form.company or None,
        "project_type": form.project_type or None,
        "budget": form.budget or None,
        "timeline": form.timeline or None,
        "description": form.description,
        "message": form.message or None,
        "created_at": now.isoformat(),
        "status": "new",
    }


class ContactService:

    async def _save(self, form: ContactForm, supabase: SupabaseGateway, config: Settings, outcome: ContactOutcome) -> None:
        if not config.supabase_configured:
            logger.info(
                "Contact form submission (Supabase not configured): %s <%s>",
                form.name,
                form.email,
            )
            outcome.saved_to_database = True
            return

        result = await run(
            supabase.anon.table("contact_requests").insert(
                contact_row(form), returning=ReturnMethod.minimal
            )
        )
        if result.error is not None:
            logger.error("Contact request insert failed: %s", result.error.message)
            outcome.errors.append(f"Failed to save to database: {result.error.message}")
            return
        outcome.saved_to_database = True

    async def _notify(self, form: ContactForm, gmail: GmailClient, outcome: ContactOutcome) -> None:
        if not gmail.configured:
            logger.info("Gmail not configured - email not sent")
            outcome.errors.append("Email service not configured")
            return

        html = render_email(
            "contact_notification.html",
            name=form.name,
            email=form.email,
            company=form.company,
            project_type=form.project_type,
            budget=form.budget,
            timeline=form.timeline,
            description=form.description,
            message=form.message,
        )
        try:
            message = gmail.build_message(
                subject=f"New Portfolio Inquiry: {form.project_type or 'General Question'}",
                html=html,
                from_name=form.name,
                reply_to=form.email,
            )
            await gmail.send(message)
        except ExternalServiceError as e:
            logger.error("Gmail API error: %s (%s)", e.message, e.details)
            outcome.errors.append("Failed to send email notification")
            return
        outcome.email_sent = True

    async def submit(
        self,
        form: ContactForm,
        supabase: SupabaseGateway,
        gmail: GmailClient,
        config: Settings,
    ) -> ContactOutcome:
        outcome = ContactOutcome()
        await self._save(form, supabase, config, outcome)
        await self._notify(form, gmail, outcome)
        logger.info(
            "Contact request from %s: saved=%s emailed=%s",
            form.email,
            outcome.saved_to_database,
            outcome.email_sent,
        )
        return outcome


contact_service = ContactService()
