"""
LoveStack Backend — Invitation Service
========================================

What:  Admin-issued invitations and their acceptance.
How:   Rows live in `user_invitations`; the token and the expiry are set by
       database defaults. Accepting a pending, unexpired invitation creates a
       confirmed GoTrue user plus its `user_profiles` row.

Invitation lifecycle:
    pending ──accept──→ accepted
       │
       ├──expiry seen on lookup──→ expired
       └──(admin)──→ cancelled

Cleanup on partial failure:
    invitation email fails  → the new invitation row is deleted
    profile insert fails    → the new auth user is deleted
"""

import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from postgrest.types import ReturnMethod

from app.clients.resend import ResendClient
from app.clients.supabase import create_user, delete_user, magic_link, run
from app.config import Settings
from app.exceptions import (
    ConflictError,
    DatabaseError,
    ExternalServiceError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from app.schemas.api import AcceptInvitationRequest, InvitationCreate
from app.services.email_service import DEFAULT_COMPANY_NAME, email_service
from app.services.profile_service import optional_row

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
VALID_ROLES = ("user", "admin", "client", "team_member", "moderator")
STATUSES = ("pending", "accepted", "expired", "cancelled")
MIN_PASSWORD_LENGTH = 8

LIST_COLUMNS = """
    *,
    inviter:user_profiles!user_invitations_invited_by_fkey(
        id,
        full_name,
        email
    )
"""

TOKEN_COLUMNS = """
    *,
    inviter:user_profiles!user_invitations_invited_by_fkey(
        full_name,
        company_name
    )
"""


def parse_timestamp(value: str) -> datetime:
    """ISO-8601 from PostgREST; a trailing Z or a missing offset means UTC."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def invitation_stats(rows: Optional[list]) -> Dict[str, int]:
    stats = {"total": len(rows or [])}
    for status in STATUSES:
        stats[status] = sum(1 for row in rows or [] if row.get("status") == status)
    return stats


class InvitationService:

    # ── Admin side ───────────────────────────────────────────────────────

    async def require_admin(self, admin: Any, user_id: str) -> Dict[str, Any]:
        """The caller's profile; 403 unless its role is admin."""
        profile = optional_row(
            await run(
                admin.table("user_profiles")
                .select("id, role, full_name")
                .eq("id", user_id)
                .maybe_single()
            ),
            "Failed to fetch profile",
        )
        if profile is None or profile.get("role") != "admin":
            raise PermissionDeniedError("Admin access required")
        return profile

    async def list_invitations(
        self,
        admin: Any,
        status: str = "pending",
        limit: int = 50,
        offset: int = 0,
    ) -> Dict[str, Any]:
        query = (
            admin.table("user_invitations")
            .select(LIST_COLUMNS)
            .order("created_at", desc=True)
            .range(offset, offset + limit - 1)
        )
        if status != "all":
            query = query.eq("status", status)
        invitations = (await run(query)).unwrap("Failed to fetch invitations")

        counts = await run(admin.table("user_invitations").select("status"))
        if counts.error is not None:
            logger.warning("Invitation stats unavailable: %s", counts.error.message)
        return {
            "invitations": invitations or [],
            "stats": invitation_stats(counts.data if counts.ok else None),
        }

    async def _email_exists(self, admin: Any, email: str) -> bool:
        existing = await run(
            admin.table("user_profiles").select("id").eq("email", email).maybe_single()
        )
        return bool(existing.ok and existing.data)

    async def create_invitation(
        self,
        admin: Any,
        resend: ResendClient,
        config: Settings,
        inviter: Dict[str, Any],
        body: InvitationCreate,
    ) -> Dict[str, Any]:
        if not (body.email and body.full_name and body.role):
            raise ValidationError("Email, full name, and role are required")
        if not EMAIL_PATTERN.match(body.email):
            raise ValidationError("Invalid email format", field="email")
        if body.role not in VALID_ROLES:
            raise ValidationError("Invalid role", field="role")

        if await self._email_exists(admin, body.email):
            raise ConflictError("User with this email already exists")

        pending = await run(
            admin.table("user_invitations")
            .select("id")
            .eq("email", body.email)
            .eq("status", "pending")
            .limit(1)
        )
        if pending.ok and pending.data:
            raise ConflictError("Pending invitation already exists for this email")

        inserted = await run(
            admin.table("user_invitations").insert(
                {
                    "email": body.email,
                    "full_name": body.full_name,
                    "role": body.role,
                    "company_name": body.company_name or None,
                    "phone": body.phone or None,
                    "address": body.address or None,
                    "timezone": body.timezone or "UTC",
                    "invited_by": inviter["id"],
                }
            )
        )
        rows = inserted.unwrap("Failed to create invitation")
        if not rows:
            raise DatabaseError("Failed to create invitation", details="insert returned no row")
        invitation = rows[0] if isinstance(rows, list) else rows

        try:
            result = await email_service.send_invitation(
                resend,
                config,
                to=body.email,
                inviter_name=inviter.get("full_name") or "Admin",
                invitee_name=body.full_name,
                role=body.role,
                accept_url=f"{config.app_url.rstrip('/')}/accept-invitation/{invitation['invitation_token']}",
                expires_at=parse_timestamp(invitation["expires_at"]),
                company_name=body.company_name or DEFAULT_COMPANY_NAME,
            )
            failure = None if result.ok else (result.error or {}).get("message") or "Unknown email error"
        except Exception as e:
            logger.error("Invitation email to %s raised: %s", body.email, str(e), exc_info=True)
            failure = str(e) or type(e).__name__

        if failure is not None:
            logger.error("Failed to send invitation email to %s: %s", body.email, failure)
            await run(admin.table("user_invitations").delete().eq("id", invitation["id"]))
            raise ExternalServiceError("Failed to send invitation email", details=failure)

        logger.info("Invitation sent to %s as %s", body.email, body.role)
        return invitation

    # ── Invitee side ─────────────────────────────────────────────────────

    async def _pending_invitation(
        self, admin: Any, token: str, columns: str, now: datetime, for_preview: bool
    ) -> Dict[str, Any]:
        result = await run(
            admin.table("user_invitations").select(columns).eq("invitation_token", token).single()
        )
        if result.error is not None or not result.data:
            raise NotFoundError("Invalid invitation token")

        invitation = result.data
        if invitation.get("status") != "pending":
            raise ValidationError(
                "This invitation is no longer valid",
                extra={"status": invitation.get("status")} if for_preview else None,
            )
        if parse_timestamp(invitation["expires_at"]) < now:
            if for_preview:
                await run(
                    admin.table("user_invitations")
                    .update({"status": "expired"})
                    .eq("id", invitation["id"])
                )
            raise ValidationError("This invitation has expired")
        return invitation

    async def _mark_accepted(self, admin: Any, invitation_id: Any, now: datetime) -> None:
        result = await run(
            admin.table("user_invitations")
            .update({"status": "accepted", "accepted_at": now.isoformat()})
            .eq("id", invitation_id)
        )
        if result.error is not None:
            logger.warning("Could not mark invitation %s accepted: %s", invitation_id, result.error.message)

    async def preview(self, admin: Any, token: str, now: Optional[datetime] = None) -> Dict[str, Any]:
        """Details for the accept form. Expired rows are flagged as a side effect."""
        now = now or datetime.now(timezone.utc)
        invitation = await self._pending_invitation(admin, token, TOKEN_COLUMNS, now, for_preview=True)

        if await self._email_exists(admin, invitation["email"]):
            await self._mark_accepted(admin, invitation["id"], now)
            raise ConflictError(
                "A user with this email already exists. Please sign in instead.",
                extra={"userExists": True},
            )

        inviter = invitation.get("inviter") or {}
        return {
            "email": invitation["email"],
            "full_name": invitation.get("full_name"),
            "role": invitation.get("role"),
            "company_name": invitation.get("company_name"),
            "inviter_name": inviter.get("full_name"),
            "inviter_company": inviter.get("company_name"),
            "expires_at": invitation["expires_at"],
        }

    async def accept(
        self,
        admin: Any,
        token: str,
        body: AcceptInvitationRequest,
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        if not body.password or len(body.password) < MIN_PASSWORD_LENGTH:
            raise ValidationError("Password must be at least 8 characters long", field="password")
        if body.password != body.confirm_password:
            raise ValidationError("Passwords do not match", field="confirmPassword")

        now = now or datetime.now(timezone.utc)
        invitation = await self._pending_invitation(admin, token, "*", now, for_preview=False)
        email = invitation["email"]

        if await self._email_exists(admin, email):
            raise ConflictError("A user with this email already exists")

        created = await create_user(admin, email, body.password)
        if created.error is not None or not created.data:
            logger.error("Auth user creation for %s failed: %s", email, created.error)
            raise DatabaseError("Failed to create user account")
        user_id = created.data["id"]

        profile = await run(
            admin.table("user_profiles").insert(
                {
                    "id": user_id,
                    "email": email,
                    "full_name": invitation.get("full_name"),
                    "role": invitation.get("role"),
                    "company_name": invitation.get("company_name"),
                    "phone": invitation.get("phone"),
                    "address": invitation.get("address"),
                    "timezone": invitation.get("timezone"),
                    "created_at": now.isoformat(),
                    "updated_at": now.isoformat(),
                },
                returning=ReturnMethod.minimal,
            )
        )
        if profile.error is not None:
            logger.error("Profile insert for %s failed: %s", email, profile.error.message)
            cleanup = await delete_user(admin, user_id)
            if cleanup.error is not None:
                logger.error("Orphaned auth user %s: %s", user_id, cleanup.error.message)
            raise DatabaseError("Failed to create user profile")

        await self._mark_accepted(admin, invitation["id"], now)

        link = await magic_link(admin, email)
        if link.error is not None:
            logger.warning("Sign-in link for %s unavailable: %s", email, link.error.message)

        logger.info("Invitation %s accepted by %s", invitation["id"], email)
        return {
            "message": "Account created successfully",
            "user": {
                "id": user_id,
                "email": email,
                "full_name": invitation.get("full_name"),
                "role": invitation.get("role"),
            },
            "signInUrl": link.data if link.ok else None,
        }


invitation_service = InvitationService()
