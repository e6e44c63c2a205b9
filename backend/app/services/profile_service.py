"""
LoveStack Backend — Profile Service
=====================================

What:  Profile lookups for an already-authenticated user.
Why:   Keeps the "no such row → 404, query failure → 500" rule in one place
       instead of every route re-implementing it.
How:   Reads through the admin client (profile rows are read before row-level
       security policies would let the user see them) with single-row
       semantics.
Who:   GET /api/auth/profile, GET /api/client/profile, GET /api/user/profile,
       GET /api/auth/user-profile, and the client project routes.
"""

import logging
from typing import Any, Dict, Optional

from app.clients.supabase import QueryResult, run
from app.exceptions import DatabaseError, NotFoundError

logger = logging.getLogger(__name__)

CLIENT_CONTACT_COLUMNS = """
    id,
    full_name,
    email,
    role,
    can_manage_team,
    client_company_id,
    client_companies!client_contacts_client_company_id_fkey (
        id,
        company_name,
        status
    )
"""

UNIFIED_CLIENT_COLUMNS = """
    *,
    client_companies!client_contacts_client_company_id_fkey (
        id,
        company_name,
        status
    )
"""


def require_row(result: QueryResult, not_found: str, failure: str) -> Dict[str, Any]:
    """
    Translate a single-row QueryResult into a row or an exception.

    Raises:
        NotFoundError: the query succeeded but matched no row.
        DatabaseError: the query itself failed; provider message in details.
    """
    if result.error is not None:
        if result.error.is_no_rows:
            raise NotFoundError(not_found)
        logger.error("%s: %s (code=%s)", failure, result.error.message, result.error.code)
        raise DatabaseError(failure, details=result.error.message)
    if result.data is None:
        raise NotFoundError(not_found)
    return result.data


def optional_row(result: QueryResult, failure: str) -> Optional[Dict[str, Any]]:
    """Like require_row, but a missing row is None."""
    if result.error is not None and result.error.is_no_rows:
        return None
    if result.error is not None:
        raise DatabaseError(failure, details=result.error.message)
    return result.data


def embedded_company(contact: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """The embedded company comes back as an object or a one-element list."""
    company = contact.get("client_companies")
    if isinstance(company, list):
        return company[0] if company else None
    return company


class ProfileService:
    """Stateless; clients are passed in per call."""

    async def get_profile(self, admin: Any, user_id: str) -> Dict[str, Any]:
        result = await run(admin.table("user_profiles").select("*").eq("id", user_id).single())
        return require_row(result, "Profile not found", "Failed to fetch profile")

    async def get_client_contact(self, admin: Any, user_id: str) -> Dict[str, Any]:
        result = await run(
            admin.table("client_contacts")
            .select(CLIENT_CONTACT_COLUMNS)
            .eq("id", user_id)
            .single()
        )
        return require_row(result, "Client contact not found", "Failed to fetch client contact")

    async def get_session_profile(self, admin: Any, user_id: str) -> Dict[str, Any]:
        """
        Profile for the site header: a client contact is reported with the
        pseudo-role `client_contact`; anyone else gets their user profile.
        """
        contact = optional_row(
            await run(admin.table("client_contacts").select("*").eq("id", user_id).maybe_single()),
            "Failed to fetch profile",
        )
        if contact is not None:
            return {
                "id": contact["id"],
                "email": contact.get("email"),
                "full_name": contact.get("full_name"),
                "role": "client_contact",
                "created_at": contact.get("created_at"),
                "updated_at": contact.get("updated_at"),
                "is_client_contact": True,
            }
        return await self.get_profile(admin, user_id)

    async def get_unified_user(self, admin: Any, user_id: str) -> Dict[str, Any]:
        """A client contact or a team member, tagged with `userType`."""
        failure = "Failed to fetch user profile"
        contact = optional_row(
            await run(
                admin.table("client_contacts")
                .select(UNIFIED_CLIENT_COLUMNS)
                .eq("id", user_id)
                .maybe_single()
            ),
            failure,
        )
        if contact is not None:
            return {
                "id": contact["id"],
                "email": contact.get("email"),
                "full_name": contact.get("full_name"),
                "userType": "client",
                "role": contact.get("role"),
                "client_company_id": contact.get("client_company_id"),
                "client_company": embedded_company(contact),
                "phone": contact.get("phone"),
                "title": contact.get("title"),
                "department": contact.get("department"),
                "is_primary_contact": contact.get("is_primary_contact"),
                "is_billing_contact": contact.get("is_billing_contact"),
                "can_manage_team": contact.get("can_manage_team"),
                "created_at": contact.get("created_at"),
                "updated_at": contact.get("updated_at"),
            }

        member = optional_row(
            await run(admin.table("user_profiles").select("*").eq("id", user_id).maybe_single()),
            failure,
        )
        if member is None:
            raise NotFoundError("User profile not found")
        return {
            "id": member["id"],
            "email": member.get("email") or "",
            "full_name": member.get("full_name"),
            "userType": "team",
            "role": member.get("role"),
            "avatar_url": member.get("avatar_url"),
            "status": member.get("status"),
            "created_at": member.get("created_at"),
            "updated_at": member.get("updated_at"),
        }


profile_service = ProfileService()
