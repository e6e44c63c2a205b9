"""
LoveStack Backend — Debug Diagnostics Service
===============================================

What:  Read-only inspections behind GET /api/debug/*.
How:   Admin client only. The accounts being inspected come from settings
       (DEBUG_ADMIN_EMAIL, DEBUG_TEAM_EMAIL, ...), never from code.

Error policy:
    - A lookup that finds no row is reported as null, not as an error
    - Any genuine query failure aborts the inspection with DatabaseError
"""

import logging
from typing import Any, Dict, List

from app.clients.supabase import list_users, run
from app.config import Settings
from app.services.profile_service import optional_row

logger = logging.getLogger(__name__)

PROFILE_SUMMARY_COLUMNS = "id, email, role, full_name, created_at"
RECENT_PROFILE_LIMIT = 10
LISTED_AUTH_USERS = 5


class DiagnosticsService:

    async def check_profiles(self, admin: Any, config: Settings) -> Dict[str, Any]:
        failure = "Failed to check profiles"
        admin_profile = optional_row(
            await run(admin.table("user_profiles").select("*").eq("email", config.debug_admin_email).single()),
            failure,
        )
        team_profile = optional_row(
            await run(admin.table("user_profiles").select("*").eq("email", config.debug_team_email).single()),
            failure,
        )
        all_profiles = (
            await run(
                admin.table("user_profiles")
                .select("*")
                .in_("id", [config.debug_admin_user_id, config.debug_team_user_id])
            )
        ).unwrap(failure)

        return {
            "adminProfile": admin_profile,
            "teamProfile": team_profile,
            "allProfiles": all_profiles,
            "adminUserId": config.debug_admin_user_id,
            "teamUserId": config.debug_team_user_id,
        }

    async def list_users(self, admin: Any) -> Dict[str, Any]:
        failure = "Internal server error"
        users: List[Dict[str, Any]] = (await list_users(admin)).unwrap(failure) or []
        companies = (await run(admin.table("client_companies").select("*"))).unwrap(failure)
        contacts = (await run(admin.table("client_contacts").select("*"))).unwrap(failure)

        return {
            "authUsers": users[:LISTED_AUTH_USERS],
            "companies": companies,
            "contacts": contacts,
        }

    async def profile_check(self, admin: Any, config: Settings) -> Dict[str, Any]:
        profile = (
            await run(
                admin.table("user_profiles")
                .select("*")
                .eq("email", config.debug_admin_email)
                .maybe_single()
            )
        ).unwrap("Database error")

        recent = await run(
            admin.table("user_profiles")
            .select(PROFILE_SUMMARY_COLUMNS)
            .order("created_at", desc=True)
            .limit(RECENT_PROFILE_LIMIT)
        )
        if recent.error is not None:
            logger.warning("Recent profile listing failed: %s", recent.error.message)
        all_profiles = recent.data or []

        return {
            "stevenProfile": profile,
            "allProfiles": all_profiles,
            "hasProfiles": len(all_profiles) > 0,
        }


diagnostics_service = DiagnosticsService()
