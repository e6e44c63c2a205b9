"""
LoveStack Backend — Client Portal Service
===========================================

What:  Project reads for a signed-in client contact.
How:   The contact's company is looked up first; only an `active` company
       may see its projects. Every read goes through the admin client and
       is scoped by `client_id = <company id>` explicitly.

Status codes raised:
    403  the company exists but is not active
    404  no contact row, or no such project for this company
    500  a query failed
"""

import logging
from typing import Any, Dict, List, Optional

from app.clients.supabase import run
from app.exceptions import NotFoundError, PermissionDeniedError
from app.services.profile_service import embedded_company

logger = logging.getLogger(__name__)

PORTAL_CONTACT_COLUMNS = """
    id,
    client_company_id,
    client_companies:client_company_id (
        id,
        company_name,
        status
    )
"""

COMPANY_COLUMNS = """
    id,
    company_name,
    industry,
    status,
    client_contacts!client_contacts_client_company_id_fkey (
        id,
        full_name,
        email,
        phone,
        title,
        role,
        is_primary_contact
    )
"""


def primary_contact(contacts: Optional[List[Dict[str, Any]]]) -> Optional[Dict[str, Any]]:
    """The primary contact, else the first one."""
    if not contacts:
        return None
    for contact in contacts:
        if contact.get("is_primary_contact"):
            return contact
    return contacts[0]


def company_summary(company: Dict[str, Any]) -> Dict[str, Any]:
    contact = primary_contact(company.get("client_contacts"))
    return {
        "id": company.get("id"),
        "company_name": company.get("company_name"),
        "industry": company.get("industry"),
        "status": company.get("status"),
        "client_contacts": {
            "id": contact.get("id"),
            "full_name": contact.get("full_name"),
            "email": contact.get("email"),
            "phone": contact.get("phone"),
            "title": contact.get("title"),
        }
        if contact
        else None,
    }


class ClientPortalService:

    async def active_company_id(self, admin: Any, user_id: str) -> str:
        """
        Company id of the caller's contact row.

        Raises:
            NotFoundError:          no contact row (or the lookup failed)
            PermissionDeniedError:  the company is missing or not active
        """
        result = await run(
            admin.table("client_contacts")
            .select(PORTAL_CONTACT_COLUMNS)
            .eq("id", user_id)
            .single()
        )
        if result.error is not None or not result.data:
            if result.error is not None and not result.error.is_no_rows:
                logger.error("Client contact lookup failed: %s", result.error.message)
            raise NotFoundError("Client contact not found")

        contact = result.data
        company = embedded_company(contact)
        if not company or company.get("status") != "active":
            raise PermissionDeniedError("Company account is not active")
        return contact["client_company_id"]

    async def list_projects(self, admin: Any, user_id: str) -> List[Dict[str, Any]]:
        company_id = await self.active_company_id(admin, user_id)

        projects = (
            await run(
                admin.table("projects")
                .select("*")
                .eq("client_id", company_id)
                .order("created_at", desc=True)
            )
        ).unwrap("Failed to fetch projects") or []
        if not projects:
            return []

        company = await run(
            admin.table("client_companies").select(COMPANY_COLUMNS).eq("id", company_id).single()
        )
        summary = None
        if company.error is not None:
            logger.warning("Company lookup for %s failed: %s", company_id, company.error.message)
        elif company.data:
            summary = company_summary(company.data)

        return [{**project, "client_companies": summary} for project in projects]

    async def get_project(self, admin: Any, user_id: str, project_id: str) -> Dict[str, Any]:
        company_id = await self.active_company_id(admin, user_id)

        result = await run(
            admin.table("projects")
            .select("*")
            .eq("id", project_id)
            .eq("client_id", company_id)
            .single()
        )
        if result.error is not None and not result.error.is_no_rows:
            logger.error("Project lookup failed: %s", result.error.message)
        if result.error is not None or not result.data:
            raise NotFoundError("Project not found", resource=project_id)
        return result.data


client_portal_service = ClientPortalService()
