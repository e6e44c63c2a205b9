"""
LoveStack Backend — Dashboard Stats Service
=============================================

What:  Computes the dashboard aggregate for one user, or for everyone.
How:   Three or four sequential PostgREST reads; totals are summed here.

Scope:
    is_admin=True   admin client, every project / time entry / invoice
    is_admin=False  caller's own client (row-level security applies), and
                    explicit filters:
                      projects       client_id = user OR member of project
                      time_entries   project_id in those projects
                      invoices       client_id = user

The user id reaches the raw or=(...) filter only through quote_value(), so
it always stays a single value.

Any query error aborts the whole aggregate with DatabaseError; partial
stats are never returned.
"""

import logging
from typing import Any, Dict, List

from app.clients.supabase import quote_value, run
from app.schemas.api import DashboardStats

logger = logging.getLogger(__name__)

FAILURE = "Failed to fetch dashboard stats"


def _number(value: Any) -> float:
    return float(value) if value is not None else 0.0


def ownership_filter(user_id: str, member_project_ids: List[str]) -> str:
    """or=(...) body: owned by the user, or one of the user's member projects."""
    filters = [f"client_id.eq.{quote_value(user_id)}"]
    if member_project_ids:
        ids = ",".join(quote_value(pid) for pid in member_project_ids)
        filters.append(f"id.in.({ids})")
    return ",".join(filters)


class StatsService:

    async def _member_project_ids(self, client: Any, user_id: str) -> List[str]:
        result = await run(
            client.table("project_members").select("project_id").eq("user_id", user_id)
        )
        rows = result.unwrap(FAILURE) or []
        return [row["project_id"] for row in rows if row.get("project_id")]

    async def get_dashboard_stats(
        self,
        client: Any,
        user_id: str,
        is_admin: bool = False,
    ) -> DashboardStats:
        projects_query = client.table("projects").select("id, status")
        if not is_admin:
            member_ids = await self._member_project_ids(client, user_id)
            projects_query = projects_query.or_(ownership_filter(user_id, member_ids))

        projects: List[Dict[str, Any]] = (await run(projects_query)).unwrap(FAILURE) or []
        project_ids = [p["id"] for p in projects]

        time_entries: List[Dict[str, Any]] = []
        if is_admin or project_ids:
            time_query = client.table("time_entries").select("hours_worked, is_billable, hourly_rate")
            if not is_admin:
                time_query = time_query.in_("project_id", project_ids)
            time_entries = (await run(time_query)).unwrap(FAILURE) or []

        invoice_query = client.table("invoices").select("total_amount, status")
        if not is_admin:
            invoice_query = invoice_query.eq("client_id", user_id)
        invoices: List[Dict[str, Any]] = (await run(invoice_query)).unwrap(FAILURE) or []

        stats = DashboardStats(
            totalProjects=len(projects),
            activeProjects=sum(1 for p in projects if p.get("status") == "active"),
            totalHoursWorked=sum(_number(e.get("hours_worked")) for e in time_entries),
            outstandingInvoices=sum(1 for i in invoices if i.get("status") == "sent"),
            totalRevenue=sum(
                _number(i.get("total_amount")) for i in invoices if i.get("status") == "paid"
            ),
        )
        logger.debug(
            "Dashboard stats for %s (admin=%s): %d projects, %d entries, %d invoices",
            user_id,
            is_admin,
            len(projects),
            len(time_entries),
            len(invoices),
        )
        return stats


stats_service = StatsService()
