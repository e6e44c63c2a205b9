"""
LoveStack Backend — Dashboard Stats Route
===========================================

What:  GET /api/dashboard/stats?userId=...&isAdmin=true|false
Auth:  Authorization header and userId are both required. Their absence is
       a 401 before any provider call is made.

Client selection:
    isAdmin=true   admin client (service role), global totals
    otherwise      anon client carrying the caller's bearer token, so the
                   provider's row-level security applies to every read
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.auth import BearerCredential
from app.clients.supabase import SupabaseGateway
from app.dependencies import get_supabase, require_bearer
from app.schemas.api import ErrorResponse, StatsResponse
from app.services.stats_service import stats_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Dashboard"])


@router.get(
    "/dashboard/stats",
    response_model=StatsResponse,
    response_model_by_alias=True,
    responses={
        401: {"description": "Missing Authorization header or userId", "model": ErrorResponse},
        500: {"description": "An aggregate query failed", "model": ErrorResponse},
    },
    summary="Dashboard aggregate for a user or for everyone",
)
async def get_dashboard_stats(
    is_admin: Optional[str] = Query(default=None, alias="isAdmin"),
    credential: BearerCredential = Depends(require_bearer),
    supabase: SupabaseGateway = Depends(get_supabase),
) -> StatsResponse:
    if is_admin == "true":
        stats = await stats_service.get_dashboard_stats(
            supabase.admin, credential.user_id, is_admin=True
        )
        return StatsResponse(stats=stats)

    client = supabase.for_user(credential.token)
    try:
        stats = await stats_service.get_dashboard_stats(client, credential.user_id, is_admin=False)
    finally:
        await supabase.release(client)
    return StatsResponse(stats=stats)
