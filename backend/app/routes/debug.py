"""
LoveStack Backend — Debug Routes
==================================

Development diagnostics over the admin client. Mounted only when
ENABLE_DEBUG_ROUTES is true; they must not be exposed in production.

    GET /api/debug/check-profiles   configured admin/team profiles
    GET /api/debug/list-users       first auth users, companies, contacts
    GET /api/debug/profile-check    configured admin profile + recent profiles
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends

from app.config import Settings
from app.dependencies import get_settings, get_supabase_admin
from app.schemas.api import ErrorResponse
from app.services.diagnostics_service import diagnostics_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/debug", tags=["Debug"])

_ERRORS = {500: {"description": "Lookup failed", "model": ErrorResponse}}


@router.get("/check-profiles", responses=_ERRORS)
async def check_profiles(
    admin: Any = Depends(get_supabase_admin),
    config: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    return await diagnostics_service.check_profiles(admin, config)


@router.get("/list-users", responses=_ERRORS)
async def list_users(admin: Any = Depends(get_supabase_admin)) -> Dict[str, Any]:
    return await diagnostics_service.list_users(admin)


@router.get("/profile-check", responses=_ERRORS)
async def profile_check(
    admin: Any = Depends(get_supabase_admin),
    config: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    return await diagnostics_service.profile_check(admin, config)
