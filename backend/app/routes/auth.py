"""
LoveStack Backend — Session Profile Routes
============================================

What:  Profile lookups for the signed-in user.
         GET /api/auth/profile        staff/user profile
         GET /api/client/profile      client contact with its company
         GET /api/user/profile        header profile (client contact or user)
         GET /api/auth/user-profile   unified view tagged with userType
How:   Session cookie → GoTrue-validated user → admin-client lookup by id.

Status codes:
    400  user-profile called without userId
    401  no session, or the provider rejected it
    403  user-profile asked for someone else's id
    404  the user is authenticated but has no profile row
    500  the lookup itself failed (provider message in `details`)
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query

from app.auth import SessionUser
from app.dependencies import get_supabase_admin, require_session
from app.exceptions import PermissionDeniedError, ValidationError
from app.schemas.api import (
    ClientContactResponse,
    ErrorResponse,
    ProfileResponse,
    UnifiedUserResponse,
)
from app.services.profile_service import profile_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Auth"])

_ERRORS = {
    401: {"description": "No valid session", "model": ErrorResponse},
    404: {"description": "No profile row for this user", "model": ErrorResponse},
    500: {"description": "Profile lookup failed", "model": ErrorResponse},
}


@router.get(
    "/auth/profile",
    response_model=ProfileResponse,
    responses=_ERRORS,
    summary="Current user's profile",
)
async def get_profile(
    session: SessionUser = Depends(require_session),
    admin: Any = Depends(get_supabase_admin),
) -> ProfileResponse:
    profile = await profile_service.get_profile(admin, session.id)
    return ProfileResponse(profile=profile)


@router.get(
    "/client/profile",
    response_model=ClientContactResponse,
    response_model_by_alias=True,
    responses=_ERRORS,
    summary="Current client contact and company",
)
async def get_client_profile(
    session: SessionUser = Depends(require_session),
    admin: Any = Depends(get_supabase_admin),
) -> ClientContactResponse:
    contact = await profile_service.get_client_contact(admin, session.id)
    return ClientContactResponse(client_contact=contact)


@router.get(
    "/user/profile",
    response_model=ProfileResponse,
    responses=_ERRORS,
    summary="Profile shown in the site header",
)
async def get_user_profile(
    session: SessionUser = Depends(require_session),
    admin: Any = Depends(get_supabase_admin),
) -> ProfileResponse:
    profile = await profile_service.get_session_profile(admin, session.id)
    return ProfileResponse(profile=profile)


@router.get(
    "/auth/user-profile",
    response_model=UnifiedUserResponse,
    responses={
        400: {"description": "userId missing", "model": ErrorResponse},
        403: {"description": "userId is not the caller", "model": ErrorResponse},
        **_ERRORS,
    },
    summary="Client contact or team member, tagged with userType",
)
async def get_unified_user_profile(
    user_id: Optional[str] = Query(default=None, alias="userId"),
    session: SessionUser = Depends(require_session),
    admin: Any = Depends(get_supabase_admin),
) -> UnifiedUserResponse:
    if not user_id:
        raise ValidationError("User ID is required", field="userId")
    if user_id != session.id:
        raise PermissionDeniedError("Cannot read another user's profile")

    user = await profile_service.get_unified_user(admin, user_id)
    return UnifiedUserResponse(user=user)
