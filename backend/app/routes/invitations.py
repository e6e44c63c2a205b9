"""
LoveStack Backend — Invitation Routes
=======================================

Admin side (session cookie, caller's profile role must be `admin`):
    GET  /api/invitations?status=&limit=&offset=   list + per-status counts
    POST /api/invitations                          create and email

Invitee side (the token is the credential):
    GET  /api/invitations/accept/{token}           details for the form
    POST /api/invitations/accept/{token}           create the account

Status codes:
    400  validation failure, or the invitation is no longer usable
    401  no session (admin side)
    403  caller is not an admin
    404  unknown token
    409  account or pending invitation already exists
    500  query, account creation or invitation email failed
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Query

from app.auth import SessionUser
from app.clients.resend import ResendClient
from app.config import Settings
from app.dependencies import get_resend, get_settings, get_supabase_admin, require_session
from app.schemas.api import (
    AcceptInvitationRequest,
    AccountCreatedResponse,
    ErrorResponse,
    InvitationCreate,
    InvitationCreatedResponse,
    InvitationListResponse,
    InvitationPreviewResponse,
)
from app.services.invitation_service import invitation_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/invitations", tags=["Invitations"])

_ADMIN_ERRORS = {
    401: {"description": "No valid session", "model": ErrorResponse},
    403: {"description": "Caller is not an admin", "model": ErrorResponse},
    500: {"description": "Query failed", "model": ErrorResponse},
}

_TOKEN_ERRORS = {
    400: {"description": "Invitation not pending, expired, or bad input", "model": ErrorResponse},
    404: {"description": "Unknown token", "model": ErrorResponse},
    409: {"description": "Account already exists", "model": ErrorResponse},
}


@router.get("", response_model=InvitationListResponse, responses=_ADMIN_ERRORS)
async def list_invitations(
    status: str = Query(default="pending"),
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    session: SessionUser = Depends(require_session),
    admin: Any = Depends(get_supabase_admin),
) -> InvitationListResponse:
    await invitation_service.require_admin(admin, session.id)
    listing = await invitation_service.list_invitations(admin, status, limit, offset)
    return InvitationListResponse(**listing)


@router.post(
    "",
    status_code=201,
    response_model=InvitationCreatedResponse,
    responses={
        400: {"description": "Invalid invitation", "model": ErrorResponse},
        409: {"description": "Account or pending invitation exists", "model": ErrorResponse},
        **_ADMIN_ERRORS,
    },
)
async def create_invitation(
    body: InvitationCreate,
    session: SessionUser = Depends(require_session),
    admin: Any = Depends(get_supabase_admin),
    resend: ResendClient = Depends(get_resend),
    config: Settings = Depends(get_settings),
) -> InvitationCreatedResponse:
    inviter = await invitation_service.require_admin(admin, session.id)
    invitation = await invitation_service.create_invitation(admin, resend, config, inviter, body)
    return InvitationCreatedResponse(message="Invitation sent successfully", invitation=invitation)


@router.get("/accept/{token}", response_model=InvitationPreviewResponse, responses=_TOKEN_ERRORS)
async def preview_invitation(
    token: str,
    admin: Any = Depends(get_supabase_admin),
) -> InvitationPreviewResponse:
    invitation = await invitation_service.preview(admin, token)
    return InvitationPreviewResponse(invitation=invitation)


@router.post(
    "/accept/{token}",
    response_model=AccountCreatedResponse,
    response_model_by_alias=True,
    responses={500: {"description": "Account creation failed", "model": ErrorResponse}, **_TOKEN_ERRORS},
)
async def accept_invitation(
    token: str,
    body: AcceptInvitationRequest,
    admin: Any = Depends(get_supabase_admin),
) -> AccountCreatedResponse:
    result = await invitation_service.accept(admin, token, body)
    return AccountCreatedResponse(
        message=result["message"], user=result["user"], sign_in_url=result["signInUrl"]
    )
