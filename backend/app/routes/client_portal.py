"""
LoveStack Backend — Client Portal Routes
==========================================

    GET /api/client/projects        projects of the caller's company
    GET /api/client/projects/{id}   one of them

Session cookie required. The caller must be a client contact of an active
company (404 / 403 otherwise).
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends

from app.auth import SessionUser
from app.dependencies import get_supabase_admin, require_session
from app.schemas.api import ClientProjectResponse, ClientProjectsResponse, ErrorResponse
from app.services.client_portal_service import client_portal_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/client", tags=["Client Portal"])

_ERRORS = {
    401: {"description": "No valid session", "model": ErrorResponse},
    403: {"description": "Company account is not active", "model": ErrorResponse},
    404: {"description": "No client contact, or no such project", "model": ErrorResponse},
}


@router.get("/projects", response_model=ClientProjectsResponse, responses=_ERRORS)
async def list_client_projects(
    session: SessionUser = Depends(require_session),
    admin: Any = Depends(get_supabase_admin),
) -> ClientProjectsResponse:
    projects = await client_portal_service.list_projects(admin, session.id)
    return ClientProjectsResponse(projects=projects)


@router.get("/projects/{project_id}", response_model=ClientProjectResponse, responses=_ERRORS)
async def get_client_project(
    project_id: str,
    session: SessionUser = Depends(require_session),
    admin: Any = Depends(get_supabase_admin),
) -> ClientProjectResponse:
    project = await client_portal_service.get_project(admin, session.id, project_id)
    return ClientProjectResponse(project=project)
