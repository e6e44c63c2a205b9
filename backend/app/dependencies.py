"""
LoveStack Backend — FastAPI Dependencies
==========================================

What:  Depends() providers that hand route handlers their clients and
       credentials.
How:   Everything is read from request.app.state.container, built once by
       create_app(). Auth dependencies raise AuthenticationError, which the
       global handler turns into a 401.

Ordering:
    Declare the auth dependency before get_supabase_admin in a handler's
    signature; FastAPI resolves them in order, so an anonymous request is
    rejected before any SDK client is built.
"""

from typing import Any, Optional

from fastapi import Depends, Header, Query, Request

from app.auth import BearerCredential, SessionUser, authenticate_session, bearer_credential
from app.clients.gmail import GmailClient
from app.clients.resend import ResendClient
from app.clients.supabase import SupabaseGateway
from app.config import Settings
from app.container import Container
from app.services.llm_base import ChatService


def get_container(request: Request) -> Container:
    return request.app.state.container


def get_settings(container: Container = Depends(get_container)) -> Settings:
    return container.settings


def get_supabase(container: Container = Depends(get_container)) -> SupabaseGateway:
    return container.supabase


def get_supabase_admin(supabase: SupabaseGateway = Depends(get_supabase)) -> Any:
    return supabase.admin


def get_resend(container: Container = Depends(get_container)) -> ResendClient:
    return container.resend


def get_gmail(container: Container = Depends(get_container)) -> GmailClient:
    return container.gmail


def get_chat_service(container: Container = Depends(get_container)) -> ChatService:
    return container.chat


async def require_session(
    request: Request,
    supabase: SupabaseGateway = Depends(get_supabase),
    config: Settings = Depends(get_settings),
) -> SessionUser:
    """Cookie session, validated by GoTrue. 401 otherwise."""
    return await authenticate_session(request.cookies, config.auth_cookie_name, supabase)


def require_bearer(
    authorization: Optional[str] = Header(default=None),
    user_id: Optional[str] = Query(default=None, alias="userId"),
) -> BearerCredential:
    """Authorization header + userId query parameter. 401 otherwise, with no I/O."""
    return bearer_credential(authorization, user_id)
