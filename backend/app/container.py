"""
LoveStack Backend — Dependency Container
==========================================

What:  Composition root that builds every provider client once.
Why:   Handlers receive their clients through FastAPI Depends() instead of
       importing module-level singletons, so tests can hand create_app() a
       container full of stand-ins.
How:   build_container() is called by create_app(); the result lives on
       app.state.container and is closed during lifespan shutdown.

Constraints:
    - Clients are process-wide and hold no per-request state
    - Nothing here opens a connection; SDK clients are created on first use
"""

import logging
from dataclasses import dataclass
from typing import Optional

from app.clients.gmail import GmailClient
from app.clients.resend import ResendClient
from app.clients.supabase import SupabaseGateway
from app.config import Settings, settings as default_settings
from app.services.llm_base import ChatService
from app.services.openai_service import OpenAIChatService

logger = logging.getLogger(__name__)


@dataclass
class Container:
    settings: Settings
    supabase: SupabaseGateway
    resend: ResendClient
    gmail: GmailClient
    chat: ChatService

    async def aclose(self) -> None:
        for name, closer in (("supabase", self.supabase.aclose), ("chat", self.chat.aclose)):
            try:
                await closer()
            except Exception as e:
                logger.warning("Error closing %s client: %s", name, str(e))


def build_container(config: Optional[Settings] = None) -> Container:
    config = config or default_settings

    return Container(
        settings=config,
        supabase=SupabaseGateway(
            config.supabase_url,
            config.supabase_anon_key,
            config.supabase_service_role_key,
            timeout=config.http_timeout,
        ),
        resend=ResendClient(config.resend_api_key),
        gmail=GmailClient(
            user_email=config.gmail_user_email,
            client_id=config.gmail_client_id,
            client_secret=config.gmail_client_secret,
            refresh_token=config.gmail_refresh_token,
        ),
        chat=OpenAIChatService(
            api_key=config.openai_api_key,
            model=config.openai_model,
            max_tokens=config.openai_max_tokens,
            base_url=config.openai_api_url,
            timeout=config.http_timeout,
        ),
    )
