"""
LoveStack Backend — Auth Gate
===============================

What:  Extracts a credential from the request and decides whether it may
       proceed. Two conventions exist:

       Session (cookie):   the Supabase SSR session cookie. Its access token
                           is validated by GoTrue; we never verify JWTs.
       Bearer (header):    Authorization header plus an explicit userId
                           parameter. Only presence is checked here; the
                           token is forwarded to the user-scoped client so
                           row-level security enforces it.

Cookie formats written by @supabase/ssr (all URL-encoded):
    base64-<base64 JSON session>       current format
    {"access_token": "...", ...}       JSON session
    ["<access>", "<refresh>", ...]     legacy array
    <raw JWT>                          plain token
Large sessions are split into <name>.0, <name>.1, ... and must be joined.
"""

import base64
import binascii
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional
from urllib.parse import unquote

from app.clients.supabase import SupabaseGateway, get_user
from app.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

BASE64_PREFIX = "base64-"


@dataclass
class SessionUser:
    """The authenticated GoTrue user plus the token that proved it."""

    user: Dict[str, Any]
    access_token: str

    @property
    def id(self) -> str:
        return self.user["id"]


@dataclass
class BearerCredential:
    token: str
    user_id: str


def read_session_cookie(cookies: Mapping[str, str], name: str) -> Optional[str]:
    """Return the cookie value, joining chunked cookies; None if absent."""
    if name in cookies:
        return unquote(cookies[name])

    chunks = []
    index = 0
    while f"{name}.{index}" in cookies:
        chunks.append(cookies[f"{name}.{index}"])
        index += 1
    if not chunks:
        return None
    return unquote("".join(chunks))


def _b64decode(value: str) -> str:
    padded = value + "=" * (-len(value) % 4)
    return base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8")


def extract_access_token(raw: Optional[str]) -> Optional[str]:
    """Pull the access token out of any supported cookie format."""
    if not raw:
        return None

    value = raw.strip()
    if value.startswith(BASE64_PREFIX):
        try:
            value = _b64decode(value[len(BASE64_PREFIX):])
        except (binascii.Error, UnicodeDecodeError, ValueError):
            logger.debug("Session cookie has an undecodable base64 payload")
            return None

    if value[:1] in ("{", "["):
        try:
            session = json.loads(value)
        except ValueError:
            logger.debug("Session cookie is not valid JSON")
            return None
        if isinstance(session, dict):
            token = session.get("access_token")
        elif isinstance(session, list) and session:
            token = session[0]
        else:
            token = None
        return token if isinstance(token, str) and token else None

    return value or None


async def authenticate_session(
    cookies: Mapping[str, str],
    cookie_name: str,
    supabase: SupabaseGateway,
) -> SessionUser:
    """
    Resolve the session cookie to a provider-validated user.

    Raises:
        AuthenticationError: no cookie, unusable cookie, or GoTrue said no.
    """
    access_token = extract_access_token(read_session_cookie(cookies, cookie_name))
    if not access_token:
        raise AuthenticationError("Not authenticated")

    result = await get_user(supabase.anon, access_token)
    if result.error is not None or not isinstance(result.data, dict) or "id" not in result.data:
        reason = result.error.message if result.error else "no user in response"
        logger.info("Session rejected by auth provider: %s", reason)
        raise AuthenticationError("Not authenticated")

    return SessionUser(user=result.data, access_token=access_token)


def bearer_credential(authorization: Optional[str], user_id: Optional[str]) -> BearerCredential:
    """
    Header-based gate. Performs no I/O: a request that fails here never
    reaches a provider.
    """
    if not authorization or not user_id:
        raise AuthenticationError("Unauthorized")

    token = authorization
    if token.lower().startswith("bearer "):
        token = token[7:]
    token = token.strip()
    if not token:
        raise AuthenticationError("Unauthorized")
    return BearerCredential(token=token, user_id=user_id)
