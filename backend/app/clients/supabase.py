"""
LoveStack Backend — Supabase Data Access Shim
===============================================

What:  Access to a hosted Supabase project through the official `supabase`
       SDK: PostgREST for tables, GoTrue for sessions and user administration.
Why:   Every SDK call can raise (postgrest APIError, AuthError, httpx errors).
       Handlers need to tell "no such row" from "the query failed", so each
       call is funnelled through run() and comes back as a QueryResult.
How:   SupabaseGateway builds the SDK clients lazily from settings: one anon
       client, one service-role client, and short-lived user-scoped clients
       that carry the caller's access token.
Who:   Built once by the dependency container; used by the service layer.

Credential tiers:
    anon         apikey=<anon>,         Authorization=Bearer <anon>
    user-scoped  apikey=<anon>,         Authorization=Bearer <caller's JWT>
                 → row-level security evaluates as the end user
    admin        apikey=<service role>, Authorization=Bearer <service role>
                 → row-level security is bypassed

Zero-or-one semantics:
    .single()        exactly one row; zero or many → QueryError(code=PGRST116)
    .maybe_single()  zero rows → data=None, no error; many → QueryError
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import httpx
from postgrest.exceptions import APIError
from supabase import AsyncClient, AuthError
from supabase.lib.client_options import AsyncClientOptions

from app.exceptions import DatabaseError

logger = logging.getLogger(__name__)

# PostgREST error code for "JSON object requested, multiple (or no) rows returned"
NO_ROWS_CODE = "PGRST116"
MISSING_RESPONSE_CODE = "204"

# Characters that force a value inside or=(...) to be double-quoted
_RESERVED_CHARS = set(',.:()" ')

ClientFactory = Callable[[str, str, Optional[str]], Any]


@dataclass
class QueryError:
    """Error value reported by the provider, or synthesized on transport failure."""

    message: str
    code: Optional[str] = None
    details: Optional[str] = None
    hint: Optional[str] = None
    status: Optional[int] = None

    @property
    def is_no_rows(self) -> bool:
        """True when a single-row read found nothing (as opposed to failing)."""
        if self.code != NO_ROWS_CODE:
            return False
        return self.details is None or "0 rows" in self.details


@dataclass
class QueryResult:
    """
    Tagged result of one provider call: either `data` or `error`.

    Callers must look at `error` before trusting `data`. `unwrap()` does
    that and raises DatabaseError for them.
    """

    data: Any = None
    error: Optional[QueryError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self, message: str = "Database error") -> Any:
        if self.error is not None:
            raise DatabaseError(
                message=message,
                details=self.error.message,
                context={"code": self.error.code, "status": self.error.status},
            )
        return self.data


def quote_value(value: Any) -> str:
    """
    Render one value for use inside a raw PostgREST filter string.

    The SDK passes or_() filters through verbatim, so any value containing
    a separator is double-quoted with embedded quotes escaped.
    """
    text = str(value).lower() if isinstance(value, bool) else str(value)
    if any(ch in _RESERVED_CHARS for ch in text):
        return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'
    return text


def _as_dict(record: Any) -> Any:
    if hasattr(record, "model_dump"):
        return record.model_dump(mode="json")
    return record


def _api_error(e: APIError) -> QueryError:
    return QueryError(
        message=e.message or str(e),
        code=e.code,
        details=e.details,
        hint=e.hint,
    )


def _auth_error(e: AuthError) -> QueryError:
    return QueryError(
        message=getattr(e, "message", None) or str(e),
        code=getattr(e, "code", None),
        status=getattr(e, "status", None),
    )


def _fetch_error(e: Exception) -> QueryError:
    return QueryError(message=str(e) or type(e).__name__, code="FETCH_ERROR")


async def run(query: Any) -> QueryResult:
    """
    Execute a postgrest request builder and tag the outcome.

    Example:
        result = await run(admin.table("user_profiles").select("*").eq("id", uid).single())
        profile = result.unwrap("Failed to load profile")
    """
    try:
        response = await query.execute()
    except APIError as e:
        # Newer postgrest releases signal an empty maybe_single() this way
        if e.code == MISSING_RESPONSE_CODE:
            return QueryResult(data=None)
        logger.debug("PostgREST error %s: %s", e.code, e.message)
        return QueryResult(error=_api_error(e))
    except httpx.HTTPError as e:
        logger.error("Supabase request failed: %s", str(e))
        return QueryResult(error=_fetch_error(e))

    # maybe_single() answers None when no row matched
    if response is None:
        return QueryResult(data=None)
    return QueryResult(data=response.data)


# ══════════════════════════════════════════════════════════════════════════
# GoTrue
# ══════════════════════════════════════════════════════════════════════════

async def get_user(client: Any, access_token: str) -> QueryResult:
    """
    Validate an access token with the provider.

    Token validity is decided entirely by GoTrue; a rejection comes back as
    a QueryError.
    """
    try:
        response = await client.auth.get_user(access_token)
    except AuthError as e:
        return QueryResult(error=_auth_error(e))
    except httpx.HTTPError as e:
        return QueryResult(error=_fetch_error(e))

    user = getattr(response, "user", None)
    if user is None:
        return QueryResult(error=QueryError(message="no user in response", status=401))
    return QueryResult(data=_as_dict(user))


async def list_users(admin: Any) -> QueryResult:
    """data is a list of user dicts, first page only."""
    try:
        users = await admin.auth.admin.list_users()
    except AuthError as e:
        return QueryResult(error=_auth_error(e))
    except httpx.HTTPError as e:
        return QueryResult(error=_fetch_error(e))
    return QueryResult(data=[_as_dict(user) for user in users or []])


async def create_user(admin: Any, email: str, password: str) -> QueryResult:
    """Create a confirmed auth user; data is the user dict."""
    try:
        response = await admin.auth.admin.create_user(
            {"email": email, "password": password, "email_confirm": True}
        )
    except AuthError as e:
        return QueryResult(error=_auth_error(e))
    except httpx.HTTPError as e:
        return QueryResult(error=_fetch_error(e))

    user = getattr(response, "user", None)
    if user is None:
        return QueryResult(error=QueryError(message="no user in response"))
    return QueryResult(data=_as_dict(user))


async def delete_user(admin: Any, user_id: str) -> QueryResult:
    try:
        await admin.auth.admin.delete_user(user_id)
    except AuthError as e:
        return QueryResult(error=_auth_error(e))
    except httpx.HTTPError as e:
        return QueryResult(error=_fetch_error(e))
    return QueryResult(data=None)


async def magic_link(admin: Any, email: str) -> QueryResult:
    """data is the one-time sign-in URL, or None if GoTrue returned none."""
    try:
        response = await admin.auth.admin.generate_link({"type": "magiclink", "email": email})
    except AuthError as e:
        return QueryResult(error=_auth_error(e))
    except httpx.HTTPError as e:
        return QueryResult(error=_fetch_error(e))
    properties = getattr(response, "properties", None)
    return QueryResult(data=getattr(properties, "action_link", None))


# ══════════════════════════════════════════════════════════════════════════
# Gateway
# ══════════════════════════════════════════════════════════════════════════

def create_sdk_client(
    url: str,
    key: str,
    access_token: Optional[str] = None,
    timeout: float = 15.0,
) -> AsyncClient:
    """Server-side SDK client: no session persistence, no token refresh."""
    options: Dict[str, Any] = {
        "auto_refresh_token": False,
        "persist_session": False,
        "postgrest_client_timeout": timeout,
    }
    if access_token:
        options["headers"] = {"Authorization": f"Bearer {access_token}"}
    return AsyncClient(url, key, options=AsyncClientOptions(**options))


class SupabaseGateway:
    """
    The project's credential tiers.

    SDK clients are created on first use, so an unconfigured deployment
    can still start and serve routes that never touch the database.
    The anon and admin clients are process-wide and hold no per-request
    state. User-scoped clients are per request and must be released.
    """

    def __init__(
        self,
        url: str,
        anon_key: str,
        service_role_key: str,
        timeout: float = 15.0,
        client_factory: Optional[ClientFactory] = None,
    ):
        self.url = url.rstrip("/")
        self.anon_key = anon_key
        self.service_role_key = service_role_key
        self.timeout = timeout
        self._factory = client_factory or self._create
        self._anon: Any = None
        self._admin: Any = None

    def _create(self, url: str, key: str, access_token: Optional[str]) -> AsyncClient:
        return create_sdk_client(url, key, access_token, timeout=self.timeout)

    def _build(self, key: str, access_token: Optional[str] = None) -> Any:
        if not self.url or not key:
            raise DatabaseError("Database error", details="Supabase is not configured")
        return self._factory(self.url, key, access_token)

    @property
    def anon(self) -> Any:
        if self._anon is None:
            self._anon = self._build(self.anon_key)
        return self._anon

    @property
    def admin(self) -> Any:
        if self._admin is None:
            self._admin = self._build(self.service_role_key)
        return self._admin

    def for_user(self, access_token: str) -> Any:
        """Anon key, requests authorized as the given end user."""
        return self._build(self.anon_key, access_token)

    async def release(self, client: Any) -> None:
        await _close(client)

    async def health_check(self) -> bool:
        """True when PostgREST answers a one-row read on the admin client."""
        try:
            result = await run(self.admin.table("user_profiles").select("id").limit(1))
        except DatabaseError as e:
            logger.warning("Supabase health check failed: %s", e.details)
            return False
        if result.error is not None:
            logger.warning("Supabase health check failed: %s", result.error.message)
            return False
        return True

    async def aclose(self) -> None:
        for client in (self._anon, self._admin):
            if client is not None:
                await _close(client)
        self._anon = self._admin = None


async def _close(client: Any) -> None:
    postgrest = getattr(client, "postgrest", None)
    if postgrest is not None and hasattr(postgrest, "aclose"):
        await postgrest.aclose()
