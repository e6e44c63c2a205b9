"""
LoveStack Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   No request leaves the process. The Supabase SDK is replaced, behind
       the real SupabaseGateway, by FakeSupabase: query builders record
       every chained call and answer from per-table queues. The Resend SDK
       is patched with unittest.mock, the Gmail service comes from a
       MagicMock factory, and the OpenAI SDK talks to an httpx.MockTransport.

Fixture Hierarchy:
    test_settings          Settings with fake credentials
    fake_supabase          PostgREST tables + GoTrue (anon, admin, user-scoped)
    resend_send            patched resend.Emails.send
    gmail_service          MagicMock Gmail API service
    openai_stub            chat completions
    container              Container wired to the fakes
    test_client            httpx.AsyncClient over ASGITransport(create_app(container))
"""

import os
from types import SimpleNamespace
from typing import Any, Callable, Dict, List, Optional, Tuple, Union
from unittest.mock import MagicMock, patch

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from postgrest.exceptions import APIError
from supabase import AuthError

# Before any app import: keep a developer's .env values out of the suite
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["SUPABASE_URL"] = ""
os.environ["RESEND_API_KEY"] = ""

from app.clients.gmail import GmailClient  # noqa: E402
from app.clients.resend import ResendClient  # noqa: E402
from app.clients.supabase import SupabaseGateway  # noqa: E402
from app.config import Settings  # noqa: E402
from app.container import Container  # noqa: E402
from app.services.openai_service import OpenAIChatService  # noqa: E402

SUPABASE_URL = "https://testref.supabase.co"
ANON_KEY = "anon-test-key"
SERVICE_KEY = "service-test-key"
AUTH_COOKIE = "sb-testref-auth-token"
VALID_TOKEN = "valid-access-token"
USER_ID = "11111111-1111-1111-1111-111111111111"

NO_ROWS_ERROR = {
    "code": "PGRST116",
    "details": "The result contains 0 rows",
    "hint": None,
    "message": "JSON object requested, multiple (or no) rows returned",
}


def api_error(message: str = "boom", code: str = "XX000", details: Optional[str] = None) -> APIError:
    return APIError({"message": message, "code": code, "details": details, "hint": None})


def no_rows() -> APIError:
    return APIError(dict(NO_ROWS_ERROR))


class RejectedCredentials(AuthError):
    """GoTrue refusal as raised by the SDK."""

    def __init__(self, message: str = "invalid JWT", code: str = "bad_jwt", status: int = 401):
        Exception.__init__(self, message)
        self.message = message
        self.code = code
        self.status = status


# ══════════════════════════════════════════════════════════════════════════
# Supabase SDK stand-in
# ══════════════════════════════════════════════════════════════════════════

# Queue entry meaning "maybe_single() found nothing"
NO_ROW = object()


class FakeQuery:
    """
    Records a postgrest builder chain.

    `calls` holds (method, args, kwargs) in call order; `execute()` answers
    from the table's queue in FakeSupabase.
    """

    def __init__(self, backend: "FakeSupabase", table: str, client: "FakeClient"):
        self.backend = backend
        self.table = table
        self.client = client
        self.calls: List[Tuple[str, tuple, dict]] = []

    def _record(self, name: str):
        def method(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            return self

        return method

    def __getattr__(self, name: str):
        if name in FakeSupabase.BUILDER_METHODS:
            return self._record(name)
        raise AttributeError(name)

    def args_of(self, name: str) -> List[tuple]:
        return [args for method, args, _ in self.calls if method == name]

    def kwargs_of(self, name: str) -> List[dict]:
        return [kwargs for method, _, kwargs in self.calls if method == name]

    def called(self, name: str) -> bool:
        return any(method == name for method, _, _ in self.calls)

    async def execute(self):
        self.backend.executed.append(self)
        queue = self.backend.tables.get(self.table)
        if not queue:
            raise api_error(f"unstubbed table {self.table}", code="TEST")
        answer = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(answer, Exception):
            raise answer
        if answer is NO_ROW:
            return None
        return SimpleNamespace(data=answer)


class FakeAdminAuth:

    def __init__(self):
        self.users: List[Dict[str, Any]] = []
        self.created: List[Dict[str, Any]] = []
        self.deleted: List[str] = []
        self.create_error: Optional[Exception] = None
        self.link_error: Optional[Exception] = None
        self.new_user_id = "22222222-2222-2222-2222-222222222222"

    async def list_users(self):
        return list(self.users)

    async def create_user(self, attributes: Dict[str, Any]):
        if self.create_error is not None:
            raise self.create_error
        self.created.append(attributes)
        return SimpleNamespace(user={"id": self.new_user_id, "email": attributes["email"]})

    async def delete_user(self, user_id: str):
        self.deleted.append(user_id)

    async def generate_link(self, params: Dict[str, Any]):
        if self.link_error is not None:
            raise self.link_error
        return SimpleNamespace(
            properties=SimpleNamespace(action_link=f"{SUPABASE_URL}/auth/v1/verify?token=magic")
        )


class FakeAuth:

    def __init__(self, backend: "FakeSupabase"):
        self.backend = backend
        self.admin = backend.admin_auth

    async def get_user(self, jwt: str):
        self.backend.get_user_calls.append(jwt)
        if self.backend.get_user_error is not None:
            raise self.backend.get_user_error
        if jwt != VALID_TOKEN:
            raise RejectedCredentials()
        return SimpleNamespace(user={"id": USER_ID, "email": "user@example.com"})


class FakePostgrest:

    def __init__(self):
        self.closed = False

    async def aclose(self):
        self.closed = True


class FakeClient:

    def __init__(self, backend: "FakeSupabase", key: str, access_token: Optional[str]):
        self.key = key
        self.access_token = access_token
        self.backend = backend
        self.auth = FakeAuth(backend)
        self.postgrest = FakePostgrest()

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self.backend, name, self)


class FakeSupabase:
    """
    Every client built by the gateway shares this backend.

    Usage:
        fake_supabase.respond("projects", [{"id": "p1", "status": "active"}])
        fake_supabase.respond("user_profiles", no_rows())
        query = fake_supabase.last("projects")
        assert query.args_of("eq") == [("client_id", "c1")]
    """

    BUILDER_METHODS = {
        "select", "eq", "neq", "in_", "or_", "order", "limit", "range",
        "insert", "update", "delete", "single", "maybe_single",
    }

    def __init__(self):
        self.tables: Dict[str, List[Any]] = {}
        self.executed: List[FakeQuery] = []
        self.clients: List[FakeClient] = []
        self.get_user_calls: List[str] = []
        self.get_user_error: Optional[Exception] = None
        self.admin_auth = FakeAdminAuth()

    def respond(self, table: str, *answers: Any) -> "FakeSupabase":
        """Queue answers; the last one repeats. Exceptions are raised from execute()."""
        self.tables.setdefault(table, []).extend(answers)
        return self

    def factory(self, url: str, key: str, access_token: Optional[str]) -> FakeClient:
        client = FakeClient(self, key, access_token)
        self.clients.append(client)
        return client

    def queries(self, table: str) -> List[FakeQuery]:
        return [q for q in self.executed if q.table == table]

    def last(self, table: str) -> FakeQuery:
        return self.queries(table)[-1]


# ══════════════════════════════════════════════════════════════════════════
# httpx stub (OpenAI)
# ══════════════════════════════════════════════════════════════════════════

Responder = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


class ProviderStub:
    """
    Routes requests by (method, path) to canned responses.

    Unrouted requests get a 599 so a missing stub fails loudly.
    """

    def __init__(self):
        self.routes: Dict[Tuple[str, str], List[Responder]] = {}
        self.requests: List[httpx.Request] = []

    def add(
        self,
        method: str,
        path: str,
        status: int = 200,
        json: Any = None,
        handler: Optional[Callable[[httpx.Request], httpx.Response]] = None,
    ) -> "ProviderStub":
        responder: Responder = handler or httpx.Response(status, json=json)
        self.routes.setdefault((method.upper(), path), []).append(responder)
        return self

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(599, json={"message": f"unstubbed {request.method} {request.url.path}"})
        responder = queue.pop(0) if len(queue) > 1 else queue[0]
        if callable(responder) and not isinstance(responder, httpx.Response):
            return responder(request)
        return responder

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


def raise_connect_error(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


# ══════════════════════════════════════════════════════════════════════════
# Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        supabase_url=SUPABASE_URL,
        supabase_anon_key=ANON_KEY,
        supabase_service_role_key=SERVICE_KEY,
        resend_api_key="re_test_123456",
        resend_from_email="noreply@resend.dev",
        email_test_recipient="delivered@resend.dev",
        app_url="http://localhost:3000",
        gmail_user_email="owner@example.com",
        gmail_client_id="gmail-client",
        gmail_client_secret="gmail-secret",
        gmail_refresh_token="gmail-refresh",
        openai_api_key="sk-test",
        log_level="WARNING",
        enable_debug_routes=True,
    )


@pytest.fixture
def fake_supabase() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def resend_send():
    """resend.Emails.send, accepting every message unless told otherwise."""
    with patch("app.clients.resend.resend.Emails.send") as send:
        send.return_value = {"id": "email_123"}
        yield send


@pytest.fixture
def gmail_service() -> MagicMock:
    service = MagicMock()
    service.users.return_value.messages.return_value.send.return_value.execute.return_value = {
        "id": "gmail-msg-1"
    }
    return service


@pytest.fixture
def openai_stub() -> ProviderStub:
    return ProviderStub()


@pytest.fixture
def container(test_settings, fake_supabase, gmail_service, openai_stub) -> Container:
    return Container(
        settings=test_settings,
        supabase=SupabaseGateway(
            SUPABASE_URL,
            ANON_KEY,
            SERVICE_KEY,
            client_factory=fake_supabase.factory,
        ),
        resend=ResendClient(test_settings.resend_api_key),
        gmail=GmailClient(
            user_email=test_settings.gmail_user_email,
            client_id=test_settings.gmail_client_id,
            client_secret=test_settings.gmail_client_secret,
            refresh_token=test_settings.gmail_refresh_token,
            service_factory=lambda credentials: gmail_service,
        ),
        chat=OpenAIChatService(
            api_key=test_settings.openai_api_key,
            http_client=httpx.AsyncClient(transport=openai_stub.transport()),
        ),
    )


@pytest_asyncio.fixture
async def test_client(container):
    """
    HTTPX AsyncClient talking to a fresh app built around the fake container.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
    """
    from app.main import create_app

    app = create_app(container=container)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    await container.aclose()


@pytest.fixture
def session_cookie() -> Dict[str, str]:
    """Cookie header carrying a raw-token session for VALID_TOKEN."""
    return {"Cookie": f"{AUTH_COOKIE}={VALID_TOKEN}"}
