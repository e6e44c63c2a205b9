"""
LoveStack Backend — FastAPI Application Factory
=================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() builds the provider container, registers middleware,
       exception handlers and routers, and returns the app.
Who:   uvicorn (uvicorn app.main:app) and the test suite
       (create_app(container=...)).

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                       FastAPI App                        │
    │                                                          │
    │  Middleware:  Request ID → Logging → GZip → CORS         │
    │                                                          │
    │  Routes:      /api/auth  /api/user   /api/client         │
    │               /api/invitations        /api/dashboard     │
    │               /api/debug /api/demo    /api/test-*email   │
    │               /api/contact /api/chat  /health  pages     │
    │                                                          │
    │  Container:   Supabase (anon, admin) Resend Gmail OpenAI │
    │                                                          │
    │  Exception Handlers:                                     │
    │    Auth→401  Validation→400  Forbidden→403               │
    │    NotFound→404  Conflict→409  DB→500                    │
    │    Email→500 {message, error}  Exception→500             │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:   logging, configuration check (logged, never fatal)
    Shutdown:  close the Supabase and OpenAI SDK clients
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app import __version__
from app.config import Settings, settings as default_settings
from app.container import Container, build_container
from app.exceptions import EmailDeliveryError, LoveStackError
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.request_id import RequestIDMiddleware, request_id_var
from app.routes import (
    auth,
    chat,
    client_portal,
    contact,
    dashboard,
    debug,
    demo,
    email,
    health,
    invitations,
    pages,
)

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger once, writing to stdout.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    config: Settings = app.state.container.settings

    setup_logging(config.log_level)
    logger.info("=" * 60)
    logger.info("LoveStack Backend starting up...")

    try:
        config.validate_required_for_production()
    except ValueError as e:
        # Keep serving: /health and /api/demo work without providers
        logger.error("Configuration error: %s", str(e))

    if config.enable_debug_routes:
        logger.warning("Debug routes are enabled under /api/debug")

    logger.info("Server ready at http://%s:%d", config.backend_host, config.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("LoveStack Backend shutting down...")
    await app.state.container.aclose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to the error envelope.

    Handler hierarchy:
        EmailDeliveryError      → 500 {message, error}
        LoveStackError (all)    → exc.status_code {error, details?}
        RequestValidationError  → 400 {error, details}
        HTTPException           → its status {error}
        Exception (fallback)    → 500 {error: "Internal server error"}

    Every failure is logged before the response is sent. Stack traces stay
    in the logs.
    """

    @app.exception_handler(EmailDeliveryError)
    async def handle_email_delivery_error(request: Request, exc: EmailDeliveryError):
        rid = request_id_var.get("")
        logger.error("[%s] Email delivery failed: %s | %s", rid, exc.message, exc.provider_error)
        return JSONResponse(status_code=exc.status_code, content=exc.to_envelope())

    @app.exception_handler(LoveStackError)
    async def handle_lovestack_error(request: Request, exc: LoveStackError):
        rid = request_id_var.get("")
        if exc.status_code >= 500:
            logger.error(
                "[%s] %s: %s | details=%s context=%s",
                rid,
                type(exc).__name__,
                exc.message,
                exc.details,
                exc.context,
            )
        else:
            logger.warning("[%s] %s: %s", rid, type(exc).__name__, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_envelope())

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Request validation failed: %s", rid, exc.errors())
        first = exc.errors()[0] if exc.errors() else {}
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request", "details": str(first.get("msg", ""))},
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        rid = request_id_var.get("")
        logger.warning("[%s] HTTP %d on %s", rid, exc.status_code, request.url.path)
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    config: Optional[Settings] = None,
    container: Optional[Container] = None,
) -> FastAPI:
    """
    Assemble the application.

    Args:
        config:     Settings to use; defaults to the module singleton.
        container:  Prebuilt provider clients (tests pass fakes here).
                    Built from `config` when omitted.
    """
    if container is None:
        container = build_container(config or default_settings)
    config = container.settings

    app = FastAPI(
        title="LoveStack API",
        description=(
            "Backend for the Monkey LoveStack consulting site: dashboard stats, "
            "profiles, demo data, transactional email and marketing pages."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.container = container

    # ── Middleware (last added runs first) ────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # ── Routes ────────────────────────────────────────────────────────────
    app.include_router(auth.router)
    app.include_router(client_portal.router)
    app.include_router(invitations.router)
    app.include_router(dashboard.router)
    app.include_router(demo.router)
    app.include_router(email.router)
    app.include_router(contact.router)
    app.include_router(chat.router)
    if config.enable_debug_routes:
        app.include_router(debug.router)
    app.include_router(health.router)
    app.include_router(pages.router)

    return app


app = create_app()
