"""
LoveStack Backend — Application Configuration
===============================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
       Every provider credential the backend needs is declared in one place.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by main.py, the dependency container, and the route modules.
When:  Loaded once at module import time; validated before app starts.

Credential tiers:
    SUPABASE_ANON_KEY          → user-scoped client (row-level security applies)
    SUPABASE_SERVICE_ROLE_KEY  → admin client (bypasses row-level security)
    RESEND_API_KEY             → transactional email
    GMAIL_*                    → contact-form notifications (OAuth refresh flow)
    OPENAI_API_KEY             → chat assistant
"""

from typing import List, Optional
from urllib.parse import urlparse

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have development defaults. Production deployments MUST
    provide the Supabase keys and the Resend key.
    """

    # ── Supabase ──────────────────────────────────────────────────────────
    # What: Project URL, e.g. https://abcd1234.supabase.co
    # PostgREST lives under /rest/v1, GoTrue under /auth/v1
    supabase_url: str = Field(default="", description="Supabase project URL")
    supabase_anon_key: str = Field(default="", description="Public (anon) API key")
    supabase_service_role_key: str = Field(
        default="",
        description="Service-role key; bypasses row-level security. Server-side only.",
    )

    # What: Name of the session cookie written by the Supabase SSR helpers
    # Default: derived from the project ref (sb-<ref>-auth-token)
    supabase_auth_cookie: Optional[str] = Field(default=None)

    # ── Resend (transactional email) ──────────────────────────────────────
    resend_api_key: str = Field(default="")
    resend_from_email: str = Field(default="noreply@resend.dev")

    # What: Recipient of the diagnostic send endpoints
    # Resend accepts this sandbox address without a verified domain
    email_test_recipient: str = Field(default="delivered@resend.dev")

    # What: Public URL of the site, used to build invitation links
    app_url: str = Field(default="http://localhost:3000")

    # ── Gmail (contact-form notifications) ────────────────────────────────
    gmail_user_email: str = Field(default="")
    gmail_client_id: str = Field(default="")
    gmail_client_secret: str = Field(default="")
    gmail_refresh_token: str = Field(default="")

    # ── OpenAI (chat assistant) ───────────────────────────────────────────
    openai_api_key: str = Field(default="")
    openai_api_url: str = Field(default="https://api.openai.com/v1")
    openai_model: str = Field(default="gpt-3.5-turbo")
    openai_max_tokens: int = Field(default=256, ge=16, le=4096)

    # ── Outbound HTTP ─────────────────────────────────────────────────────
    # What: Per-request timeout for every provider call, in seconds
    # No retries are attempted; a timeout surfaces as a 500 to the caller
    http_timeout: float = Field(default=15.0, ge=1.0, le=120.0)

    # ── CORS ──────────────────────────────────────────────────────────────
    cors_origins: str = Field(default="http://localhost:3000")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8000, ge=1024, le=65535)

    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Debug Endpoints ───────────────────────────────────────────────────
    # What: Development-only diagnostics under /api/debug
    # Off unless ENABLE_DEBUG_ROUTES=true; lookup targets come from the environment
    enable_debug_routes: bool = Field(default=False)
    debug_admin_email: str = Field(default="admin@example.com")
    debug_team_email: str = Field(default="team@example.com")
    debug_admin_user_id: str = Field(default="00000000-0000-0000-0000-000000000001")
    debug_team_user_id: str = Field(default="00000000-0000-0000-0000-000000000002")

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @property
    def supabase_project_ref(self) -> str:
        """First label of the Supabase host (abcd1234 for abcd1234.supabase.co)."""
        host = urlparse(self.supabase_url).hostname or ""
        return host.split(".")[0] if host else ""

    @property
    def auth_cookie_name(self) -> str:
        if self.supabase_auth_cookie:
            return self.supabase_auth_cookie
        return f"sb-{self.supabase_project_ref}-auth-token"

    @property
    def supabase_configured(self) -> bool:
        """
        True when real Supabase credentials are present.

        Placeholder values shipped in example env files count as unconfigured.
        """
        return bool(
            self.supabase_url
            and self.supabase_url != "https://placeholder-url.supabase.co"
            and self.supabase_anon_key
            and self.supabase_anon_key != "placeholder-key"
        )

    @property
    def gmail_configured(self) -> bool:
        return all(
            (
                self.gmail_user_email,
                self.gmail_client_id,
                self.gmail_client_secret,
                self.gmail_refresh_token,
            )
        )

    def validate_required_for_production(self) -> None:
        """
        What:  Validates that critical settings are configured.
        When:  Called during app startup (lifespan).
        How:   Collects every problem and raises one ValueError listing them.
        """
        errors = []
        if not self.supabase_url:
            errors.append("SUPABASE_URL is not set.")
        if not self.supabase_anon_key:
            errors.append("SUPABASE_ANON_KEY is not set.")
        if not self.supabase_service_role_key:
            errors.append(
                "SUPABASE_SERVICE_ROLE_KEY is not set. Admin queries will be rejected."
            )
        if not self.resend_api_key:
            errors.append("RESEND_API_KEY is not set. Email endpoints will fail.")
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )


# Singleton instance, imported throughout the application
settings = Settings()
