"""
LoveStack Backend — Pydantic Request/Response Schemas
=======================================================

What:  Pydantic models describing the HTTP contract of the /api routes.
Why:   Request validation and OpenAPI documentation. Database rows are
       pass-through records owned by Supabase, so they are typed as plain
       dicts here rather than re-modelled column by column.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ══════════════════════════════════════════════════════════════════════════
# Error Envelope
# ══════════════════════════════════════════════════════════════════════════

class ErrorResponse(BaseModel):
    """
    Uniform failure body.

    Example:
        {"error": "Failed to fetch dashboard stats", "details": "relation \"projects\" does not exist"}
    """
    error: str = Field(description="Human-readable failure description")
    details: Optional[str] = Field(default=None, description="Underlying provider message")


class EmailErrorResponse(BaseModel):
    message: str
    error: Any = Field(description="Provider error payload, embedded verbatim")


# ══════════════════════════════════════════════════════════════════════════
# Auth & Profiles
# ══════════════════════════════════════════════════════════════════════════

class ProfileResponse(BaseModel):
    profile: Dict[str, Any]


class ClientContactResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    client_contact: Dict[str, Any] = Field(alias="clientContact")


class UnifiedUserResponse(BaseModel):
    """`user.userType` is "client" for a client contact, "team" otherwise."""
    user: Dict[str, Any]


# ══════════════════════════════════════════════════════════════════════════
# Client Portal
# ══════════════════════════════════════════════════════════════════════════

class ClientProjectsResponse(BaseModel):
    projects: List[Dict[str, Any]]


class ClientProjectResponse(BaseModel):
    project: Dict[str, Any]


# ══════════════════════════════════════════════════════════════════════════
# Invitations
# ══════════════════════════════════════════════════════════════════════════

class InvitationCreate(BaseModel):
    """
    Admin request to invite someone.

    email, full_name and role are required; the service reports their
    absence with its own 400 message.
    """
    email: Optional[str] = None
    full_name: Optional[str] = None
    role: Optional[str] = None
    company_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    timezone: Optional[str] = None


class InvitationStats(BaseModel):
    total: int = 0
    pending: int = 0
    accepted: int = 0
    expired: int = 0
    cancelled: int = 0


class InvitationListResponse(BaseModel):
    invitations: List[Dict[str, Any]]
    stats: InvitationStats


class InvitationCreatedResponse(BaseModel):
    message: str
    invitation: Dict[str, Any]


class InvitationPreview(BaseModel):
    email: str
    full_name: Optional[str] = None
    role: Optional[str] = None
    company_name: Optional[str] = None
    inviter_name: Optional[str] = None
    inviter_company: Optional[str] = None
    expires_at: str


class InvitationPreviewResponse(BaseModel):
    invitation: InvitationPreview


class AcceptInvitationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    password: Optional[str] = None
    confirm_password: Optional[str] = Field(default=None, alias="confirmPassword")


class AccountCreatedResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    user: Dict[str, Any]
    sign_in_url: Optional[str] = Field(default=None, alias="signInUrl")


# ══════════════════════════════════════════════════════════════════════════
# Dashboard
# ══════════════════════════════════════════════════════════════════════════

class DashboardStats(BaseModel):
    """
    Aggregate shown on the dashboard landing page.

    Serialized with camelCase keys (by_alias) to match the frontend.
    """
    model_config = ConfigDict(populate_by_name=True)

    total_projects: int = Field(default=0, alias="totalProjects")
    active_projects: int = Field(default=0, alias="activeProjects")
    total_hours_worked: float = Field(default=0, alias="totalHoursWorked")
    outstanding_invoices: int = Field(default=0, alias="outstandingInvoices")
    total_revenue: float = Field(default=0, alias="totalRevenue")
    recent_activity: List[Dict[str, Any]] = Field(default_factory=list, alias="recentActivity")


class StatsResponse(BaseModel):
    stats: DashboardStats


# ══════════════════════════════════════════════════════════════════════════
# Email
# ══════════════════════════════════════════════════════════════════════════

class EmailSentResponse(BaseModel):
    message: str
    data: Optional[Dict[str, Any]] = None


# ══════════════════════════════════════════════════════════════════════════
# Contact Form & Chat
# ══════════════════════════════════════════════════════════════════════════

class ContactForm(BaseModel):
    """
    Inbound contact-form payload.

    Every field is optional at the schema level; the route reports missing
    required fields (name, email, description) with its own 400 body.
    """
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    email: Optional[str] = None
    company: Optional[str] = None
    project_type: Optional[str] = Field(default=None, alias="projectType")
    budget: Optional[str] = None
    timeline: Optional[str] = None
    description: Optional[str] = None
    message: Optional[str] = None

    @property
    def missing_required(self) -> bool:
        return not (self.name and self.email and self.description)


class ChatRequest(BaseModel):
    message: Optional[str] = None


class ChatResponse(BaseModel):
    reply: str


# ══════════════════════════════════════════════════════════════════════════
# Health
# ══════════════════════════════════════════════════════════════════════════

class HealthResponse(BaseModel):
    """Health check response showing service and dependency status."""
    status: str = Field(description="Overall service status: healthy, degraded, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Supabase reachability: connected, disconnected")
    email: str = Field(description="Resend configuration: configured, unconfigured")
    uptime_seconds: float = Field(description="Seconds since service started")
