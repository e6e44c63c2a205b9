"""
LoveStack Backend — Demo Fixture Schemas
==========================================

What:  Immutable record types for the portfolio demo fixture.
Why:   Frozen models make the fixture read-only after construction; every
       response is a fresh serialization, never a shared mutable dict.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class DemoContact(_Frozen):
    full_name: str
    email: str
    phone: Optional[str] = None
    title: str


class DemoClient(_Frozen):
    id: str
    company_name: str
    industry: str
    website: Optional[str] = None
    status: str = Field(description="prospect | active | inactive")
    primary_contact: DemoContact
    projects_count: int
    total_revenue: float
    created_at: str


class DemoProject(_Frozen):
    id: str
    name: str
    description: str
    status: str = Field(description="planning | active | on_hold | completed | cancelled")
    client_company: str
    start_date: str
    end_date: Optional[str] = None
    estimated_hours: int
    hourly_rate: float
    fixed_price: Optional[float] = None
    github_repo_url: Optional[str] = None
    created_at: str
    progress: int


class DemoTimeEntry(_Frozen):
    id: str
    project_id: str
    description: str
    hours: int
    date: str
    billable: bool
    hourly_rate: float


class DemoInvoice(_Frozen):
    id: str
    project_id: str
    invoice_number: str
    amount: float
    status: str = Field(description="draft | sent | paid | overdue")
    issued_date: str
    due_date: str
    paid_date: Optional[str] = None


class DemoStats(_Frozen):
    total_projects: int = Field(alias="totalProjects")
    active_projects: int = Field(alias="activeProjects")
    total_hours_worked: int = Field(alias="totalHoursWorked")
    outstanding_invoices: int = Field(alias="outstandingInvoices")
    total_revenue: float = Field(alias="totalRevenue")
