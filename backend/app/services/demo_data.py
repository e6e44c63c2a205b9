"""
LoveStack Backend — Demo Data Provider
========================================

What:  Static portfolio fixture (clients, projects, stats, time entries,
       invoices) served by GET /api/demo.
Why:   Lets the dashboard be shown without a live database.
How:   The fixture is built once at import from frozen models. Generated
       sections (time entries, invoices) are derived deterministically: a
       fixed hour cycle, descriptions picked by index, statuses judged
       against a fixed "as of" date. No randomness, no wall clock, so every
       process serves byte-identical JSON.

Selector dispatch:
    DemoDataType is a closed enumeration mapped to extractor functions.
    Absent or unknown selectors fall back to the whole fixture.

        type=clients       → {"clients": [...]}
        type=projects      → {"projects": [...]}
        type=stats         → {"stats": {...}}
        type=time-entries  → {"timeEntries": [...]}
        type=invoices      → {"invoices": [...]}
        (none / other)     → {clients, projects, stats, timeEntries, invoices}
"""

import calendar
from datetime import date, timedelta
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple

from app.schemas.demo import (
    DemoClient,
    DemoContact,
    DemoInvoice,
    DemoProject,
    DemoStats,
    DemoTimeEntry,
)

# Generated data stops at this date; invoice status is judged against it too
FIXTURE_AS_OF = date(2024, 9, 1)
TIME_ENTRY_START = date(2024, 3, 1)

TASK_DESCRIPTIONS = (
    "Frontend component development",
    "API endpoint implementation",
    "Database schema design",
    "Unit test coverage",
    "Code review and refactoring",
    "Performance optimization",
    "Security audit",
    "Documentation updates",
    "Bug fixes and debugging",
    "Client meeting and requirements gathering",
    "Deployment and monitoring setup",
)

# Hours logged per working day, cycled
_HOURS_CYCLE = (6, 8, 4, 7, 5, 8, 3, 6)

DEMO_CLIENTS: Tuple[DemoClient, ...] = (
    DemoClient(
        id="demo-client-1",
        company_name="TechCorp Solutions",
        industry="Technology",
        website="https://techcorp-solutions.com",
        status="active",
        primary_contact=DemoContact(
            full_name="Sarah Johnson",
            email="sarah.johnson@techcorp-solutions.com",
            phone="+1 (555) 123-4567",
            title="VP of Engineering",
        ),
        projects_count=3,
        total_revenue=145750,
        created_at="2024-01-15T08:30:00Z",
    ),
    DemoClient(
        id="demo-client-2",
        company_name="GreenLeaf Ventures",
        industry="E-commerce",
        website="https://greenleaf-ventures.com",
        status="active",
        primary_contact=DemoContact(
            full_name="Michael Chen",
            email="mike@greenleaf-ventures.com",
            phone="+1 (555) 987-6543",
            title="CTO",
        ),
        projects_count=2,
        total_revenue=89500,
        created_at="2024-02-22T14:15:00Z",
    ),
    DemoClient(
        id="demo-client-3",
        company_name="HealthFirst Analytics",
        industry="Healthcare",
        website="https://healthfirst-analytics.com",
        status="active",
        primary_contact=DemoContact(
            full_name="Dr. Emily Rodriguez",
            email="emily.rodriguez@healthfirst.com",
            phone="+1 (555) 456-7890",
            title="Chief Medical Officer",
        ),
        projects_count=1,
        total_revenue=67200,
        created_at="2024-03-10T10:45:00Z",
    ),
    DemoClient(
        id="demo-client-4",
        company_name="FinanceFlow Inc",
        industry="Finance",
        status="prospect",
        primary_contact=DemoContact(
            full_name="Robert Kim",
            email="robert.kim@financeflow.com",
            title="Director of Technology",
        ),
        projects_count=0,
        total_revenue=0,
        created_at="2024-06-05T16:20:00Z",
    ),
    DemoClient(
        id="demo-client-5",
        company_name="EduTech Innovations",
        industry="Education",
        website="https://edutech-innovations.org",
        status="active",
        primary_contact=DemoContact(
            full_name="Lisa Thompson",
            email="lisa@edutech-innovations.org",
            phone="+1 (555) 234-5678",
            title="Product Manager",
        ),
        projects_count=2,
        total_revenue=52800,
        created_at="2024-04-18T09:30:00Z",
    ),
)

DEMO_PROJECTS: Tuple[DemoProject, ...] = (
    DemoProject(
        id="demo-project-1",
        name="Enterprise E-commerce Platform",
        description=(
            "Complete rebuild of legacy e-commerce system with modern React frontend, "
            "Node.js API, and PostgreSQL database. Includes inventory management, "
            "payment processing, and analytics dashboard."
        ),
        status="active",
        client_company="TechCorp Solutions",
        start_date="2024-03-01",
        end_date="2024-08-15",
        estimated_hours=480,
        hourly_rate=150,
        github_repo_url="https://github.com/techcorp/ecommerce-platform",
        created_at="2024-02-25T10:00:00Z",
        progress=65,
    ),
    DemoProject(
        id="demo-project-2",
        name="Customer Analytics Dashboard",
        description=(
            "Real-time analytics dashboard for tracking customer behavior, sales metrics, "
            "and business intelligence. Built with Next.js, D3.js visualizations, and "
            "integrated with existing CRM."
        ),
        status="completed",
        client_company="TechCorp Solutions",
        start_date="2024-01-15",
        end_date="2024-03-30",
        estimated_hours=240,
        hourly_rate=150,
        fixed_price=35000,
        github_repo_url="https://github.com/techcorp/analytics-dashboard",
        created_at="2024-01-10T14:30:00Z",
        progress=100,
    ),
    DemoProject(
        id="demo-project-3",
        name="Mobile API & DevOps Setup",
        description=(
            "RESTful API development for mobile app backend with AWS infrastructure setup, "
            "CI/CD pipeline, monitoring, and security hardening."
        ),
        status="completed",
        client_company="TechCorp Solutions",
        start_date="2024-05-01",
        end_date="2024-06-20",
        estimated_hours=160,
        hourly_rate=150,
        github_repo_url="https://github.com/techcorp/mobile-api",
        created_at="2024-04-28T11:15:00Z",
        progress=100,
    ),
    DemoProject(
        id="demo-project-4",
        name="Sustainable Supply Chain Platform",
        description=(
            "Web platform for tracking and optimizing supply chain sustainability metrics. "
            "Features include vendor scorecards, environmental impact tracking, and "
            "automated reporting."
        ),
        status="active",
        client_company="GreenLeaf Ventures",
        start_date="2024-04-15",
        end_date="2024-09-30",
        estimated_hours=320,
        hourly_rate=140,
        github_repo_url="https://github.com/greenleaf/supply-chain-platform",
        created_at="2024-04-10T09:45:00Z",
        progress=45,
    ),
    DemoProject(
        id="demo-project-5",
        name="Inventory Management System",
        description=(
            "Custom inventory management system with barcode scanning, automated "
            "reordering, and integration with existing ERP system."
        ),
        status="planning",
        client_company="GreenLeaf Ventures",
        start_date="2024-08-01",
        estimated_hours=200,
        hourly_rate=140,
        created_at="2024-07-20T13:20:00Z",
        progress=5,
    ),
    DemoProject(
        id="demo-project-6",
        name="Patient Data Analytics Platform",
        description=(
            "HIPAA-compliant healthcare analytics platform for processing patient data, "
            "generating insights, and creating automated reports for medical research."
        ),
        status="active",
        client_company="HealthFirst Analytics",
        start_date="2024-05-20",
        end_date="2024-10-15",
        estimated_hours=400,
        hourly_rate=160,
        github_repo_url="https://github.com/healthfirst/patient-analytics",
        created_at="2024-05-15T15:00:00Z",
        progress=30,
    ),
    DemoProject(
        id="demo-project-7",
        name="Learning Management System",
        description=(
            "Custom LMS with video streaming, interactive quizzes, progress tracking, and "
            "instructor tools. Integrated with payment processing and certificate generation."
        ),
        status="completed",
        client_company="EduTech Innovations",
        start_date="2024-02-01",
        end_date="2024-05-30",
        estimated_hours=280,
        hourly_rate=135,
        fixed_price=38000,
        github_repo_url="https://github.com/edutech/lms-platform",
        created_at="2024-01-25T12:30:00Z",
        progress=100,
    ),
    DemoProject(
        id="demo-project-8",
        name="Student Portal Mobile App",
        description=(
            "React Native mobile application for students to access courses, submit "
            "assignments, view grades, and communicate with instructors."
        ),
        status="on_hold",
        client_company="EduTech Innovations",
        start_date="2024-06-15",
        estimated_hours=180,
        hourly_rate=135,
        created_at="2024-06-10T10:15:00Z",
        progress=15,
    ),
)


# ══════════════════════════════════════════════════════════════════════════
# Deterministic generators
# ══════════════════════════════════════════════════════════════════════════

def _add_month(day: date) -> date:
    year, month = (day.year + 1, 1) if day.month == 12 else (day.year, day.month + 1)
    last = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last))


def generate_time_entries(
    project_id: str, total_hours: int, offset: int = 0
) -> Tuple[DemoTimeEntry, ...]:
    """
    Spread `total_hours` over weekdays starting at TIME_ENTRY_START.

    `offset` shifts the hour and description cycles so projects don't all
    look alike. Every tenth entry is non-billable.
    """
    entries = []
    remaining = total_hours
    current = TIME_ENTRY_START

    while remaining > 0 and current <= FIXTURE_AS_OF:
        if current.weekday() < 5:
            n = len(entries)
            hours = min(remaining, _HOURS_CYCLE[(n + offset) % len(_HOURS_CYCLE)])
            entries.append(
                DemoTimeEntry(
                    id=f"demo-time-{project_id}-{n + 1}",
                    project_id=project_id,
                    description=TASK_DESCRIPTIONS[(n + offset) % len(TASK_DESCRIPTIONS)],
                    hours=hours,
                    date=current.isoformat(),
                    billable=(n + 1) % 10 != 0,
                    hourly_rate=150,
                )
            )
            remaining -= hours
        current += timedelta(days=1)

    return tuple(entries)


def generate_invoices(projects: Tuple[DemoProject, ...]) -> Tuple[DemoInvoice, ...]:
    """
    One invoice per completed project, or per active project past 50%.

    Amount is the fixed price, else 70% of estimated hours at the hourly
    rate. Issued a month after start, due 30 days later. Completed projects
    are paid five days before the due date; the rest are `sent`, or
    `overdue` when already due by FIXTURE_AS_OF.
    """
    invoices = []
    counter = 1001

    for project in projects:
        billable = project.status == "completed" or (
            project.status == "active" and project.progress > 50
        )
        if not billable:
            continue

        amount = project.fixed_price or round(
            project.estimated_hours * 0.7 * project.hourly_rate, 2
        )
        issued = _add_month(date.fromisoformat(project.start_date))
        due = issued + timedelta(days=30)

        paid_date: Optional[str] = None
        if project.status == "completed":
            status = "paid"
            paid_date = (due - timedelta(days=5)).isoformat()
        elif due < FIXTURE_AS_OF:
            status = "overdue"
        else:
            status = "sent"

        invoices.append(
            DemoInvoice(
                id=f"demo-invoice-{project.id}",
                project_id=project.id,
                invoice_number=f"INV-{counter}",
                amount=amount,
                status=status,
                issued_date=issued.isoformat(),
                due_date=due.isoformat(),
                paid_date=paid_date,
            )
        )
        counter += 1

    return tuple(invoices)


DEMO_STATS = DemoStats(
    totalProjects=len(DEMO_PROJECTS),
    activeProjects=sum(1 for p in DEMO_PROJECTS if p.status == "active"),
    totalHoursWorked=1240,
    outstandingInvoices=3,
    totalRevenue=sum(c.total_revenue for c in DEMO_CLIENTS),
)

DEMO_TIME_ENTRIES: Tuple[DemoTimeEntry, ...] = tuple(
    entry
    for index, project in enumerate(DEMO_PROJECTS)
    for entry in generate_time_entries(
        project.id, project.estimated_hours * project.progress // 100, offset=index
    )
)

DEMO_INVOICES = generate_invoices(DEMO_PROJECTS)


# ══════════════════════════════════════════════════════════════════════════
# Selector dispatch
# ══════════════════════════════════════════════════════════════════════════

class DemoDataType(str, Enum):
    CLIENTS = "clients"
    PROJECTS = "projects"
    STATS = "stats"
    TIME_ENTRIES = "time-entries"
    INVOICES = "invoices"


def _dump(records) -> Any:
    if isinstance(records, tuple):
        return [r.model_dump(mode="json", by_alias=True, exclude_none=True) for r in records]
    return records.model_dump(mode="json", by_alias=True, exclude_none=True)


def full_fixture() -> Dict[str, Any]:
    """A fresh JSON-ready copy of the whole fixture."""
    return {
        "clients": _dump(DEMO_CLIENTS),
        "projects": _dump(DEMO_PROJECTS),
        "stats": _dump(DEMO_STATS),
        "timeEntries": _dump(DEMO_TIME_ENTRIES),
        "invoices": _dump(DEMO_INVOICES),
    }


_EXTRACTORS: Dict[DemoDataType, Callable[[], Dict[str, Any]]] = {
    DemoDataType.CLIENTS: lambda: {"clients": _dump(DEMO_CLIENTS)},
    DemoDataType.PROJECTS: lambda: {"projects": _dump(DEMO_PROJECTS)},
    DemoDataType.STATS: lambda: {"stats": _dump(DEMO_STATS)},
    DemoDataType.TIME_ENTRIES: lambda: {"timeEntries": _dump(DEMO_TIME_ENTRIES)},
    DemoDataType.INVOICES: lambda: {"invoices": _dump(DEMO_INVOICES)},
}


def parse_demo_type(value: Optional[str]) -> Optional[DemoDataType]:
    """Map a raw query value to a selector; None for absent or unknown values."""
    if value is None:
        return None
    try:
        return DemoDataType(value)
    except ValueError:
        return None


def get_demo_data(selector: Optional[str] = None) -> Dict[str, Any]:
    demo_type = parse_demo_type(selector)
    if demo_type is None:
        return full_fixture()
    return _EXTRACTORS[demo_type]()
