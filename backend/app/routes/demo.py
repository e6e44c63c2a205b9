"""
LoveStack Backend — Demo Data Route
=====================================

GET /api/demo?type=clients|projects|stats|time-entries|invoices

Serves the static demo fixture. A known `type` returns exactly one key; an
absent or unrecognized one returns the whole fixture. No provider is
contacted.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Query

from app.schemas.api import ErrorResponse
from app.services.demo_data import get_demo_data

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Demo"])


@router.get(
    "/demo",
    responses={500: {"description": "Fixture could not be served", "model": ErrorResponse}},
    summary="Demo fixture, optionally filtered by type",
)
async def demo_data(
    demo_type: Optional[str] = Query(
        default=None,
        alias="type",
        description="One of clients, projects, stats, time-entries, invoices",
    ),
) -> Dict[str, Any]:
    return get_demo_data(demo_type)
