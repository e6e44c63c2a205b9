"""
LoveStack Backend — Contact Form Route
========================================

POST /api/contact

    200  {success: true, message, details: {emailSent, savedToDatabase, errors?}}
    400  {success: false, message}          name, email or description missing
    500  {success: false, message, errors}  neither storage nor notification worked

This route answers with its own body shape rather than the error envelope;
the marketing site's form reads `success` and `message`.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.clients.gmail import GmailClient
from app.clients.supabase import SupabaseGateway
from app.config import Settings
from app.dependencies import get_gmail, get_settings, get_supabase
from app.schemas.api import ContactForm
from app.services.contact_service import contact_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Contact"])


@router.post("/contact", summary="Submit the public contact form")
async def submit_contact(
    form: ContactForm,
    supabase: SupabaseGateway = Depends(get_supabase),
    gmail: GmailClient = Depends(get_gmail),
    config: Settings = Depends(get_settings),
) -> JSONResponse:
    if form.missing_required:
        logger.info("Contact form rejected: required fields missing")
        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "message": "Name, email, and project description are required",
            },
        )

    outcome = await contact_service.submit(form, supabase, gmail, config)

    if not outcome.success:
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "message": "Failed to process contact request",
                "errors": outcome.errors,
            },
        )

    return JSONResponse(
        content={
            "success": True,
            "message": f"Contact request submitted successfully ({outcome.summary})",
            "details": outcome.details(),
        }
    )
