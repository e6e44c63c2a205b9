"""
LoveStack Backend — Email Diagnostic Routes
=============================================

What:  GET /api/test-simple-email and GET /api/test-email send one message
       each through Resend to EMAIL_TEST_RECIPIENT.
How:   One send per request, no retries. Failures keep the provider's error
       payload in the body so the operator can see what Resend said.

Response shapes:
    200  {message, data}              (+ debug on /test-email)
    500  {message, error}             provider rejected the send
    500  {message: "Unexpected error", error: "<str>"}
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.clients.resend import ResendClient
from app.config import Settings
from app.dependencies import get_resend, get_settings
from app.exceptions import EmailDeliveryError
from app.schemas.api import EmailErrorResponse, EmailSentResponse
from app.services.email_service import email_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Email"])


@router.get(
    "/test-simple-email",
    response_model=EmailSentResponse,
    responses={500: {"description": "Send failed", "model": EmailErrorResponse}},
    summary="Send a minimal test email",
)
async def test_simple_email(
    resend: ResendClient = Depends(get_resend),
    config: Settings = Depends(get_settings),
):
    try:
        result = await email_service.send_simple_test(resend, config)
    except Exception as e:
        logger.error("Unexpected error sending simple email: %s", str(e), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"message": "Unexpected error", "error": str(e) or type(e).__name__},
        )

    if not result.ok:
        raise EmailDeliveryError("Failed to send simple email", provider_error=result.error)

    return EmailSentResponse(message="Simple email sent successfully", data=result.data)


@router.get(
    "/test-email",
    responses={500: {"description": "Send failed", "model": EmailErrorResponse}},
    summary="Send a test invitation email",
)
async def test_email(
    resend: ResendClient = Depends(get_resend),
    config: Settings = Depends(get_settings),
):
    debug = email_service.debug_info(config)
    logger.info("Email debug info: %s", debug)

    try:
        result = await email_service.send_test_invitation(resend, config)
    except Exception as e:
        logger.error("Test email error: %s", str(e), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "message": "Failed to test email service",
                "error": str(e) or type(e).__name__,
                "debug": debug,
            },
        )

    if not result.ok:
        raise EmailDeliveryError(
            "Failed to send test email",
            provider_error=result.error,
            extra={"debug": debug},
        )

    return {
        "message": f"Test invitation email sent successfully to {config.email_test_recipient}",
        "data": result.data,
        "debug": debug,
    }
