"""POST /api/chat: one user message in, one assistant reply out."""

import logging

from fastapi import APIRouter, Depends

from app.dependencies import get_chat_service
from app.exceptions import ExternalServiceError, ValidationError
from app.schemas.api import ChatRequest, ChatResponse, ErrorResponse
from app.services.llm_base import ChatService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Chat"])


@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={
        400: {"description": "No message provided", "model": ErrorResponse},
        500: {"description": "Chat provider unavailable", "model": ErrorResponse},
    },
)
async def chat(
    body: ChatRequest,
    chat_service: ChatService = Depends(get_chat_service),
) -> ChatResponse:
    if not chat_service.configured:
        raise ExternalServiceError("OpenAI API key not configured.")
    if not body.message:
        raise ValidationError("No message provided.", field="message")

    reply = await chat_service.reply(body.message)
    return ChatResponse(reply=reply)
