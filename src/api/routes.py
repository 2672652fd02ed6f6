from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from src.core.config import settings
from src.core.logging import logger
from src.models import (
    ChatMessage,
    ChatReply,
    ErrorResponse,
    HealthResponse,
    SupportRequest,
    SupportRequestData,
    SupportRequestResponse,
)
from src.services.ai_service import AIService, get_ai_service
from src.services.chatbot_service import ChatbotService
from src.services.circuit_breaker import CircuitBreaker, find_circuit_breaker
from src.services.classify_service import ClassifyService

router = APIRouter()

SUPPORT_FAILURE_MESSAGE = "Failed to process your request. Please try again later."


# ============================================================
# Health Check API
# ============================================================

@router.get("/health", response_model=HealthResponse)
async def health_check():
    return HealthResponse(
        status="ok",
        message=f"{settings.APP_NAME} API is running",
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


# ============================================================
# Support Request API
# ============================================================

@router.post(
    "/support-request",
    response_model=SupportRequestResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def create_support_request(
    payload: SupportRequest,
    ai_service: AIService = Depends(get_ai_service),
):
    """
    Classify a patient support request.

    Returns a short summary and an urgency tier (Low/Medium/High) along
    with the acknowledgement the patient should see.
    """
    try:
        result = await ai_service.process_patient_issue(payload)
    except Exception as e:
        logger.error(f"Error processing support request: {e}", exc_info=e)
        return JSONResponse(status_code=500, content={"success": False, "error": SUPPORT_FAILURE_MESSAGE})

    return SupportRequestResponse(
        data=SupportRequestData(
            patient_name=payload.name,
            category=payload.issue_category,
            summary=result.summary,
            urgency=result.urgency,
            acknowledgement=ClassifyService.acknowledgement(result.urgency),
        )
    )


# ============================================================
# Chatbot API
# ============================================================

@router.post("/chatbot/message", response_model=ChatReply)
async def chatbot_message(
    payload: Optional[ChatMessage] = None,
    chatbot_service: ChatbotService = Depends(),
):
    """Answer a FAQ-style question from the chatbot widget."""
    return chatbot_service.process_message(payload.message if payload else None)


# ============================================================
# Circuit Breaker Status API
# ============================================================

def _registered_circuit(name: str) -> CircuitBreaker:
    cb = find_circuit_breaker(name)
    if cb is None:
        raise HTTPException(status_code=404, detail=f"Circuit '{name}' not found")
    return cb


@router.get("/circuit/{name}/status")
async def get_circuit_status(name: str):
    """
    Get the current status of a Circuit Breaker instance.

    Example: `GET /api/circuit/llm/status`.
    """
    cb = _registered_circuit(name)
    return cb.get_status()


@router.post("/circuit/{name}/reset")
async def reset_circuit(name: str):
    """
    Reset the Circuit Breaker state (for debugging/testing).
    """
    cb = _registered_circuit(name)
    cb.reset()
    return {"status": "reset", "name": name}
