from typing import Optional

from src.core.logging import logger
from src.models import ClassificationResult, SupportRequest
from src.services.circuit_breaker import CircuitBreaker, CircuitBreakerOpenError, get_circuit_breaker
from src.services.classify_service import ClassifyService
from src.services.llm_client import LLMClient

LLM_CIRCUIT_NAME = "llm"

llm_circuit_breaker = get_circuit_breaker(LLM_CIRCUIT_NAME)


class AIService:
    """
    Turns a support request into a summary and urgency tier.

    Uses the LLM when an API key is configured and falls back to the
    rule-based classifier when it is not, or when the call fails.
    """

    def __init__(
        self,
        llm_client: Optional[LLMClient] = None,
        classify_service: Optional[ClassifyService] = None,
        circuit_breaker: Optional[CircuitBreaker] = None,
    ):
        self.llm_client = llm_client or LLMClient()
        self.classify_service = classify_service or ClassifyService()
        self.circuit_breaker = circuit_breaker or llm_circuit_breaker

    async def process_patient_issue(self, request: SupportRequest) -> ClassificationResult:
        if not self.llm_client.enabled:
            return self.classify_service.classify(request)

        try:
            parsed = await self.circuit_breaker.call(self.llm_client.classify, request)
        except CircuitBreakerOpenError as e:
            logger.warning(f"LLM circuit open, using rule-based classification ({e})")
            return self.classify_service.classify(request)
        except Exception as e:
            logger.warning(f"LLM processing error, using rule-based classification: {e}")
            return self.classify_service.classify(request)

        return ClassificationResult(
            summary=parsed["summary"],
            urgency=self.classify_service.validate_urgency(parsed["urgency"]),
        )


_ai_service: Optional[AIService] = None


def get_ai_service() -> AIService:
    """Return the process-wide AIService instance."""
    global _ai_service
    if _ai_service is None:
        _ai_service = AIService()
    return _ai_service
