import json
from typing import Any, Optional

import httpx

from src.core.config import PLACEHOLDER_API_KEY, settings
from src.models import SupportRequest

PROMPT_TEMPLATE = """You are a healthcare support assistant for an NGO called "Jarurat Care" that helps underserved communities.

Analyze this patient support request:
- Patient Age: {age} years
- Category: {category}
- Issue Description: {description}

Provide a response in exactly this JSON format:
{{
  "summary": "A concise 1-2 sentence summary of the patient's issue in simple, empathetic language",
  "urgency": "Low" OR "Medium" OR "High"
}}

Urgency Guidelines:
- HIGH: Life-threatening, severe pain, mental health crisis, emergency situations, elderly with acute symptoms
- MEDIUM: Persistent symptoms, moderate pain, recurring issues, needs attention within 24-48 hours
- LOW: Minor concerns, routine checkups, general inquiries, non-urgent follow-ups

Respond ONLY with the JSON object, no additional text."""


class LLMResponseError(Exception):
    """The completion API answered, but not with a usable {summary, urgency} object."""


def build_prompt(request: SupportRequest) -> str:
    return PROMPT_TEMPLATE.format(
        age=request.age,
        category=request.issue_category.value,
        description=request.description,
    )


def parse_classification(content: Any) -> dict:
    """
    Parse the model's reply into a dict with a non-empty `summary`.

    The `urgency` value is passed through untouched; callers coerce it.
    """
    if not isinstance(content, str) or not content.strip():
        raise LLMResponseError("Completion content is empty or not text")
    try:
        parsed = json.loads(content.strip())
    except json.JSONDecodeError as e:
        raise LLMResponseError(f"Completion is not valid JSON: {e}") from e
    if not isinstance(parsed, dict):
        raise LLMResponseError("Completion JSON is not an object")
    summary = parsed.get("summary")
    if not isinstance(summary, str) or not summary.strip():
        raise LLMResponseError("Completion has no summary")
    return {"summary": summary.strip(), "urgency": parsed.get("urgency")}


class LLMClient:
    """Thin client for an OpenAI-compatible chat completions endpoint."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = settings.OPENAI_API_KEY if api_key is None else api_key
        self.model = model or settings.OPENAI_MODEL
        self.base_url = (base_url or settings.OPENAI_BASE_URL).rstrip("/")
        self.timeout = timeout or settings.LLM_TIMEOUT_SECONDS
        self.transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.api_key) and self.api_key != PLACEHOLDER_API_KEY

    async def complete(self, prompt: str, temperature: float = 0.3, max_tokens: int = 200) -> Optional[str]:
        payload = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            resp = await client.post(f"{self.base_url}/chat/completions", json=payload, headers=headers)
            resp.raise_for_status()
        try:
            body = resp.json()
        except ValueError as e:
            raise LLMResponseError(f"Completion response is not JSON: {e}") from e
        try:
            return body["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise LLMResponseError(f"Unexpected completion payload: {e}") from e

    async def classify(self, request: SupportRequest) -> dict:
        """Ask the model for a {summary, urgency} object describing the request."""
        content = await self.complete(build_prompt(request))
        return parse_classification(content)
