"""
Stand-in for an OpenAI-compatible chat completions API.

Point OPENAI_BASE_URL at http://localhost:9000/v1 to exercise the LLM path
locally. POST /mock/mode switches between well-behaved and failing replies.
"""

import json
import re
import time
import logging
from typing import Optional

from fastapi import FastAPI, Header, HTTPException
from pydantic import BaseModel

from src.models import IssueCategory
from src.services.classify_service import ClassifyService

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(title="Mock LLM Completions")

MODES = {"ok", "malformed", "bad_urgency", "error"}
current_mode = "ok"
request_count = 0

AGE_RE = re.compile(r"Patient Age: (\d+) years")
CATEGORY_RE = re.compile(r"Category: (.+)")
DESCRIPTION_RE = re.compile(r"Issue Description: (.+?)\n\nProvide a response", re.S)


class ChatCompletionMessage(BaseModel):
    role: str
    content: str


class ChatCompletionRequest(BaseModel):
    model: str
    messages: list[ChatCompletionMessage]
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None


class ModeUpdate(BaseModel):
    mode: str


def _classification_reply(prompt: str) -> dict:
    """Answer the intake prompt the way a cooperative model would."""
    age_match = AGE_RE.search(prompt)
    category_match = CATEGORY_RE.search(prompt)
    description_match = DESCRIPTION_RE.search(prompt)

    age = int(age_match.group(1)) if age_match else 0
    category = category_match.group(1).strip() if category_match else IssueCategory.OTHER.value
    description = description_match.group(1).strip() if description_match else ""

    urgency = ClassifyService.calculate_urgency(description, category, age)
    return {
        "summary": f"A {age}-year-old patient needs help with a {category.lower()} concern.",
        "urgency": urgency.value,
    }


@app.post("/v1/chat/completions")
async def chat_completions(
    body: ChatCompletionRequest,
    authorization: Optional[str] = Header(None),
):
    global request_count
    request_count += 1

    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Missing bearer token")

    if current_mode == "error":
        logger.warning("Simulating upstream failure")
        raise HTTPException(status_code=503, detail="Service Unavailable")

    prompt = body.messages[-1].content if body.messages else ""
    if current_mode == "malformed":
        content = "Sure! Here is my analysis of the patient."
    elif current_mode == "bad_urgency":
        content = json.dumps({"summary": "Patient needs follow-up.", "urgency": "Critical"})
    else:
        content = json.dumps(_classification_reply(prompt))

    return {
        "id": f"chatcmpl-mock-{request_count}",
        "object": "chat.completion",
        "created": int(time.time()),
        "model": body.model,
        "choices": [
            {"index": 0, "message": {"role": "assistant", "content": content}, "finish_reason": "stop"}
        ],
    }


@app.post("/mock/mode")
async def set_mode(update: ModeUpdate):
    """Switch the reply behaviour (for debugging/testing)."""
    global current_mode
    if update.mode not in MODES:
        raise HTTPException(status_code=400, detail=f"mode must be one of: {', '.join(sorted(MODES))}")
    current_mode = update.mode
    logger.info(f"Mock LLM mode set to {current_mode}")
    return {"mode": current_mode}


@app.get("/health")
async def health():
    """Mock API health check."""
    return {"status": "ok", "service": "mock-llm", "mode": current_mode, "requests": request_count}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=9000)
