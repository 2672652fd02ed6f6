import math
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class IssueCategory(str, Enum):
    MEDICAL = "Medical"
    MENTAL_HEALTH = "Mental Health"
    EMERGENCY = "Emergency"
    OTHER = "Other"


class Urgency(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


VALID_CATEGORIES = [c.value for c in IssueCategory]

NAME_MIN, NAME_MAX = 2, 100
AGE_MIN, AGE_MAX = 0, 150
DESCRIPTION_MIN, DESCRIPTION_MAX = 10, 2000


def _parse_age(age: Any) -> Optional[int]:
    """Return the age as an int, or None if it is not a whole number in range."""
    if isinstance(age, bool):
        return None
    try:
        numeric = float(age)
    except (TypeError, ValueError, OverflowError):
        return None
    if math.isnan(numeric) or not numeric.is_integer():
        return None
    if numeric < AGE_MIN or numeric > AGE_MAX:
        return None
    return int(numeric)


def validate_support_request(data: dict) -> Optional[str]:
    """
    Check a raw support request payload.

    Fields are checked in form order and the first problem found is
    returned as a human-readable message. Returns None when valid.
    """
    name = data.get("name")
    if not isinstance(name, str) or len(name.strip()) < NAME_MIN:
        return f"Name is required and must be at least {NAME_MIN} characters"
    if len(name.strip()) > NAME_MAX:
        return f"Name must be less than {NAME_MAX} characters"

    age = data.get("age")
    if age is None:
        return "Age is required"
    if _parse_age(age) is None:
        return f"Age must be a valid number between {AGE_MIN} and {AGE_MAX}"

    category = data.get("issueCategory", data.get("issue_category"))
    if isinstance(category, IssueCategory):
        category = category.value
    if category not in VALID_CATEGORIES:
        return f"Issue category must be one of: {', '.join(VALID_CATEGORIES)}"

    description = data.get("description")
    if not isinstance(description, str) or len(description.strip()) < DESCRIPTION_MIN:
        return f"Description is required and must be at least {DESCRIPTION_MIN} characters"
    if len(description.strip()) > DESCRIPTION_MAX:
        return f"Description must be less than {DESCRIPTION_MAX} characters"

    return None


# ============================================================
# Support request
# ============================================================

class SupportRequest(BaseModel):
    """Patient support form submission. Lives for one request only."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    age: int
    issue_category: IssueCategory = Field(..., alias="issueCategory")
    description: str

    @model_validator(mode="before")
    @classmethod
    def check_payload(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            raise ValueError("Request body must be a JSON object")
        error = validate_support_request(data)
        if error:
            raise ValueError(error)
        return {
            **data,
            "name": data["name"].strip(),
            "age": _parse_age(data["age"]),
        }


class ClassificationResult(BaseModel):
    summary: str
    urgency: Urgency


class SupportRequestData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    patient_name: str = Field(..., alias="patientName")
    category: IssueCategory
    summary: str
    urgency: Urgency
    acknowledgement: str


class SupportRequestResponse(BaseModel):
    success: bool = True
    data: SupportRequestData


class ErrorResponse(BaseModel):
    success: bool = False
    error: str


# ============================================================
# Chatbot
# ============================================================

class ChatMessage(BaseModel):
    # Left untyped so non-string input gets a friendly reply instead of a 400.
    message: Any = None


class ChatReply(BaseModel):
    reply: str


class HealthResponse(BaseModel):
    status: str
    message: str
    timestamp: str
