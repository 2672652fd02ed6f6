from typing import Optional, Union

from src.models import ClassificationResult, IssueCategory, SupportRequest, Urgency

# Immediate attention needed.
HIGH_URGENCY_KEYWORDS = (
    "emergency", "severe", "unbearable", "chest pain", "breathing",
    "suicide", "blood", "accident", "unconscious", "heart attack",
    "stroke", "poisoning", "overdose", "collapse", "seizure",
    "not breathing", "dying", "critical", "urgent", "immediately",
)

# Attention within 24-48 hours.
MEDIUM_URGENCY_KEYWORDS = (
    "fever", "pain", "infection", "swelling", "persistent",
    "recurring", "anxiety", "depression", "stress", "chronic",
    "medication", "worsening", "concerning", "trouble sleeping",
    "loss of appetite", "weakness", "dizzy", "nausea",
)

ELDERLY_AGE = 65
ELDERLY_MIN_DESCRIPTION_LENGTH = 30
SUMMARY_PREVIEW_LENGTH = 100

SUMMARY_TEMPLATES = {
    IssueCategory.MEDICAL: "Patient (age {age}) reports a medical concern: {preview}",
    IssueCategory.MENTAL_HEALTH: "Patient (age {age}) is seeking mental health support regarding: {preview}",
    IssueCategory.EMERGENCY: "URGENT: Patient (age {age}) requires immediate attention for: {preview}",
    IssueCategory.OTHER: "Patient (age {age}) has submitted a support request: {preview}",
}

ACKNOWLEDGEMENT_MESSAGES = {
    Urgency.HIGH: (
        "A volunteer will contact you as soon as possible due to high urgency. "
        "Please ensure your contact information is accessible."
    ),
    Urgency.MEDIUM: (
        "Your request is under review. You can expect a response within 24-48 hours. "
        "We appreciate your patience."
    ),
    Urgency.LOW: (
        "Your request has been queued and will be reviewed shortly. "
        "Our team will reach out within 3-5 business days."
    ),
}


def _as_category(category: Union[IssueCategory, str, None]) -> Optional[IssueCategory]:
    try:
        return IssueCategory(category)
    except ValueError:
        return None


class ClassifyService:
    """Rule-based urgency classification and summaries for support requests."""

    @staticmethod
    def calculate_urgency(description: str, category: Union[IssueCategory, str], age: int) -> Urgency:
        """
        Classify a description into an urgency tier.

        A high-urgency keyword or the Emergency category wins outright, so an
        elderly patient with "chest pain" is High, not Medium. With no keyword
        match, a non-elderly patient outside Mental Health is always Low.
        """
        text = description.lower()
        category = _as_category(category)

        if category == IssueCategory.EMERGENCY or any(k in text for k in HIGH_URGENCY_KEYWORDS):
            return Urgency.HIGH

        if (
            any(k in text for k in MEDIUM_URGENCY_KEYWORDS)
            or category == IssueCategory.MENTAL_HEALTH
            or (age >= ELDERLY_AGE and len(text) > ELDERLY_MIN_DESCRIPTION_LENGTH)
        ):
            return Urgency.MEDIUM

        return Urgency.LOW

    @staticmethod
    def generate_summary(category: Union[IssueCategory, str], description: str, age: int) -> str:
        if len(description) > SUMMARY_PREVIEW_LENGTH:
            preview = description[:SUMMARY_PREVIEW_LENGTH].strip() + "..."
        else:
            preview = description

        template = SUMMARY_TEMPLATES.get(_as_category(category), SUMMARY_TEMPLATES[IssueCategory.OTHER])
        return template.format(age=age, preview=preview)

    @staticmethod
    def validate_urgency(urgency) -> Urgency:
        """Coerce an untrusted urgency label; anything unrecognised becomes Medium."""
        try:
            return Urgency(urgency)
        except ValueError:
            return Urgency.MEDIUM

    @staticmethod
    def acknowledgement(urgency) -> str:
        return ACKNOWLEDGEMENT_MESSAGES.get(
            ClassifyService.validate_urgency(urgency), ACKNOWLEDGEMENT_MESSAGES[Urgency.MEDIUM]
        )

    def classify(self, request: SupportRequest) -> ClassificationResult:
        """Fallback path: classify and summarise without any external call."""
        return ClassificationResult(
            summary=self.generate_summary(request.issue_category, request.description, request.age),
            urgency=self.calculate_urgency(request.description, request.issue_category, request.age),
        )
