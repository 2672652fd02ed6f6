"""
Rule-based FAQ chatbot for patients using the support portal.

Replies come from a fixed intent table so the bot never offers a
diagnosis or treatment. Emergency wording always routes to emergency
contact numbers, and every reply carries the safety disclaimer.
"""

from dataclasses import dataclass
from typing import Any, FrozenSet, Optional, Tuple

from src.models import ChatReply


@dataclass(frozen=True)
class ChatIntent:
    id: str
    keywords: FrozenSet[str]
    response: str


EMERGENCY_INTENT_ID = "emergency"

EMERGENCY_KEYWORDS = frozenset({
    "emergency", "dying", "suicide", "suicidal", "kill myself",
    "heart attack", "stroke", "overdose", "bleeding heavily",
    "can't breathe", "cannot breathe", "unconscious", "seizure",
    "chest pain", "severe pain", "accident", "poisoning",
})

# Registration order matters: on equal keyword counts the earlier intent wins.
FAQ_INTENTS: Tuple[ChatIntent, ...] = (
    ChatIntent(
        id="greeting",
        keywords=frozenset({"hello", "hi", "hey", "good morning", "good evening", "namaste"}),
        response=(
            "Hello! Welcome to Jarurat Care. I'm here to help answer your questions about "
            "our healthcare support services. How can I assist you today?"
        ),
    ),
    ChatIntent(
        id="services",
        keywords=frozenset({
            "what support", "what services", "what do you provide",
            "what help", "what can you do", "how can you help",
        }),
        response=(
            "Jarurat Care provides healthcare support services including:\n\n"
            "• Medical support coordination - connecting you with healthcare resources\n"
            "• Mental health support referrals\n"
            "• Emergency assistance guidance\n"
            "• Follow-up care coordination\n\n"
            "We help connect patients with appropriate healthcare providers and support their "
            "care journey. Please note: We are a support service, not a medical provider."
        ),
    ),
    ChatIntent(
        id="response_time",
        keywords=frozenset({
            "how long", "when will", "response time", "wait time", "how fast", "when can i expect",
        }),
        response=(
            "Our response times depend on the urgency of your request:\n\n"
            "• High Priority: As soon as possible (typically within hours)\n"
            "• Medium Priority: Within 24-48 hours\n"
            "• Low Priority: Within 3-5 business days\n\n"
            "A volunteer will review your request and reach out based on the priority level "
            "assigned by our system."
        ),
    ),
    ChatIntent(
        id="medical_service",
        keywords=frozenset({
            "medical service", "doctor", "diagnose", "diagnosis", "prescribe",
            "medicine", "treatment", "medical advice",
        }),
        response=(
            "Important: Jarurat Care is a support coordination service, NOT a medical provider.\n\n"
            "We cannot:\n"
            "• Diagnose medical conditions\n"
            "• Prescribe medications\n"
            "• Provide medical treatment\n\n"
            "We CAN help connect you with qualified healthcare professionals in your area. "
            "For medical concerns, please consult a licensed healthcare provider."
        ),
    ),
    ChatIntent(
        id=EMERGENCY_INTENT_ID,
        keywords=EMERGENCY_KEYWORDS,
        response=(
            "⚠️ IMPORTANT: If you are experiencing a medical emergency, please contact "
            "emergency services IMMEDIATELY.\n\n"
            "• India Emergency: 112\n"
            "• Ambulance: 102\n"
            "• Health Helpline: 104\n\n"
            "This chatbot cannot provide emergency medical assistance. Please do not wait - "
            "call emergency services right away.\n\n"
            "If this is not an emergency, a volunteer will review your support request and "
            "reach out to you."
        ),
    ),
    ChatIntent(
        id="data_safety",
        keywords=frozenset({
            "data safe", "privacy", "confidential", "secure", "who sees", "share my information",
        }),
        response=(
            "Your privacy is important to us. Here's how we handle your data:\n\n"
            "• Information is only used to process your support request\n"
            "• Trained volunteers handle your case under strict confidentiality\n"
            "• We do not share personal health information with third parties without consent\n"
            "• Data is stored securely and accessed only by authorized personnel\n\n"
            "For detailed privacy information, please contact our support team."
        ),
    ),
    ChatIntent(
        id="volunteer",
        keywords=frozenset({"volunteer", "who helps", "who responds", "staff", "team"}),
        response=(
            "Our support is provided by trained volunteers who:\n\n"
            "• Understand healthcare coordination\n"
            "• Follow strict confidentiality guidelines\n"
            "• Are supervised by experienced coordinators\n"
            "• Care about helping underserved communities\n\n"
            "They will review your request and help connect you with appropriate resources."
        ),
    ),
    ChatIntent(
        id="how_to_submit",
        keywords=frozenset({
            "submit", "request", "form", "how to apply", "how to get help", "fill out",
        }),
        response=(
            "To submit a support request:\n\n"
            "1. Fill out the Patient Support Form on our portal\n"
            "2. Provide your name, age, and issue category\n"
            "3. Describe your healthcare concern in detail\n"
            "4. Click \"Submit Request\"\n\n"
            "Our AI system will analyze your request, assign a priority level, and a volunteer "
            "will follow up based on urgency."
        ),
    ),
    ChatIntent(
        id="cost",
        keywords=frozenset({"cost", "fee", "charge", "price", "payment", "free", "money"}),
        response=(
            "Jarurat Care is an NGO providing FREE healthcare support coordination services.\n\n"
            "We do not charge for:\n"
            "• Reviewing your support request\n"
            "• Connecting you with resources\n"
            "• Follow-up coordination\n\n"
            "Note: Actual medical services from healthcare providers may have their own costs. "
            "We help connect you but cannot cover medical expenses."
        ),
    ),
    ChatIntent(
        id="mental_health",
        keywords=frozenset({
            "mental health", "anxiety", "depression", "stress", "counseling",
            "therapy", "sad", "worried",
        }),
        response=(
            "Mental health is just as important as physical health. Jarurat Care can help "
            "connect you with:\n\n"
            "• Mental health support resources\n"
            "• Counseling service referrals\n"
            "• Crisis helpline information\n\n"
            "If you're struggling, you're not alone. Please submit a support request under "
            "\"Mental Health\" category, and a volunteer will reach out.\n\n"
            "For immediate crisis support:\n"
            "• iCall: 9152987821\n"
            "• Vandrevala Foundation: 1860-2662-345"
        ),
    ),
    ChatIntent(
        id="thanks",
        keywords=frozenset({"thank", "thanks", "thank you", "appreciate"}),
        response=(
            "You're welcome! We're here to help. If you have any more questions or need "
            "support, feel free to ask or submit a support request through our form. Take care! 💚"
        ),
    ),
    ChatIntent(
        id="bye",
        keywords=frozenset({"bye", "goodbye", "see you", "take care"}),
        response=(
            "Take care! Remember, we're here whenever you need support. Don't hesitate to "
            "reach out. Wishing you good health! 💚"
        ),
    ),
)

INTENTS_BY_ID = {intent.id: intent for intent in FAQ_INTENTS}

DEFAULT_RESPONSE = (
    "I understand you have a question. While I may not have a specific answer for that, "
    "here's what I can help with:\n\n"
    "• Information about our support services\n"
    "• How to submit a request\n"
    "• Response time expectations\n"
    "• Data privacy questions\n"
    "• Mental health resources\n\n"
    "For specific healthcare concerns, please submit a support request through our form, "
    "and a volunteer will review your case personally.\n\n"
    "Is there something else I can help you with?"
)

NO_MESSAGE_RESPONSE = "I didn't receive a message. How can I help you today?"
EMPTY_MESSAGE_RESPONSE = "Please type a message so I can assist you."

SAFETY_DISCLAIMER = (
    "\n\n---\n_Disclaimer: This chatbot provides general guidance only. It does not provide "
    "medical advice, diagnosis, or treatment. For medical concerns, please consult a "
    "healthcare professional._"
)


def contains_emergency_keywords(message: str) -> bool:
    text = message.lower()
    return any(keyword in text for keyword in EMERGENCY_KEYWORDS)


def find_matching_intent(message: str) -> Optional[ChatIntent]:
    """
    Return the intent with the most keyword hits in `message`, or None.

    Emergency wording short-circuits scoring entirely.
    """
    if contains_emergency_keywords(message):
        return INTENTS_BY_ID[EMERGENCY_INTENT_ID]

    text = message.lower()
    best_match: Optional[ChatIntent] = None
    best_score = 0

    for intent in FAQ_INTENTS:
        if intent.id == EMERGENCY_INTENT_ID:
            continue
        score = sum(1 for keyword in intent.keywords if keyword in text)
        if score > best_score:
            best_score = score
            best_match = intent

    return best_match


class ChatbotService:
    def process_message(self, message: Any) -> ChatReply:
        if not message or not isinstance(message, str):
            return ChatReply(reply=NO_MESSAGE_RESPONSE + SAFETY_DISCLAIMER)

        trimmed = message.strip()
        if not trimmed:
            return ChatReply(reply=EMPTY_MESSAGE_RESPONSE + SAFETY_DISCLAIMER)

        intent = find_matching_intent(trimmed)
        response = intent.response if intent else DEFAULT_RESPONSE
        return ChatReply(reply=response + SAFETY_DISCLAIMER)
