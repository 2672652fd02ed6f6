"""
FAQ intent matching for the chatbot.
"""

import pytest
from fastapi.testclient import TestClient

from src.main import app
from src.services.chatbot_service import (
    DEFAULT_RESPONSE,
    EMERGENCY_KEYWORDS,
    EMPTY_MESSAGE_RESPONSE,
    FAQ_INTENTS,
    INTENTS_BY_ID,
    NO_MESSAGE_RESPONSE,
    SAFETY_DISCLAIMER,
    ChatbotService,
    find_matching_intent,
)

client = TestClient(app)


def test_intent_table_order_and_size():
    assert [i.id for i in FAQ_INTENTS] == [
        "greeting", "services", "response_time", "medical_service", "emergency",
        "data_safety", "volunteer", "how_to_submit", "cost", "mental_health",
        "thanks", "bye",
    ]


@pytest.mark.parametrize("keyword", sorted(EMERGENCY_KEYWORDS))
def test_emergency_keyword_always_wins(keyword):
    message = f"Hello, what services do you provide? Also {keyword}, thanks"
    assert find_matching_intent(message).id == "emergency"


def test_emergency_match_is_case_insensitive():
    assert find_matching_intent("I think this is a HEART ATTACK").id == "emergency"


def test_no_keyword_returns_none():
    assert find_matching_intent("Tell me about the weather") is None


def test_higher_count_wins():
    # greeting: "hi" (1); services: "what services", "what can you do" (2)
    intent = find_matching_intent("hi, what services do you provide and what can you do?")
    assert intent.id == "services"


def test_tie_goes_to_earlier_intent():
    # greeting: "hello" (1); services: "what services" (1)
    intent = find_matching_intent("hello, what services do you provide?")
    assert intent.id == "greeting"


def test_single_intent_match():
    assert find_matching_intent("How much does it cost?").id == "cost"
    assert find_matching_intent("Is my data private? What about privacy?").id == "data_safety"


def test_reply_appends_disclaimer():
    reply = ChatbotService().process_message("How much does it cost?").reply
    assert reply == INTENTS_BY_ID["cost"].response + SAFETY_DISCLAIMER


def test_default_reply():
    reply = ChatbotService().process_message("Tell me about the weather").reply
    assert reply == DEFAULT_RESPONSE + SAFETY_DISCLAIMER


@pytest.mark.parametrize("message", [None, "", 42, ["hello"]])
def test_missing_or_non_string_message(message):
    reply = ChatbotService().process_message(message).reply
    assert reply == NO_MESSAGE_RESPONSE + SAFETY_DISCLAIMER


def test_blank_message():
    reply = ChatbotService().process_message("   \n ").reply
    assert reply == EMPTY_MESSAGE_RESPONSE + SAFETY_DISCLAIMER


def test_chatbot_endpoint():
    response = client.post("/api/chatbot/message", json={"message": "I feel suicidal"})
    assert response.status_code == 200
    reply = response.json()["reply"]
    assert reply.startswith(INTENTS_BY_ID["emergency"].response)
    assert reply.endswith(SAFETY_DISCLAIMER)


def test_chatbot_endpoint_without_body():
    response = client.post("/api/chatbot/message")
    assert response.status_code == 200
    assert response.json()["reply"].startswith(NO_MESSAGE_RESPONSE)


def test_chatbot_endpoint_with_non_string_message():
    response = client.post("/api/chatbot/message", json={"message": 123})
    assert response.status_code == 200
    assert response.json()["reply"].startswith(NO_MESSAGE_RESPONSE)
