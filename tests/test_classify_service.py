"""
Rule-based urgency classification and summary templates.
"""

import pytest

from src.models import IssueCategory, SupportRequest, Urgency
from src.services.classify_service import (
    HIGH_URGENCY_KEYWORDS,
    ClassifyService,
)


@pytest.mark.parametrize("keyword", HIGH_URGENCY_KEYWORDS)
def test_high_urgency_keyword_wins_regardless_of_category_and_age(keyword):
    description = f"my father has {keyword} since morning"
    for category in IssueCategory:
        for age in (5, 30, 80):
            assert ClassifyService.calculate_urgency(description, category, age) == Urgency.HIGH


def test_emergency_category_is_high_without_keywords():
    assert ClassifyService.calculate_urgency("", IssueCategory.EMERGENCY, 25) == Urgency.HIGH
    assert ClassifyService.calculate_urgency("need help soon", "Emergency", 25) == Urgency.HIGH


def test_mental_health_category_is_at_least_medium():
    assert ClassifyService.calculate_urgency(
        "i would like to talk to someone", IssueCategory.MENTAL_HEALTH, 25
    ) == Urgency.MEDIUM


def test_medium_keyword():
    assert ClassifyService.calculate_urgency(
        "I have had a fever for three days", IssueCategory.MEDICAL, 30
    ) == Urgency.MEDIUM


def test_elderly_with_longer_description_is_medium():
    description = "i have been feeling a little off lately and tired"
    assert len(description) > 30
    assert ClassifyService.calculate_urgency(description, IssueCategory.OTHER, 65) == Urgency.MEDIUM


def test_elderly_with_short_description_is_low():
    assert ClassifyService.calculate_urgency("need a checkup", IssueCategory.MEDICAL, 70) == Urgency.LOW


def test_default_is_low():
    assert ClassifyService.calculate_urgency(
        "mild headache for two days", IssueCategory.MEDICAL, 30
    ) == Urgency.LOW


def test_keyword_short_circuits_before_age_check():
    assert ClassifyService.calculate_urgency(
        "severe chest pain and can't breathe", IssueCategory.MEDICAL, 72
    ) == Urgency.HIGH


def test_matching_is_case_insensitive():
    assert ClassifyService.calculate_urgency("SEVERE Headache", IssueCategory.MEDICAL, 30) == Urgency.HIGH


def test_summary_uses_category_template():
    summary = ClassifyService.generate_summary(IssueCategory.EMERGENCY, "Fell down the stairs", 40)
    assert summary == "URGENT: Patient (age 40) requires immediate attention for: Fell down the stairs"

    summary = ClassifyService.generate_summary("Mental Health", "Cannot focus at work", 29)
    assert summary == "Patient (age 29) is seeking mental health support regarding: Cannot focus at work"


def test_summary_truncates_long_description():
    description = "word " * 40
    summary = ClassifyService.generate_summary(IssueCategory.MEDICAL, description, 50)
    preview = summary.split(": ", 1)[1]
    assert preview.endswith("...")
    assert preview == description[:100].strip() + "..."


def test_summary_keeps_description_of_exactly_100_chars():
    description = "a" * 100
    summary = ClassifyService.generate_summary(IssueCategory.MEDICAL, description, 50)
    assert summary.endswith(description)


def test_summary_unknown_category_uses_other_template():
    summary = ClassifyService.generate_summary("Dental", "Tooth needs a look", 33)
    assert summary == "Patient (age 33) has submitted a support request: Tooth needs a look"


@pytest.mark.parametrize("raw,expected", [
    ("Low", Urgency.LOW),
    ("Medium", Urgency.MEDIUM),
    ("High", Urgency.HIGH),
    ("high", Urgency.MEDIUM),
    ("Critical", Urgency.MEDIUM),
    (None, Urgency.MEDIUM),
])
def test_validate_urgency(raw, expected):
    assert ClassifyService.validate_urgency(raw) == expected


def test_acknowledgement_per_urgency():
    assert "as soon as possible" in ClassifyService.acknowledgement(Urgency.HIGH)
    assert "24-48 hours" in ClassifyService.acknowledgement(Urgency.MEDIUM)
    assert "3-5 business days" in ClassifyService.acknowledgement(Urgency.LOW)
    assert ClassifyService.acknowledgement("unknown") == ClassifyService.acknowledgement(Urgency.MEDIUM)


def test_classify_request():
    request = SupportRequest(
        name="Asha",
        age=72,
        issueCategory="Medical",
        description="severe chest pain and can't breathe",
    )
    result = ClassifyService().classify(request)
    assert result.urgency == Urgency.HIGH
    assert result.summary.startswith("Patient (age 72) reports a medical concern:")
