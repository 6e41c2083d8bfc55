import pytest

from farm_assistant.components.keyword_classifier import KeywordClassifier, is_in_domain
from farm_assistant.components.knowledge_base import find_agriculture_response

test_cases = [
    ("How do I treat aphids on my tomato plants?", True),
    ("What's the capital of France?", False),
    ("I planted beans last week", True),  # substring match: planted -> plant
    ("When should I HARVEST sorghum?", True),
    ("tell me a joke", False),
    ("", False),
    ("   \n\t", False),
]


@pytest.mark.parametrize("query, expected", test_cases)
def test_is_in_domain(query, expected):
    assert is_in_domain(query) is expected


def test_custom_keyword_list():
    classifier = KeywordClassifier(["Beekeeping"])
    assert classifier.is_in_domain("tips for beekeeping in winter")
    assert not classifier.is_in_domain("my soil is dry")
    assert classifier.matched_keywords("BEEKEEPING") == ["beekeeping"]


def test_knowledge_base_prefers_multi_word_keyword():
    answer = find_agriculture_response("How do I plant H6213 maize?")
    assert answer.startswith("To plant H6213 maize hybrid")


def test_knowledge_base_picks_entry_with_most_hits():
    answer = find_agriculture_response("drip irrigation and watering when soil moisture is low")
    assert answer.startswith("Water deeply but infrequently")


def test_knowledge_base_no_match():
    assert find_agriculture_response("What's the capital of France?") is None
    assert find_agriculture_response("") is None
