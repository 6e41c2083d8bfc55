import json
import random

import pytest

from farm_assistant.common.records import IdentificationRecord
from farm_assistant.components.identification_normalizer import IdentificationNormalizer
from farm_assistant.components.report_renderer import (
    GENERIC_RETRY_MESSAGE,
    confidence_color,
    render,
    render_markdown,
)


def _identified(**overrides):
    ident = {
        "name": "Fall Armyworm",
        "confidence": 92,
        "kind": "pest",
        "description": "A destructive caterpillar.",
        "causes": [],
        "controls": {"chemical": [], "organic": [], "cultural": []},
        "affected_plants": [],
    }
    ident.update(overrides)
    return json.dumps({"status": "identified", "message": "", "identification": ident})


@pytest.mark.parametrize("text", ["", "not json", "[]", "{}", '{"status": "maybe"}', None, 42,
                                  '{"status": "identified", "identification": {"name": "x", "confidence": 400}}',
                                  '{"status": "identified", "identification": {"name": "x", "confidence": Infinity}}',
                                  '{"status": "identified", "identification": {"name": "x", "confidence": NaN}}',
                                  '{"status": "identified", "identification": {"name": "x", "confidence": 80, '
                                  '"controls": {"chemical": [{"name": "y", "safe_days": NaN}]}}}'])
def test_render_never_throws_and_shows_error_card(text):
    tree = render(text)
    card = tree.children[0]
    assert card.attrs["variant"] == "error"
    assert any(p.text == GENERIC_RETRY_MESSAGE for p in card.find("paragraph"))
    assert GENERIC_RETRY_MESSAGE in render_markdown(text)


@pytest.mark.parametrize("text", [
    "[" * 100000 + "]" * 100000,
    '{"status": ' * 50000 + "1" + "}" * 50000,
], ids=["deep-array", "deep-object"])
def test_deeply_nested_json_shows_error_card(text):
    assert render(text).children[0].attrs["variant"] == "error"
    assert GENERIC_RETRY_MESSAGE in render_markdown(text)


def test_render_healthy_card():
    text = IdentificationRecord(status="healthy", message="All good").to_json()
    tree = render(text)
    assert tree.attrs["status"] == "healthy"
    assert [n.text for n in tree.find("heading")] == ["Healthy Plant"]
    assert "All good" in render_markdown(text)


def test_render_error_record_shows_its_message():
    text = IdentificationRecord(status="error", message="No plants detected").to_json()
    paragraphs = [p.text for p in render(text).find("paragraph")]
    assert paragraphs == ["No plants detected", GENERIC_RETRY_MESSAGE]


def test_empty_optional_lists_omit_sections():
    tree = render(_identified())
    variants = [card.attrs.get("variant") for card in tree.children]
    assert variants == ["identification"]
    assert tree.find("section") == []


def test_full_report_order_and_content():
    record = IdentificationNormalizer(rng=random.Random(1)).normalize({
        "name": "Late Blight",
        "confidence": 80,
        "type": "disease",
        "causes": ["Cool wet weather"],
        "plants_affected": ["Potato", "Tomato"],
        "control_measures": {
            "chemical": [{"name": "Ridomil Gold", "brands": ["Ridomil Gold", "Victory"], "safe_days": 7}],
            "organic": [{"name": "Copper Hydroxide"}],
            "cultural": ["Avoid overhead irrigation"],
        },
    })
    tree = render(record.to_json())
    assert [c.attrs["variant"] for c in tree.children] == ["identification", "causes", "controls", "plants"]

    confidence = tree.find("confidence")[0]
    assert confidence.attrs == {"value": 80, "color": "yellow"}
    assert [s.text for s in tree.find("section")] == ["Chemical Control", "Organic Control", "Cultural Practices"]

    chemical = tree.find("product")[0]
    fields = {f.attrs["label"]: f.text for f in chemical.find("field")}
    assert fields["Safe Days"] == "7 days before harvest"
    assert fields["Available Brands"] == "Ridomil Gold, Victory"
    assert chemical.find("callout")[0].attrs["label"] == "Safety"

    organic = tree.find("product")[1]
    assert "Available Brands" not in {f.attrs["label"] for f in organic.find("field")}
    assert [b.text for b in tree.children[-1].find("badge")] == ["Potato", "Tomato"]

    markdown = render_markdown(record.to_json())
    assert "#### Chemical Control" in markdown
    assert "*" not in markdown


def test_render_strips_markers_left_in_stored_records():
    tree = render(_identified(name="**Aphids**", causes=["*heat*"]))
    assert tree.find("heading")[0].text == "Aphids"
    assert tree.find("item")[0].text == "heat"


def test_only_cultural_controls_render_one_section():
    tree = render(_identified(controls={"chemical": [], "organic": [], "cultural": ["Rotate crops"]}))
    assert [s.text for s in tree.find("section")] == ["Cultural Practices"]


@pytest.mark.parametrize("confidence, color", [(95, "green"), (91, "green"), (90, "yellow"), (76, "yellow"), (75, "red"), (0, "red")])
def test_confidence_color_thresholds(confidence, color):
    assert confidence_color(confidence) == color
