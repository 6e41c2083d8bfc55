# farm_assistant/components/identification_normalizer.py
"""
IdentificationNormalizer

Turns an upstream identification result (the dict produced by the vision
model parser or the mock provider) into the canonical IdentificationRecord:

1. status: healthy / error / identified, decided from name and confidence
2. emphasis markers stripped from every string leaf (single pass)
3. dosage, method and safety text for each control product filled from fixed
   templates wherever the upstream entry leaves them out; the model is only
   trusted for which product to use
4. fixed fallback lists for causes, cultural practices and affected plants

Upstream shape (all keys optional except name):
    {name, confidence, type, description, causes: [str], plants_affected: [str],
     control_measures: {chemical: [{name, ...}], organic: [...], cultural: [str]}}

Totally malformed input (no dict at all) is the caller's problem; the session
controller substitutes an error record in that case.
"""
import math
import random
import re
from typing import Any, Dict, List, Optional

from farm_assistant.common.logger import get_logger
from farm_assistant.common.records import (
    KINDS,
    STATUS_ERROR,
    STATUS_HEALTHY,
    STATUS_IDENTIFIED,
    ControlMethods,
    ControlProduct,
    Identification,
    IdentificationRecord,
)
from farm_assistant.common.templates import HEALTHY_MESSAGE, NO_PLANT_MESSAGE
from farm_assistant.components.response_sanitizer import strip_emphasis

logger = get_logger(__name__)

ANALYSIS_FAILED = "Analysis Failed"
HEALTHY_NAME_MARKERS = ("no disease", "healthy")

# Fallback confidence range when the model gives none; not a measured value
FALLBACK_CONFIDENCE_RANGE = (70, 99)

FALLBACK_CAUSES = [
    "High temperatures and humidity",
    "Poor crop rotation",
    "Late planting",
]

FALLBACK_AFFECTED_PLANTS = ["Maize", "Sorghum", "Sugarcane", "Millet"]

FALLBACK_CULTURAL_PRACTICES = [
    "Practice crop rotation with non-cereal crops",
    "Plant early to avoid peak pest populations",
    "Remove and destroy infested plant debris after harvest",
    "Encourage natural enemies by planting flowering plants nearby",
    "Destroy crop residues after harvest to reduce pest carryover",
]

CHEMICAL_TEMPLATE = {
    "application_rate": "1 ml/L water",
    "method": (
        "Apply as a foliar spray targeting affected areas. "
        "Ensure thorough coverage of plant surfaces. "
        "Repeat application after 7-10 days if needed. "
        "Apply during early morning or late evening."
    ),
    "safe_days": 14,
    "safety": (
        "Wear protective gloves and eyewear. "
        "Avoid skin and eye contact. "
        "Keep children and pets away from treated areas. "
        "Do not apply near water sources."
    ),
}

ORGANIC_TEMPLATE = {
    "active_ingredient": "Azadirachtin",
    "application_rate": "5 ml/L water",
    "method": (
        "Apply as a foliar spray covering all plant surfaces. "
        "Focus on undersides of leaves where pests hide. "
        "Repeat application every 5-7 days. "
        "Best applied in early morning or evening."
    ),
    "safe_days": 0,
    "safety": (
        "Wear gloves during preparation and application. "
        "Avoid eye contact. "
        "Do not spray during hot, sunny conditions. "
        "Safe for beneficial insects when dry."
    ),
}

_DIGITS_RE = re.compile(r"-?\d+(?:\.\d+)?")


def parse_confidence(value: Any) -> Optional[int]:
    """Integer confidence clamped to 0..100, or None when the value carries no number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    else:
        match = _DIGITS_RE.search(str(value))
        if not match:
            return None
        number = float(match.group())
    if not math.isfinite(number):
        return None
    # some models answer 0.87 instead of 87
    if 0 < number < 1:
        number *= 100
    return max(0, min(100, int(round(number))))


def _clean_list(values: Any) -> List[str]:
    if not values:
        return []
    if isinstance(values, str):
        values = [values]
    elif not isinstance(values, (list, tuple)):
        return []
    items = []
    for v in values:
        text = str(v).strip()
        if text:
            items.append(text)
    return items


def _text(entry: Dict[str, Any], key: str, points_key: str) -> str:
    """Single-string field, or the joined point list some parsers emit instead."""
    value = entry.get(key)
    if isinstance(value, str) and value.strip():
        return value.strip()
    points = _clean_list(entry.get(points_key))
    if points:
        return ". ".join(p.rstrip(".") for p in points) + "."
    return ""


_CAMEL_RE = re.compile(r"(?<=[a-z0-9])([A-Z])")


def _snake_keys(value: Any) -> Any:
    """plantsAffected -> plants_affected, recursively; a snake_case key wins over its camelCase twin"""
    if isinstance(value, dict):
        converted = {}
        for key, item in value.items():
            snake = _CAMEL_RE.sub(r"_\1", key).lower() if isinstance(key, str) else key
            if snake not in converted or snake == key:
                converted[snake] = _snake_keys(item)
        return converted
    if isinstance(value, list):
        return [_snake_keys(item) for item in value]
    return value


def _safe_days(value: Any, default: int) -> int:
    if isinstance(value, bool) or value is None:
        return default
    try:
        days = int(value)
    except (TypeError, ValueError, OverflowError):
        return default
    return days if days >= 0 else default


class IdentificationNormalizer:
    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    # -------------------------
    # Status
    # -------------------------
    @staticmethod
    def classify_status(name: str, confidence: Optional[int]) -> str:
        lowered = (name or "").lower()
        if any(marker in lowered for marker in HEALTHY_NAME_MARKERS):
            return STATUS_HEALTHY
        if (name or "").strip() == ANALYSIS_FAILED or confidence == 0:
            return STATUS_ERROR
        return STATUS_IDENTIFIED

    # -------------------------
    # Control products
    # -------------------------
    def _chemical(self, entry: Dict[str, Any]) -> ControlProduct:
        name = str(entry.get("name") or "Unknown chemical").strip()
        first_word = name.split()[0] if name.split() else name
        return ControlProduct(
            name=name,
            active_ingredient=str(entry.get("active_ingredient") or f"{first_word} 25 g/L EC").strip(),
            application_rate=str(entry.get("application_rate") or CHEMICAL_TEMPLATE["application_rate"]).strip(),
            method=_text(entry, "method", "method_points") or CHEMICAL_TEMPLATE["method"],
            safe_days=_safe_days(entry.get("safe_days"), CHEMICAL_TEMPLATE["safe_days"]),
            safety=_text(entry, "safety", "safety_points") or CHEMICAL_TEMPLATE["safety"],
            brands=_clean_list(entry.get("brands")),
        )

    def _organic(self, entry: Dict[str, Any]) -> ControlProduct:
        return ControlProduct(
            name=str(entry.get("name") or "Unknown organic control").strip(),
            active_ingredient=str(entry.get("active_ingredient") or ORGANIC_TEMPLATE["active_ingredient"]).strip(),
            application_rate=str(entry.get("application_rate") or ORGANIC_TEMPLATE["application_rate"]).strip(),
            method=_text(entry, "method", "method_points") or ORGANIC_TEMPLATE["method"],
            safe_days=_safe_days(entry.get("safe_days"), ORGANIC_TEMPLATE["safe_days"]),
            safety=_text(entry, "safety", "safety_points") or ORGANIC_TEMPLATE["safety"],
            brands=_clean_list(entry.get("brands")),
        )

    def _controls(self, measures: Any) -> ControlMethods:
        if not isinstance(measures, dict):
            measures = {}
        chemical = [self._chemical(e) for e in measures.get("chemical") or [] if isinstance(e, dict)]
        organic = [self._organic(e) for e in measures.get("organic") or [] if isinstance(e, dict)]
        cultural = _clean_list(measures.get("cultural")) or list(FALLBACK_CULTURAL_PRACTICES)
        return ControlMethods(chemical=chemical, organic=organic, cultural=cultural)

    # -------------------------
    # Entry point
    # -------------------------
    def normalize(self, raw: Dict[str, Any]) -> IdentificationRecord:
        name = strip_emphasis(str(raw.get("name") or "")).strip()
        confidence = parse_confidence(raw.get("confidence"))
        status = self.classify_status(name, confidence)

        if status == STATUS_HEALTHY:
            return IdentificationRecord(status=STATUS_HEALTHY, message=HEALTHY_MESSAGE)
        if status == STATUS_ERROR:
            return IdentificationRecord(status=STATUS_ERROR, message=NO_PLANT_MESSAGE)

        clean = _snake_keys(strip_emphasis(raw))
        name = str(clean.get("name") or "").strip() or "Unknown specimen"
        if confidence is None:
            confidence = self._rng.randint(*FALLBACK_CONFIDENCE_RANGE)
            logger.info(f"No confidence from upstream for '{name}', using fallback {confidence}")

        kind = str(clean.get("type") or "").strip().lower()
        if kind not in KINDS:
            kind = "disease"

        causes = _clean_list(clean.get("causes")) or list(FALLBACK_CAUSES)
        plants = _clean_list(clean.get("plants_affected")) or list(FALLBACK_AFFECTED_PLANTS)
        description = str(clean.get("description") or "").strip() or "No description available"

        identification = Identification(
            name=name,
            confidence=confidence,
            kind=kind,
            description=description,
            causes=causes,
            controls=self._controls(clean.get("control_measures")),
            affected_plants=plants,
        )
        summary = (
            f"{name} identified with {confidence}% confidence. This {kind} affects "
            f"{', '.join(plants)} crops and requires prompt treatment."
        )
        return IdentificationRecord(status=STATUS_IDENTIFIED, message=summary, identification=identification)


def normalize(raw: Dict[str, Any], rng: Optional[random.Random] = None) -> IdentificationRecord:
    return IdentificationNormalizer(rng=rng).normalize(raw)
