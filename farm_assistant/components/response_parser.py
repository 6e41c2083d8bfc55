# farm_assistant/components/response_parser.py
"""
Parses the free-text answer of the vision model into the upstream result dict
consumed by IdentificationNormalizer.

The prompt asks for labelled sections (Name, Type, Confidence, Description,
Causes, Control Methods, Plants Affected). Models follow it loosely, so every
section is optional and missing control groups are filled from the
per-family defaults in control_defaults.
"""
import re
from typing import Any, Dict, List, Optional

from farm_assistant.common.logger import get_logger
from farm_assistant.common.templates import HEALTHY_MARKER
from farm_assistant.components.control_defaults import (
    default_chemical,
    default_cultural,
    default_organic,
)

logger = get_logger(__name__)

_FLAGS = re.IGNORECASE

NAME_RE = re.compile(r"Name:\s*([^\n]+)", _FLAGS)
TYPE_RE = re.compile(r"Type:\s*(pest|disease)", _FLAGS)
CONFIDENCE_RE = re.compile(r"Confidence:\s*(\d+)", _FLAGS)
DESCRIPTION_RE = re.compile(r"Description:\s*([^\n]+)", _FLAGS)

CAUSES_RE = re.compile(r"Causes:.*?(?=Control Methods:|Plants Affected:|\Z)", _FLAGS | re.DOTALL)
CONTROLS_RE = re.compile(r"Control Methods:.*?(?=Plants Affected:|\Z)", _FLAGS | re.DOTALL)
CHEMICAL_RE = re.compile(r"Chemical Control:.*?(?=Organic Control:|Cultural Control:|\Z)", _FLAGS | re.DOTALL)
ORGANIC_RE = re.compile(r"Organic Control:.*?(?=Chemical Control:|Cultural Control:|\Z)", _FLAGS | re.DOTALL)
CULTURAL_RE = re.compile(r"Cultural Control:.*?(?=Chemical Control:|Organic Control:|\Z)", _FLAGS | re.DOTALL)
PLANTS_RE = re.compile(r"Plants Affected:.*\Z", _FLAGS | re.DOTALL)

# product blocks start on a bullet or numbered line beginning with a capital
BLOCK_SPLIT_RE = re.compile(r"\n\s*-\s*(?=[A-Z])|\n\s*\d+\.\s*(?=[A-Z])")
LIST_SPLIT_RE = re.compile(r"\n\s*[-•]|\n\s*\d+\.")
PLANTS_SPLIT_RE = re.compile(r"\n\s*[-•]|\n\s*\d+\.|\s*,\s*")

ACTIVE_RE = re.compile(r"Active Ingredient:\s*([^\n]+)", _FLAGS)
RATE_RE = re.compile(r"Application Rate:\s*([^\n]+)", _FLAGS)
METHOD_RE = re.compile(r"Method:\s*([^\n]+(?:\n(?!\s*[\w ]+:)[^\n]+)*)", _FLAGS)
SAFE_DAYS_RE = re.compile(r"Safe Days:\s*(\d+)", _FLAGS)
SAFETY_RE = re.compile(r"Safety:\s*([^\n]+(?:\n(?!\s*[\w ]+:)[^\n]+)*)", _FLAGS)
BRANDS_RE = re.compile(r"(?:Brands|Brand names):\s*([^\n]+)", _FLAGS)

FIELD_LINE_RE = re.compile(
    r"^(?:Active Ingredient|Application Rate|Method|Safe Days|Safety|Brands|Brand names)\s*:", _FLAGS
)

_LEADING_MARKER_RE = re.compile(r"^(?:[-•*]\s*|\d+\.\s*|[a-z]\.\s+)+")
_SECTION_LABEL_RE = re.compile(r"^[\w ]+:\s*$")


def _clean_items(parts: List[str]) -> List[str]:
    items = []
    for part in parts:
        item = _LEADING_MARKER_RE.sub("", part.strip()).strip()
        # trailing numbering of the next section ("6.") leaves empty or bare-digit items
        if not item or item.rstrip(".").isdigit():
            continue
        items.append(item)
    return items


def _section_items(section: Optional[str], label: str, splitter=LIST_SPLIT_RE) -> List[str]:
    if not section:
        return []
    body = re.sub(rf"^{label}:\s*", "", section, flags=_FLAGS)
    return _clean_items(splitter.split(body))


def _first(pattern: re.Pattern, text: str) -> Optional[str]:
    match = pattern.search(text)
    return match.group(1).strip() if match else None


def _points(text: str) -> List[str]:
    return [p.strip() for p in re.split(r"\.\s+", text) if p.strip()]


def _product_block(block: str, fallback_name: str) -> Dict[str, Any]:
    first_line = block.strip().split("\n", 1)[0]
    name = _LEADING_MARKER_RE.sub("", first_line).strip()
    # "Name: Mancozeb" style first lines
    name = re.sub(r"^(?:Name(?: of the [\w/ ]+)?):\s*", "", name, flags=_FLAGS) or fallback_name
    product: Dict[str, Any] = {"name": name}

    active = _first(ACTIVE_RE, block)
    if active:
        product["active_ingredient"] = active
    rate = _first(RATE_RE, block)
    if rate:
        product["application_rate"] = rate

    method = _first(METHOD_RE, block)
    if method:
        if "." in method:
            product["method_points"] = _points(method)
        else:
            product["method"] = method
    safe_days = _first(SAFE_DAYS_RE, block)
    if safe_days:
        product["safe_days"] = int(safe_days)
    safety = _first(SAFETY_RE, block)
    if safety:
        if "." in safety:
            product["safety_points"] = _points(safety)
        else:
            product["safety"] = safety
    brands = _first(BRANDS_RE, block)
    if brands:
        product["brands"] = [b.strip() for b in re.split(r",\s*", brands) if b.strip()]
    return product


def _product_blocks(section: Optional[str], fallback_name: str) -> List[Dict[str, Any]]:
    if not section:
        return []
    # drop the "b." / "c." lettering of the following sub-section
    section = re.sub(r"\n\s*[a-z]\.\s*\Z", "", section)
    blocks: List[str] = []
    for block in BLOCK_SPLIT_RE.split(section)[1:]:
        stripped = block.strip()
        if not stripped or _SECTION_LABEL_RE.match(stripped.split("\n", 1)[0]):
            continue
        # bulleted field lines belong to the product above them
        if FIELD_LINE_RE.match(stripped) and blocks:
            blocks[-1] += "\n" + stripped
            continue
        blocks.append(stripped)
    return [_product_block(block, fallback_name) for block in blocks]


def _ensure_brands(products: List[Dict[str, Any]]) -> None:
    for product in products:
        brands = product.get("brands") or []
        if not brands:
            product["brands"] = [f"{product['name']} Plus", f"{product['name']} Gold"]
        elif len(brands) == 1:
            product["brands"] = [brands[0], f"{brands[0]} Premium"]


def _search(pattern: re.Pattern, text: str) -> Optional[str]:
    match = pattern.search(text)
    return match.group(0) if match else None


def parse_identification_text(text: str) -> Dict[str, Any]:
    """Upstream result dict for one model answer. Never raises on odd text."""
    text = text or ""
    if HEALTHY_MARKER.lower() in text.lower():
        return {
            "name": "No Disease",
            "confidence": 95,
            "type": "plant",
            "description": text.strip(),
            "plants_affected": [],
        }

    name = _first(NAME_RE, text) or "Unknown specimen"
    type_match = TYPE_RE.search(text)
    kind = type_match.group(1).lower() if type_match else "disease"

    result: Dict[str, Any] = {"name": name, "type": kind}
    confidence = _first(CONFIDENCE_RE, text)
    if confidence is not None:
        result["confidence"] = int(confidence)
    else:
        logger.info(f"Model answer for '{name}' carries no confidence")
    result["description"] = _first(DESCRIPTION_RE, text) or "No description available"
    result["causes"] = _section_items(_search(CAUSES_RE, text), "Causes")

    controls = _search(CONTROLS_RE, text) or ""
    chemical = _product_blocks(_search(CHEMICAL_RE, controls), "Unknown chemical")
    organic = _product_blocks(_search(ORGANIC_RE, controls), "Unknown organic control")
    cultural = _section_items(_search(CULTURAL_RE, controls), "Cultural Control")

    if not chemical:
        chemical = [default_chemical(name, kind)]
    _ensure_brands(chemical)
    if not organic:
        organic = [default_organic(name, kind)]
    if not cultural:
        cultural = default_cultural(name, kind)

    result["control_measures"] = {"chemical": chemical, "organic": organic, "cultural": cultural}
    result["plants_affected"] = _section_items(_search(PLANTS_RE, text), "Plants Affected", PLANTS_SPLIT_RE)
    return result
