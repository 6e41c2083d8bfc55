# farm_assistant/components/control_defaults.py
"""
Default control recommendations per pest/disease family, used by the
identification parser when the model names a pest or disease but lists no
products or practices for one of the control groups.

Families are matched by substring on the lower-cased identification name,
first match wins; the last entry of each table is the generic fallback.
"""
from typing import Any, Dict, List, Optional, Tuple

Family = Tuple[Tuple[str, ...], Any]


def _product(name, active, rate, method, safe_days, safety, brands=None) -> Dict[str, Any]:
    product = {
        "name": name,
        "active_ingredient": active,
        "application_rate": rate,
        "method_points": list(method),
        "safe_days": safe_days,
        "safety_points": list(safety),
    }
    if brands:
        product["brands"] = list(brands)
    return product


PEST_CHEMICALS: List[Family] = [
    (("aphid",), _product(
        "Imidacloprid", "Imidacloprid 17.8% SL", "0.5 ml/L water",
        ["Apply as a foliar spray targeting the undersides of leaves",
         "Can also be applied as a soil drench for systemic protection",
         "Repeat after 14 days if infestation persists"],
        21,
        ["Highly toxic to bees - do not apply during flowering",
         "Wear protective equipment during application",
         "Keep away from water sources"],
        ["Confidor", "Admire"])),
    (("mite", "spider"), _product(
        "Abamectin", "Abamectin 1.8% EC", "0.5 ml/L water",
        ["Apply as a foliar spray ensuring complete coverage",
         "Target the undersides of leaves where mites congregate",
         "Repeat after 7 days if infestation persists"],
        7,
        ["Toxic to fish and aquatic organisms",
         "Wear protective equipment during application",
         "Avoid application during hot periods of the day"],
        ["Dynamec", "Agrimec"])),
    (("thrip",), _product(
        "Spinosad", "Spinosad 45% SC", "0.3 ml/L water",
        ["Apply as a foliar spray ensuring thorough coverage",
         "Target growing points and flowers where thrips hide",
         "Repeat after 7-10 days if infestation persists"],
        3,
        ["Low toxicity to mammals but toxic to bees when wet",
         "Avoid application during flowering or apply in evening",
         "Wear protective equipment during application"],
        ["Success", "Tracer"])),
    (("caterpillar", "worm", "moth"), _product(
        "Bacillus thuringiensis (Bt)", "Bacillus thuringiensis kurstaki 32,000 IU/mg WP", "1-2 g/L water",
        ["Apply as a foliar spray targeting young larvae",
         "Best applied in the evening as UV light degrades the bacteria",
         "Repeat every 5-7 days during heavy infestation"],
        0,
        ["Safe for humans, beneficial insects, and the environment",
         "Can be used up to day of harvest",
         "Store in a cool, dry place to maintain efficacy"],
        ["Dipel", "Thuricide"])),
    (("beetle", "weevil"), _product(
        "Lambda-cyhalothrin", "Lambda-cyhalothrin 5% EC", "1 ml/L water",
        ["Apply as a foliar spray ensuring thorough coverage",
         "Target adults during their active feeding periods",
         "Repeat after 10-14 days if infestation persists"],
        14,
        ["Toxic to bees and aquatic organisms",
         "Wear protective equipment during application",
         "Keep children and pets away from treated areas until dry"],
        ["Karate", "Ninja"])),
    ((), _product(
        "Deltamethrin", "Deltamethrin 25 g/L EC", "1 ml/L water",
        ["Apply as a foliar spray",
         "Ensure thorough coverage of the plant",
         "Repeat after 7-10 days if infestation persists"],
        14,
        ["Wear protective equipment during application",
         "Keep away from water sources",
         "Avoid contact with skin and eyes"],
        ["Duduthrin", "Tata Alpha"])),
]

DISEASE_CHEMICALS: List[Family] = [
    (("mildew",), _product(
        "Tebuconazole", "Tebuconazole 25% WP", "1 g/L water",
        ["Apply as a preventive spray at first signs of disease",
         "Ensure thorough coverage of upper and lower leaf surfaces",
         "Repeat every 10-14 days during favorable conditions"],
        7,
        ["Wear protective equipment during application",
         "Avoid application during windy conditions",
         "Keep away from water bodies"],
        ["Folicur", "Orius"])),
    (("rust",), _product(
        "Propiconazole", "Propiconazole 25% EC", "1 ml/L water",
        ["Apply at first signs of disease",
         "Ensure thorough coverage of all plant surfaces",
         "Repeat every 14-21 days if conditions favor disease"],
        14,
        ["Wear protective equipment during application",
         "Avoid contact with skin and eyes",
         "Keep away from water sources"],
        ["Tilt", "Bumper"])),
    (("blight",), _product(
        "Metalaxyl + Mancozeb", "Metalaxyl 8% + Mancozeb 64% WP", "2.5 g/L water",
        ["Apply as a preventive spray before disease onset",
         "Ensure thorough coverage of all plant surfaces",
         "Repeat every 7-10 days during rainy periods"],
        14,
        ["Wear protective equipment during application",
         "Avoid contact with skin and eyes",
         "Keep away from water sources"],
        ["Ridomil Gold", "Victory"])),
    (("anthracnose",), _product(
        "Chlorothalonil", "Chlorothalonil 75% WP", "2 g/L water",
        ["Apply as a preventive spray",
         "Ensure thorough coverage of all plant surfaces",
         "Repeat every 7-14 days during wet conditions"],
        7,
        ["Wear protective equipment during application",
         "Avoid contact with skin and eyes",
         "Keep away from water sources"],
        ["Bravo", "Daconil"])),
    (("wilt", "rot"), _product(
        "Copper Oxychloride", "Copper Oxychloride 50% WP", "3 g/L water",
        ["Apply as a soil drench around the base of plants",
         "Can also be applied as a foliar spray",
         "Repeat every 7-14 days during disease-favorable conditions"],
        7,
        ["Wear protective equipment during application",
         "May cause phytotoxicity in some crops in hot weather",
         "Keep away from water sources"],
        ["Cobox", "Cuprocaffaro"])),
    ((), _product(
        "Mancozeb", "Mancozeb 80% WP", "2-3 g/L water",
        ["Apply as a preventive spray",
         "Ensure thorough coverage of the plant",
         "Repeat every 7-14 days"],
        7,
        ["Wear protective equipment during application",
         "Keep away from water sources",
         "Avoid contact with skin and eyes"],
        ["Oshothane", "Dithane M-45"])),
]

PEST_ORGANICS: List[Family] = [
    (("aphid", "mite", "thrip"), _product(
        "Neem Oil", "Azadirachtin", "5 ml/L water",
        ["Apply as a foliar spray ensuring complete coverage",
         "Target the undersides of leaves where pests hide",
         "Repeat every 5-7 days until infestation subsides"],
        0,
        ["Safe for most beneficial insects when dry",
         "Apply in evening to prevent leaf burn and protect pollinators",
         "Avoid spraying during flowering if possible"])),
    (("caterpillar", "worm"), _product(
        "Bacillus thuringiensis (Bt)", "Bacillus thuringiensis kurstaki", "1-2 g/L water",
        ["Apply as a foliar spray targeting young larvae",
         "Best applied in the evening as UV light degrades the bacteria",
         "Repeat every 5-7 days during heavy infestation"],
        0,
        ["Safe for humans, beneficial insects, and the environment",
         "Can be used up to day of harvest",
         "Store in a cool, dry place to maintain efficacy"])),
    (("beetle", "weevil"), _product(
        "Diatomaceous Earth", "Silicon dioxide from fossilized diatoms", "Apply as a dust to soil surface or plants",
        ["Apply as a dust around plants or on foliage",
         "Reapply after rain or heavy dew",
         "Creates a physical barrier that damages insect exoskeletons"],
        0,
        ["Wear a dust mask during application",
         "Food grade diatomaceous earth is safe around edible plants",
         "May harm beneficial insects with exoskeletons if directly applied"])),
    ((), _product(
        "Neem Oil", "Azadirachtin", "5 ml/L water",
        ["Apply as a foliar spray", "Ensure thorough coverage", "Repeat every 5-7 days"],
        0,
        ["Wear gloves during application", "Avoid spraying during hot, sunny conditions"])),
]

DISEASE_ORGANICS: List[Family] = [
    (("mildew", "rust", "blight"), _product(
        "Copper Soap", "Copper octanoate", "5-8 ml/L water",
        ["Apply as a preventive spray before disease appears",
         "Ensure thorough coverage of all plant surfaces",
         "Repeat every 7-10 days during disease-favorable conditions"],
        0,
        ["Less toxic than other copper formulations",
         "May cause phytotoxicity in some plants in hot weather",
         "Can be used up to day of harvest"])),
    (("rot", "wilt"), _product(
        "Trichoderma", "Trichoderma harzianum", "5-10 g/L water",
        ["Apply as a soil drench around the base of plants",
         "Can be incorporated into potting soil or compost",
         "Apply monthly as a preventive measure"],
        0,
        ["Safe for humans, animals, and beneficial organisms",
         "Can be used up to day of harvest",
         "Store in a cool, dry place to maintain viability"])),
    ((), _product(
        "Baking Soda Spray", "Sodium bicarbonate", "5-10 g/L water + 2 ml liquid soap as surfactant",
        ["Apply as a preventive spray",
         "Ensure thorough coverage of all plant surfaces",
         "Repeat every 7-14 days during disease-favorable conditions"],
        0,
        ["Safe for humans and the environment",
         "May cause leaf burn if concentration is too high",
         "Avoid applying in hot, sunny conditions"])),
]

PEST_CULTURAL: List[Family] = [
    (("aphid", "mite", "thrip"), [
        "Introduce beneficial insects like ladybugs, lacewings, or predatory mites",
        "Use reflective mulches to repel flying insects",
        "Maintain proper plant nutrition as stressed plants are more susceptible",
        "Use water sprays to dislodge pests from plants",
        "Remove heavily infested plant parts",
    ]),
    (("caterpillar", "worm", "moth"), [
        "Handpick and destroy caterpillars and egg masses",
        "Use pheromone traps to monitor and reduce adult moth populations",
        "Cover plants with floating row covers during peak egg-laying periods",
        "Encourage natural predators like birds, wasps, and predatory beetles",
        "Practice crop rotation to disrupt pest life cycles",
    ]),
    (("beetle", "weevil"), [
        "Use trap crops to lure pests away from main crops",
        "Implement crop rotation with non-host plants",
        "Till soil after harvest to expose pupae to predators and weather",
        "Use sticky traps to monitor and reduce adult populations",
        "Remove plant debris where pests may overwinter",
    ]),
    ((), [
        "Practice crop rotation",
        "Maintain proper plant spacing for good air circulation",
        "Use companion planting to repel pests or attract beneficial insects",
        "Keep fields weed-free as many weeds host pests",
        "Maintain proper field sanitation",
    ]),
]

DISEASE_CULTURAL: List[Family] = [
    (("mildew", "blight"), [
        "Increase plant spacing to improve air circulation",
        "Avoid overhead irrigation; use drip irrigation instead",
        "Water in the morning so plants dry quickly",
        "Prune to improve air circulation within plant canopy",
        "Remove and destroy infected plant material",
    ]),
    (("rot", "wilt"), [
        "Improve soil drainage by adding organic matter",
        "Avoid overwatering and ensure proper irrigation scheduling",
        "Use raised beds in areas with poor drainage",
        "Practice crop rotation with non-susceptible crops",
        "Use disease-free planting material and resistant varieties",
    ]),
    (("virus",), [
        "Control insect vectors like aphids and whiteflies",
        "Remove and destroy infected plants immediately",
        "Disinfect tools between plants to prevent transmission",
        "Use virus-free certified seed or planting material",
        "Control weeds that may serve as virus reservoirs",
    ]),
    ((), [
        "Practice crop rotation",
        "Maintain proper plant spacing for good air circulation",
        "Remove and destroy infected plant debris",
        "Use resistant varieties when available",
        "Maintain proper field sanitation",
    ]),
]


def _pick(table: List[Family], name: str) -> Any:
    lowered = (name or "").lower()
    for markers, value in table:
        if not markers or any(m in lowered for m in markers):
            return value
    return table[-1][1]


def _copy(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: list(v) if isinstance(v, list) else v for k, v in value.items()}
    return list(value)


def default_chemical(name: str, kind: Optional[str]) -> Dict[str, Any]:
    return _copy(_pick(PEST_CHEMICALS if kind == "pest" else DISEASE_CHEMICALS, name))


def default_organic(name: str, kind: Optional[str]) -> Dict[str, Any]:
    return _copy(_pick(PEST_ORGANICS if kind == "pest" else DISEASE_ORGANICS, name))


def default_cultural(name: str, kind: Optional[str]) -> List[str]:
    return _copy(_pick(PEST_CULTURAL if kind == "pest" else DISEASE_CULTURAL, name))
