# farm_assistant/components/keyword_classifier.py
"""
Local in-domain check used when the model cannot be asked to classify the
question itself.

Matching is plain substring matching on the lower-cased text, so "planted"
counts as "plant". Missing a farming question costs more than answering an
odd one.
"""
from typing import Iterable, Tuple

AGRICULTURE_KEYWORDS: Tuple[str, ...] = (
    "farm", "crop", "plant", "soil", "seed", "harvest", "fertilizer",
    "pesticide", "irrigation", "garden", "grow", "cultivate", "agriculture",
    "organic", "compost", "weed", "pest", "disease", "fruit", "vegetable",
    "flower", "tree", "shrub", "greenhouse", "hydroponics", "livestock",
    "cattle", "poultry", "dairy", "field", "yield", "rotation", "season",
    "climate", "weather", "drought", "flood", "nutrient", "mulch", "prune",
)


class KeywordClassifier:
    def __init__(self, keywords: Iterable[str] = AGRICULTURE_KEYWORDS):
        self.keywords = tuple(k.lower() for k in keywords)

    def matched_keywords(self, text: str) -> list:
        lower = (text or "").lower()
        return [k for k in self.keywords if k in lower]

    def is_in_domain(self, text: str) -> bool:
        if not text or not text.strip():
            return False
        lower = text.lower()
        return any(k in lower for k in self.keywords)


_default = KeywordClassifier()


def is_in_domain(text: str) -> bool:
    return _default.is_in_domain(text)
