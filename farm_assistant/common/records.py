# farm_assistant/common/records.py
"""
Record shapes shared by the chat, identification and pest-tracking flows.

An IdentificationRecord is serialized to JSON and stored as the text of an
assistant Message. `parse_record` is the inverse and reports malformed input
as an Err value rather than raising.
"""
import itertools
import json
import math
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from farm_assistant.common.result import Err, Ok, Result

STATUS_HEALTHY = "healthy"
STATUS_IDENTIFIED = "identified"
STATUS_ERROR = "error"
STATUSES = (STATUS_HEALTHY, STATUS_IDENTIFIED, STATUS_ERROR)

KINDS = ("plant", "pest", "disease")

ROLE_USER = "user"
ROLE_ASSISTANT = "assistant"

_id_counter = itertools.count()


def new_record_id() -> str:
    """Millisecond timestamp plus a process-local counter so ids never collide."""
    return f"{int(time.time() * 1000)}-{next(_id_counter)}"


# -------------------------
# Chat messages
# -------------------------
@dataclass(frozen=True)
class Message:
    id: str
    role: str
    text: str
    created_at: datetime
    attached_image: Optional[bytes] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "role": self.role,
            "text": self.text,
            "created_at": self.created_at.isoformat(),
            "has_image": self.attached_image is not None,
        }


# -------------------------
# Identification record
# -------------------------
@dataclass
class ControlProduct:
    name: str
    active_ingredient: str
    application_rate: str
    method: str
    safe_days: int
    safety: str
    brands: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "active_ingredient": self.active_ingredient,
            "application_rate": self.application_rate,
            "method": self.method,
            "safe_days": self.safe_days,
            "safety": self.safety,
            "brands": list(self.brands),
        }


@dataclass
class ControlMethods:
    chemical: List[ControlProduct] = field(default_factory=list)
    organic: List[ControlProduct] = field(default_factory=list)
    cultural: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "chemical": [p.to_dict() for p in self.chemical],
            "organic": [p.to_dict() for p in self.organic],
            "cultural": list(self.cultural),
        }


@dataclass
class Identification:
    name: str
    confidence: int
    kind: str
    description: str
    causes: List[str] = field(default_factory=list)
    controls: ControlMethods = field(default_factory=ControlMethods)
    affected_plants: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "confidence": self.confidence,
            "kind": self.kind,
            "description": self.description,
            "causes": list(self.causes),
            "controls": self.controls.to_dict(),
            "affected_plants": list(self.affected_plants),
        }


@dataclass
class IdentificationRecord:
    status: str
    message: str = ""
    identification: Optional[Identification] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"status": self.status, "message": self.message}
        if self.identification is not None:
            data["identification"] = self.identification.to_dict()
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)


def error_record(message: str) -> IdentificationRecord:
    return IdentificationRecord(status=STATUS_ERROR, message=message)


# -------------------------
# Parsing serialized records
# -------------------------
def _str_list(value: Any, label: str) -> Result:
    if value is None:
        return Ok([])
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        return Err(f"{label} must be a list of strings")
    return Ok(list(value))


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str) and value.strip().isdecimal():
        return int(value.strip())
    return None


def _product(data: Any, label: str) -> Result:
    if not isinstance(data, dict) or not isinstance(data.get("name"), str):
        return Err(f"{label} entry needs a name")
    brands = _str_list(data.get("brands"), f"{label} brands")
    if not brands.ok:
        return brands
    safe_days = _as_int(data.get("safe_days", 0))
    if safe_days is None or safe_days < 0:
        return Err(f"{label} safe_days must be a non-negative integer")
    return Ok(ControlProduct(
        name=data["name"],
        active_ingredient=str(data.get("active_ingredient", "")),
        application_rate=str(data.get("application_rate", "")),
        method=str(data.get("method", "")),
        safe_days=safe_days,
        safety=str(data.get("safety", "")),
        brands=brands.value,
    ))


def _identification(data: Any) -> Result:
    if not isinstance(data, dict):
        return Err("identification must be an object")
    name = data.get("name")
    if not isinstance(name, str):
        return Err("identification.name missing")
    confidence = _as_int(data.get("confidence"))
    if confidence is None or not 0 <= confidence <= 100:
        return Err("identification.confidence must be an integer in 0..100")
    kind = data.get("kind", "disease")
    if kind not in KINDS:
        return Err(f"unknown identification kind '{kind}'")

    causes = _str_list(data.get("causes"), "causes")
    if not causes.ok:
        return causes
    plants = _str_list(data.get("affected_plants"), "affected_plants")
    if not plants.ok:
        return plants

    controls_data = data.get("controls") or {}
    if not isinstance(controls_data, dict):
        return Err("controls must be an object")
    cultural = _str_list(controls_data.get("cultural"), "cultural controls")
    if not cultural.ok:
        return cultural
    products = {}
    for group in ("chemical", "organic"):
        entries = controls_data.get(group) or []
        if not isinstance(entries, list):
            return Err(f"{group} controls must be a list")
        parsed = []
        for entry in entries:
            result = _product(entry, group)
            if not result.ok:
                return result
            parsed.append(result.value)
        products[group] = parsed

    return Ok(Identification(
        name=name,
        confidence=confidence,
        kind=kind,
        description=str(data.get("description", "")),
        causes=causes.value,
        controls=ControlMethods(products["chemical"], products["organic"], cultural.value),
        affected_plants=plants.value,
    ))


def parse_record(text: str) -> Result:
    """Ok(IdentificationRecord) or Err(reason) for any input text."""
    if not isinstance(text, str) or not text.strip():
        return Err("empty report")
    try:
        data = json.loads(text)
    except ValueError as e:
        return Err(f"report is not valid JSON: {e}")
    except RecursionError:
        return Err("report is nested too deeply")
    if not isinstance(data, dict):
        return Err("report must be a JSON object")

    status = data.get("status")
    if status not in STATUSES:
        return Err(f"unknown report status '{status}'")
    message = data.get("message", "")
    if not isinstance(message, str):
        return Err("message must be a string")

    if status != STATUS_IDENTIFIED:
        return Ok(IdentificationRecord(status=status, message=message))

    ident = _identification(data.get("identification"))
    if not ident.ok:
        return ident
    return Ok(IdentificationRecord(status=status, message=message, identification=ident.value))


# -------------------------
# Pest tracking
# -------------------------
@dataclass(frozen=True)
class PestTrackingEntry:
    id: str
    name: str
    date: str
    location: str
    affected_plants: str
    treatment_plan: str
    notes: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "name": self.name,
            "date": self.date,
            "location": self.location,
            "affected_plants": self.affected_plants,
            "treatment_plan": self.treatment_plan,
        }
        if self.notes:
            data["notes"] = self.notes
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PestTrackingEntry":
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            date=data.get("date", ""),
            location=data.get("location", ""),
            affected_plants=data.get("affected_plants", ""),
            treatment_plan=data.get("treatment_plan", ""),
            notes=data.get("notes"),
        )
