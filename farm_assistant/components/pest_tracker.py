# farm_assistant/components/pest_tracker.py
"""
Manually entered pest sightings, kept in the local store newest first.
Entries are never edited once added.
"""
import re
from datetime import date, datetime
from typing import List, Optional

from farm_assistant.common.local_store import LocalStore
from farm_assistant.common.logger import get_logger
from farm_assistant.common.records import (
    STATUS_IDENTIFIED,
    IdentificationRecord,
    PestTrackingEntry,
    new_record_id,
)

logger = get_logger(__name__)

PESTS_KEY = "pestRecords"
ALL_LOCATIONS = "All Locations"

DATE_FORMATS = (
    "%Y-%m-%d",
    "%B %d, %Y",
    "%b %d, %Y",
    "%B %d %Y",
    "%b %d %Y",
    "%d %B %Y",
    "%d %b %Y",
    "%m/%d/%Y",
    "%Y/%m/%d",
)

_ORDINAL_RE = re.compile(r"(\d{1,2})(st|nd|rd|th)\b", re.IGNORECASE)


def parse_lenient_date(text: str) -> Optional[date]:
    """'March 10th, 2024', '2024-03-10', '03/10/2024' and friends; None if unreadable"""
    if not text:
        return None
    cleaned = _ORDINAL_RE.sub(r"\1", text.strip())
    cleaned = re.sub(r"\s+", " ", cleaned)
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(cleaned, fmt).date()
        except ValueError:
            continue
    # ISO timestamps ("2024-03-10T08:00:00")
    try:
        return datetime.fromisoformat(cleaned).date()
    except ValueError:
        return None


class PestTracker:
    def __init__(self, store: LocalStore):
        self.store = store
        self._entries: List[PestTrackingEntry] = [
            PestTrackingEntry.from_dict(d) for d in (store.read(PESTS_KEY, []) or []) if d.get("id")
        ]

    def _save(self):
        self.store.write(PESTS_KEY, [e.to_dict() for e in self._entries])

    def add(
        self,
        name: str,
        date: str,
        location: str,
        affected_plants: str,
        treatment_plan: str,
        notes: Optional[str] = None,
    ) -> PestTrackingEntry:
        if not name or not name.strip():
            raise ValueError("Pest name is required")
        entry = PestTrackingEntry(
            id=new_record_id(),
            name=name.strip(),
            date=(date or "").strip(),
            location=(location or "").strip(),
            affected_plants=(affected_plants or "").strip(),
            treatment_plan=(treatment_plan or "").strip(),
            notes=notes.strip() if notes else None,
        )
        self._entries.insert(0, entry)
        self._save()
        logger.info(f"Recorded pest '{entry.name}' at '{entry.location}'")
        return entry

    def entries(self) -> List[PestTrackingEntry]:
        return list(self._entries)

    def filter(self, search: str = "", date: str = "", location: str = ALL_LOCATIONS) -> List[PestTrackingEntry]:
        needle = (search or "").strip().lower()
        wanted_date = parse_lenient_date(date) if date else None
        if date and wanted_date is None:
            logger.warning(f"Unreadable date filter '{date}' matches nothing")
            return []

        matches = []
        for entry in self._entries:
            if needle and needle not in entry.name.lower() and needle not in entry.affected_plants.lower():
                continue
            if wanted_date is not None and parse_lenient_date(entry.date) != wanted_date:
                continue
            if location and location != ALL_LOCATIONS and entry.location != location:
                continue
            matches.append(entry)
        return matches

    def unique_locations(self) -> List[str]:
        locations = [ALL_LOCATIONS]
        for entry in self._entries:
            if entry.location and entry.location not in locations:
                locations.append(entry.location)
        return locations

    def record_from_identification(self, record: IdentificationRecord, when: Optional[date] = None) -> PestTrackingEntry:
        if record.status != STATUS_IDENTIFIED or record.identification is None:
            raise ValueError("Only identified pests or diseases can be tracked")
        ident = record.identification
        return self.add(
            name=ident.name,
            date=(when or date.today()).isoformat(),
            location="Not specified",
            affected_plants=", ".join(ident.affected_plants),
            treatment_plan="See analysis for recommendations",
        )
