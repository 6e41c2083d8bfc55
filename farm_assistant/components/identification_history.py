# farm_assistant/components/identification_history.py
"""
Browsable history of past identifications, newest first.

Read once from the local store when constructed, written back in full on
every change. Only the entry added last in this session may gain notes.
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from farm_assistant.common.local_store import LocalStore
from farm_assistant.common.logger import get_logger
from farm_assistant.common.records import STATUS_ERROR, new_record_id, parse_record
from farm_assistant.config.config import HISTORY_LIMIT

logger = get_logger(__name__)

HISTORY_KEY = "identificationHistory"


class IdentificationHistory:
    def __init__(self, store: LocalStore, limit: int = HISTORY_LIMIT):
        self.store = store
        self.limit = limit
        self._entries: List[Dict[str, Any]] = store.read(HISTORY_KEY, []) or []
        self._latest_id: Optional[str] = None

    def add(self, record_json: str, image_ref: Optional[str] = None) -> Optional[str]:
        """Store a copy of a non-error record; returns the new entry id or None"""
        parsed = parse_record(record_json)
        if not parsed.ok:
            logger.warning(f"Not adding unreadable record to history: {parsed.reason}")
            return None
        if parsed.value.status == STATUS_ERROR:
            return None

        entry = {
            "id": new_record_id(),
            "created_at": datetime.now(timezone.utc).isoformat(),
            "record": parsed.value.to_dict(),
            "image_ref": image_ref,
        }
        self._entries = ([entry] + self._entries)[: self.limit]
        self._latest_id = entry["id"]
        self.store.write(HISTORY_KEY, self._entries)
        logger.info(f"Added identification {entry['id']} to history ({len(self._entries)} entries)")
        return entry["id"]

    def attach_notes(self, notes: str) -> bool:
        if self._latest_id is None:
            return False
        for entry in self._entries:
            if entry["id"] == self._latest_id:
                entry["notes"] = notes
                self.store.write(HISTORY_KEY, self._entries)
                return True
        # dropped by the size limit since it was added
        return False

    def entries(self) -> List[Dict[str, Any]]:
        return [dict(e, record=dict(e["record"])) for e in self._entries]
