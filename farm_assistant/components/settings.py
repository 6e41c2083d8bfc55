# farm_assistant/components/settings.py
from dataclasses import asdict, dataclass
from typing import Any, Dict

from farm_assistant.common.local_store import LocalStore
from farm_assistant.config.config import DEFAULT_COUNTRY

SETTINGS_KEY = "profileSettings"
UNITS = ("metric", "imperial")


@dataclass
class ProfileSettings:
    location: str = ""
    farm_name: str = ""
    units: str = "metric"


class UserSettings:
    """Profile settings kept in the local store"""

    def __init__(self, store: LocalStore, default_country: str = DEFAULT_COUNTRY):
        self.store = store
        self.default_country = default_country
        data = store.read(SETTINGS_KEY, {}) or {}
        self.profile = ProfileSettings(
            location=str(data.get("location") or ""),
            farm_name=str(data.get("farm_name") or ""),
            units=data.get("units") if data.get("units") in UNITS else "metric",
        )

    def update(self, **changes: Any) -> ProfileSettings:
        for key, value in changes.items():
            if not hasattr(self.profile, key):
                raise ValueError(f"Unknown setting '{key}'")
            if key == "units" and value not in UNITS:
                raise ValueError(f"units must be one of {', '.join(UNITS)}")
            setattr(self.profile, key, str(value).strip())
        self.store.write(SETTINGS_KEY, asdict(self.profile))
        return self.profile

    def country(self) -> str:
        """First comma-separated part of the location"""
        first = self.profile.location.split(",")[0].strip()
        return first or self.default_country

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self.profile)
        data["country"] = self.country()
        return data
