# farm_assistant/common/services.py
"""
The collaborators one running app is built from. create_app stores an
instance on the Flask app; routes read it back through current_services().
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, List

from flask import current_app

EXTENSION_KEY = "farm_assistant"


@dataclass
class Services:
    sessions: Any
    identify_sessions: Any
    history: Any
    settings: Any
    pests: Any
    weather: Any
    breakers: List[Any] = field(default_factory=list)
    live_identification: bool = False
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


def current_services() -> Services:
    return current_app.extensions[EXTENSION_KEY]
