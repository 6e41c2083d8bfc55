# farm_assistant/common/local_store.py
"""
Small JSON file store for per-installation state (identification history,
profile settings, pest records).

Each key is read when its owner is constructed and written back in full on
every mutation. Last writer wins; there is exactly one writer per install.
"""
import json
import os
import threading
from pathlib import Path
from typing import Any, Dict, Optional

from farm_assistant.common.logger import get_logger

logger = get_logger(__name__)


class LocalStore:
    def __init__(self, path: Optional[str] = None):
        # path=None keeps everything in memory (tests, throwaway sessions)
        self.path = Path(path) if path else None
        self._lock = threading.Lock()
        self._data: Dict[str, Any] = self._load()

    def _load(self) -> Dict[str, Any]:
        if self.path is None or not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as e:
            logger.error(f"Could not read local store {self.path}: {e}. Starting empty.")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Local store {self.path} is not a JSON object, ignoring it")
            return {}
        return data

    def read(self, key: str, default: Any = None) -> Any:
        with self._lock:
            value = self._data.get(key, default)
            # hand out copies so callers cannot mutate stored state in place
            return json.loads(json.dumps(value)) if value is not None else default

    def write(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = value
            self._flush()

    def _flush(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp, "w", encoding="utf-8") as fh:
            json.dump(self._data, fh, indent=2, ensure_ascii=False)
        os.replace(tmp, self.path)
