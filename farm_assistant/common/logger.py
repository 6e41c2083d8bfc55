# farm_assistant/common/logger.py
import logging
import os
import re
import sys
from datetime import datetime

LOGS_DIR = os.getenv("FARM_ASSISTANT_LOGS_DIR", "logs")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Model replies occasionally carry terminal colour codes; keep log files clean
ANSI_RE = re.compile(r"\x1B\[[0-?]*[ -/]*[@-~]")


class StripAnsiFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = ANSI_RE.sub("", record.msg)
        return True


_configured = False


def _log_file_path() -> str:
    os.makedirs(LOGS_DIR, exist_ok=True)
    return os.path.join(LOGS_DIR, f"log_{datetime.now().strftime('%Y-%m-%d')}.log")


def _configure_root_logger():
    global _configured
    if _configured:
        return

    root = logging.getLogger()
    level = getattr(logging, LOG_LEVEL, logging.INFO)
    root.setLevel(level)

    fmt = logging.Formatter("%(asctime)s - %(levelname)s - %(name)s - %(message)s")
    ansi_filter = StripAnsiFilter()

    try:
        fh = logging.FileHandler(_log_file_path(), encoding="utf-8")
        fh.setLevel(level)
        fh.setFormatter(fmt)
        fh.addFilter(ansi_filter)
        root.addHandler(fh)
    except OSError:
        # Read-only checkouts still get console logging
        pass

    sh = logging.StreamHandler(stream=sys.stdout)
    sh.setLevel(level)
    sh.setFormatter(fmt)
    sh.addFilter(ansi_filter)
    root.addHandler(sh)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    _configure_root_logger()
    return logging.getLogger(name)
