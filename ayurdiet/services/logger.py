import json
import logging
import os
from datetime import datetime

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


_debug_logger = get_logger("ayurdiet.debug")


def log_debug(event: str, data: dict):
    """
    Logs structured debug info if enabled.
    """
    if os.environ.get("AI_DEBUG_MODE", "False").lower() != "true":
        return

    entry = {
        "timestamp": datetime.now().isoformat(),
        "event": event,
        "data": data,
    }
    _debug_logger.info("[AI DEBUG] %s", json.dumps(entry, indent=2, default=str))
