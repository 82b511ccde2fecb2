"""Log an operational error the first time it happens, then stay quiet."""

import logging
import threading

logger = logging.getLogger(__name__)

_logged_keys: set[str] = set()
_lock = threading.Lock()


def log_once(key: str, message: str, *args, level: int = logging.ERROR, exc_info=None) -> bool:
    """Emit *message* once per *key* for the life of the process.

    Returns True when the message was emitted.
    """
    with _lock:
        if key in _logged_keys:
            return False
        _logged_keys.add(key)
    logger.log(level, message, *args, exc_info=exc_info)
    return True


def reset_log_once() -> None:
    with _lock:
        _logged_keys.clear()
