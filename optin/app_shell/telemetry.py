"""
Process-wide logging setup.

init_logging() installs the root handler once per process; later calls
are no-ops so tests and the app factory can call it freely.
"""

import logging
import sys
import threading
from typing import TextIO

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_lock = threading.Lock()
_initialized = False


def init_logging(level: str = "INFO", stream: TextIO | None = None) -> bool:
    """
    Configure root logging exactly once.

    Returns:
        True if this call performed the initialization
    """
    global _initialized
    with _lock:
        if _initialized:
            return False
        logging.basicConfig(
            level=getattr(logging, level.upper(), logging.INFO),
            format=LOG_FORMAT,
            stream=stream or sys.stdout,
        )
        # httpx logs every request URL at INFO
        logging.getLogger("httpx").setLevel(logging.WARNING)
        _initialized = True
        return True
