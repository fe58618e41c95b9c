import logging
import sys

from core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_handler = None


def configure_logging(level: str = None) -> None:
    """Install one stream handler on the root logger (idempotent)."""
    global _handler
    root = logging.getLogger()
    root.setLevel(level or settings.log_level)
    if _handler is not None and _handler in root.handlers:
        return
    _handler = logging.StreamHandler(sys.stdout)
    _handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(_handler)
