import logging
import sys

from .config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str | None = None) -> logging.Logger:
    """Attach a stdout handler to the package logger (idempotent)."""
    logger = logging.getLogger("rentflow")
    logger.setLevel((level or settings.LOG_LEVEL).upper())

    if not any(getattr(h, "_rentflow", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._rentflow = True
        logger.addHandler(handler)

    return logger
