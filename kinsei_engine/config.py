# config.py
import logging
import os

# ======= Board defaults =======
DEFAULT_SIZE = int(os.getenv("KINSEI_DEFAULT_SIZE", "8"))

# ======= Logging =======
LOG_LEVEL  = os.getenv("KINSEI_LOG_LEVEL", "WARNING").upper()
LOG_FORMAT = os.getenv("KINSEI_LOG_FORMAT", "%(asctime)s %(levelname)s %(name)s: %(message)s")

# ======= HTTP API =======
API_HOST = os.getenv("KINSEI_API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("KINSEI_API_PORT", "8000"))


class CFG:
    DEFAULT_SIZE = DEFAULT_SIZE

    LOG_LEVEL  = LOG_LEVEL
    LOG_FORMAT = LOG_FORMAT

    API_HOST = API_HOST
    API_PORT = API_PORT


def configure_logging(level=None) -> logging.Logger:
    """Attach one stream handler to the package logger; safe to call twice."""
    logger = logging.getLogger("kinsei_engine")
    resolved = level if level is not None else CFG.LOG_LEVEL
    logger.setLevel(resolved)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(CFG.LOG_FORMAT))
        logger.addHandler(handler)
    return logger


__all__ = ["CFG", "configure_logging"]
