# cafe/utils/logging.py
import logging
import sys

from cafe.utils.settings import LOG_LEVEL

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_configured = False


def _configure_root():
    global _configured
    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_FORMAT))

    root = logging.getLogger("cafe")
    root.addHandler(handler)
    root.setLevel(LOG_LEVEL.upper())
    #no propagation, uvicorn and celery install their own root handlers
    root.propagate = False
    _configured = True


def get_logger(name: str) -> logging.Logger:
    _configure_root()
    return logging.getLogger(name)
