"""
Logging setup for the wish service.

Everything under the ``wish_lighthouse_api`` logger namespace follows
``LOG_LEVEL``.  Handlers live on the root logger so uvicorn's own
records share the same console (and ``LOG_FILE``, when set).  Root
handlers are attached once per process; the package level is applied
on every call, so a second ``create_app`` with another level still
takes effect.
"""

import logging
from pathlib import Path
from typing import List, Optional

APP_LOGGER = "wish_lighthouse_api"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_level(level: Optional[str]) -> int:
    """Map a level name such as ``"debug"`` to its number, ``INFO`` if unknown."""
    value = getattr(logging, (level or "").upper(), None)
    return value if isinstance(value, int) else logging.INFO


def _handlers(logfile: Optional[str]) -> List[logging.Handler]:
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if logfile:
        handlers.append(logging.FileHandler(Path(logfile).resolve(), encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> int:
    """Apply ``level`` to the service loggers and attach root handlers.

    Returns the numeric level in effect for the ``wish_lighthouse_api``
    namespace.
    """
    numeric_level = resolve_level(level)
    logging.getLogger(APP_LOGGER).setLevel(numeric_level)

    root = logging.getLogger()
    if not root.handlers:
        root.setLevel(numeric_level)
        for handler in _handlers(logfile):
            root.addHandler(handler)
    return numeric_level
