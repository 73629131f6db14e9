"""Namespaced loggers for the hatchet dashboard.

Every module logs through ``get_logger``; the loggers share one format and
do not propagate to the root logger, so a host application's logging
configuration is left alone. ``set_verbose`` switches all of them between
INFO and DEBUG at once (the CLI and ``create_app`` call it from the
``HATCHET_VERBOSE`` setting).
"""

from __future__ import annotations

import logging
from typing import Optional

from ..config import settings

ROOT_NAME = "hatchet_web"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _level_for(verbose: bool) -> int:
    return logging.DEBUG if verbose else logging.INFO


def get_logger(name: str, *, level: Optional[int] = None) -> logging.Logger:
    """Return the ``hatchet_web.<name>`` logger, attaching its handler once.

    *level* overrides the verbosity-derived default for this logger only.
    """

    logger = logging.getLogger(f"{ROOT_NAME}.{name}")
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False
        logger.setLevel(_level_for(settings.verbose) if level is None else level)
    elif level is not None:
        logger.setLevel(level)
    return logger


def set_verbose(verbose: bool) -> None:
    level = _level_for(verbose)
    for name, logger in list(logging.Logger.manager.loggerDict.items()):
        if name.startswith(f"{ROOT_NAME}.") and isinstance(logger, logging.Logger):
            logger.setLevel(level)
