from __future__ import annotations

import logging
import os


def _level_from_env() -> int:
    level = logging.getLevelName(os.getenv("PROMISSORY_LOG_LEVEL", "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


logger = logging.getLogger(__package__)
if not logger.handlers:
    formatter = logging.Formatter(
        "[%(asctime)s] [%(name)s::%(threadName)s] [%(levelname)s]: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(_level_from_env())
    logger.propagate = False
