# peoplebase/common/logging.py
from __future__ import annotations

import logging


def get_logger(name: str = "peoplebase", level: int | str | None = None) -> logging.Logger:
    """
    Return a named logger. If nothing configured the root logger yet, we add a
    basicConfig once so records are not dropped. `level` defaults to the
    LOG_LEVEL setting.
    """
    if level is None:
        from peoplebase.common.settings import get_settings

        level = get_settings().log_level.upper()
    logger = logging.getLogger(name)
    if not logging.getLogger().handlers and not logger.handlers:
        logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logger.setLevel(level)
    return logger
