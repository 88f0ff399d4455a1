import logging
from logging import Logger
from typing import Optional

from .config import Settings, get_settings


def configure_logging(settings: Optional[Settings] = None, name: Optional[str] = None) -> Logger:
    """تهيئة مسجل موحد للخدمة، مع إمكانية الحصول على مسجل فرعي باسم الوحدة."""
    settings = settings or get_settings()

    logger = logging.getLogger(settings.app_name)
    if not logger.handlers:
        logger.setLevel(settings.log_level.upper())

        handler = logging.StreamHandler()
        formatter = logging.Formatter("[%(levelname)s] %(asctime)s | %(name)s | %(message)s")
        handler.setFormatter(formatter)

        logger.addHandler(handler)
        logger.propagate = False

    if name:
        return logger.getChild(name)
    return logger
