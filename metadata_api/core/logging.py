import logging
from logging import Logger

from .config import get_settings

PACKAGE_LOGGER = "metadata_api"
LOG_FORMAT = "[%(levelname)s] %(asctime)s | %(name)s | %(message)s"


def configure_logging() -> Logger:
    """
    Configure the ``metadata_api`` logger tree and return its root.

    Module loggers (``logging.getLogger(__name__)`` under ``metadata_api``)
    propagate into the single stream handler installed here. The level comes
    from ``Settings.log_level`` and is re-applied on every call.
    """
    settings = get_settings()

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(settings.log_level.upper())

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False

    return logger
