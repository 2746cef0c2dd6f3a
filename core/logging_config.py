
import logging
from logging import Logger

DEFAULT_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"
DEFAULT_DATEFMT = "%H:%M:%S"
PROJECT_LOGGER = "card_rules"


def setup_logging(level: int = logging.INFO, *, verbose_modules: tuple = ()) -> Logger:
    """Configure root logging once and return the project logger.

    ``verbose_modules`` lists loggers (``"card_rules.engine"``...) that should
    emit debug output even when ``level`` is higher.
    """

    logging.basicConfig(level=level, format=DEFAULT_FORMAT, datefmt=DEFAULT_DATEFMT)
    for name in verbose_modules:
        logging.getLogger(name).setLevel(logging.DEBUG)
    logger = logging.getLogger(PROJECT_LOGGER)
    logger.debug("Logging initialized.")
    return logger
