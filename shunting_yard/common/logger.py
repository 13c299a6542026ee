"""Shared application logger."""
import logging
import sys

logger = logging.getLogger("shunting_yard")
logger.addHandler(logging.NullHandler())


def configure_logging(level: int = logging.INFO) -> None:
    """
    Attach a console handler to the application logger.

    Calling it again only updates the level.

    :param int level: Logging level, e.g. ``logging.DEBUG``
    """
    logger.setLevel(level)
    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(handler)
    for handler in logger.handlers:
        handler.setLevel(level)
