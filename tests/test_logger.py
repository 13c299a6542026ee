"""Test function configure_logging."""
import logging

from shunting_yard.common.logger import configure_logging, logger


def test_configure_logging_is_idempotent() -> None:
    """A second call changes the level without adding a handler."""
    handlers = list(logger.handlers)
    try:
        configure_logging(logging.INFO)
        configure_logging(logging.DEBUG)
        stream_handlers = [h for h in logger.handlers if isinstance(h, logging.StreamHandler)]
        assert len(stream_handlers) == 1
        assert logger.level == logging.DEBUG
        assert stream_handlers[0].level == logging.DEBUG
    finally:
        for handler in logger.handlers[:]:
            if handler not in handlers:
                logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)
