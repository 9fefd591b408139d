"""Tests for logging configuration."""

import logging

from drivetime_scheduler.app_logging import configure_logging


def test_configure_logging_idempotent() -> None:
    logger = logging.getLogger("drivetime_scheduler")
    logger.handlers.clear()

    configure_logging()
    first_count = len(logger.handlers)

    configure_logging()
    second_count = len(logger.handlers)

    assert first_count == 1
    assert second_count == 1


def test_configure_logging_updates_level() -> None:
    logger = logging.getLogger("drivetime_scheduler")
    logger.handlers.clear()

    configure_logging(logging.DEBUG)
    configure_logging(logging.WARNING)

    assert logger.level == logging.WARNING
    assert logger.propagate is False
