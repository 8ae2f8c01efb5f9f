"""Shared fixtures for the cspom test suite."""

import logging
from collections.abc import Iterator

import pytest


@pytest.fixture
def cspom_logger() -> Iterator[logging.Logger]:
    """The ``cspom`` logger, unconfigured for the test and restored after it.

    Handlers, level and the configured flag set by ``setup_logging`` are put
    back as they were so that tests do not leak handlers into each other.
    """
    logger = logging.getLogger("cspom")
    handlers = list(logger.handlers)
    level = logger.level
    configured = logger.__dict__.get("_cspom_configured")

    for handler in handlers:
        logger.removeHandler(handler)
    logger.__dict__.pop("_cspom_configured", None)
    logger.setLevel(logging.NOTSET)

    yield logger

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)
    if configured is None:
        logger.__dict__.pop("_cspom_configured", None)
    else:
        logger._cspom_configured = configured  # type: ignore[attr-defined]
