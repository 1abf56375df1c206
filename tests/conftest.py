"""
Shared fixtures.
"""

import logging

import pytest


@pytest.fixture(autouse=True)
def reset_codepush_logger():
    """Undo logging setup done by a test."""
    logger = logging.getLogger("codepush")
    handlers = list(logger.handlers)
    level = logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
