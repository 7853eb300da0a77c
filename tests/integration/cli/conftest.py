"""Fixtures for CLI integration tests"""

import logging

import pytest


@pytest.fixture(autouse=True)
def reset_mdsite_logger():
    """Drop handlers bound to CliRunner's captured streams after each command."""
    yield
    logger = logging.getLogger("mdsite")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
