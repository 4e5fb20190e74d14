"""Shared pytest fixtures."""

import logging

import pytest


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """Drop handlers that CLI commands attach to the ``rts_agents`` logger.

    Handlers created under capsys hold the captured stream, which is closed
    once the test ends.
    """
    yield
    logger = logging.getLogger("rts_agents")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
