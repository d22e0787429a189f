import logging

import pytest


@pytest.fixture(autouse=True)
def _reset_hubgen_logger():
    """Let caplog see hubgen records even after the CLI configured logging."""
    logger = logging.getLogger("hubgen")
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
