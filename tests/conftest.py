"""Shared fixtures for the payments engine test suite"""

import logging

import pytest

from payments_engine.accounts import Account


@pytest.fixture(autouse=True)
def reset_engine_logger():
    """Undo setup_logging() so caplog keeps seeing engine records"""
    yield
    logger = logging.getLogger("payments_engine")
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def account():
    """Fresh account for client 1"""
    return Account.new(1)
