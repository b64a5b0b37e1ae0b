import logging

import pytest


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the caller's GITNAPPED_* settings out of every test."""
    for name in ('GITNAPPED_CONFIG', 'GITNAPPED_AUTHOR', 'GITNAPPED_WORKING_HOURS', 'GITNAPPED_PARALLEL'):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo configure_logging() so caplog sees gitnapped records."""
    yield
    logger = logging.getLogger("gitnapped")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
