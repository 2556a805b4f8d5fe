from __future__ import annotations

import logging
from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def basic_project() -> Path:
    """Path to the small Unity project used across tests."""
    return FIXTURES_DIR / "basic_project"


@pytest.fixture(autouse=True)
def reset_unityatlas_logger():
    """Undo handler changes made by CLI invocations so caplog keeps working."""
    yield
    logger = logging.getLogger("unityatlas")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
