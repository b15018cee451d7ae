import io
from typing import List

import pytest
from loguru import logger

from envelog.config import ConfigStore, default_store


@pytest.fixture(autouse=True)
def reset_default_store():
    """
    Reset the process-wide settings before and after each test.

    The module-level logging functions share one store, so a setting changed
    by one test would otherwise leak into the next.
    """
    default_store.reset()
    yield
    default_store.reset()


@pytest.fixture
def buffer() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def store(buffer) -> ConfigStore:
    """
    Isolated store writing to an in-memory buffer.
    """
    isolated = ConfigStore()
    isolated.log_writer(buffer)
    return isolated


@pytest.fixture
def diagnostics() -> List[str]:
    """
    Capture envelog's own loguru diagnostics for the duration of a test.
    """
    messages: List[str] = []
    logger.enable("envelog")
    handler_id = logger.add(messages.append, level="DEBUG", format="{level} | {message}")
    yield messages
    logger.remove(handler_id)
    logger.disable("envelog")
