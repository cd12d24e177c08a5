import pytest
from loguru import logger

from dynquery.samples import employees, tasks


@pytest.fixture
def employee_records():
    return employees()


@pytest.fixture
def task_records():
    return tasks()


@pytest.fixture
def log_messages():
    """Collect loguru messages emitted during a test."""
    messages: list[str] = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
