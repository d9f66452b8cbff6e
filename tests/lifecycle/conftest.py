import pytest

from lifecycle.task_registry import TaskRegistry


@pytest.fixture(autouse=True)
def fresh_task_registry():
    TaskRegistry.reset()
    yield
    TaskRegistry.reset()
