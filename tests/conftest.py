import pytest
from unittest.mock import MagicMock

from hardware.light.virtual_light import VirtualLight, CapturingVirtualLight
from lifecycle.task_registry import TaskRegistry
from models.color import Color
from utils.logger import configure_logger, LogLevel


@pytest.fixture(autouse=True)
def fresh_task_registry():
    """Each test gets its own registry singleton."""
    TaskRegistry._instance = None
    yield
    TaskRegistry._instance = None


@pytest.fixture(autouse=True)
def quiet_logger():
    """Keep effect logs plain; restore defaults after config tests touch them."""
    configure_logger(min_level=LogLevel.INFO, use_colors=False)
    yield
    configure_logger(min_level=LogLevel.INFO, use_colors=True)


@pytest.fixture
def light():
    """Light that is on, at 50% and a distinctive color."""
    return VirtualLight(name="test", on=True, brightness=50, color=Color(1, 2, 3))


@pytest.fixture
def light_off():
    return VirtualLight(name="test-off", on=False, brightness=50, color=Color(1, 2, 3))


@pytest.fixture
def capturing_light():
    return CapturingVirtualLight(name="capture", on=True, brightness=42, color=Color(10, 20, 30))


@pytest.fixture
def on_complete():
    return MagicMock(name="on_complete")


@pytest.fixture
def on_fault():
    return MagicMock(name="on_fault")
