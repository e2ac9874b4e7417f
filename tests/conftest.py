import logging
import sys
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from event_registry import EventRegistry, reset_default_registry  # noqa: E402
from event_registry.logging_config import PACKAGE_LOGGER  # noqa: E402


@pytest.fixture()
def registry() -> EventRegistry:
    return EventRegistry()


@pytest.fixture()
def safe_registry() -> EventRegistry:
    return EventRegistry(["test"], True)


@pytest.fixture(autouse=True)
def _fresh_default_registry():
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    previous_level = package_logger.level
    reset_default_registry()
    yield
    reset_default_registry()
    package_logger.setLevel(previous_level)
