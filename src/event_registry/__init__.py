"""
Synchronous in-process publish/subscribe registry.

Register listeners for named events on an :class:`EventRegistry`, then emit
events to call them in registration order with the emitted arguments.
"""

from importlib.metadata import PackageNotFoundError, version

from .config import RegistryConfig, load_registry_config
from .exceptions import ConfigError, EventRegistryError, RejectionReason
from .handle import ListenerHandle
from .registry import EventRegistry, get_default_registry, reset_default_registry

try:
    __version__ = version("event-registry")
except PackageNotFoundError:  # pragma: no cover - during tests without packaging
    __version__ = "0.0.0"

__all__ = [
    "ConfigError",
    "EventRegistry",
    "EventRegistryError",
    "ListenerHandle",
    "RegistryConfig",
    "RejectionReason",
    "__version__",
    "get_default_registry",
    "load_registry_config",
    "reset_default_registry",
]
