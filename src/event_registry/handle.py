from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:  # pragma: no cover
    from .registry import EventRegistry


@dataclass(frozen=True)
class ListenerHandle:
    """Token returned by a successful registration.

    Attributes:
        event: Event name the listener was registered for.
        listener: The stored callable (the one-shot wrapper for one-time handlers).
        registry: Registry that owns the registration. Compared by identity, so
            handles from different registries are never equal.
    """

    event: str
    listener: Callable[..., Any]
    registry: "EventRegistry" = field(repr=False)

    def remove(self) -> bool:
        """Detach this listener from its event.

        Returns:
            True if the listener was removed, False if it was already gone.
        """
        return self.registry.remove_handler(self.event, self.listener)
