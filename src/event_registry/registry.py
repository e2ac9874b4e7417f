from __future__ import annotations

import functools
import inspect
import logging
from collections.abc import Sequence
from typing import Any, Callable, Dict, List, Optional, Tuple

from .config import RegistryConfig, load_registry_config
from .exceptions import RejectionReason
from .handle import ListenerHandle
from .logging_config import configure_logging

Listener = Callable[..., Any]


def _describe(listener: Any) -> str:
    return getattr(listener, "__name__", repr(listener))


def _same(a: Listener, b: Listener) -> bool:
    """Identity match; bound methods match on (instance, function) since each
    attribute access creates a new method object."""
    if a is b:
        return True
    if inspect.ismethod(a) and inspect.ismethod(b):
        return a.__self__ is b.__self__ and a.__func__ is b.__func__
    return False


def _index_of(handlers: Sequence[Listener], listener: Listener) -> int:
    for i, h in enumerate(handlers):
        if _same(h, listener):
            return i
    return -1


class EventRegistry:
    """Synchronous, in-process registry mapping event names to listeners.

    Listeners run in registration order, in the calling thread, with the
    positional arguments given to :meth:`emit_event`. When constructed with
    ``event_safe=True`` only names in ``supported_events`` can be registered
    for or emitted.

    Failures (unsupported event, non-callable listener, duplicate listener)
    are reported by returning ``None``/``False`` and logging a warning to the
    injected logger; nothing is raised. Exceptions raised by listeners
    themselves propagate to the caller of :meth:`emit_event`.

    Not thread-safe; intended for single-threaded use.
    """

    def __init__(
        self,
        supported_events: Optional[Sequence[str]] = None,
        event_safe: Optional[bool] = None,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._supported_events: Tuple[str, ...] = ()
        if (
            isinstance(supported_events, Sequence)
            and not isinstance(supported_events, (str, bytes))
            and len(supported_events) > 0
        ):
            self._supported_events = tuple(supported_events)
        self._event_safe = False if event_safe is None else bool(event_safe)
        self._handlers: Dict[str, List[Listener]] = {}
        self._log = logger if logger is not None else logging.getLogger(__name__)

    @classmethod
    def from_config(cls, config: RegistryConfig, *, logger: Optional[logging.Logger] = None) -> "EventRegistry":
        return cls(list(config.supported_events), config.event_safe, logger=logger)

    # ------------------------ Introspection ------------------------
    @property
    def supported_events(self) -> Tuple[str, ...]:
        return self._supported_events

    @property
    def event_safe(self) -> bool:
        return self._event_safe

    def get_supported_events(self) -> Tuple[str, ...]:
        """Return the allow-list as configured (empty if none was given)."""
        return self._supported_events

    def has_event(self, name: str) -> bool:
        return name in self._supported_events

    def check_safety(self, name: str) -> bool:
        """Return True if ``name`` may be registered for and emitted."""
        return not self._event_safe or self.has_event(name)

    def get_handlers(self, name: str) -> Tuple[Listener, ...]:
        """Return a snapshot of the listeners registered for ``name``."""
        return tuple(self._handlers.get(name, ()))

    def has_handler(self, name: str, listener: Listener) -> bool:
        return _index_of(self._handlers.get(name, ()), listener) >= 0

    def __repr__(self) -> str:
        counts = {name: len(handlers) for name, handlers in self._handlers.items() if handlers}
        return (
            f"{type(self).__name__}(event_safe={self._event_safe}, "
            f"supported_events={list(self._supported_events)!r}, handlers={counts!r})"
        )

    # ------------------------ Registration ------------------------
    def _reject(self, reason: RejectionReason, message: str, *args: Any) -> None:
        self._log.warning("Rejected (%s): " + message, reason.value, *args)

    def register_handler(self, name: str, listener: Listener) -> Optional[ListenerHandle]:
        """Register ``listener`` for ``name``.

        Returns:
            A :class:`ListenerHandle`, or None if the event is not supported by an
            event-safe registry, the listener is not callable, or it is already
            registered for this event.
        """
        if not self.check_safety(name):
            self._reject(
                RejectionReason.UNSUPPORTED_EVENT,
                "cannot register for unsupported event '%s'",
                name,
            )
            return None
        if not callable(listener):
            self._reject(
                RejectionReason.INVALID_LISTENER,
                "listener %r for event '%s' is not callable",
                listener,
                name,
            )
            return None
        handlers = self._handlers.setdefault(name, [])
        if _index_of(handlers, listener) >= 0:
            self._reject(
                RejectionReason.DUPLICATE_LISTENER,
                "handler %s is already registered for event '%s'",
                _describe(listener),
                name,
            )
            return None
        handlers.append(listener)
        self._log.debug("Registered handler %s for event '%s'", _describe(listener), name)
        return ListenerHandle(name, listener, self)

    def register_one_time_handler(self, name: str, listener: Listener) -> Optional[ListenerHandle]:
        """Register ``listener`` to run on the next emission of ``name`` only.

        The stored callable is a wrapper that detaches itself before calling
        ``listener``, so a re-entrant emit of the same event from inside
        ``listener`` will not call it again. The original is reachable as
        ``handle.listener.__wrapped__``.
        """
        if not callable(listener):
            self._reject(
                RejectionReason.INVALID_LISTENER,
                "one-time listener %r for event '%s' is not callable",
                listener,
                name,
            )
            return None

        @functools.wraps(listener)
        def once(*args: Any) -> Any:
            self.remove_handler(name, once)
            return listener(*args)

        return self.register_handler(name, once)

    # ------------------------ Removal ------------------------
    def remove_handler(self, name: str, listener: Listener) -> bool:
        """Remove ``listener`` from ``name``; False if it was not registered."""
        handlers = self._handlers.get(name)
        index = _index_of(handlers, listener) if handlers else -1
        if index < 0:
            return False
        del handlers[index]
        self._log.debug("Removed handler %s from event '%s'", _describe(listener), name)
        return True

    def remove_all_event_handlers(self, name: str) -> None:
        removed = self._handlers.pop(name, None)
        if removed:
            self._log.debug("Removed %d handlers from event '%s'", len(removed), name)

    def remove_all_handlers(self) -> None:
        self._handlers.clear()
        self._log.debug("Removed all handlers")

    # ------------------------ Dispatch ------------------------
    def emit_event(self, name: str, *args: Any) -> bool:
        """Call every listener registered for ``name`` with ``*args``.

        Dispatch walks a snapshot of the listener list taken when the call
        starts, calling each entry that is still registered when its turn
        comes. Listeners registered for the first time during the pass wait
        for the next emission; one removed before its turn is skipped unless
        it was registered again by then. A listener may emit again
        (re-entrantly); the nested call completes before the outer pass
        resumes. Recursing without bound is the caller's problem.

        Returns:
            False if the event is rejected by an event-safe registry, else True
            (even when nothing is listening).
        """
        if not self.check_safety(name):
            self._reject(RejectionReason.UNSUPPORTED_EVENT, "cannot emit unsupported event '%s'", name)
            return False
        snapshot = list(self._handlers.get(name, ()))
        self._log.debug("Emitting event '%s' to %d handlers with args: %r", name, len(snapshot), args)
        for listener in snapshot:
            if _index_of(self._handlers.get(name, ()), listener) < 0:
                continue
            listener(*args)
        return True


# Module-level default registry, built lazily from configuration
_DEFAULT_REGISTRY: Optional[EventRegistry] = None


def get_default_registry() -> EventRegistry:
    """Return the process-wide registry, creating it from config if necessary.

    The configured ``log_level`` is applied to the package logger before the
    registry is built.
    """
    global _DEFAULT_REGISTRY
    if _DEFAULT_REGISTRY is None:
        config = load_registry_config()
        _DEFAULT_REGISTRY = EventRegistry.from_config(config, logger=configure_logging(config.log_level))
    return _DEFAULT_REGISTRY


def reset_default_registry() -> None:
    """Discard the default registry (useful in tests)."""
    global _DEFAULT_REGISTRY
    _DEFAULT_REGISTRY = None
