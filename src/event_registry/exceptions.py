from enum import Enum


class EventRegistryError(Exception):
    """Base exception for the event_registry package."""


class ConfigError(EventRegistryError):
    """Raised when registry configuration cannot be read or is malformed."""


class RejectionReason(str, Enum):
    """Why a registration or emission was refused.

    Rejections are reported through return values and a WARNING log record,
    never by raising.
    """

    UNSUPPORTED_EVENT = "unsupported_event"
    INVALID_LISTENER = "invalid_listener"
    DUPLICATE_LISTENER = "duplicate_listener"
