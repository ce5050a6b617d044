"""Slack Redmine bot package initialisation."""

from .config import AppSettings, get_settings  # noqa: F401
from .errors import (  # noqa: F401
    BackendLookupError,
    BridgeError,
    ReplyDeliveryError,
    TransportCastError,
    UnsupportedEventType,
)
from .event_loop import EventLoop, LoopState  # noqa: F401
from .logging_config import configure_logging  # noqa: F401
from .router import CommandRouter  # noqa: F401

__all__ = [
    "AppSettings",
    "get_settings",
    "BackendLookupError",
    "BridgeError",
    "ReplyDeliveryError",
    "TransportCastError",
    "UnsupportedEventType",
    "EventLoop",
    "LoopState",
    "configure_logging",
    "CommandRouter",
]
