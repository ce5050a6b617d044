"""Exception types raised while bridging Slack and Redmine."""

from __future__ import annotations


class BridgeError(Exception):
    """Base class for bridge failures."""


class TransportCastError(BridgeError):
    """Raised when a Socket Mode payload does not have the expected shape."""


class UnsupportedEventType(BridgeError):
    """Raised when an Events API envelope type is not recognised."""

    def __init__(self, event_type: str | None) -> None:
        super().__init__(f"Unsupported event type: {event_type!r}")
        self.event_type = event_type


class ReplyDeliveryError(BridgeError):
    """Raised when a reply could not be posted to Slack."""

    def __init__(self, channel: str, error: str | None) -> None:
        super().__init__(f"Failed to post message to {channel}: {error}")
        self.channel = channel
        self.error = error


class BackendLookupError(BridgeError):
    """Raised when the Redmine API cannot be queried or returns garbage."""
