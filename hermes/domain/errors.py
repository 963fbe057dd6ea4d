"""Errors raised by the bus.

Listener failures are not represented here: whatever a listener raises
propagates to the publisher unchanged.
"""

from __future__ import annotations


class BusError(Exception):
    """Base class for every error raised by the bus itself."""


class InvalidNameError(BusError, ValueError):
    """An empty channel or topic name was given to a create/remove call."""


class MissingTopicError(BusError, ValueError):
    """A topic-scoped operation received an address without a topic."""

    def __init__(self, address: str) -> None:
        super().__init__(f"No topic defined for event '{address}'.")
        self.address = address


class NotFoundError(BusError, LookupError):
    """A channel, topic or subscription to remove does not exist."""

    def __init__(self, kind: str, name: str) -> None:
        super().__init__(f"Cannot remove {kind} '{name}', it does not exist.")
        self.kind = kind
        self.name = name


class DuplicateNameError(BusError, ValueError):
    """A rename targeted a name that is already taken."""
