"""Synchronous in-process channel/topic event bus."""

from __future__ import annotations

import logging
import threading
from typing import Any

from hermes.config import BusSettings
from hermes.domain.channel import Channel
from hermes.domain.errors import DuplicateNameError, InvalidNameError, NotFoundError
from hermes.domain.models import Address, ChannelInfo, Subscription
from hermes.domain.registry import Listener
from hermes.domain.topic import Topic
from hermes.repos.memory import NameStore
from hermes.services.identity import matcher_for

logger = logging.getLogger(__name__)


class Bus:
    """Publish/subscribe bus addressed by ``"channel/topic"`` strings.

    Channels and topics spring into existence the first time an operation
    names them. Listeners are called synchronously, in registration order,
    on the caller's stack. A single re-entrant lock is shared with every
    channel and topic, so calls from different threads are serialised.
    """

    def __init__(self, settings: BusSettings | None = None) -> None:
        self.settings = settings or BusSettings()
        self._matcher = matcher_for(self.settings.identity_rule)
        self._lock = threading.RLock()
        self._channels: NameStore[Channel] = NameStore()

    # ------------------------------------------------------------------
    # Channels
    # ------------------------------------------------------------------

    def resolve_channel(self, name: str) -> Channel:
        """Return the channel called *name*, creating it if needed."""
        if not name:
            raise InvalidNameError("No name is given when resolving a channel.")
        with self._lock:
            channel = self._channels.get(name)
            if channel is None:
                channel = Channel(name, matcher=self._matcher, lock=self._lock)
                self._channels.add(name, channel)
                logger.debug("Created channel %s", name)
            return channel

    def remove_channel(self, name: str) -> None:
        """Delete a channel together with all its topics and listeners."""
        if not name:
            raise InvalidNameError("No name is given for removing a channel.")
        with self._lock:
            if self._channels.pop(name) is None:
                raise NotFoundError("channel", name)
            logger.debug("Removed channel %s", name)

    def rename_channel(self, old: str, new: str) -> Channel:
        """Move a channel's topics under a new name and return the new channel.

        Handles to the old channel are left empty and detached. Tokens
        issued before the rename still work with ``unsubscribe``.
        """
        if not old or not new:
            raise InvalidNameError("Both the current and the new channel name are required.")
        with self._lock:
            channel = self._channels.get(old)
            if channel is None:
                raise NotFoundError("channel", old)
            if old == new:
                return channel
            if self._channels.has(new):
                raise DuplicateNameError(f"Channel '{new}' already exists.")
            renamed = channel.renamed(new)
            self._channels.pop(old)
            self._channels.add(new, renamed)
            logger.debug("Renamed channel %s to %s", old, new)
            return renamed

    def has_channel(self, name: str) -> bool:
        with self._lock:
            return self._channels.has(name)

    def get_channel(self, name: str) -> Channel | None:
        """Look a channel up without creating it."""
        with self._lock:
            return self._channels.get(name)

    def channel_names(self) -> list[str]:
        with self._lock:
            return self._channels.names()

    def describe(self) -> list[ChannelInfo]:
        with self._lock:
            return [channel.describe() for channel in self._channels.list_all()]

    # ------------------------------------------------------------------
    # Addressed operations
    # ------------------------------------------------------------------

    def resolve_topic(self, address: str) -> Topic[Any]:
        """Parse *address* and return its topic, creating channel and topic."""
        parsed = Address.parse(address)
        with self._lock:
            return self.resolve_channel(parsed.channel).resolve_topic(parsed.topic)

    def subscribe(
        self, address: str, listener: Listener[Any], forced: bool = False
    ) -> Subscription:
        with self._lock:
            return self.resolve_topic(address).subscribe(listener, forced=forced)

    def subscribe_delayed(
        self, address: str, listener: Listener[Any], forced: bool = False
    ) -> Subscription:
        """Subscribe and receive the topic's last delayed payload, if any, right away."""
        with self._lock:
            return self.resolve_topic(address).subscribe_delayed(listener, forced=forced)

    def publish(self, address: str, payload: Any = None, forced: bool = False) -> None:
        """Deliver *payload* to the topic's immediate listeners.

        ``forced`` is accepted for symmetry with ``subscribe`` and does not
        change delivery.
        """
        with self._lock:
            self.resolve_topic(address).publish(payload)

    def publish_delayed(self, address: str, payload: Any = None) -> None:
        """Deliver to delayed listeners and remember *payload* for late subscribers."""
        with self._lock:
            self.resolve_topic(address).publish_delayed(payload)

    def unsubscribe(self, subscription: Subscription) -> None:
        """Remove the listener entry identified by *subscription*.

        The token is looked up by id, so it stays valid after its channel
        has been renamed.
        """
        with self._lock:
            topic = self._topic_holding(subscription)
            if topic is None:
                raise NotFoundError("subscription", subscription.id)
            topic.unsubscribe(subscription)

    def _topic_holding(self, subscription: Subscription) -> Topic[Any] | None:
        channel = self._channels.get(subscription.channel)
        if channel is not None:
            topic = channel.get_topic(subscription.topic)
            if topic is not None and topic.holds(subscription):
                return topic
        for channel in self._channels.list_all():
            for topic in channel.topics():
                if topic.holds(subscription):
                    return topic
        return None
