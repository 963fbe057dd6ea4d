"""A single topic: immediate listeners, delayed listeners and a replay slot."""

from __future__ import annotations

import logging
import threading
from typing import Generic, TypeVar

from hermes.domain.errors import NotFoundError
from hermes.domain.models import Subscription, TopicInfo
from hermes.domain.registry import Listener, ListenerRegistry
from hermes.services.identity import ListenerMatcher, same_reference

logger = logging.getLogger(__name__)

P = TypeVar("P")

_EMPTY = object()


class Topic(Generic[P]):
    """Listener bookkeeping and synchronous delivery for one topic.

    Delivery is fail-fast: a listener that raises stops the loop and the
    exception reaches the publisher untouched. Every operation holds *lock*
    for its full duration; it is re-entrant, so listeners may publish or
    subscribe from inside a delivery.
    """

    def __init__(
        self,
        name: str,
        channel: str = "",
        matcher: ListenerMatcher = same_reference,
        lock: threading.RLock | None = None,
    ) -> None:
        self.name = name
        self.channel = channel
        self._lock = lock or threading.RLock()
        self._listeners: ListenerRegistry[P] = ListenerRegistry(matcher)
        self._delayed: ListenerRegistry[P] = ListenerRegistry(matcher)
        self._replay: object = _EMPTY

    @property
    def has_replay(self) -> bool:
        return self._replay is not _EMPTY

    # ------------------------------------------------------------------
    # Immediate delivery
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener[P], forced: bool = False) -> Subscription:
        """Register *listener*; an equivalent one already present is kept instead."""
        with self._lock:
            if not forced:
                existing = self._listeners.find(listener)
                if existing is not None:
                    logger.debug("Duplicate listener on %s/%s skipped", self.channel, self.name)
                    return existing
            subscription = self._token(delayed=False)
            self._listeners.append(subscription, listener)
            logger.debug("Subscribed %s", subscription.id)
            return subscription

    def publish(self, payload: P) -> None:
        with self._lock:
            self._listeners.invoke(payload)

    # ------------------------------------------------------------------
    # Delayed delivery
    # ------------------------------------------------------------------

    def subscribe_delayed(
        self, listener: Listener[P], forced: bool = False
    ) -> Subscription:
        """Register a delayed listener and replay the last delayed payload to it.

        Every call replays, duplicates included. The replay runs before the
        listener is stored, so a listener whose replay raises is not
        registered.
        """
        with self._lock:
            if self.has_replay:
                listener(self._replay)
            if not forced:
                existing = self._delayed.find(listener)
                if existing is not None:
                    logger.debug(
                        "Duplicate delayed listener on %s/%s skipped",
                        self.channel,
                        self.name,
                    )
                    return existing
            subscription = self._token(delayed=True)
            self._delayed.append(subscription, listener)
            logger.debug("Subscribed delayed %s", subscription.id)
            return subscription

    def publish_delayed(self, payload: P) -> None:
        """Deliver to delayed listeners, then keep *payload* for late subscribers.

        The replay slot is overwritten even when a listener raises.
        """
        with self._lock:
            try:
                self._delayed.invoke(payload)
            finally:
                self._replay = payload

    # ------------------------------------------------------------------
    # Bookkeeping
    # ------------------------------------------------------------------

    def unsubscribe(self, subscription: Subscription) -> None:
        registry = self._delayed if subscription.delayed else self._listeners
        with self._lock:
            if not registry.remove(subscription):
                raise NotFoundError("subscription", subscription.id)
            logger.debug("Unsubscribed %s", subscription.id)

    def holds(self, subscription: Subscription) -> bool:
        registry = self._delayed if subscription.delayed else self._listeners
        with self._lock:
            return any(token.id == subscription.id for token in registry)

    def listener_count(self) -> tuple[int, int]:
        """Return ``(immediate, delayed)`` listener counts."""
        with self._lock:
            return len(self._listeners), len(self._delayed)

    def describe(self) -> TopicInfo:
        listeners, delayed = self.listener_count()
        return TopicInfo(
            name=self.name,
            listeners=listeners,
            delayed_listeners=delayed,
            has_replay=self.has_replay,
        )

    def _token(self, delayed: bool) -> Subscription:
        return Subscription(channel=self.channel, topic=self.name, delayed=delayed)

    def __repr__(self) -> str:
        return f"Topic({self.channel!r}, {self.name!r})"
