"""A channel: the topic namespace under one channel name."""

from __future__ import annotations

import logging
import threading
from typing import Any

from hermes.domain.errors import InvalidNameError, NotFoundError
from hermes.domain.models import ChannelInfo
from hermes.domain.topic import Topic
from hermes.repos.memory import NameStore
from hermes.services.identity import ListenerMatcher, same_reference

logger = logging.getLogger(__name__)


class Channel:
    """Owns its topics and creates them on first reference."""

    def __init__(
        self,
        name: str,
        matcher: ListenerMatcher = same_reference,
        lock: threading.RLock | None = None,
        topics: NameStore[Topic[Any]] | None = None,
    ) -> None:
        self._name = name
        self._matcher = matcher
        self._lock = lock or threading.RLock()
        self._topics: NameStore[Topic[Any]] = NameStore() if topics is None else topics
        for topic in self._topics.list_all():
            topic.channel = name

    @property
    def name(self) -> str:
        return self._name

    def resolve_topic(self, name: str) -> Topic[Any]:
        """Return the topic called *name*, creating it if needed."""
        if not name:
            raise InvalidNameError("No name is given when resolving a topic.")
        with self._lock:
            topic = self._topics.get(name)
            if topic is None:
                topic = Topic(name, channel=self._name, matcher=self._matcher, lock=self._lock)
                self._topics.add(name, topic)
                logger.debug("Created topic %s/%s", self._name, name)
            return topic

    def remove_topic(self, name: str) -> None:
        """Delete a topic with all of its listeners and its replay slot."""
        if not name:
            raise InvalidNameError("No name is given for removing a topic.")
        with self._lock:
            if self._topics.pop(name) is None:
                raise NotFoundError("topic", f"{self._name}/{name}")
            logger.debug("Removed topic %s/%s", self._name, name)

    def has_topic(self, name: str) -> bool:
        with self._lock:
            return self._topics.has(name)

    def get_topic(self, name: str) -> Topic[Any] | None:
        """Look a topic up without creating it."""
        with self._lock:
            return self._topics.get(name)

    def topic_names(self) -> list[str]:
        with self._lock:
            return self._topics.names()

    def describe(self) -> ChannelInfo:
        with self._lock:
            return ChannelInfo(
                name=self._name,
                topics=[topic.describe() for topic in self._topics.list_all()],
            )

    def renamed(self, name: str) -> Channel:
        """Build a channel called *name* that takes over this one's topics.

        This channel is left empty and detached, so a stale handle to it can
        no longer reach the moved topics.
        """
        with self._lock:
            topics, self._topics = self._topics, NameStore()
            return Channel(name, matcher=self._matcher, lock=self._lock, topics=topics)

    def topics(self) -> list[Topic[Any]]:
        with self._lock:
            return self._topics.list_all()

    def __repr__(self) -> str:
        return f"Channel({self._name!r})"
