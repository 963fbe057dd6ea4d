"""Ordered listener collection shared by immediate and delayed delivery."""

from __future__ import annotations

from typing import Callable, Generic, Iterator, NamedTuple, TypeVar

from hermes.domain.models import Subscription
from hermes.services.identity import ListenerMatcher, same_reference

P = TypeVar("P")

Listener = Callable[[P], object]


class _Entry(NamedTuple, Generic[P]):
    subscription: Subscription
    listener: Listener[P]


class ListenerRegistry(Generic[P]):
    """Listeners kept in registration order.

    Duplicate detection is delegated to *matcher*; the registry itself never
    refuses an ``append``, so forced registration is simply skipping ``find``.
    """

    def __init__(self, matcher: ListenerMatcher = same_reference) -> None:
        self._matcher = matcher
        self._entries: list[_Entry[P]] = []

    def find(self, listener: Listener[P]) -> Subscription | None:
        """Return the token of the first entry equivalent to *listener*."""
        for entry in self._entries:
            if self._matcher(entry.listener, listener):
                return entry.subscription
        return None

    def append(self, subscription: Subscription, listener: Listener[P]) -> None:
        self._entries.append(_Entry(subscription, listener))

    def remove(self, subscription: Subscription) -> bool:
        """Drop the entry carrying *subscription*; False if it is not here."""
        for index, entry in enumerate(self._entries):
            if entry.subscription.id == subscription.id:
                del self._entries[index]
                return True
        return False

    def snapshot(self) -> list[Listener[P]]:
        """Listeners as of now; later mutations do not affect the list."""
        return [entry.listener for entry in self._entries]

    def invoke(self, payload: P) -> None:
        """Call every listener with *payload*, stopping at the first failure."""
        for listener in self.snapshot():
            listener(payload)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Subscription]:
        return iter([entry.subscription for entry in self._entries])
