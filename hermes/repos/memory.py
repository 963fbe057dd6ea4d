"""In-memory store for named bus entities (channels, topics)."""

from __future__ import annotations

from typing import Generic, TypeVar

T = TypeVar("T")


class NameStore(Generic[T]):
    """Dict-backed store keyed by name, preserving insertion order."""

    def __init__(self) -> None:
        self._store: dict[str, T] = {}

    def add(self, name: str, item: T) -> None:
        self._store[name] = item

    def get(self, name: str) -> T | None:
        return self._store.get(name)

    def has(self, name: str) -> bool:
        return name in self._store

    def names(self) -> list[str]:
        return list(self._store)

    def list_all(self) -> list[T]:
        return list(self._store.values())

    def pop(self, name: str) -> T | None:
        return self._store.pop(name, None)
