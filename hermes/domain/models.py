"""Records exchanged with bus callers: addresses, tokens and snapshots."""

from __future__ import annotations

import uuid
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from hermes.domain.errors import InvalidNameError, MissingTopicError

ADDRESS_SEPARATOR = "/"


class IdentityRule(StrEnum):
    REFERENCE = "reference"
    STRUCTURAL = "structural"


def _new_id() -> str:
    return str(uuid.uuid4())


# ---------------------------------------------------------------------------
# Addressing and subscriptions
# ---------------------------------------------------------------------------


class Address(BaseModel):
    """A parsed ``"channel/topic"`` address."""

    model_config = ConfigDict(frozen=True)

    channel: str
    topic: str

    @classmethod
    def parse(cls, address: str) -> Address:
        """Split *address* on its first ``/``.

        Raises ``MissingTopicError`` when there is no separator or nothing
        after it, and ``InvalidNameError`` when the channel part is empty.
        Any further ``/`` belongs to the topic name.
        """
        channel, sep, topic = address.partition(ADDRESS_SEPARATOR)
        if not sep or not topic:
            raise MissingTopicError(address)
        if not channel:
            raise InvalidNameError(f"No channel name given in address '{address}'.")
        return cls(channel=channel, topic=topic)

    def __str__(self) -> str:
        return f"{self.channel}{ADDRESS_SEPARATOR}{self.topic}"


class Subscription(BaseModel):
    """Opaque token naming one listener entry; pass it back to unsubscribe."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_id)
    channel: str
    topic: str
    delayed: bool = False

    @property
    def address(self) -> str:
        return str(Address(channel=self.channel, topic=self.topic))


# ---------------------------------------------------------------------------
# Read-only snapshots
# ---------------------------------------------------------------------------


class TopicInfo(BaseModel):
    name: str
    listeners: int = 0
    delayed_listeners: int = 0
    has_replay: bool = False


class ChannelInfo(BaseModel):
    name: str
    topics: list[TopicInfo] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Request / Response DTOs
# ---------------------------------------------------------------------------


class PublishRequest(BaseModel):
    address: str
    payload: Any = None
    delayed: bool = False


class RemovedResponse(BaseModel):
    status: str = "removed"
    channel: str
    topic: str | None = None
