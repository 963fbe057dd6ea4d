"""Tests for channel-level topic management."""

from __future__ import annotations

import pytest

from hermes.domain.channel import Channel
from hermes.domain.errors import InvalidNameError, NotFoundError


def test_resolve_topic_is_idempotent():
    channel = Channel("c")

    topic = channel.resolve_topic("t")

    assert channel.resolve_topic("t") is topic
    assert topic.channel == "c"
    assert channel.topic_names() == ["t"]


def test_resolve_topic_rejects_empty_name():
    with pytest.raises(InvalidNameError):
        Channel("c").resolve_topic("")


def test_remove_topic_deletes_listeners_and_replay():
    channel = Channel("c")
    seen: list = []
    channel.resolve_topic("t").subscribe(seen.append)
    channel.resolve_topic("t").publish_delayed("old")

    channel.remove_topic("t")
    fresh = channel.resolve_topic("t")
    fresh.publish("new")

    assert seen == []
    assert fresh.has_replay is False


def test_remove_missing_topic_raises():
    channel = Channel("c")
    with pytest.raises(NotFoundError, match="c/ghost"):
        channel.remove_topic("ghost")


def test_remove_topic_rejects_empty_name():
    with pytest.raises(InvalidNameError):
        Channel("c").remove_topic("")


def test_get_topic_does_not_create():
    channel = Channel("c")

    assert channel.get_topic("t") is None
    assert channel.has_topic("t") is False
    assert channel.topic_names() == []


def test_renamed_channel_adopts_topics():
    channel = Channel("old")
    topic = channel.resolve_topic("t")

    renamed = channel.renamed("new")

    assert renamed.name == "new"
    assert renamed.resolve_topic("t") is topic
    assert topic.channel == "new"
    assert channel.topic_names() == []


def test_describe_snapshot():
    channel = Channel("c")
    channel.resolve_topic("a").subscribe(print)
    channel.resolve_topic("b")

    info = channel.describe()

    assert info.name == "c"
    assert [t.name for t in info.topics] == ["a", "b"]
    assert info.topics[0].listeners == 1
