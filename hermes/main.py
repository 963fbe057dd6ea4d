"""FastAPI application: an admin surface over an in-process bus."""

from __future__ import annotations

from fastapi import FastAPI, HTTPException, Request

from hermes.config import BusSettings, configure_logging
from hermes.domain.bus import Bus
from hermes.domain.errors import InvalidNameError, MissingTopicError, NotFoundError
from hermes.domain.models import ChannelInfo, PublishRequest, RemovedResponse, TopicInfo


def create_app(bus: Bus | None = None, settings: BusSettings | None = None) -> FastAPI:
    """Build the app around *bus*, or around a new bus built from *settings*.

    Listeners stay in-process: routes only inspect the bus and invoke its
    public operations on behalf of the HTTP caller.
    """
    settings = settings or (bus.settings if bus is not None else BusSettings.from_env())
    configure_logging(settings)

    app = FastAPI(title="Hermes Event Bus")
    app.state.bus = bus if bus is not None else Bus(settings)

    # ── Routes ────────────────────────────────────────────────────────────

    @app.get("/channels", response_model=list[ChannelInfo])
    def list_channels(request: Request) -> list[ChannelInfo]:
        """Return a snapshot of every channel and its topics."""
        return _bus(request).describe()

    @app.get("/channels/{channel_name}", response_model=ChannelInfo)
    def get_channel(channel_name: str, request: Request) -> ChannelInfo:
        """Return one channel; unknown names are not created."""
        channel = _bus(request).get_channel(channel_name)
        if channel is None:
            raise HTTPException(status_code=404, detail="Channel not found")
        return channel.describe()

    @app.delete("/channels/{channel_name}", response_model=RemovedResponse)
    def remove_channel(channel_name: str, request: Request) -> RemovedResponse:
        try:
            _bus(request).remove_channel(channel_name)
        except NotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return RemovedResponse(channel=channel_name)

    @app.delete("/channels/{channel_name}/topics/{topic_name}", response_model=RemovedResponse)
    def remove_topic(channel_name: str, topic_name: str, request: Request) -> RemovedResponse:
        channel = _bus(request).get_channel(channel_name)
        if channel is None:
            raise HTTPException(status_code=404, detail="Channel not found")
        try:
            channel.remove_topic(topic_name)
        except NotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return RemovedResponse(channel=channel_name, topic=topic_name)

    @app.post("/publish", response_model=TopicInfo)
    def publish(body: PublishRequest, request: Request) -> TopicInfo:
        """Publish a JSON payload and report the topic's state afterwards."""
        bus = _bus(request)
        try:
            if body.delayed:
                bus.publish_delayed(body.address, body.payload)
            else:
                bus.publish(body.address, body.payload)
            topic = bus.resolve_topic(body.address)
        except (MissingTopicError, InvalidNameError) as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return topic.describe()

    return app


def _bus(request: Request) -> Bus:
    return request.app.state.bus
