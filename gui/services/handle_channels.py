"""Channel Handlers — create (single and CSV), list, view, update, enable/disable."""

from gui.api.requests import (
    BulkCreateRequest, CreateChannelRequest, ListRequest, StatusRequest,
    UpdateRequest, ViewRequest,
)
from gui.api.responses import UIResponse, page, redirect
from gui.sdk.client import PlatformSDK
from gui.sdk.models import Channel
from gui.services.handler_helpers import (
    create_sequentially, page_metadata, require,
)

_UPDATABLE = ("name", "description", "metadata")


async def create_channel(sdk: PlatformSDK, req: CreateChannelRequest) -> UIResponse:
    require(name=req.channel.name)
    await sdk.channels.create_channel(req.channel, req.token)
    return redirect("/channels")


async def create_channels(sdk: PlatformSDK, req: BulkCreateRequest) -> UIResponse:
    async def create_one(channel: Channel) -> Channel:
        require(name=channel.name)
        return await sdk.channels.create_channel(channel, req.token)

    await create_sequentially(req.entities, create_one)
    return redirect("/channels")


async def list_channels(sdk: PlatformSDK, req: ListRequest) -> UIResponse:
    channels = await sdk.channels.channels(page_metadata(req), req.token)
    return page("channels.html", channels=channels)


async def view_channel(sdk: PlatformSDK, req: ViewRequest) -> UIResponse:
    require(id=req.id)
    channel = await sdk.channels.channel(req.id, req.token)
    return page("channel.html", channel=channel)


async def list_channel_things(sdk: PlatformSDK, req: ViewRequest) -> UIResponse:
    """Things connected to the channel, plus all things for the connect form."""
    require(id=req.id)
    channel = await sdk.channels.channel(req.id, req.token)
    connected = await sdk.things.things_by_channel(req.id, page_metadata(req), req.token)
    things = await sdk.things.things(page_metadata(req), req.token)
    return page(
        "channel_things.html", channel=channel, connected=connected, things=things,
    )


async def update_channel(sdk: PlatformSDK, req: UpdateRequest) -> UIResponse:
    require(id=req.id)
    fields = {k: req.data.get(k) for k in _UPDATABLE}
    await sdk.channels.update_channel(Channel(id=req.id, **fields), req.token)
    return redirect(f"/channels/{req.id}")


async def enable_channel(sdk: PlatformSDK, req: StatusRequest) -> UIResponse:
    require(channelID=req.id)
    await sdk.channels.enable_channel(req.id, req.token)
    return redirect("/channels")


async def disable_channel(sdk: PlatformSDK, req: StatusRequest) -> UIResponse:
    require(channelID=req.id)
    await sdk.channels.disable_channel(req.id, req.token)
    return redirect("/channels")
