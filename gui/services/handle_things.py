"""Thing Handlers — create (single and CSV), list, view, update, enable/disable."""

from gui.api.requests import (
    BulkCreateRequest, CreateThingRequest, ListRequest, StatusRequest,
    UpdateRequest, ViewRequest,
)
from gui.api.responses import UIResponse, page, redirect
from gui.sdk.client import PlatformSDK
from gui.sdk.models import Thing
from gui.services.handler_helpers import (
    create_sequentially, page_metadata, require,
)


async def create_thing(sdk: PlatformSDK, req: CreateThingRequest) -> UIResponse:
    require(name=req.thing.name)
    await sdk.things.create_thing(req.thing, req.token)
    return redirect("/things")


async def create_things(sdk: PlatformSDK, req: BulkCreateRequest) -> UIResponse:
    async def create_one(thing: Thing) -> Thing:
        require(name=thing.name)
        return await sdk.things.create_thing(thing, req.token)

    await create_sequentially(req.entities, create_one)
    return redirect("/things")


async def list_things(sdk: PlatformSDK, req: ListRequest) -> UIResponse:
    things = await sdk.things.things(page_metadata(req), req.token)
    return page("things.html", things=things)


async def view_thing(sdk: PlatformSDK, req: ViewRequest) -> UIResponse:
    require(id=req.id)
    thing = await sdk.things.thing(req.id, req.token)
    return page("thing.html", thing=thing)


async def list_thing_channels(sdk: PlatformSDK, req: ViewRequest) -> UIResponse:
    """Channels the thing is connected to, plus all channels for the connect form."""
    require(id=req.id)
    thing = await sdk.things.thing(req.id, req.token)
    connected = await sdk.channels.channels_by_thing(req.id, page_metadata(req), req.token)
    channels = await sdk.channels.channels(page_metadata(req), req.token)
    return page(
        "thing_channels.html", thing=thing, connected=connected, channels=channels,
    )


async def update_thing(sdk: PlatformSDK, req: UpdateRequest) -> UIResponse:
    require(id=req.id)
    thing = Thing(
        id=req.id, name=req.data.get("name"), metadata=req.data.get("metadata"),
    )
    await sdk.things.update_thing(thing, req.token)
    return redirect(f"/things/{req.id}")


async def update_thing_tags(sdk: PlatformSDK, req: UpdateRequest) -> UIResponse:
    require(id=req.id)
    await sdk.things.update_thing_tags(
        Thing(id=req.id, tags=req.data.get("tags") or []), req.token,
    )
    return redirect(f"/things/{req.id}")


async def update_thing_secret(sdk: PlatformSDK, req: UpdateRequest) -> UIResponse:
    secret = req.data.get("secret")
    require(id=req.id, secret=secret)
    await sdk.things.update_thing_secret(req.id, secret, req.token)
    return redirect(f"/things/{req.id}")


async def update_thing_owner(sdk: PlatformSDK, req: UpdateRequest) -> UIResponse:
    owner = req.data.get("owner")
    require(id=req.id, owner=owner)
    await sdk.things.update_thing_owner(Thing(id=req.id, owner=owner), req.token)
    return redirect(f"/things/{req.id}")


async def enable_thing(sdk: PlatformSDK, req: StatusRequest) -> UIResponse:
    require(thingID=req.id)
    await sdk.things.enable_thing(req.id, req.token)
    return redirect("/things")


async def disable_thing(sdk: PlatformSDK, req: StatusRequest) -> UIResponse:
    require(thingID=req.id)
    await sdk.things.disable_thing(req.id, req.token)
    return redirect("/things")
