"""Connection Handlers — thing ↔ channel bindings, sharing and things policies.

Invariants:
    - A single connect issues exactly one Connect call with one-element id lists
    - CSV connect/disconnect bind every listed thing to the one `chanID` channel
    - Things policies are connections carrying actions (subject=thing, object=channel)
"""

from gui.api.requests import (
    ConnectRequest, DisconnectRequest, ListRequest, PolicyRequest, ShareRequest,
)
from gui.api.responses import UIResponse, page, redirect
from gui.core.errors import MalformedDataError
from gui.sdk.client import PlatformSDK
from gui.sdk.models import ConnectionIDs, Policy
from gui.services.handler_helpers import page_metadata, require


def _require_pairs(conns: ConnectionIDs) -> None:
    if not conns.channel_ids or not conns.thing_ids:
        raise MalformedDataError("missing connection ids")
    require(
        channelID=all(conns.channel_ids), thingID=all(conns.thing_ids),
    )


async def connect_from_channel(sdk: PlatformSDK, req: ConnectRequest) -> UIResponse:
    _require_pairs(req.conns)
    await sdk.connections.connect(req.conns, req.token)
    return redirect(f"/channels/{req.conns.channel_ids[0]}/things")


async def connect_from_thing(sdk: PlatformSDK, req: ConnectRequest) -> UIResponse:
    _require_pairs(req.conns)
    await sdk.connections.connect(req.conns, req.token)
    return redirect(f"/things/{req.conns.thing_ids[0]}/channels")


async def connect_bulk(sdk: PlatformSDK, req: ConnectRequest) -> UIResponse:
    _require_pairs(req.conns)
    await sdk.connections.connect(req.conns, req.token)
    return redirect(f"/channels/{req.conns.channel_ids[0]}/things")


async def disconnect_bulk(sdk: PlatformSDK, req: ConnectRequest) -> UIResponse:
    _require_pairs(req.conns)
    await sdk.connections.disconnect(req.conns, req.token)
    return redirect(f"/channels/{req.conns.channel_ids[0]}/things")


async def disconnect_thing(sdk: PlatformSDK, req: DisconnectRequest) -> UIResponse:
    """Disconnect from the channel page."""
    require(channelID=req.channel_id, thingID=req.thing_id)
    await sdk.connections.disconnect_thing(req.thing_id, req.channel_id, req.token)
    return redirect(f"/channels/{req.channel_id}/things")


async def disconnect_channel(sdk: PlatformSDK, req: DisconnectRequest) -> UIResponse:
    """Disconnect from the thing page."""
    require(channelID=req.channel_id, thingID=req.thing_id)
    await sdk.connections.disconnect_thing(req.thing_id, req.channel_id, req.token)
    return redirect(f"/things/{req.thing_id}/channels")


async def share_thing(sdk: PlatformSDK, req: ShareRequest) -> UIResponse:
    """Grant a user actions on a channel."""
    require(channelID=req.channel_id, userID=req.user_id, actions=req.actions)
    policy = Policy(
        subject=req.user_id, object=req.channel_id, actions=req.actions,
    )
    await sdk.policies.add_policy(policy, req.token)
    return redirect(f"/channels/{req.channel_id}")


async def list_things_policies(sdk: PlatformSDK, req: ListRequest) -> UIResponse:
    policies = await sdk.connections.things_policies(page_metadata(req), req.token)
    return page("things_policies.html", policies=policies)


async def add_things_policy(sdk: PlatformSDK, req: ConnectRequest) -> UIResponse:
    _require_pairs(req.conns)
    require(actions=req.conns.actions)
    await sdk.connections.connect(req.conns, req.token)
    return redirect("/things_policies")


async def update_things_policy(sdk: PlatformSDK, req: PolicyRequest) -> UIResponse:
    require(subject=req.policy.subject, object=req.policy.object)
    await sdk.connections.update_things_policy(req.policy, req.token)
    return redirect("/things_policies")


async def delete_things_policy(sdk: PlatformSDK, req: ConnectRequest) -> UIResponse:
    _require_pairs(req.conns)
    await sdk.connections.disconnect(req.conns, req.token)
    return redirect("/things_policies")
