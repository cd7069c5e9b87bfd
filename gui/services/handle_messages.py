"""Message Handlers — publish through the HTTP adapter and read from the reader.

Invariants:
    - Publishing authenticates with the thing key, never the user token
    - Reading with a thing key uses "Thing <key>"; without one, the user token
"""

from urllib.parse import quote

from gui.api.requests import PublishRequest, ReadMessagesRequest
from gui.api.responses import UIResponse, page, redirect
from gui.core.domain_types import THING_PREFIX
from gui.sdk.client import PlatformSDK
from gui.sdk.models import Page, PageMetadata
from gui.services.handler_helpers import require


def _channel_name(channel_id: str, subtopic: str) -> str:
    return f"{channel_id}.{subtopic}" if subtopic else channel_id


async def publish(sdk: PlatformSDK, req: PublishRequest) -> UIResponse:
    require(channelID=req.channel_id, thingKey=req.thing_key)
    await sdk.messages.send_message(
        _channel_name(req.channel_id, req.subtopic), req.message, req.thing_key,
    )
    return redirect(f"/readmessages?chanID={quote(req.channel_id, safe='')}")


async def messages_page(sdk: PlatformSDK, req: ReadMessagesRequest) -> UIResponse:
    """Channel picker; lists messages when a channel is selected."""
    channels = await sdk.channels.channels(PageMetadata(limit=100), req.token)
    messages = Page()
    if req.channel_id:
        messages = await sdk.messages.read_messages(req.channel_id, req.token)
    return page(
        "messages.html", channels=channels, channel_id=req.channel_id,
        messages=messages,
    )


async def read_messages(sdk: PlatformSDK, req: ReadMessagesRequest) -> UIResponse:
    require(chanID=req.channel_id)
    auth = THING_PREFIX + req.thing_key if req.thing_key else req.token
    channels = await sdk.channels.channels(PageMetadata(limit=100), req.token)
    messages = await sdk.messages.read_messages(req.channel_id, auth)
    return page(
        "messages.html", channels=channels, channel_id=req.channel_id,
        messages=messages,
    )
