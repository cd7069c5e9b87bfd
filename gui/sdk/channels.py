"""Channels Client — pub/sub topics on the things service."""

import json

from gui.core.errors import SDKErrorKind
from gui.sdk.models import Channel, Page, PageMetadata, with_query_params
from gui.sdk.transport import ResourceClient, path_segment

CHANNELS_ENDPOINT = "channels"
THINGS_ENDPOINT = "things"


class ChannelsClient(ResourceClient):
    """Implements ChannelClient against the things service."""

    async def create_channel(self, channel: Channel, token: str) -> Channel:
        _, body = await self._call(
            "POST", self._url(CHANNELS_ENDPOINT), token,
            SDKErrorKind.CREATION_FAILED, body=channel.to_body(),
            expected=(201,),
        )
        return Channel.model_validate_json(body)

    async def create_channels(self, channels: list[Channel], token: str) -> list[Channel]:
        payload = json.dumps(
            [c.model_dump(exclude_none=True) for c in channels],
        ).encode()
        _, body = await self._call(
            "POST", self._url(CHANNELS_ENDPOINT, "bulk"), token,
            SDKErrorKind.CREATION_FAILED, body=payload, expected=(200,),
        )
        return Page[Channel].from_body(body, "channels").items

    async def channels(self, pm: PageMetadata, token: str) -> Page[Channel]:
        url = with_query_params(self._base_url, CHANNELS_ENDPOINT, pm)
        _, body = await self._call("GET", url, token, SDKErrorKind.LIST_FAILED)
        return Page[Channel].from_body(body, "channels")

    async def channels_by_thing(self, thing_id: str, pm: PageMetadata, token: str) -> Page[Channel]:
        url = with_query_params(
            self._base_url, f"{THINGS_ENDPOINT}/{path_segment(thing_id)}/{CHANNELS_ENDPOINT}", pm,
        )
        _, body = await self._call("GET", url, token, SDKErrorKind.LIST_FAILED)
        return Page[Channel].from_body(body, "channels")

    async def channel(self, channel_id: str, token: str) -> Channel:
        _, body = await self._call(
            "GET", self._url(CHANNELS_ENDPOINT, channel_id), token,
            SDKErrorKind.FETCH_FAILED,
        )
        return Channel.model_validate_json(body)

    async def update_channel(self, channel: Channel, token: str) -> Channel:
        payload = Channel(
            name=channel.name, description=channel.description,
            metadata=channel.metadata,
        ).to_body()
        _, body = await self._call(
            "PUT", self._url(CHANNELS_ENDPOINT, channel.id or ""), token,
            SDKErrorKind.UPDATE_FAILED, body=payload,
        )
        return Channel.model_validate_json(body)

    async def enable_channel(self, channel_id: str, token: str) -> Channel:
        _, body = await self._call(
            "POST", self._url(CHANNELS_ENDPOINT, channel_id, "enable"), token,
            SDKErrorKind.ENABLE_FAILED,
        )
        return Channel.model_validate_json(body)

    async def disable_channel(self, channel_id: str, token: str) -> Channel:
        _, body = await self._call(
            "POST", self._url(CHANNELS_ENDPOINT, channel_id, "disable"), token,
            SDKErrorKind.DISABLE_FAILED,
        )
        return Channel.model_validate_json(body)
