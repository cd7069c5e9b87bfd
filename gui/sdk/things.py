"""Things Client — device entities on the things service."""

import json

from gui.core.errors import SDKErrorKind
from gui.sdk.models import Page, PageMetadata, Thing, with_query_params
from gui.sdk.transport import ResourceClient, path_segment

THINGS_ENDPOINT = "things"
CHANNELS_ENDPOINT = "channels"
IDENTIFY_ENDPOINT = "identify"


class ThingsClient(ResourceClient):
    """Implements ThingClient against the things service."""

    async def create_thing(self, thing: Thing, token: str) -> Thing:
        _, body = await self._call(
            "POST", self._url(THINGS_ENDPOINT), token,
            SDKErrorKind.CREATION_FAILED, body=thing.to_body(), expected=(201,),
        )
        return Thing.model_validate_json(body)

    async def create_things(self, things: list[Thing], token: str) -> list[Thing]:
        payload = json.dumps(
            [t.model_dump(exclude_none=True) for t in things],
        ).encode()
        _, body = await self._call(
            "POST", self._url(THINGS_ENDPOINT, "bulk"), token,
            SDKErrorKind.CREATION_FAILED, body=payload, expected=(200,),
        )
        return Page[Thing].from_body(body, "things").items

    async def things(self, pm: PageMetadata, token: str) -> Page[Thing]:
        url = with_query_params(self._base_url, THINGS_ENDPOINT, pm)
        _, body = await self._call("GET", url, token, SDKErrorKind.LIST_FAILED)
        return Page[Thing].from_body(body, "things")

    async def things_by_channel(self, channel_id: str, pm: PageMetadata, token: str) -> Page[Thing]:
        url = with_query_params(
            self._base_url, f"{CHANNELS_ENDPOINT}/{path_segment(channel_id)}/{THINGS_ENDPOINT}", pm,
        )
        _, body = await self._call("GET", url, token, SDKErrorKind.LIST_FAILED)
        return Page[Thing].from_body(body, "things")

    async def thing(self, thing_id: str, token: str) -> Thing:
        _, body = await self._call(
            "GET", self._url(THINGS_ENDPOINT, thing_id), token,
            SDKErrorKind.FETCH_FAILED,
        )
        return Thing.model_validate_json(body)

    async def update_thing(self, thing: Thing, token: str) -> Thing:
        payload = Thing(name=thing.name, metadata=thing.metadata).to_body()
        return await self._patch(thing.id, "", payload, token)

    async def update_thing_tags(self, thing: Thing, token: str) -> Thing:
        payload = json.dumps({"tags": thing.tags or []}).encode()
        return await self._patch(thing.id, "tags", payload, token)

    async def update_thing_secret(self, thing_id: str, secret: str, token: str) -> Thing:
        payload = json.dumps({"secret": secret}).encode()
        return await self._patch(thing_id, "secret", payload, token)

    async def update_thing_owner(self, thing: Thing, token: str) -> Thing:
        payload = json.dumps({"owner": thing.owner or ""}).encode()
        return await self._patch(thing.id, "owner", payload, token)

    async def enable_thing(self, thing_id: str, token: str) -> Thing:
        _, body = await self._call(
            "POST", self._url(THINGS_ENDPOINT, thing_id, "enable"), token,
            SDKErrorKind.ENABLE_FAILED,
        )
        return Thing.model_validate_json(body)

    async def disable_thing(self, thing_id: str, token: str) -> Thing:
        _, body = await self._call(
            "POST", self._url(THINGS_ENDPOINT, thing_id, "disable"), token,
            SDKErrorKind.DISABLE_FAILED,
        )
        return Thing.model_validate_json(body)

    async def identify_thing(self, key: str) -> str:
        _, body = await self._call(
            "POST", self._url(IDENTIFY_ENDPOINT), "",
            SDKErrorKind.FETCH_FAILED,
            body=json.dumps({"token": key}).encode(),
        )
        return json.loads(body).get("id", "")

    async def _patch(self, thing_id: str | None, field: str, payload: bytes, token: str) -> Thing:
        parts = [THINGS_ENDPOINT, thing_id or ""]
        if field:
            parts.append(field)
        _, body = await self._call(
            "PATCH", self._url(*parts), token, SDKErrorKind.UPDATE_FAILED,
            body=payload,
        )
        return Thing.model_validate_json(body)
