"""Connections Client — thing ↔ channel bindings and things policies."""

from gui.core.errors import SDKErrorKind
from gui.sdk.models import (
    ConnectionIDs, Page, PageMetadata, Policy, with_query_params,
)
from gui.sdk.transport import ResourceClient

CONNECT_ENDPOINT = "connect"
DISCONNECT_ENDPOINT = "disconnect"
CHANNELS_ENDPOINT = "channels"
THINGS_ENDPOINT = "things"
THINGS_POLICIES_ENDPOINT = "things/policies"


class ConnectionsClient(ResourceClient):
    """Implements ConnectionClient against the things service."""

    async def connect(self, conns: ConnectionIDs, token: str) -> None:
        await self._call(
            "POST", self._url(CONNECT_ENDPOINT), token,
            SDKErrorKind.CREATION_FAILED, body=conns.to_body(), expected=(201,),
        )

    async def disconnect(self, conns: ConnectionIDs, token: str) -> None:
        await self._call(
            "POST", self._url(DISCONNECT_ENDPOINT), token,
            SDKErrorKind.REMOVAL_FAILED, body=conns.to_body(), expected=(204,),
        )

    async def connect_thing(self, thing_id: str, channel_id: str, token: str) -> None:
        await self._call(
            "POST",
            self._url(CHANNELS_ENDPOINT, channel_id, THINGS_ENDPOINT, thing_id),
            token, SDKErrorKind.CREATION_FAILED, expected=(201,),
        )

    async def disconnect_thing(self, thing_id: str, channel_id: str, token: str) -> None:
        await self._call(
            "DELETE",
            self._url(CHANNELS_ENDPOINT, channel_id, THINGS_ENDPOINT, thing_id),
            token, SDKErrorKind.REMOVAL_FAILED, expected=(204,),
        )

    async def things_policies(self, pm: PageMetadata, token: str) -> Page[Policy]:
        url = with_query_params(self._base_url, THINGS_POLICIES_ENDPOINT, pm)
        _, body = await self._call("GET", url, token, SDKErrorKind.LIST_FAILED)
        return Page[Policy].from_body(body, "policies")

    async def update_things_policy(self, policy: Policy, token: str) -> None:
        payload = Policy(
            subject=policy.subject, object=policy.object, actions=policy.actions,
        ).to_body()
        await self._call(
            "PUT", self._url(THINGS_POLICIES_ENDPOINT), token,
            SDKErrorKind.UPDATE_FAILED, body=payload, expected=(204,),
        )
