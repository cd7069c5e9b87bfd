"""Policies Client — user-side access-control relations."""

from gui.core.errors import SDKErrorKind
from gui.sdk.models import Page, PageMetadata, Policy, with_query_params
from gui.sdk.transport import ResourceClient

POLICIES_ENDPOINT = "policies"


class PoliciesClient(ResourceClient):
    """Implements PolicyClient against the users service."""

    async def add_policy(self, policy: Policy, token: str) -> None:
        await self._call(
            "POST", self._url(POLICIES_ENDPOINT), token,
            SDKErrorKind.CREATION_FAILED, body=policy.to_body(), expected=(201,),
        )

    async def update_policy(self, policy: Policy, token: str) -> None:
        await self._call(
            "PUT", self._url(POLICIES_ENDPOINT), token,
            SDKErrorKind.UPDATE_FAILED, body=policy.to_body(), expected=(204,),
        )

    async def delete_policy(self, policy: Policy, token: str) -> None:
        await self._call(
            "DELETE",
            self._url(POLICIES_ENDPOINT, policy.subject or "", policy.object or ""),
            token, SDKErrorKind.REMOVAL_FAILED, expected=(204,),
        )

    async def list_policies(self, pm: PageMetadata, token: str) -> Page[Policy]:
        url = with_query_params(self._base_url, POLICIES_ENDPOINT, pm)
        _, body = await self._call("GET", url, token, SDKErrorKind.LIST_FAILED)
        return Page[Policy].from_body(body, "policies")
