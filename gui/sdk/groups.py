"""Groups Client — hierarchical groups on the users service."""

from gui.core.errors import SDKErrorKind
from gui.sdk.models import Group, Page, PageMetadata, User, with_query_params
from gui.sdk.transport import ResourceClient, path_segment

GROUPS_ENDPOINT = "groups"


class GroupsClient(ResourceClient):
    """Implements GroupClient against the users service."""

    async def create_group(self, group: Group, token: str) -> Group:
        _, body = await self._call(
            "POST", self._url(GROUPS_ENDPOINT), token,
            SDKErrorKind.CREATION_FAILED, body=group.to_body(), expected=(201,),
        )
        return Group.model_validate_json(body)

    async def groups(self, pm: PageMetadata, token: str) -> Page[Group]:
        return await self._list(GROUPS_ENDPOINT, pm, token)

    async def parents(self, group_id: str, pm: PageMetadata, token: str) -> Page[Group]:
        return await self._list(f"{GROUPS_ENDPOINT}/{path_segment(group_id)}/parents", pm, token)

    async def children(self, group_id: str, pm: PageMetadata, token: str) -> Page[Group]:
        return await self._list(f"{GROUPS_ENDPOINT}/{path_segment(group_id)}/children", pm, token)

    async def group(self, group_id: str, token: str) -> Group:
        _, body = await self._call(
            "GET", self._url(GROUPS_ENDPOINT, group_id), token,
            SDKErrorKind.FETCH_FAILED,
        )
        return Group.model_validate_json(body)

    async def update_group(self, group: Group, token: str) -> Group:
        payload = Group(
            name=group.name, description=group.description,
            metadata=group.metadata,
        ).to_body()
        _, body = await self._call(
            "PUT", self._url(GROUPS_ENDPOINT, group.id or ""), token,
            SDKErrorKind.UPDATE_FAILED, body=payload,
        )
        return Group.model_validate_json(body)

    async def enable_group(self, group_id: str, token: str) -> Group:
        _, body = await self._call(
            "POST", self._url(GROUPS_ENDPOINT, group_id, "enable"), token,
            SDKErrorKind.ENABLE_FAILED,
        )
        return Group.model_validate_json(body)

    async def disable_group(self, group_id: str, token: str) -> Group:
        _, body = await self._call(
            "POST", self._url(GROUPS_ENDPOINT, group_id, "disable"), token,
            SDKErrorKind.DISABLE_FAILED,
        )
        return Group.model_validate_json(body)

    async def members(self, group_id: str, pm: PageMetadata, token: str) -> Page[User]:
        url = with_query_params(
            self._base_url, f"{GROUPS_ENDPOINT}/{path_segment(group_id)}/members", pm,
        )
        _, body = await self._call("GET", url, token, SDKErrorKind.LIST_FAILED)
        return Page[User].from_body(body, "members")

    async def _list(self, endpoint: str, pm: PageMetadata, token: str) -> Page[Group]:
        url = with_query_params(self._base_url, endpoint, pm)
        _, body = await self._call("GET", url, token, SDKErrorKind.LIST_FAILED)
        return Page[Group].from_body(body, "groups")
