"""Group Handlers — CRUD, members, and membership expressed as policies.

Invariants:
    - Assign adds a policy (subject=member, object=group, actions=member types)
    - Unassign deletes the (member, group) policy
"""

from gui.api.requests import (
    BulkCreateRequest, CreateGroupRequest, ListRequest, MembershipRequest,
    StatusRequest, UpdateRequest, ViewRequest,
)
from gui.api.responses import UIResponse, page, redirect
from gui.core.domain_types import MemberType
from gui.core.errors import MalformedDataError
from gui.sdk.client import PlatformSDK
from gui.sdk.models import Group, Policy
from gui.services.handler_helpers import (
    create_sequentially, page_metadata, require,
)

_UPDATABLE = ("name", "description", "metadata")
_MEMBER_TYPES = frozenset(t.value for t in MemberType)


async def create_group(sdk: PlatformSDK, req: CreateGroupRequest) -> UIResponse:
    require(name=req.group.name)
    await sdk.groups.create_group(req.group, req.token)
    return redirect("/groups")


async def create_groups(sdk: PlatformSDK, req: BulkCreateRequest) -> UIResponse:
    async def create_one(group: Group) -> Group:
        require(name=group.name)
        return await sdk.groups.create_group(group, req.token)

    await create_sequentially(req.entities, create_one)
    return redirect("/groups")


async def list_groups(sdk: PlatformSDK, req: ListRequest) -> UIResponse:
    groups = await sdk.groups.groups(page_metadata(req), req.token)
    return page("groups.html", groups=groups)


async def view_group(sdk: PlatformSDK, req: ViewRequest) -> UIResponse:
    require(id=req.id)
    group = await sdk.groups.group(req.id, req.token)
    children = await sdk.groups.children(req.id, page_metadata(req), req.token)
    return page("group.html", group=group, children=children)


async def update_group(sdk: PlatformSDK, req: UpdateRequest) -> UIResponse:
    require(id=req.id)
    fields = {k: req.data.get(k) for k in _UPDATABLE}
    await sdk.groups.update_group(Group(id=req.id, **fields), req.token)
    return redirect(f"/groups/{req.id}")


async def enable_group(sdk: PlatformSDK, req: StatusRequest) -> UIResponse:
    require(groupID=req.id)
    await sdk.groups.enable_group(req.id, req.token)
    return redirect("/groups")


async def disable_group(sdk: PlatformSDK, req: StatusRequest) -> UIResponse:
    require(groupID=req.id)
    await sdk.groups.disable_group(req.id, req.token)
    return redirect("/groups")


async def list_members(sdk: PlatformSDK, req: ViewRequest) -> UIResponse:
    require(id=req.id)
    group = await sdk.groups.group(req.id, req.token)
    members = await sdk.groups.members(req.id, page_metadata(req), req.token)
    users = await sdk.users.users(page_metadata(req), req.token)
    return page("group_members.html", group=group, members=members, users=users)


async def assign(sdk: PlatformSDK, req: MembershipRequest) -> UIResponse:
    require(id=req.group_id, memberID=req.member_id, Type=req.member_types)
    unknown = set(req.member_types) - _MEMBER_TYPES
    if unknown:
        raise MalformedDataError(f"unknown member type(s): {', '.join(sorted(unknown))}")
    policy = Policy(
        subject=req.member_id, object=req.group_id, actions=req.member_types,
    )
    await sdk.policies.add_policy(policy, req.token)
    return redirect(f"/groups/{req.group_id}/members")


async def unassign(sdk: PlatformSDK, req: MembershipRequest) -> UIResponse:
    require(id=req.group_id, memberID=req.member_id)
    await sdk.policies.delete_policy(
        Policy(subject=req.member_id, object=req.group_id), req.token,
    )
    return redirect(f"/groups/{req.group_id}/members")
