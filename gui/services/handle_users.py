"""User Handlers — create (single and CSV), list, view, update, enable/disable."""

from gui.api.requests import (
    BulkCreateRequest, CreateUserRequest, ListRequest, StatusRequest,
    UpdateRequest, ViewRequest,
)
from gui.api.responses import UIResponse, page, redirect
from gui.sdk.client import PlatformSDK
from gui.sdk.models import Credentials, User
from gui.services.handler_helpers import (
    create_sequentially, page_metadata, require,
)


async def create_user(sdk: PlatformSDK, req: CreateUserRequest) -> UIResponse:
    creds = req.user.credentials
    require(
        identity=creds.identity if creds else "",
        secret=creds.secret if creds else "",
    )
    await sdk.users.create_user(req.user, req.token)
    return redirect("/users")


async def create_users(sdk: PlatformSDK, req: BulkCreateRequest) -> UIResponse:
    async def create_one(user: User) -> User:
        require(identity=user.credentials.identity, secret=user.credentials.secret)
        return await sdk.users.create_user(user, req.token)

    await create_sequentially(req.entities, create_one)
    return redirect("/users")


async def list_users(sdk: PlatformSDK, req: ListRequest) -> UIResponse:
    users = await sdk.users.users(page_metadata(req), req.token)
    return page("users.html", users=users)


async def view_user(sdk: PlatformSDK, req: ViewRequest) -> UIResponse:
    require(id=req.id)
    user = await sdk.users.user(req.id, req.token)
    return page("user.html", user=user)


async def update_user(sdk: PlatformSDK, req: UpdateRequest) -> UIResponse:
    require(id=req.id)
    user = User(
        id=req.id, name=req.data.get("name"), metadata=req.data.get("metadata"),
    )
    await sdk.users.update_user(user, req.token)
    return redirect(f"/users/{req.id}")


async def update_user_tags(sdk: PlatformSDK, req: UpdateRequest) -> UIResponse:
    require(id=req.id)
    await sdk.users.update_user_tags(
        User(id=req.id, tags=req.data.get("tags") or []), req.token,
    )
    return redirect(f"/users/{req.id}")


async def update_user_identity(sdk: PlatformSDK, req: UpdateRequest) -> UIResponse:
    identity = req.data.get("identity")
    require(id=req.id, identity=identity)
    await sdk.users.update_user_identity(
        User(id=req.id, credentials=Credentials(identity=identity)), req.token,
    )
    return redirect(f"/users/{req.id}")


async def enable_user(sdk: PlatformSDK, req: StatusRequest) -> UIResponse:
    require(userID=req.id)
    await sdk.users.enable_user(req.id, req.token)
    return redirect("/users")


async def disable_user(sdk: PlatformSDK, req: StatusRequest) -> UIResponse:
    require(userID=req.id)
    await sdk.users.disable_user(req.id, req.token)
    return redirect("/users")
