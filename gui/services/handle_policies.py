"""Policy Handlers — list, add, update and delete user-side policies."""

from gui.api.requests import ListRequest, PolicyRequest
from gui.api.responses import UIResponse, page, redirect
from gui.sdk.client import PlatformSDK
from gui.services.handler_helpers import page_metadata, require


async def list_policies(sdk: PlatformSDK, req: ListRequest) -> UIResponse:
    policies = await sdk.policies.list_policies(page_metadata(req), req.token)
    return page("policies.html", policies=policies)


async def add_policy(sdk: PlatformSDK, req: PolicyRequest) -> UIResponse:
    require(subject=req.policy.subject, object=req.policy.object, actions=req.policy.actions)
    await sdk.policies.add_policy(req.policy, req.token)
    return redirect("/policies")


async def update_policy(sdk: PlatformSDK, req: PolicyRequest) -> UIResponse:
    require(subject=req.policy.subject, object=req.policy.object)
    await sdk.policies.update_policy(req.policy, req.token)
    return redirect("/policies")


async def delete_policy(sdk: PlatformSDK, req: PolicyRequest) -> UIResponse:
    require(subject=req.policy.subject, object=req.policy.object)
    await sdk.policies.delete_policy(req.policy, req.token)
    return redirect("/policies")
