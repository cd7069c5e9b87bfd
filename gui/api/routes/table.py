"""Route Table — static (method, path) → (decoder, handler) bindings.

Invariants:
    - Every UI route is listed in ROUTES; nothing is registered at runtime
    - Each call runs decode → handle → encode; errors propagate to the
      global handlers (api/error_handlers.py)
    - Every call is counted and timed under its route name, error or not
    - Literal paths (/users/bulk, /users/enabled) precede /users/{id}

Design Decisions:
    - Explicit tuple over decorators: every mapping visible in one place
    - Handlers are plain async functions (sdk, request) → UIResponse so they
      can be tested without HTTP
"""

import logging
import time
from typing import Any, Awaitable, Callable, NamedTuple

from fastapi import APIRouter, Depends, Request

from gui.api import decoders as d
from gui.api.responses import encode_response
from gui.config import Settings, get_settings
from gui.core.errors import GuiError
from gui.infrastructure.observability import record_request
from gui.infrastructure.sdk_manager import get_sdk
from gui.sdk.client import PlatformSDK
from gui.sdk.models import Channel, Group, Thing
from gui.services import (
    handle_auth, handle_channels, handle_connections, handle_groups,
    handle_messages, handle_policies, handle_things, handle_users,
)

logger = logging.getLogger(__name__)


class Route(NamedTuple):
    method: str
    path: str
    name: str
    decode: Callable[[Request], Awaitable[Any]]
    handle: Callable[[PlatformSDK, Any], Awaitable[Any]]


ROUTES: tuple[Route, ...] = (
    # Session
    Route("GET", "/", "index", d.decode_token, handle_auth.index),
    Route("GET", "/login", "login", d.decode_empty, handle_auth.login_page),
    Route("POST", "/login", "token", d.decode_login, handle_auth.login),
    Route("GET", "/refresh_token", "refresh_token", d.decode_refresh, handle_auth.refresh_token),
    Route("GET", "/logout", "logout", d.decode_empty, handle_auth.logout),
    Route("POST", "/password", "update_password", d.decode_password_update, handle_auth.update_password),
    Route("GET", "/password", "password", d.decode_empty, handle_auth.password_page),

    # Users
    Route("POST", "/users", "create_user", d.decode_user_creation, handle_users.create_user),
    Route("POST", "/users/bulk", "create_users", d.decode_users_bulk, handle_users.create_users),
    Route("GET", "/users", "list_users", d.decode_list, handle_users.list_users),
    Route("POST", "/users/enabled", "enable_user", d.status_decoder("userID"), handle_users.enable_user),
    Route("POST", "/users/disabled", "disable_user", d.status_decoder("userID"), handle_users.disable_user),
    Route("GET", "/users/{id}", "view_user", d.decode_view, handle_users.view_user),
    Route("POST", "/users/{id}", "update_user", d.json_update_decoder("name", "metadata"), handle_users.update_user),
    Route("POST", "/users/{id}/tags", "update_user_tags", d.json_update_decoder("tags"), handle_users.update_user_tags),
    Route("POST", "/users/{id}/identity", "update_user_identity", d.json_update_decoder("identity"), handle_users.update_user_identity),

    # Things
    Route("POST", "/things", "create_thing", d.decode_thing_creation, handle_things.create_thing),
    Route("POST", "/things/bulk", "create_things", d.names_bulk_decoder("thingsFile", Thing), handle_things.create_things),
    Route("GET", "/things", "list_things", d.decode_list, handle_things.list_things),
    Route("POST", "/things/enabled", "enable_thing", d.status_decoder("thingID"), handle_things.enable_thing),
    Route("POST", "/things/disabled", "disable_thing", d.status_decoder("thingID"), handle_things.disable_thing),
    Route("GET", "/things/{id}", "view_thing", d.decode_view, handle_things.view_thing),
    Route("POST", "/things/{id}", "update_thing", d.json_update_decoder("name", "metadata"), handle_things.update_thing),
    Route("POST", "/things/{id}/tags", "update_thing_tags", d.json_update_decoder("tags"), handle_things.update_thing_tags),
    Route("POST", "/things/{id}/secret", "update_thing_secret", d.json_update_decoder("secret"), handle_things.update_thing_secret),
    Route("POST", "/things/{id}/owner", "update_thing_owner", d.json_update_decoder("owner"), handle_things.update_thing_owner),
    Route("GET", "/things/{id}/channels", "list_channels_by_thing", d.decode_view, handle_things.list_thing_channels),
    Route("POST", "/things/{id}/connect", "connect_channel", d.decode_thing_connect_channel, handle_connections.connect_from_thing),
    Route("POST", "/things/{id}/connectThing", "connect_thing_channel", d.decode_thing_connect_thing, handle_connections.connect_from_thing),
    Route("POST", "/disconnectChannel", "disconnect_channel", d.decode_disconnect, handle_connections.disconnect_channel),

    # Channels
    Route("POST", "/channels", "create_channel", d.decode_channel_creation, handle_channels.create_channel),
    Route("POST", "/channels/bulk", "create_channels", d.names_bulk_decoder("channelsFile", Channel), handle_channels.create_channels),
    Route("POST", "/channels/enabled", "enable_channel", d.status_decoder("channelID"), handle_channels.enable_channel),
    Route("POST", "/channels/disabled", "disable_channel", d.status_decoder("channelID"), handle_channels.disable_channel),
    Route("GET", "/channels/{id}", "view_channel", d.decode_view, handle_channels.view_channel),
    Route("POST", "/channels/{id}", "update_channel", d.json_update_decoder("name", "description", "metadata"), handle_channels.update_channel),
    Route("GET", "/channels", "list_channels", d.decode_list, handle_channels.list_channels),
    Route("POST", "/channels/{id}/connectThing", "connect_thing", d.decode_channel_connect_thing, handle_connections.connect_from_channel),
    Route("POST", "/channels/{id}/shareThing", "share_thing", d.decode_share_thing, handle_connections.share_thing),
    Route("POST", "/disconnectThing", "disconnect_thing", d.decode_disconnect, handle_connections.disconnect_thing),
    Route("POST", "/connect", "connect_things", d.decode_connections_bulk, handle_connections.connect_bulk),
    Route("POST", "/disconnect", "disconnect_things", d.decode_connections_bulk, handle_connections.disconnect_bulk),
    Route("GET", "/channels/{id}/things", "list_things_by_channel", d.decode_view, handle_channels.list_channel_things),

    # Things policies
    Route("GET", "/things_policies", "view_things_policies", d.decode_list, handle_connections.list_things_policies),
    Route("POST", "/things_policies", "add_things_policy", d.decode_things_policy, handle_connections.add_things_policy),
    Route("POST", "/things_policies/update", "update_things_policy", d.decode_policy_update, handle_connections.update_things_policy),
    Route("POST", "/things_policies/delete", "delete_things_policy", d.decode_things_policy, handle_connections.delete_things_policy),

    # Groups
    Route("POST", "/groups", "create_group", d.decode_group_creation, handle_groups.create_group),
    Route("GET", "/groups", "list_groups", d.decode_list, handle_groups.list_groups),
    Route("POST", "/groups/bulk", "create_groups", d.names_bulk_decoder("groupsFile", Group), handle_groups.create_groups),
    Route("POST", "/groups/enabled", "enable_group", d.status_decoder("groupID"), handle_groups.enable_group),
    Route("POST", "/groups/disabled", "disable_group", d.status_decoder("groupID"), handle_groups.disable_group),
    Route("GET", "/groups/{id}", "view_group", d.decode_view, handle_groups.view_group),
    Route("GET", "/groups/{id}/members", "list_members", d.decode_view, handle_groups.list_members),
    Route("POST", "/groups/{id}", "update_group", d.json_update_decoder("name", "description", "metadata"), handle_groups.update_group),
    Route("POST", "/groups/{id}/members", "assign", d.decode_assign, handle_groups.assign),
    Route("POST", "/groups/{id}/unassign", "unassign", d.decode_unassign, handle_groups.unassign),

    # Policies
    Route("GET", "/policies", "list_policies", d.decode_list, handle_policies.list_policies),
    Route("POST", "/policies", "add_policy", d.decode_policy, handle_policies.add_policy),
    Route("POST", "/policies/update", "update_policy", d.decode_policy_update, handle_policies.update_policy),
    Route("POST", "/policies/delete", "delete_policy", d.decode_policy_delete, handle_policies.delete_policy),

    # Messages
    Route("POST", "/messages", "publish", d.decode_publish, handle_messages.publish),
    Route("GET", "/readmessages", "messages", d.decode_read_messages_page, handle_messages.messages_page),
    Route("POST", "/readmessages", "read_messages", d.decode_read_messages, handle_messages.read_messages),

    # Deleted clients
    Route("GET", "/deleted", "list_deleted_clients", d.decode_list, handle_auth.list_deleted),
)


def make_endpoint(route: Route):
    """Wrap one Route as a FastAPI endpoint: decode → handle → encode."""

    async def endpoint(
        request: Request,
        sdk: PlatformSDK = Depends(get_sdk),
        settings: Settings = Depends(get_settings),
    ):
        start = time.perf_counter()
        status_code = 500
        try:
            req = await route.decode(request)
            res = await route.handle(sdk, req)
            status_code = res.code
            return encode_response(request, res, settings.gui_secure_cookies)
        except GuiError as e:
            status_code = e.http_status
            raise
        finally:
            elapsed = time.perf_counter() - start
            record_request(route.name, elapsed)
            logger.info(
                f"{route.method} {route.path} -> {status_code}",
                extra={
                    "route": route.name,
                    "method": route.method,
                    "status_code": status_code,
                    "duration_ms": round(elapsed * 1000, 2),
                },
            )

    endpoint.__name__ = route.name
    return endpoint


def build_router(routes: tuple[Route, ...] = ROUTES) -> APIRouter:
    router = APIRouter(include_in_schema=False)
    for route in routes:
        router.add_api_route(
            route.path, make_endpoint(route), methods=[route.method],
            name=route.name,
        )
    return router
