"""Handlers — called directly with typed requests, backend faked.

Invariants:
    - Bulk import: sequential, stops at the first failure, earlier rows stay
    - Group membership and channel sharing are expressed as policies
    - Reading messages with a thing key authenticates as "Thing <key>"
"""

import json

import pytest

from gui.api.requests import (
    BulkCreateRequest, MembershipRequest, ReadMessagesRequest, ShareRequest,
)
from gui.core.errors import (
    BulkImportError, ErrorKind, MalformedDataError,
)
from gui.sdk.models import Credentials, User
from gui.services import handle_groups, handle_connections, handle_messages, handle_users
from gui.services.handler_helpers import create_sequentially, require

TOKEN = "user-access-token"


def _user(name, identity):
    return User(name=name, credentials=Credentials(identity=identity, secret="pw"))


# -- Helpers -------------------------------------------------------------------


def test_require_names_all_missing_fields():
    with pytest.raises(MalformedDataError) as exc_info:
        require(identity="", secret=None, name="ok")
    assert exc_info.value.message == "missing identity, secret"


async def test_create_sequentially_rejects_empty_input():
    async def create_one(entity):
        return entity

    with pytest.raises(MalformedDataError):
        await create_sequentially([], create_one)


# -- Bulk users ----------------------------------------------------------------


async def test_create_users_partial_failure(sdk, backend):
    backend.on("POST", "/users", 201, json={"id": "u1"})
    backend.on("POST", "/users", 409, json={"message": "entity already exists"})
    req = BulkCreateRequest(token=TOKEN, entities=[
        _user("alice", "a@x.com"), _user("bob", "b@x.com"), _user("carol", "c@x.com"),
    ])

    with pytest.raises(BulkImportError) as exc_info:
        await handle_users.create_users(sdk, req)

    err = exc_info.value
    assert err.row == 2
    assert err.total == 3
    assert [u.id for u in err.created] == ["u1"]
    assert err.kind == ErrorKind.BACKEND_UNAVAILABLE
    assert len(backend.calls("POST", "/users")) == 2


async def test_create_users_all_rows(sdk, backend):
    backend.on("POST", "/users", 201, json={"id": "u1"})
    req = BulkCreateRequest(token=TOKEN, entities=[
        _user("alice", "a@x.com"), _user("bob", "b@x.com"),
    ])

    res = await handle_users.create_users(sdk, req)

    assert res.code == 303
    assert res.headers["Location"] == "/users"
    assert len(backend.calls("POST", "/users")) == 2


# -- Groups --------------------------------------------------------------------


async def test_assign_adds_member_policy(sdk, backend):
    backend.on("POST", "/policies", 201)
    req = MembershipRequest(
        token=TOKEN, group_id="g1", member_id="u1", member_types=["users"],
    )

    res = await handle_groups.assign(sdk, req)

    assert res.headers["Location"] == "/groups/g1/members"
    body = json.loads(backend.calls("POST", "/policies")[0].content)
    assert body == {"subject": "u1", "object": "g1", "actions": ["users"]}


async def test_assign_rejects_unknown_member_type(sdk, backend):
    req = MembershipRequest(
        token=TOKEN, group_id="g1", member_id="u1", member_types=["robots"],
    )

    with pytest.raises(MalformedDataError):
        await handle_groups.assign(sdk, req)
    assert backend.requests == []


async def test_unassign_deletes_member_policy(sdk, backend):
    backend.on("DELETE", "/policies/u1/g1", 204)

    res = await handle_groups.unassign(
        sdk, MembershipRequest(token=TOKEN, group_id="g1", member_id="u1"),
    )

    assert res.headers["Location"] == "/groups/g1/members"
    assert len(backend.calls("DELETE", "/policies/u1/g1")) == 1


# -- Sharing -------------------------------------------------------------------


async def test_share_thing_adds_channel_policy(sdk, backend):
    backend.on("POST", "/policies", 201)
    req = ShareRequest(
        token=TOKEN, channel_id="c1", user_id="u2", actions=["m_read"],
    )

    res = await handle_connections.share_thing(sdk, req)

    assert res.headers["Location"] == "/channels/c1"
    body = json.loads(backend.calls("POST", "/policies")[0].content)
    assert body == {"subject": "u2", "object": "c1", "actions": ["m_read"]}


async def test_share_thing_requires_actions(sdk, backend):
    req = ShareRequest(token=TOKEN, channel_id="c1", user_id="u2")

    with pytest.raises(MalformedDataError):
        await handle_connections.share_thing(sdk, req)


# -- Messages ------------------------------------------------------------------


async def test_read_messages_with_thing_key(sdk, backend):
    backend.on("GET", "/channels", json={"channels": [{"id": "c1"}], "total": 1})
    backend.on("GET", "/channels/c1/messages", json={"messages": [], "total": 0})
    req = ReadMessagesRequest(token=TOKEN, channel_id="c1", thing_key="k-1")

    res = await handle_messages.read_messages(sdk, req)

    assert res.template == "messages.html"
    reader = backend.calls("GET", "/channels/c1/messages")[0]
    assert reader.headers["Authorization"] == "Thing k-1"
    listing = backend.calls("GET", "/channels")[0]
    assert listing.headers["Authorization"] == f"Bearer {TOKEN}"


async def test_messages_page_without_channel_skips_reader(sdk, backend):
    backend.on("GET", "/channels", json={"channels": [], "total": 0})

    res = await handle_messages.messages_page(sdk, ReadMessagesRequest(token=TOKEN))

    assert res.context["messages"].items == []
    assert backend.calls("GET", "/channels/c1/messages") == []
