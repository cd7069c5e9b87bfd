"""Request Decoders — inbound HTTP request → typed request value.

Invariants:
    - read_token() runs before any body parsing: a token-requiring route with
      no `token` cookie always fails with NoCookieError (→ 302 /login)
    - Decoders never call the backend and keep no state between requests
    - JSON-encoded form fields (metadata, tags, actions) that fail to parse
      raise MalformedDataError; an absent field decodes to empty
    - Update bodies must be JSON objects; unknown keys are dropped
    - The refresh `ref` is accepted only as a local path with no control
      characters, otherwise "/"

Design Decisions:
    - Small decoder factories (json_update_decoder, status_decoder,
      names_bulk_decoder) instead of one hand-written function per route
    - Path parameters are read from request.path_params, never re-parsed
"""

import json
from typing import Any, Awaitable, Callable
from urllib.parse import urlsplit

from starlette.datastructures import FormData
from starlette.formparsers import MultiPartException
from starlette.requests import Request

from gui.api.csv_import import read_csv_rows
from gui.api.requests import (
    BulkCreateRequest, ConnectRequest, CreateChannelRequest,
    CreateGroupRequest, CreateThingRequest, CreateUserRequest,
    DisconnectRequest, EmptyRequest, ListRequest, LoginRequest,
    MembershipRequest, PasswordRequest, PolicyRequest, PublishRequest,
    ReadMessagesRequest, RefreshRequest, ShareRequest, StatusRequest,
    TokenRequest, UpdateRequest, ViewRequest,
)
from gui.core.domain_types import REFRESH_TOKEN_COOKIE, TOKEN_COOKIE
from gui.core.errors import (
    MalformedDataError, MalformedSubtopicError, NoCookieError,
)
from gui.sdk.models import (
    Channel, ConnectionIDs, Credentials, Group, Policy, Thing, User,
)

Decoder = Callable[[Request], Awaitable[Any]]

DEFAULT_LIMIT = 10
MAX_LIMIT = 100


# ─── Shared Sub-protocols ────────────────────────────────────────

def read_token(request: Request) -> str:
    """Access token from the `token` cookie."""
    token = request.cookies.get(TOKEN_COOKIE)
    if not token:
        raise NoCookieError(TOKEN_COOKIE)
    return token


def safe_ref(ref: str | None) -> str:
    """Keep `ref` only if it is a path on this host."""
    if not ref or not ref.startswith("/") or "\\" in ref:
        return "/"
    # Browsers drop tab, CR and LF, so "/\t/host" would become "//host"
    if any(ord(c) < 0x20 or ord(c) == 0x7f for c in ref):
        return "/"
    parts = urlsplit(ref)
    if parts.scheme or parts.netloc or ref.startswith("//"):
        return "/"
    return ref


async def read_form(request: Request) -> FormData:
    try:
        return await request.form()
    except (MultiPartException, ValueError) as e:
        raise MalformedDataError(f"invalid form body: {e}")


def json_form_field(form: FormData, name: str, expected: type) -> Any:
    """Decode a JSON-encoded form field; absent or blank → None."""
    raw = form.get(name)
    if not isinstance(raw, str) or not raw.strip():
        return None
    try:
        value = json.loads(raw)
    except ValueError:
        raise MalformedDataError(f"{name} is not valid JSON")
    if value is not None and not isinstance(value, expected):
        raise MalformedDataError(f"{name} must be a JSON {expected.__name__}")
    return value


def form_tags(form: FormData) -> list[str] | None:
    tags = json_form_field(form, "tags", list)
    if tags and not all(isinstance(t, str) for t in tags):
        raise MalformedDataError("tags must be strings")
    return tags


def form_str(form: FormData, name: str) -> str:
    value = form.get(name)
    return value.strip() if isinstance(value, str) else ""


async def read_json_object(request: Request) -> dict[str, Any]:
    body = await request.body()
    try:
        data = json.loads(body)
    except ValueError:
        raise MalformedDataError("request body is not valid JSON")
    if not isinstance(data, dict):
        raise MalformedDataError("request body must be a JSON object")
    return data


def query_int(request: Request, name: str, default: int) -> int:
    raw = request.query_params.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise MalformedDataError(f"{name} must be an integer")
    if value < 0:
        raise MalformedDataError(f"{name} must not be negative")
    return value


def _page(request: Request) -> tuple[int, int]:
    offset = query_int(request, "offset", 0)
    limit = query_int(request, "limit", DEFAULT_LIMIT)
    return offset, min(max(limit, 1), MAX_LIMIT)


def normalize_subtopic(subtopic: str) -> str:
    """Turn "a/b//c" into "a.b.c"; reject segments mixing wildcards with text."""
    parts = []
    for segment in subtopic.replace("/", ".").split("."):
        if not segment:
            continue
        if len(segment) > 1 and ("*" in segment or ">" in segment):
            raise MalformedSubtopicError(subtopic)
        parts.append(segment)
    return ".".join(parts)


# ─── Session ─────────────────────────────────────────────────────

async def decode_empty(request: Request) -> EmptyRequest:
    return EmptyRequest()


async def decode_token(request: Request) -> TokenRequest:
    return TokenRequest(token=read_token(request))


async def decode_list(request: Request) -> ListRequest:
    token = read_token(request)
    offset, limit = _page(request)
    return ListRequest(token=token, offset=offset, limit=limit)


async def decode_login(request: Request) -> LoginRequest:
    form = await read_form(request)
    return LoginRequest(
        identity=form_str(form, "username"),
        secret=form_str(form, "password"),
    )


async def decode_refresh(request: Request) -> RefreshRequest:
    refresh_token = request.cookies.get(REFRESH_TOKEN_COOKIE)
    if not refresh_token:
        raise NoCookieError(REFRESH_TOKEN_COOKIE)
    return RefreshRequest(
        refresh_token=refresh_token,
        ref=safe_ref(request.query_params.get("ref")),
    )


async def decode_password_update(request: Request) -> PasswordRequest:
    token = read_token(request)
    form = await read_form(request)
    return PasswordRequest(
        token=token,
        old_password=form_str(form, "oldpass"),
        new_password=form_str(form, "newpass"),
    )


# ─── Views, Updates, Status ──────────────────────────────────────

async def decode_view(request: Request) -> ViewRequest:
    token = read_token(request)
    offset, limit = _page(request)
    return ViewRequest(
        token=token, id=request.path_params.get("id", ""),
        offset=offset, limit=limit,
    )


_UPDATE_FIELD_TYPES: dict[str, type] = {"metadata": dict, "tags": list}


def _check_update_field(name: str, value: Any) -> None:
    expected = _UPDATE_FIELD_TYPES.get(name, str)
    if value is not None and not isinstance(value, expected):
        raise MalformedDataError(f"{name} must be a JSON {expected.__name__}")
    if name == "tags" and value and not all(isinstance(t, str) for t in value):
        raise MalformedDataError("tags must be strings")


def json_update_decoder(*fields: str) -> Decoder:
    """Decoder for a JSON update body restricted to `fields`."""

    async def decode(request: Request) -> UpdateRequest:
        token = read_token(request)
        data = await read_json_object(request)
        kept = {k: data[k] for k in fields if k in data}
        for name, value in kept.items():
            _check_update_field(name, value)
        return UpdateRequest(
            token=token, id=request.path_params.get("id", ""), data=kept,
        )

    return decode


def status_decoder(id_field: str) -> Decoder:
    """Decoder for enable/disable forms carrying the entity id in `id_field`."""

    async def decode(request: Request) -> StatusRequest:
        token = read_token(request)
        form = await read_form(request)
        return StatusRequest(token=token, id=form_str(form, id_field))

    return decode


# ─── Creation ────────────────────────────────────────────────────

async def decode_user_creation(request: Request) -> CreateUserRequest:
    token = read_token(request)
    form = await read_form(request)
    user = User(
        name=form_str(form, "name"),
        credentials=Credentials(
            identity=form_str(form, "identity"),
            secret=form_str(form, "secret"),
        ),
        tags=form_tags(form),
        metadata=json_form_field(form, "metadata", dict),
    )
    return CreateUserRequest(token=token, user=user)


async def decode_thing_creation(request: Request) -> CreateThingRequest:
    token = read_token(request)
    form = await read_form(request)
    identity = form_str(form, "identity")
    secret = form_str(form, "secret")
    thing = Thing(
        id=form_str(form, "thingID") or None,
        name=form_str(form, "name"),
        credentials=(
            Credentials(identity=identity or None, secret=secret or None)
            if identity or secret else None
        ),
        tags=form_tags(form),
        metadata=json_form_field(form, "metadata", dict),
    )
    return CreateThingRequest(token=token, thing=thing)


async def decode_channel_creation(request: Request) -> CreateChannelRequest:
    token = read_token(request)
    form = await read_form(request)
    channel = Channel(
        name=form_str(form, "name"),
        description=form_str(form, "description") or None,
        parent_id=form_str(form, "parentID") or None,
        metadata=json_form_field(form, "metadata", dict),
    )
    return CreateChannelRequest(token=token, channel=channel)


async def decode_group_creation(request: Request) -> CreateGroupRequest:
    token = read_token(request)
    form = await read_form(request)
    group = Group(
        name=form_str(form, "name"),
        description=form_str(form, "description") or None,
        parent_id=form_str(form, "parentID") or None,
        metadata=json_form_field(form, "metadata", dict),
    )
    return CreateGroupRequest(token=token, group=group)


# ─── Bulk CSV ────────────────────────────────────────────────────

async def decode_users_bulk(request: Request) -> BulkCreateRequest:
    token = read_token(request)
    form = await read_form(request)
    rows = await read_csv_rows(form.get("usersFile"), columns=3)
    users = [
        User(name=name, credentials=Credentials(identity=identity, secret=secret))
        for name, identity, secret in rows
    ]
    return BulkCreateRequest(token=token, entities=users)


def names_bulk_decoder(file_field: str, model: type) -> Decoder:
    """Decoder for a one-column CSV of entity names."""

    async def decode(request: Request) -> BulkCreateRequest:
        token = read_token(request)
        form = await read_form(request)
        rows = await read_csv_rows(form.get(file_field), columns=1)
        return BulkCreateRequest(
            token=token, entities=[model(name=row[0]) for row in rows],
        )

    return decode


async def decode_connections_bulk(request: Request) -> ConnectRequest:
    """thingsFile rows of thing ids, all bound to the `chanID` channel."""
    token = read_token(request)
    form = await read_form(request)
    rows = await read_csv_rows(form.get("thingsFile"), columns=1)
    channel_id = form_str(form, "chanID")
    return ConnectRequest(
        token=token,
        conns=ConnectionIDs(
            channel_ids=[channel_id] * len(rows),
            thing_ids=[row[0] for row in rows],
        ),
    )


# ─── Connections ─────────────────────────────────────────────────

def _single_connection(
    channel_id: str, thing_id: str, actions: list[str],
) -> ConnectionIDs:
    return ConnectionIDs(
        channel_ids=[channel_id], thing_ids=[thing_id], actions=actions or None,
    )


async def decode_channel_connect_thing(request: Request) -> ConnectRequest:
    """/channels/{id}/connectThing: channel in the path, thingID in the form."""
    token = read_token(request)
    form = await read_form(request)
    return ConnectRequest(token=token, conns=_single_connection(
        request.path_params["id"], form_str(form, "thingID"),
        form.getlist("actions"),
    ))


async def decode_thing_connect_channel(request: Request) -> ConnectRequest:
    """/things/{id}/connect: thing in the path, channelID in the form."""
    token = read_token(request)
    form = await read_form(request)
    return ConnectRequest(token=token, conns=_single_connection(
        form_str(form, "channelID"), request.path_params["id"],
        form.getlist("actions"),
    ))


async def decode_thing_connect_thing(request: Request) -> ConnectRequest:
    """/things/{id}/connectThing: the path id fills whichever side the form omits."""
    token = read_token(request)
    form = await read_form(request)
    path_id = request.path_params["id"]
    channel_id = form_str(form, "channelID")
    thing_id = form_str(form, "thingID")
    if channel_id:
        thing_id = thing_id or path_id
    else:
        channel_id = path_id
    return ConnectRequest(token=token, conns=_single_connection(
        channel_id, thing_id, form.getlist("actions"),
    ))


async def decode_disconnect(request: Request) -> DisconnectRequest:
    token = read_token(request)
    form = await read_form(request)
    return DisconnectRequest(
        token=token,
        channel_id=form_str(form, "channelID"),
        thing_id=form_str(form, "thingID"),
    )


async def decode_share_thing(request: Request) -> ShareRequest:
    token = read_token(request)
    form = await read_form(request)
    return ShareRequest(
        token=token,
        channel_id=request.path_params["id"],
        user_id=form_str(form, "userID"),
        actions=form.getlist("actions"),
    )


async def decode_things_policy(request: Request) -> ConnectRequest:
    """Things policy form: subject is the thing, object the channel."""
    token = read_token(request)
    form = await read_form(request)
    return ConnectRequest(token=token, conns=_single_connection(
        form_str(form, "object"), form_str(form, "subject"),
        form.getlist("actions"),
    ))


# ─── Groups ──────────────────────────────────────────────────────

async def decode_assign(request: Request) -> MembershipRequest:
    token = read_token(request)
    form = await read_form(request)
    return MembershipRequest(
        token=token,
        group_id=request.path_params["id"],
        member_id=form_str(form, "memberID"),
        member_types=form.getlist("Type"),
    )


async def decode_unassign(request: Request) -> MembershipRequest:
    token = read_token(request)
    form = await read_form(request)
    return MembershipRequest(
        token=token,
        group_id=request.path_params["id"],
        member_id=form_str(form, "memberID"),
    )


# ─── Policies ────────────────────────────────────────────────────

async def decode_policy(request: Request) -> PolicyRequest:
    token = read_token(request)
    form = await read_form(request)
    return PolicyRequest(token=token, policy=Policy(
        subject=form_str(form, "subject"),
        object=form_str(form, "object"),
        actions=form.getlist("actions"),
    ))


async def decode_policy_update(request: Request) -> PolicyRequest:
    """Update form sends `actions` as one JSON-encoded list."""
    token = read_token(request)
    form = await read_form(request)
    return PolicyRequest(token=token, policy=Policy(
        subject=form_str(form, "subject"),
        object=form_str(form, "object"),
        actions=json_form_field(form, "actions", list) or [],
    ))


async def decode_policy_delete(request: Request) -> PolicyRequest:
    token = read_token(request)
    form = await read_form(request)
    return PolicyRequest(token=token, policy=Policy(
        subject=form_str(form, "subject"),
        object=form_str(form, "object"),
    ))


# ─── Messages ────────────────────────────────────────────────────

async def decode_publish(request: Request) -> PublishRequest:
    token = read_token(request)
    form = await read_form(request)
    message = form.get("message")
    return PublishRequest(
        token=token,
        channel_id=form_str(form, "channelID"),
        message=message if isinstance(message, str) else "",
        thing_key=form_str(form, "thingKey"),
        subtopic=normalize_subtopic(form_str(form, "subtopic")),
    )


async def decode_read_messages_page(request: Request) -> ReadMessagesRequest:
    return ReadMessagesRequest(
        token=read_token(request),
        channel_id=request.query_params.get("chanID", ""),
    )


async def decode_read_messages(request: Request) -> ReadMessagesRequest:
    token = read_token(request)
    form = await read_form(request)
    return ReadMessagesRequest(
        token=token,
        channel_id=form_str(form, "chanID"),
        thing_key=form_str(form, "thingKey"),
    )
