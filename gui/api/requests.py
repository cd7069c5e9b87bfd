"""Typed Requests — values produced by the decoders and consumed by handlers.

Invariants:
    - A request that needs a token always carries a non-empty one (the
      decoder raises NoCookieError otherwise)
    - Requests are plain values: no I/O, no reference to the inbound request
"""

from dataclasses import dataclass, field
from typing import Any

from gui.core.domain_types import ChannelId, GroupId, ThingId, UserId
from gui.sdk.models import Channel, ConnectionIDs, Group, Policy, Thing, User


@dataclass
class EmptyRequest:
    """Pages that need neither a token nor input (login form, password reset)."""


@dataclass
class TokenRequest:
    token: str


@dataclass
class ListRequest:
    token: str
    offset: int = 0
    limit: int = 10


@dataclass
class LoginRequest:
    identity: str
    secret: str = field(repr=False)


@dataclass
class RefreshRequest:
    refresh_token: str = field(repr=False)
    ref: str = "/"


@dataclass
class ViewRequest:
    token: str
    id: str
    offset: int = 0
    limit: int = 10


@dataclass
class UpdateRequest:
    """JSON-body update of one entity; `data` holds only the keys sent."""
    token: str
    id: str
    data: dict[str, Any] = field(default_factory=dict)


@dataclass
class StatusRequest:
    token: str
    id: str


@dataclass
class PasswordRequest:
    token: str
    old_password: str = field(repr=False)
    new_password: str = field(repr=False)


@dataclass
class CreateUserRequest:
    token: str
    user: User


@dataclass
class CreateThingRequest:
    token: str
    thing: Thing


@dataclass
class CreateChannelRequest:
    token: str
    channel: Channel


@dataclass
class CreateGroupRequest:
    token: str
    group: Group


@dataclass
class BulkCreateRequest:
    """Entities decoded from an uploaded CSV, in file order."""
    token: str
    entities: list[Any] = field(default_factory=list)


@dataclass
class ConnectRequest:
    token: str
    conns: ConnectionIDs


@dataclass
class DisconnectRequest:
    token: str
    channel_id: ChannelId
    thing_id: ThingId


@dataclass
class ShareRequest:
    token: str
    channel_id: ChannelId
    user_id: UserId
    actions: list[str] = field(default_factory=list)


@dataclass
class MembershipRequest:
    token: str
    group_id: GroupId
    member_id: str
    member_types: list[str] = field(default_factory=list)


@dataclass
class PolicyRequest:
    token: str
    policy: Policy


@dataclass
class PublishRequest:
    token: str
    channel_id: str
    message: str
    thing_key: str = field(repr=False)
    subtopic: str = ""


@dataclass
class ReadMessagesRequest:
    token: str
    channel_id: str = ""
    thing_key: str = field(default="", repr=False)
