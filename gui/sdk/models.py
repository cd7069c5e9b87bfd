"""SDK Models — pydantic wire types for the platform REST API.

Invariants:
    - Optional fields default to None and are dropped on serialization (omitempty)
    - Secrets never appear in repr() output
    - Every list operation yields Page[T] regardless of the backend's item key
    - PageMetadata.query() emits only non-zero / non-empty fields, keys sorted

Design Decisions:
    - One generic Page[T] instead of a page class per resource; the backend
      item key ("users", "things", ...) is supplied by the caller of from_body()
"""

import json
from typing import Any, Generic, TypeVar
from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")

Metadata = dict[str, Any]

# Fields the backend accepts as query parameters; permission and
# owner_id travel in request bodies only.
_QUERY_FIELDS = (
    "offset", "limit", "total", "level", "email", "name", "type",
    "visibility", "status", "metadata", "action", "subject", "object",
    "tag", "owner", "shared_by", "topic", "contact", "state",
)


class WireModel(BaseModel):
    """Base for all request/response bodies."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    def to_body(self) -> bytes:
        return self.model_dump_json(exclude_none=True, by_alias=True).encode()


class Credentials(WireModel):
    identity: str | None = None
    secret: str | None = Field(default=None, repr=False)


class User(WireModel):
    id: str | None = None
    name: str | None = None
    credentials: Credentials | None = None
    tags: list[str] | None = None
    owner: str | None = None
    metadata: Metadata | None = None
    created_at: str | None = None
    updated_at: str | None = None
    updated_by: str | None = None
    status: str | None = None
    role: str | None = None


class Thing(WireModel):
    id: str | None = None
    name: str | None = None
    credentials: Credentials | None = None
    tags: list[str] | None = None
    owner: str | None = None
    metadata: Metadata | None = None
    created_at: str | None = None
    updated_at: str | None = None
    updated_by: str | None = None
    status: str | None = None


class Channel(WireModel):
    id: str | None = None
    owner_id: str | None = None
    parent_id: str | None = None
    name: str | None = None
    description: str | None = None
    metadata: Metadata | None = None
    level: int | None = None
    path: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    status: str | None = None


class Group(WireModel):
    id: str | None = None
    owner_id: str | None = None
    parent_id: str | None = None
    name: str | None = None
    description: str | None = None
    metadata: Metadata | None = None
    level: int | None = None
    path: str | None = None
    children: list["Group"] | None = None
    created_at: str | None = None
    updated_at: str | None = None
    status: str | None = None


class Policy(WireModel):
    owner_id: str | None = None
    subject: str | None = None
    object: str | None = None
    actions: list[str] | None = None
    created_at: str | None = None
    updated_at: str | None = None


class ConnectionIDs(WireModel):
    """Many-to-many thing ↔ channel binding; lists are index-aligned."""
    channel_ids: list[str] = Field(default_factory=list)
    thing_ids: list[str] = Field(default_factory=list)
    actions: list[str] | None = None


class Token(WireModel):
    access_token: str = Field(repr=False)
    refresh_token: str | None = Field(default=None, repr=False)
    access_type: str | None = None


class Message(WireModel):
    """SenML-style message as returned by the reader."""
    model_config = ConfigDict(extra="allow")

    channel: str | None = None
    subtopic: str | None = None
    publisher: str | None = None
    protocol: str | None = None
    name: str | None = None
    unit: str | None = None
    time: float | None = None
    value: float | None = None
    string_value: str | None = None
    bool_value: bool | None = None
    data_value: str | None = None
    sum: float | None = None
    update_time: float | None = None


class HealthInfo(WireModel):
    status: str = ""
    version: str = ""
    commit: str = ""
    description: str = ""
    build_time: str = ""
    instance_id: str = ""


class BootstrapConfig(WireModel):
    thing_id: str | None = None
    thing_key: str | None = Field(default=None, repr=False)
    channels: list[Any] | None = None
    external_id: str | None = None
    external_key: str | None = Field(default=None, repr=False)
    name: str | None = None
    client_cert: str | None = None
    client_key: str | None = Field(default=None, repr=False)
    ca_cert: str | None = None
    content: str | None = None
    state: int | None = None


class Cert(WireModel):
    thing_id: str | None = None
    cert_serial: str | None = None
    client_key: str | None = Field(default=None, repr=False)
    client_cert: str | None = None
    expiration: str | None = None


class Subscription(WireModel):
    id: str | None = None
    owner_id: str | None = None
    topic: str | None = None
    contact: str | None = None


class Page(BaseModel, Generic[T]):
    """Uniform list result: {items, total, offset, limit}."""
    items: list[T] = Field(default_factory=list)
    total: int = 0
    offset: int = 0
    limit: int = 0

    @classmethod
    def from_body(cls, body: bytes, key: str) -> "Page[T]":
        data = json.loads(body or b"{}")
        return cls(
            items=data.get(key) or [],
            total=data.get("total", 0),
            offset=data.get("offset", 0),
            limit=data.get("limit", 0),
        )


class PageMetadata(BaseModel):
    """Filter/pagination parameters shared by every list operation."""
    total: int = 0
    offset: int = 0
    limit: int = 0
    level: int = 0
    email: str = ""
    name: str = ""
    type: str = ""
    metadata: Metadata | None = None
    status: str = ""
    action: str = ""
    subject: str = ""
    object: str = ""
    permission: str = ""
    tag: str = ""
    owner: str = ""
    shared_by: str = ""
    visibility: str = ""
    owner_id: str = ""
    topic: str = ""
    contact: str = ""
    state: str = ""

    def query(self) -> str:
        """URL-encode the non-default fields, keys in sorted order."""
        params: dict[str, str] = {}
        for name in _QUERY_FIELDS:
            value = getattr(self, name)
            if not value:
                continue
            if name == "metadata":
                value = json.dumps(
                    value, separators=(",", ":"), sort_keys=True,
                    ensure_ascii=False,
                )
            params[name] = str(value)
        return urlencode(sorted(params.items()))


def with_query_params(base_url: str, endpoint: str, pm: PageMetadata) -> str:
    return f"{base_url}/{endpoint}?{pm.query()}"
