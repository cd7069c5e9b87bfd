"""Domain Types — identifiers, statuses and wire constants shared across layers.

Invariants:
    - Entity ids are opaque strings issued by the backend
    - Client status is exactly "enabled" or "disabled" (soft delete only)
    - Authorization prefixes are the only two schemes the backend accepts
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", str)
ThingId = NewType("ThingId", str)
ChannelId = NewType("ChannelId", str)
GroupId = NewType("GroupId", str)


# ─── Wire Constants ──────────────────────────────────────────────

BEARER_PREFIX = "Bearer "
THING_PREFIX = "Thing "

TOKEN_COOKIE = "token"
REFRESH_TOKEN_COOKIE = "refresh_token"


# ─── Enums ───────────────────────────────────────────────────────

class ClientStatus(str, Enum):
    """User/thing/channel/group status; disable is the only delete."""
    ENABLED = "enabled"
    DISABLED = "disabled"


class ContentType(str, Enum):
    """Payload content types accepted by the HTTP adapter."""
    JSON = "application/json"
    SENML_JSON = "application/senml+json"
    BINARY = "application/octet-stream"


class MemberType(str, Enum):
    """Member kinds that can be assigned to a group."""
    USERS = "users"
    THINGS = "things"
    CHANNELS = "channels"
    GROUPS = "groups"
