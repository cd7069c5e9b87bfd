"""Capability Protocols — one contract per backend resource family.

Invariants:
    - PlatformSDK exposes each capability typed as its Protocol
    - Every method performs exactly one backend HTTP call
    - Failures raise SDKError (core/errors.py); no method returns an error value

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Split per resource so a change to one backend API touches one contract
"""

from datetime import datetime
from typing import Protocol

from gui.sdk.models import (
    BootstrapConfig, Cert, Channel, ConnectionIDs, Group, HealthInfo,
    Message, Page, PageMetadata, Policy, Subscription, Thing, Token, User,
)


class UserClient(Protocol):
    async def create_user(self, user: User, token: str) -> User: ...
    async def user(self, user_id: str, token: str) -> User: ...
    async def users(self, pm: PageMetadata, token: str) -> Page[User]: ...
    async def user_profile(self, token: str) -> User: ...
    async def update_user(self, user: User, token: str) -> User: ...
    async def update_user_tags(self, user: User, token: str) -> User: ...
    async def update_user_identity(self, user: User, token: str) -> User: ...
    async def update_user_owner(self, user: User, token: str) -> User: ...
    async def update_password(self, old_secret: str, new_secret: str, token: str) -> User: ...
    async def enable_user(self, user_id: str, token: str) -> User: ...
    async def disable_user(self, user_id: str, token: str) -> User: ...
    async def create_token(self, user: User) -> Token: ...
    async def refresh_token(self, refresh_token: str) -> Token: ...
    async def reset_password_request(self, email: str) -> None: ...
    async def reset_password(self, password: str, confirm_password: str, token: str) -> None: ...


class ThingClient(Protocol):
    async def create_thing(self, thing: Thing, token: str) -> Thing: ...
    async def create_things(self, things: list[Thing], token: str) -> list[Thing]: ...
    async def things(self, pm: PageMetadata, token: str) -> Page[Thing]: ...
    async def things_by_channel(self, channel_id: str, pm: PageMetadata, token: str) -> Page[Thing]: ...
    async def thing(self, thing_id: str, token: str) -> Thing: ...
    async def update_thing(self, thing: Thing, token: str) -> Thing: ...
    async def update_thing_tags(self, thing: Thing, token: str) -> Thing: ...
    async def update_thing_secret(self, thing_id: str, secret: str, token: str) -> Thing: ...
    async def update_thing_owner(self, thing: Thing, token: str) -> Thing: ...
    async def enable_thing(self, thing_id: str, token: str) -> Thing: ...
    async def disable_thing(self, thing_id: str, token: str) -> Thing: ...
    async def identify_thing(self, key: str) -> str: ...


class ChannelClient(Protocol):
    async def create_channel(self, channel: Channel, token: str) -> Channel: ...
    async def create_channels(self, channels: list[Channel], token: str) -> list[Channel]: ...
    async def channels(self, pm: PageMetadata, token: str) -> Page[Channel]: ...
    async def channels_by_thing(self, thing_id: str, pm: PageMetadata, token: str) -> Page[Channel]: ...
    async def channel(self, channel_id: str, token: str) -> Channel: ...
    async def update_channel(self, channel: Channel, token: str) -> Channel: ...
    async def enable_channel(self, channel_id: str, token: str) -> Channel: ...
    async def disable_channel(self, channel_id: str, token: str) -> Channel: ...


class ConnectionClient(Protocol):
    async def connect(self, conns: ConnectionIDs, token: str) -> None: ...
    async def disconnect(self, conns: ConnectionIDs, token: str) -> None: ...
    async def connect_thing(self, thing_id: str, channel_id: str, token: str) -> None: ...
    async def disconnect_thing(self, thing_id: str, channel_id: str, token: str) -> None: ...
    async def things_policies(self, pm: PageMetadata, token: str) -> Page[Policy]: ...
    async def update_things_policy(self, policy: Policy, token: str) -> None: ...


class GroupClient(Protocol):
    async def create_group(self, group: Group, token: str) -> Group: ...
    async def groups(self, pm: PageMetadata, token: str) -> Page[Group]: ...
    async def parents(self, group_id: str, pm: PageMetadata, token: str) -> Page[Group]: ...
    async def children(self, group_id: str, pm: PageMetadata, token: str) -> Page[Group]: ...
    async def group(self, group_id: str, token: str) -> Group: ...
    async def update_group(self, group: Group, token: str) -> Group: ...
    async def enable_group(self, group_id: str, token: str) -> Group: ...
    async def disable_group(self, group_id: str, token: str) -> Group: ...
    async def members(self, group_id: str, pm: PageMetadata, token: str) -> Page[User]: ...


class PolicyClient(Protocol):
    async def add_policy(self, policy: Policy, token: str) -> None: ...
    async def update_policy(self, policy: Policy, token: str) -> None: ...
    async def delete_policy(self, policy: Policy, token: str) -> None: ...
    async def list_policies(self, pm: PageMetadata, token: str) -> Page[Policy]: ...


class MessageClient(Protocol):
    async def send_message(self, channel_name: str, msg: str, key: str) -> None: ...
    async def read_messages(self, channel_name: str, token: str) -> Page[Message]: ...
    def set_content_type(self, content_type: str) -> None: ...


class HealthClient(Protocol):
    async def health(self, service: str) -> HealthInfo: ...


class BootstrapClient(Protocol):
    async def add_bootstrap(self, cfg: BootstrapConfig, token: str) -> str: ...
    async def view_bootstrap(self, config_id: str, token: str) -> BootstrapConfig: ...
    async def update_bootstrap(self, cfg: BootstrapConfig, token: str) -> None: ...
    async def update_bootstrap_certs(
        self, config_id: str, client_cert: str, client_key: str, ca: str, token: str,
    ) -> BootstrapConfig: ...
    async def update_bootstrap_connection(self, config_id: str, channels: list[str], token: str) -> None: ...
    async def remove_bootstrap(self, config_id: str, token: str) -> None: ...
    async def bootstrap(self, external_id: str, external_key: str) -> BootstrapConfig: ...
    async def bootstraps(self, pm: PageMetadata, token: str) -> Page[BootstrapConfig]: ...
    async def whitelist(self, cfg: BootstrapConfig, token: str) -> None: ...


class CertClient(Protocol):
    async def issue_cert(self, thing_id: str, valid: str, token: str) -> Cert: ...
    async def view_cert(self, cert_id: str, token: str) -> Cert: ...
    async def view_cert_by_thing(self, thing_id: str, token: str) -> Page[Cert]: ...
    async def revoke_cert(self, thing_id: str, token: str) -> datetime: ...


class SubscriptionClient(Protocol):
    async def create_subscription(self, topic: str, contact: str, token: str) -> str: ...
    async def list_subscriptions(self, pm: PageMetadata, token: str) -> Page[Subscription]: ...
    async def view_subscription(self, subscription_id: str, token: str) -> Subscription: ...
    async def delete_subscription(self, subscription_id: str, token: str) -> None: ...
