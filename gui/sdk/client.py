"""Platform SDK — one object exposing every capability client.

Invariants:
    - All capability clients share a single HTTPTransport (one connection pool)
    - Base URLs come from Settings; users, groups, policies and subscriptions
      share users_url; things, channels and connections share things_url

Design Decisions:
    - Composition over a monolithic client: handlers depend on the narrow
      Protocol they need (sdk.things, sdk.users, ...), tests swap the transport
"""

import httpx

from gui.config import Settings
from gui.sdk.bootstrap import BootstrapsClient
from gui.sdk.certs import CertsClient
from gui.sdk.channels import ChannelsClient
from gui.sdk.connections import ConnectionsClient
from gui.sdk.groups import GroupsClient
from gui.sdk.health import HealthChecker
from gui.sdk.messages import MessagesClient
from gui.sdk.policies import PoliciesClient
from gui.sdk.protocols import (
    BootstrapClient, CertClient, ChannelClient, ConnectionClient, GroupClient,
    HealthClient, MessageClient, PolicyClient, SubscriptionClient, ThingClient,
    UserClient,
)
from gui.sdk.subscriptions import SubscriptionsClient
from gui.sdk.things import ThingsClient
from gui.sdk.transport import HTTPTransport
from gui.sdk.users import UsersClient


class PlatformSDK:
    """Typed client for the platform's backend services."""

    def __init__(self, transport: HTTPTransport, settings: Settings):
        self.transport = transport
        self.users: UserClient = UsersClient(transport, settings.users_url, settings.ui_host_url)
        self.things: ThingClient = ThingsClient(transport, settings.things_url)
        self.channels: ChannelClient = ChannelsClient(transport, settings.things_url)
        self.connections: ConnectionClient = ConnectionsClient(transport, settings.things_url)
        self.groups: GroupClient = GroupsClient(transport, settings.users_url)
        self.policies: PolicyClient = PoliciesClient(transport, settings.users_url)
        self.messages: MessageClient = MessagesClient(
            transport, settings.http_adapter_url, settings.reader_url,
            settings.msg_content_type,
        )
        self.health: HealthClient = HealthChecker(transport, {
            "users": settings.users_url,
            "things": settings.things_url,
            "http-adapter": settings.http_adapter_url,
            "reader": settings.reader_url,
            "bootstrap": settings.bootstrap_url,
            "certs": settings.certs_url,
        })
        self.bootstrap: BootstrapClient = BootstrapsClient(transport, settings.bootstrap_url)
        self.certs: CertClient = CertsClient(transport, settings.certs_url)
        self.subscriptions: SubscriptionClient = SubscriptionsClient(transport, settings.users_url)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "PlatformSDK":
        http = HTTPTransport.create(
            verify_tls=settings.verification_tls,
            timeout=settings.sdk_timeout,
            transport=transport,
        )
        return cls(http, settings)

    async def aclose(self) -> None:
        await self.transport.aclose()
