"""Subscriptions Client — notifier subscriptions (topic → contact)."""

import json

from gui.core.errors import SDKErrorKind
from gui.sdk.models import Page, PageMetadata, Subscription, with_query_params
from gui.sdk.transport import ResourceClient, id_from_location

SUBSCRIPTIONS_ENDPOINT = "subscriptions"


class SubscriptionsClient(ResourceClient):
    """Implements SubscriptionClient against the users service."""

    async def create_subscription(self, topic: str, contact: str, token: str) -> str:
        payload = json.dumps({"topic": topic, "contact": contact}).encode()
        headers, _ = await self._call(
            "POST", self._url(SUBSCRIPTIONS_ENDPOINT), token,
            SDKErrorKind.CREATION_FAILED, body=payload, expected=(201,),
        )
        return id_from_location(headers, f"/{SUBSCRIPTIONS_ENDPOINT}/")

    async def list_subscriptions(self, pm: PageMetadata, token: str) -> Page[Subscription]:
        url = with_query_params(self._base_url, SUBSCRIPTIONS_ENDPOINT, pm)
        _, body = await self._call("GET", url, token, SDKErrorKind.LIST_FAILED)
        return Page[Subscription].from_body(body, "subscriptions")

    async def view_subscription(self, subscription_id: str, token: str) -> Subscription:
        _, body = await self._call(
            "GET", self._url(SUBSCRIPTIONS_ENDPOINT, subscription_id), token,
            SDKErrorKind.FETCH_FAILED,
        )
        return Subscription.model_validate_json(body)

    async def delete_subscription(self, subscription_id: str, token: str) -> None:
        await self._call(
            "DELETE", self._url(SUBSCRIPTIONS_ENDPOINT, subscription_id), token,
            SDKErrorKind.REMOVAL_FAILED, expected=(204,),
        )
